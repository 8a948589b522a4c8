"""Content store backed by a vault directory on disk."""

from pathlib import Path
from typing import Iterable, List, Optional

from vault_query.core.models import Document, FileStat, NotFound
from vault_query.core.paths import require_valid_path

DEFAULT_IGNORED = (".obsidian",)


class FileSystemStore:
    """Reads documents straight from a vault folder.

    Nothing is cached: every call goes to the filesystem, so results
    reflect the vault as it is at that moment.
    """

    def __init__(self, vault_path: Path, ignored: Optional[Iterable[str]] = None):
        """Initialize FileSystemStore.

        Args:
            vault_path: Path to the vault root
            ignored: Top-level folder names to hide (default: .obsidian)
        """
        self.vault_path = Path(vault_path)
        self.ignored = set(DEFAULT_IGNORED if ignored is None else ignored)

    def _full_path(self, path: str) -> Path:
        return self.vault_path / require_valid_path(path)

    def _relative(self, full_path: Path) -> str:
        return full_path.relative_to(self.vault_path).as_posix()

    def _is_ignored(self, rel_path: str) -> bool:
        return rel_path.split('/', 1)[0] in self.ignored

    def read(self, path: str) -> str:
        """Read file contents on demand."""
        full_path = self._full_path(path)
        if not full_path.is_file():
            raise NotFound(path)
        return full_path.read_text(encoding='utf-8')

    def stat(self, path: str) -> FileStat:
        full_path = self._full_path(path)
        try:
            st = full_path.stat()
        except FileNotFoundError as e:
            raise NotFound(path) from e
        return FileStat(
            mtime=st.st_mtime_ns // 1_000_000,
            size=st.st_size if full_path.is_file() else 0,
            ctime=st.st_ctime_ns // 1_000_000,
        )

    def exists(self, path: str) -> bool:
        return self.get(path) is not None

    def get(self, path: str) -> Optional[Document]:
        full_path = self._full_path(path)
        rel_path = self._relative(full_path)
        if self._is_ignored(rel_path) or not full_path.exists():
            return None
        return self._document(full_path, rel_path)

    def list_all(self) -> List[Document]:
        """Every file and folder below the vault root, in path order."""
        docs = []
        for full_path in sorted(self.vault_path.rglob("*")):
            rel_path = self._relative(full_path)
            if self._is_ignored(rel_path):
                continue
            try:
                docs.append(self._document(full_path, rel_path))
            except FileNotFoundError:
                # Removed between listing and stat
                continue
        return docs

    def _document(self, full_path: Path, rel_path: str) -> Document:
        st = full_path.stat()
        is_dir = full_path.is_dir()
        return Document(
            path=rel_path,
            kind="directory" if is_dir else "file",
            size=0 if is_dir else st.st_size,
            mtime=st.st_mtime_ns // 1_000_000,
            ctime=st.st_ctime_ns // 1_000_000,
        )
