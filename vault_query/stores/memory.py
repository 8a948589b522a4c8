"""In-memory content store."""

import itertools
from typing import Dict, List, Optional

from vault_query.core.models import Document, FileStat, NotFound
from vault_query.core.paths import require_valid_path


class InMemoryStore:
    """A content store kept in a dict, for tests and embedding.

    Parent directories are implied by file paths. Modification times
    advance on every write unless given explicitly.
    """

    def __init__(self, files: Optional[Dict[str, str]] = None):
        self._files: Dict[str, str] = {}
        self._stats: Dict[str, FileStat] = {}
        self._clock = itertools.count(1)
        for path, content in (files or {}).items():
            self.write(path, content)

    def write(self, path: str, content: str, mtime: Optional[float] = None, ctime: Optional[float] = None) -> Document:
        path = require_valid_path(path)
        tick = next(self._clock) * 1000
        previous = self._stats.get(path)
        self._files[path] = content
        self._stats[path] = FileStat(
            mtime=tick if mtime is None else mtime,
            size=len(content.encode('utf-8')),
            ctime=(previous.ctime if previous else tick) if ctime is None else ctime,
        )
        return self.get(path)

    def remove(self, path: str) -> None:
        self._files.pop(path, None)
        self._stats.pop(path, None)

    def read(self, path: str) -> str:
        if path not in self._files:
            raise NotFound(path)
        return self._files[path]

    def stat(self, path: str) -> FileStat:
        if path in self._stats:
            return self._stats[path]
        if path in self._directories():
            return FileStat(mtime=0, size=0, ctime=0)
        raise NotFound(path)

    def exists(self, path: str) -> bool:
        return path in self._files or path in self._directories()

    def get(self, path: str) -> Optional[Document]:
        if path in self._files:
            st = self._stats[path]
            return Document(path=path, kind="file", size=st.size, mtime=st.mtime, ctime=st.ctime)
        if path in self._directories():
            return Document(path=path, kind="directory")
        return None

    def list_all(self) -> List[Document]:
        docs = [Document(path=d, kind="directory") for d in sorted(self._directories())]
        docs.extend(self.get(path) for path in self._files)
        return docs

    def _directories(self) -> set:
        dirs = set()
        for path in self._files:
            parts = path.split('/')[:-1]
            for i in range(1, len(parts) + 1):
                dirs.add('/'.join(parts[:i]))
        return dirs
