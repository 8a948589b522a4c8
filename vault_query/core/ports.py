"""Collaborator interfaces consumed by the engine.

The engine only reads through these. Document lifecycle and link
resolution belong to whatever host implements them.
"""

from typing import Dict, List, Optional, Protocol

from vault_query.core.models import Document, FileStat


class ContentStore(Protocol):
    """Read access to the vault's documents."""

    def read(self, path: str) -> str:
        """Return the text of the document at ``path``.

        Raises ``NotFound`` or ``OSError`` when it cannot be read.
        """
        ...

    def stat(self, path: str) -> FileStat:
        ...

    def list_all(self) -> List[Document]:
        """Every file and directory in the vault, excluding the root."""
        ...

    def exists(self, path: str) -> bool:
        ...

    def get(self, path: str) -> Optional[Document]:
        ...


class LinkOracle(Protocol):
    """The host's link resolution and metadata cache."""

    def resolve(self, source_path: str, link_text: str) -> Optional[Document]:
        ...

    def headings_of(self, document: Document) -> List[str]:
        ...

    def resolved_link_map(self) -> Dict[str, Dict[str, int]]:
        """Map of source path to ``{target path: link count}``."""
        ...
