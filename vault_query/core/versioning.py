"""Optimistic-concurrency version tokens."""

import base64
import hashlib
from typing import Optional, Union

from vault_query.core.models import Document, FileStat, VersionConflict

DEFAULT_TOKEN_LENGTH = 22


def _format_number(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class VersionOracle:
    """Issues and checks version tokens derived from ``(mtime, size)``.

    Tokens are the URL-safe base64 SHA-256 of ``"{mtime}-{size}"``,
    truncated. Identical inputs always give identical tokens.
    """

    def __init__(self, token_length: int = DEFAULT_TOKEN_LENGTH):
        self.token_length = token_length

    def token_for(self, document: Union[Document, FileStat]) -> str:
        data = f"{_format_number(document.mtime)}-{document.size}"
        digest = hashlib.sha256(data.encode('utf-8')).digest()
        encoded = base64.urlsafe_b64encode(digest).decode('ascii').rstrip('=')
        return encoded[:self.token_length]

    def validate(self, document: Union[Document, FileStat], provided: Optional[str]) -> bool:
        """True if ``provided`` matches the document's current token."""
        return provided is not None and self.token_for(document) == provided

    def ensure(self, path: str, document: Union[Document, FileStat], provided: str) -> str:
        """Require ``provided`` to be current.

        Returns:
            The current token

        Raises:
            VersionConflict: If the document changed since ``provided`` was issued
        """
        current = self.token_for(document)
        if current != provided:
            raise VersionConflict(path, provided, current)
        return current
