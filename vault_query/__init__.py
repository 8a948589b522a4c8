"""
Vault Query - Search and link-graph queries over Obsidian-style vaults

A read-side engine for automation clients working with a vault of
linked Markdown notes, with support for:
- Glob-filtered listing with cursor pagination
- Literal and regex full-text search with snippets
- Wikilink resolution, suggestions and validation
- Linked and unlinked backlinks
- Note reads with word counts and vault statistics
- Optimistic-concurrency version tokens
"""

from vault_query.config import EngineConfig, load_config
from vault_query.core.models import (
    Backlink,
    Document,
    InvalidPath,
    InvalidQuery,
    LinkValidation,
    ListResult,
    NoteContent,
    NotFound,
    SearchMatch,
    SearchResult,
    VaultInfo,
    VaultQueryError,
    VersionConflict,
    WikiLink,
)
from vault_query.core.engine import VaultQueryEngine
from vault_query.core.listing import ListOptions
from vault_query.core.search import SearchOptions
from vault_query.stores.filesystem import FileSystemStore
from vault_query.stores.memory import InMemoryStore
from vault_query.stores.oracle import SimpleLinkOracle

__version__ = "0.1.0"

__all__ = [
    "Backlink",
    "Document",
    "EngineConfig",
    "FileSystemStore",
    "InMemoryStore",
    "InvalidPath",
    "InvalidQuery",
    "LinkValidation",
    "ListOptions",
    "ListResult",
    "NoteContent",
    "NotFound",
    "SearchMatch",
    "SearchOptions",
    "SearchResult",
    "SimpleLinkOracle",
    "VaultInfo",
    "VaultQueryEngine",
    "VaultQueryError",
    "VersionConflict",
    "WikiLink",
    "load_config",
]
