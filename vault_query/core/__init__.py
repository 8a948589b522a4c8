"""Core components for Vault Query."""

from vault_query.core.models import (
    Backlink,
    Document,
    InvalidPath,
    InvalidQuery,
    NotFound,
    SearchMatch,
    VaultQueryError,
    VersionConflict,
    WikiLink,
)
from vault_query.core.glob import GlobMatcher, compile_glob, should_include
from vault_query.core.search import ContentSearchEngine, SearchOptions
from vault_query.core.listing import ListOptions, PaginatedLister
from vault_query.core.links import LinkResolver, parse_wikilinks
from vault_query.core.backlinks import BacklinkIndexer
from vault_query.core.validation import LinkValidator
from vault_query.core.versioning import VersionOracle
from vault_query.core.engine import VaultQueryEngine

__all__ = [
    "Backlink",
    "Document",
    "InvalidPath",
    "InvalidQuery",
    "NotFound",
    "SearchMatch",
    "VaultQueryError",
    "VersionConflict",
    "WikiLink",
    "GlobMatcher",
    "compile_glob",
    "should_include",
    "ContentSearchEngine",
    "SearchOptions",
    "ListOptions",
    "PaginatedLister",
    "LinkResolver",
    "parse_wikilinks",
    "BacklinkIndexer",
    "LinkValidator",
    "VersionOracle",
    "VaultQueryEngine",
]
