"""Data models and errors for Vault Query."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


class VaultQueryError(Exception):
    """Base class for all errors raised by the engine."""


class InvalidQuery(VaultQueryError):
    """A search query could not be compiled."""


class InvalidPath(VaultQueryError):
    """A path is absolute, escapes the vault, or contains disallowed characters."""

    def __init__(self, path: str, reason: str = "invalid path"):
        super().__init__(f"Invalid path '{path}': {reason}")
        self.path = path
        self.reason = reason


class NotFound(VaultQueryError):
    """A requested document or folder does not exist."""

    def __init__(self, path: str, kind: str = "file"):
        super().__init__(f"{kind.capitalize()} not found: {path}")
        self.path = path
        self.kind = kind


class VersionConflict(VaultQueryError):
    """The document changed since the caller's version token was issued.

    Equivalent to HTTP 412 Precondition Failed. Both tokens are carried so
    the caller can choose between re-reading and forcing the write.
    """

    status = 412

    def __init__(self, path: str, provided: str, current: str):
        super().__init__(
            f"Version mismatch for {path}: provided {provided}, current {current}"
        )
        self.path = path
        self.provided = provided
        self.current = current

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": "Version mismatch (412 Precondition Failed)",
            "path": self.path,
            "message": "The file has been modified since you last read it. "
                       "Please re-read the file and try again.",
            "providedVersion": self.provided,
            "currentVersion": self.current,
        }


@dataclass(frozen=True)
class FileStat:
    """Timestamps (milliseconds) and size as reported by the content store."""
    mtime: float
    size: int
    ctime: float = 0


@dataclass(frozen=True)
class Document:
    """A file or directory in the vault, keyed by its store-relative path."""
    path: str
    kind: str = "file"
    size: int = 0
    mtime: float = 0
    ctime: float = 0

    @property
    def name(self) -> str:
        return self.path.rsplit('/', 1)[-1]

    @property
    def extension(self) -> str:
        name = self.name
        if self.kind != "file" or '.' not in name.lstrip('.'):
            return ""
        return name.rsplit('.', 1)[1]

    @property
    def basename(self) -> str:
        """File name without its extension."""
        ext = self.extension
        return self.name[:-(len(ext) + 1)] if ext else self.name

    @property
    def parent(self) -> str:
        return self.path.rsplit('/', 1)[0] if '/' in self.path else ""

    @property
    def is_file(self) -> bool:
        return self.kind == "file"

    @property
    def is_directory(self) -> bool:
        return self.kind == "directory"

    def to_dict(self) -> Dict[str, Any]:
        if self.is_directory:
            return {
                "kind": "directory",
                "name": self.name,
                "path": self.path,
                "modified": self.mtime,
            }
        return {
            "kind": "file",
            "name": self.name,
            "path": self.path,
            "extension": self.extension,
            "size": self.size,
            "modified": self.mtime,
            "created": self.ctime,
        }


@dataclass
class WikiLink:
    """A ``[[target]]`` or ``[[target|alias]]`` occurrence.

    ``line`` is 1-indexed, ``column`` is the 0-indexed offset of ``[[``.
    """
    raw: str
    target: str
    line: int
    column: int
    alias: Optional[str] = None


@dataclass
class ResolvedLink:
    text: str
    target: str
    alias: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"text": self.text, "target": self.target}
        if self.alias is not None:
            result["alias"] = self.alias
        return result


@dataclass
class UnresolvedLink:
    text: str
    line: int
    suggestions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "line": self.line, "suggestions": list(self.suggestions)}


@dataclass
class BrokenNoteLink:
    """Link whose target document does not exist."""
    link: str
    line: int
    context: str

    def to_dict(self) -> Dict[str, Any]:
        return {"link": self.link, "line": self.line, "context": self.context}


@dataclass
class BrokenHeadingLink:
    """Link whose target document exists but lacks the referenced heading."""
    link: str
    line: int
    context: str
    note: str

    def to_dict(self) -> Dict[str, Any]:
        return {"link": self.link, "line": self.line, "context": self.context, "note": self.note}


@dataclass
class LinkValidation:
    """Classification of every wikilink in a document."""
    valid: List[str] = field(default_factory=list)
    broken_notes: List[BrokenNoteLink] = field(default_factory=list)
    broken_headings: List[BrokenHeadingLink] = field(default_factory=list)
    summary: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": list(self.valid),
            "brokenNotes": [b.to_dict() for b in self.broken_notes],
            "brokenHeadings": [b.to_dict() for b in self.broken_headings],
            "summary": self.summary,
        }


@dataclass
class BacklinkOccurrence:
    line: int
    snippet: str

    def to_dict(self) -> Dict[str, Any]:
        return {"line": self.line, "snippet": self.snippet}


@dataclass
class Backlink:
    """A document referencing the target, by wikilink or by plain-text mention."""
    source_path: str
    type: str
    occurrences: List[BacklinkOccurrence] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sourcePath": self.source_path,
            "type": self.type,
            "occurrences": [o.to_dict() for o in self.occurrences],
        }


@dataclass(frozen=True)
class MatchRange:
    start: int
    end: int

    def to_dict(self) -> Dict[str, int]:
        return {"start": self.start, "end": self.end}


@dataclass
class SearchMatch:
    """A single search hit.

    ``line`` is 1-indexed; ``0`` means the document's file name matched.
    ``column`` is 1-indexed. ``match_ranges`` are relative to ``snippet``.
    """
    path: str
    line: int
    column: int
    snippet: str
    match_ranges: List[MatchRange] = field(default_factory=list)

    @property
    def is_filename_match(self) -> bool:
        return self.line == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "line": self.line,
            "column": self.column,
            "snippet": self.snippet,
            "matchRanges": [r.to_dict() for r in self.match_ranges],
        }


@dataclass
class SearchStats:
    files_searched: int = 0
    files_with_matches: int = 0
    total_matches: int = 0


@dataclass
class SearchResult:
    query: str
    is_regex: bool
    matches: List[SearchMatch] = field(default_factory=list)
    stats: SearchStats = field(default_factory=SearchStats)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "query": self.query,
            "isRegex": self.is_regex,
            "matches": [m.to_dict() for m in self.matches],
            "totalMatches": self.stats.total_matches,
            "filesSearched": self.stats.files_searched,
            "filesWithMatches": self.stats.files_with_matches,
        }


@dataclass
class ListItem:
    """A listed document, optionally enriched with frontmatter or child count."""
    document: Document
    frontmatter_summary: Optional[Dict[str, Any]] = None
    children_count: Optional[int] = None

    @property
    def path(self) -> str:
        return self.document.path

    @property
    def name(self) -> str:
        return self.document.name

    @property
    def kind(self) -> str:
        return self.document.kind

    def to_dict(self) -> Dict[str, Any]:
        result = self.document.to_dict()
        if self.children_count is not None:
            result["childrenCount"] = self.children_count
        if self.frontmatter_summary is not None:
            result["frontmatterSummary"] = self.frontmatter_summary
        return result


@dataclass
class ListResult:
    """One page of a cursor-paginated listing."""
    items: List[ListItem] = field(default_factory=list)
    total_count: int = 0
    has_more: bool = False
    next_cursor: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "items": [item.to_dict() for item in self.items],
            "totalCount": self.total_count,
            "hasMore": self.has_more,
        }
        if self.next_cursor is not None:
            result["nextCursor"] = self.next_cursor
        return result


@dataclass
class WaypointBlock:
    """A ``%% Begin Waypoint %%`` ... ``%% End Waypoint %%`` block.

    ``start`` and ``end`` are the 1-indexed lines of the two markers.
    """
    has_waypoint: bool
    start: Optional[int] = None
    end: Optional[int] = None
    links: List[str] = field(default_factory=list)
    raw_content: Optional[str] = None


@dataclass
class WaypointMatch:
    path: str
    start: int
    end: int
    content: str
    links: List[str] = field(default_factory=list)

    @property
    def line(self) -> int:
        return self.start

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "line": self.start,
            "waypointRange": {"start": self.start, "end": self.end},
            "content": self.content,
            "links": list(self.links),
        }


@dataclass
class FolderNoteInfo:
    is_folder_note: bool
    reason: str
    folder_path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isFolderNote": self.is_folder_note,
            "reason": self.reason,
            "folderPath": self.folder_path,
        }


@dataclass
class NoteContent:
    """A note as returned by a read, with optional frontmatter breakdown.

    Fields left as None were not requested and are omitted from ``to_dict``.
    """
    path: str
    version: str
    content: Optional[str] = None
    word_count: Optional[int] = None
    has_frontmatter: Optional[bool] = None
    frontmatter: Optional[str] = None
    parsed_frontmatter: Optional[Dict[str, Any]] = None
    content_without_frontmatter: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"path": self.path, "versionId": self.version}
        optional = {
            "content": self.content,
            "wordCount": self.word_count,
            "hasFrontmatter": self.has_frontmatter,
            "frontmatter": self.frontmatter,
            "parsedFrontmatter": self.parsed_frontmatter,
            "contentWithoutFrontmatter": self.content_without_frontmatter,
        }
        result.update({k: v for k, v in optional.items() if v is not None})
        return result


@dataclass
class VaultInfo:
    """Counts and total size of the documents in a vault."""
    total_files: int = 0
    total_folders: int = 0
    markdown_files: int = 0
    total_size: int = 0
    name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "totalFiles": self.total_files,
            "totalFolders": self.total_folders,
            "markdownFiles": self.markdown_files,
            "totalSize": self.total_size,
        }
