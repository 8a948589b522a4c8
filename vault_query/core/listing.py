"""Folder listing with glob filtering and cursor pagination."""

import logging
from collections import Counter
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

from vault_query.config import EngineConfig
from vault_query.core.frontmatter import parse_frontmatter, summarize_frontmatter
from vault_query.core.glob import matches_excludes, should_include
from vault_query.core.models import Document, InvalidPath, ListItem, ListResult, NotFound
from vault_query.core.paths import require_valid_path
from vault_query.core.ports import ContentStore

logger = logging.getLogger(__name__)

ONLY_CHOICES = ("files", "directories", "any")


@dataclass
class ListOptions:
    path: Optional[str] = None
    recursive: bool = False
    includes: Optional[List[str]] = None
    excludes: Optional[List[str]] = None
    only: str = "any"
    limit: Optional[int] = None
    cursor: Optional[str] = None
    with_frontmatter_summary: bool = False


def sort_key(item: Union[ListItem, Document]):
    """Directories before files, then case-insensitive name, then path."""
    return (0 if item.kind == "directory" else 1, item.name.lower(), item.path)


def sort_items(items: Sequence[ListItem]) -> List[ListItem]:
    return sorted(items, key=sort_key)


def paginate(
    items: Sequence[ListItem],
    limit: Optional[int] = None,
    cursor: Optional[str] = None,
) -> ListResult:
    """Cut one page out of an already sorted sequence.

    The page starts right after the item whose path equals ``cursor``.
    A cursor that no longer exists in the sequence restarts from the
    first item.

    Args:
        items: Sorted items
        limit: Page size; None or less than 1 returns everything
        cursor: Path of the last item of the previous page

    Returns:
        ListResult for the page
    """
    start = 0
    if cursor:
        index = next((i for i, item in enumerate(items) if item.path == cursor), -1)
        if index == -1:
            logger.debug("Cursor %s not found, restarting from the beginning", cursor)
        else:
            start = index + 1

    page = list(items[start:])
    has_more = False
    next_cursor = None

    if limit is not None and limit > 0 and len(page) > limit:
        page = page[:limit]
        has_more = True
        next_cursor = page[-1].path

    return ListResult(items=page, total_count=len(items), has_more=has_more, next_cursor=next_cursor)


def _in_scope(path: str, root: str, recursive: bool) -> bool:
    parent = path.rsplit('/', 1)[0] if '/' in path else ""
    if not recursive:
        return parent == root
    return not root or path.startswith(root + '/')


class PaginatedLister:
    """Lists folder contents in a stable order, one page at a time."""

    def __init__(self, store: ContentStore, config: Optional[EngineConfig] = None):
        self.store = store
        self.config = config or EngineConfig()

    def list(
        self,
        candidates: Sequence[ListItem],
        limit: Optional[int] = None,
        cursor: Optional[str] = None,
    ) -> ListResult:
        """Sort candidates and return the page following ``cursor``."""
        return paginate(sort_items(candidates), limit, cursor)

    def list_folder(self, options: Optional[ListOptions] = None) -> ListResult:
        """List a folder of the store.

        Raises:
            NotFound: If the folder does not exist
            InvalidPath: If the path names a file
            ValueError: If ``only`` is not a known choice
        """
        options = options or ListOptions()
        return self.list(self.collect(options), options.limit, options.cursor)

    def collect(self, options: ListOptions) -> List[ListItem]:
        """Gather the unsorted items a listing covers.

        An excluded directory hides everything below it.
        """
        if options.only not in ONLY_CHOICES:
            raise ValueError(f"'only' must be one of {', '.join(ONLY_CHOICES)}")

        root = self._resolve_root(options.path)
        everything = self.store.list_all()
        child_counts = Counter(
            d.path.rsplit('/', 1)[0] if '/' in d.path else "" for d in everything
        )

        excluded_dirs = [
            d.path for d in everything
            if d.is_directory and _in_scope(d.path, root, options.recursive)
            and matches_excludes(d.path, options.excludes)
        ]

        items: List[ListItem] = []
        for doc in everything:
            if not _in_scope(doc.path, root, options.recursive):
                continue
            if any(doc.path.startswith(d + '/') for d in excluded_dirs):
                continue
            if not should_include(doc.path, options.includes, options.excludes):
                continue

            if doc.is_directory:
                if options.only != "files":
                    items.append(ListItem(document=doc, children_count=child_counts.get(doc.path, 0)))
            elif options.only != "directories":
                items.append(self._file_item(doc, options.with_frontmatter_summary))

        return items

    def _resolve_root(self, path: Optional[str]) -> str:
        if not path or path in ('.', '/'):
            return ""

        root = require_valid_path(path)
        doc = self.store.get(root)
        if doc is None:
            raise NotFound(root, kind="folder")
        if not doc.is_directory:
            raise InvalidPath(root, "not a folder")
        return root

    def _file_item(self, doc: Document, with_summary: bool) -> ListItem:
        if not with_summary or not self.config.is_markdown(doc.path):
            return ListItem(document=doc)

        try:
            frontmatter = parse_frontmatter(self.store.read(doc.path), doc.path)
        except (OSError, UnicodeDecodeError, NotFound) as e:
            logger.debug("Could not read frontmatter for %s: %s", doc.path, e)
            return ListItem(document=doc)

        if not frontmatter:
            return ListItem(document=doc)
        return ListItem(document=doc, frontmatter_summary=summarize_frontmatter(frontmatter))
