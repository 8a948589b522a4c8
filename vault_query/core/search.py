"""Full-text and regex search over vault documents."""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from vault_query.config import EngineConfig
from vault_query.core.glob import should_include
from vault_query.core.models import (
    Document,
    InvalidQuery,
    MatchRange,
    NotFound,
    SearchMatch,
    SearchResult,
    SearchStats,
)
from vault_query.core.ports import ContentStore

logger = logging.getLogger(__name__)


@dataclass
class SearchOptions:
    """Options for a content search. Unset values fall back to the engine config."""
    is_regex: bool = False
    case_sensitive: bool = False
    includes: Optional[List[str]] = None
    excludes: Optional[List[str]] = None
    folder: Optional[str] = None
    return_snippets: bool = True
    snippet_length: Optional[int] = None
    max_results: Optional[int] = None


def compile_query(query: str, is_regex: bool = False, case_sensitive: bool = False) -> re.Pattern:
    """Compile a search query into a pattern.

    Literal queries are escaped so characters like ``.`` only match
    themselves.

    Raises:
        InvalidQuery: If a regex query does not compile
    """
    flags = 0 if case_sensitive else re.IGNORECASE
    source = query if is_regex else re.escape(query)
    try:
        return re.compile(source, flags)
    except re.error as e:
        raise InvalidQuery(f"Invalid regex pattern: {e}") from e


def iter_line_matches(pattern: re.Pattern, line: str):
    """Yield ``(start, end)`` for every match in ``line``.

    Each call scans with its own cursor. An empty match moves the cursor
    forward one character.
    """
    pos = 0
    while pos <= len(line):
        match = pattern.search(line, pos)
        if match is None:
            return
        start, end = match.span()
        yield start, end
        pos = end + 1 if end == start else end


def snippet_window(line: str, start: int, snippet_length: int) -> tuple[str, int]:
    """Cut a window of ``snippet_length`` around a match starting at ``start``.

    Returns:
        Tuple of (snippet, offset of the snippet within the line)
    """
    if len(line) <= snippet_length:
        return line, 0

    offset = max(0, start - snippet_length // 2)
    end = min(len(line), offset + snippet_length)
    if end == len(line):
        offset = max(0, len(line) - snippet_length)
    return line[offset:end], offset


def in_folder(path: str, folder: Optional[str]) -> bool:
    if not folder:
        return True
    folder = folder.rstrip('/')
    return path == folder or path.startswith(folder + '/')


class ContentSearchEngine:
    """Streams through document lines looking for a query.

    Handles:
    - Literal and regex queries, case sensitive or not
    - Folder prefix and glob include/exclude filtering
    - Snippets centred on each match
    - File name matches (reported with line 0)
    """

    def __init__(self, store: ContentStore, config: Optional[EngineConfig] = None):
        self.store = store
        self.config = config or EngineConfig()

    def candidates(
        self,
        folder: Optional[str] = None,
        includes: Optional[List[str]] = None,
        excludes: Optional[List[str]] = None,
    ) -> List[Document]:
        """Markdown documents under ``folder`` that pass the glob filters."""
        docs = [
            d for d in self.store.list_all()
            if d.is_file and self.config.is_markdown(d.path)
        ]
        if folder:
            docs = [d for d in docs if in_folder(d.path, folder)]
        if includes or excludes:
            docs = [d for d in docs if should_include(d.path, includes, excludes)]
        return docs

    def search(self, query: str, options: Optional[SearchOptions] = None) -> SearchResult:
        """Search document contents and file names.

        Args:
            query: Text or regular expression to look for
            options: Search options

        Returns:
            SearchResult with matches in document order and scan statistics

        Raises:
            InvalidQuery: If a regex query does not compile
        """
        options = options or SearchOptions()
        pattern = compile_query(query, options.is_regex, options.case_sensitive)
        snippet_length = options.snippet_length or self.config.snippet_length
        max_results = (
            options.max_results if options.max_results is not None else self.config.max_results
        )

        matches: List[SearchMatch] = []
        files_with_matches = set()
        files_searched = 0

        for doc in self.candidates(options.folder, options.includes, options.excludes):
            if len(matches) >= max_results:
                break

            files_searched += 1
            try:
                content = self.store.read(doc.path)
            except (OSError, UnicodeDecodeError, NotFound) as e:
                logger.debug("Skipping unreadable document %s: %s", doc.path, e)
                continue

            remaining = max_results - len(matches)
            found = self._search_content(
                doc.path, content, pattern, options.return_snippets, snippet_length, remaining
            )
            remaining -= len(found)
            if remaining > 0:
                found.extend(self._search_filename(doc, pattern, remaining))

            if found:
                files_with_matches.add(doc.path)
                matches.extend(found)

        stats = SearchStats(
            files_searched=files_searched,
            files_with_matches=len(files_with_matches),
            total_matches=len(matches),
        )
        return SearchResult(query=query, is_regex=options.is_regex, matches=matches, stats=stats)

    def _search_content(
        self,
        path: str,
        content: str,
        pattern: re.Pattern,
        return_snippets: bool,
        snippet_length: int,
        limit: int,
    ) -> List[SearchMatch]:
        found: List[SearchMatch] = []

        for line_index, line in enumerate(content.split('\n')):
            for start, end in iter_line_matches(pattern, line):
                if len(found) >= limit:
                    return found

                if return_snippets:
                    snippet, offset = snippet_window(line, start, snippet_length)
                else:
                    snippet, offset = line, 0

                found.append(SearchMatch(
                    path=path,
                    line=line_index + 1,
                    column=start + 1,
                    snippet=snippet,
                    match_ranges=[MatchRange(start - offset, end - offset)],
                ))

        return found

    def _search_filename(self, doc: Document, pattern: re.Pattern, limit: int) -> List[SearchMatch]:
        found: List[SearchMatch] = []
        name = doc.basename

        for start, end in iter_line_matches(pattern, name):
            if len(found) >= limit:
                break
            found.append(SearchMatch(
                path=doc.path,
                line=0,
                column=start + 1,
                snippet=name,
                match_ranges=[MatchRange(start, end)],
            ))

        return found
