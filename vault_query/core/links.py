"""Wikilink parsing and resolution."""

import re
from typing import List, Optional

from vault_query.config import EngineConfig
from vault_query.core.models import Document, WikiLink
from vault_query.core.ports import ContentStore, LinkOracle

# Pattern for wikilinks: [[target]] or [[target|alias]]
WIKILINK_PATTERN = re.compile(r'\[\[([^\]|]+)(?:\|([^\]]+))?\]\]')

HEADING_PATTERN = re.compile(r'^\s{0,3}(#{1,6})\s+(.*?)\s*#*\s*$')
FENCE_PATTERN = re.compile(r'^\s*(```|~~~)')


def parse_wikilinks(content: str) -> List[WikiLink]:
    """Parse all wikilinks from content, line by line.

    Args:
        content: Note text

    Returns:
        WikiLinks in document order, with 1-indexed lines and 0-indexed columns
    """
    links = []

    for line_index, line in enumerate(content.split('\n')):
        for match in WIKILINK_PATTERN.finditer(line):
            alias = match.group(2)
            links.append(WikiLink(
                raw=match.group(0),
                target=match.group(1).strip(),
                alias=alias.strip() if alias is not None else None,
                line=line_index + 1,
                column=match.start(),
            ))

    return links


def extract_headings(content: str) -> List[str]:
    """ATX headings of a note, ignoring fenced code blocks."""
    headings = []
    in_fence = False

    for line in content.split('\n'):
        if FENCE_PATTERN.match(line):
            in_fence = not in_fence
            continue
        if in_fence:
            continue
        match = HEADING_PATTERN.match(line)
        if match and match.group(2):
            headings.append(match.group(2))

    return headings


def split_target(target: str) -> tuple[str, Optional[str]]:
    """Split ``note#heading`` into its note and heading parts."""
    if '#' not in target:
        return target, None
    note, heading = target.split('#', 1)
    return note.strip(), heading.strip()


def strip_subpath(link_text: str) -> str:
    """Drop any ``#heading`` or ``^block`` suffix."""
    return link_text.split('#', 1)[0].split('^', 1)[0]


def suggestion_score(query: str, doc: Document) -> float:
    """Score how well a document matches a lowercased link query."""
    name = doc.basename.lower()
    path = doc.path.lower()

    if name == query:
        return 1000
    if query in name:
        return 500 + (len(query) / len(name)) * 100
    if query in path:
        return 250 + (len(query) / len(path)) * 100

    present = sum(1 for char in query if char in name)
    return (present / len(query)) * 100


class LinkResolver:
    """Resolves link text through the link oracle and suggests fixes for misses."""

    def __init__(
        self,
        store: ContentStore,
        oracle: LinkOracle,
        config: Optional[EngineConfig] = None,
    ):
        self.store = store
        self.oracle = oracle
        self.config = config or EngineConfig()

    def resolve(self, source_path: str, link_text: str) -> Optional[Document]:
        """Resolve ``link_text`` as written in ``source_path``; None if unresolved."""
        return self.oracle.resolve(source_path, link_text)

    def suggest(self, link_text: str, max_suggestions: Optional[int] = None) -> List[str]:
        """Rank Markdown documents by similarity to an unresolved link.

        Args:
            link_text: Link text, optionally with a heading or block suffix
            max_suggestions: Number of paths to return (config default if None)

        Returns:
            Up to ``max_suggestions`` paths, best first. Equal scores keep the
            store's enumeration order.
        """
        limit = self.config.max_suggestions if max_suggestions is None else max_suggestions
        query = strip_subpath(link_text).strip().lower()
        if not query or limit <= 0:
            return []

        scored = []
        for doc in self.store.list_all():
            if not doc.is_file or not self.config.is_markdown(doc.path):
                continue
            score = suggestion_score(query, doc)
            if score > 0:
                scored.append((score, doc.path))

        scored.sort(key=lambda item: item[0], reverse=True)
        return [path for _, path in scored[:limit]]
