"""Backlink computation: linked references and unlinked mentions."""

import logging
import re
from typing import List, Optional, Set

from vault_query.config import EngineConfig
from vault_query.core.links import LinkResolver, parse_wikilinks
from vault_query.core.models import Backlink, BacklinkOccurrence, Document, NotFound
from vault_query.core.ports import ContentStore, LinkOracle

logger = logging.getLogger(__name__)

ELLIPSIS = "..."


def centered_snippet(line: str, start: int, end: int, max_length: int = 100) -> str:
    """Cut ``line`` down to at most ``max_length`` characters around a match.

    Truncated ends are marked with ``...``; the markers count toward the
    length.
    """
    if len(line) <= max_length:
        return line

    marker = len(ELLIPSIS)
    if max_length <= 2 * marker:
        return line[:max_length]

    window = max_length - 2 * marker
    middle = (start + end) // 2
    head = max(0, middle - window // 2)
    tail = min(len(line), head + window)
    head = max(0, tail - window)

    # Only one end truncated: that marker's room goes back to the text
    if head == 0:
        return line[:max_length - marker] + ELLIPSIS
    if tail == len(line):
        return ELLIPSIS + line[len(line) - (max_length - marker):]
    return ELLIPSIS + line[head:tail] + ELLIPSIS


def mention_pattern(name: str) -> re.Pattern:
    """Case-insensitive whole-word pattern for a plain-text mention."""
    return re.compile(r'\b' + re.escape(name) + r'\b', re.IGNORECASE)


class BacklinkIndexer:
    """Finds the documents that reference a target document."""

    def __init__(
        self,
        store: ContentStore,
        oracle: LinkOracle,
        resolver: Optional[LinkResolver] = None,
        config: Optional[EngineConfig] = None,
    ):
        self.store = store
        self.oracle = oracle
        self.config = config or EngineConfig()
        self.resolver = resolver or LinkResolver(store, oracle, self.config)

    def get_backlinks(self, target_path: str, include_unlinked: bool = False) -> List[Backlink]:
        """Collect backlinks to ``target_path``.

        Linked backlinks come first, in the order of the oracle's link map,
        followed by unlinked mentions in store order.

        Args:
            target_path: Path of the document being referenced
            include_unlinked: Also scan for plain-text mentions of its name

        Returns:
            List of Backlink, one per source document and type

        Raises:
            NotFound: If the target document does not exist
        """
        target = self.store.get(target_path)
        if target is None or not target.is_file:
            raise NotFound(target_path)

        backlinks = self._linked(target)

        if include_unlinked:
            seen = {b.source_path for b in backlinks}
            seen.add(target.path)
            backlinks.extend(self._unlinked(target, seen))

        return backlinks

    def _read_lines(self, path: str) -> Optional[List[str]]:
        try:
            return self.store.read(path).split('\n')
        except (OSError, UnicodeDecodeError, NotFound) as e:
            logger.debug("Skipping unreadable document %s: %s", path, e)
            return None

    def _linked(self, target: Document) -> List[Backlink]:
        backlinks = []
        max_length = self.config.backlink_snippet_length

        # The oracle's map is per file, so each candidate is re-parsed to
        # attribute individual lines.
        for source_path, targets in self.oracle.resolved_link_map().items():
            if not targets.get(target.path):
                continue

            lines = self._read_lines(source_path)
            if lines is None:
                continue

            occurrences = []
            for link in parse_wikilinks('\n'.join(lines)):
                resolved = self.resolver.resolve(source_path, link.target)
                if resolved is None or resolved.path != target.path:
                    continue
                line = lines[link.line - 1]
                snippet = centered_snippet(
                    line, link.column, link.column + len(link.raw), max_length
                )
                occurrences.append(BacklinkOccurrence(line=link.line, snippet=snippet))

            if occurrences:
                backlinks.append(Backlink(source_path=source_path, type="linked", occurrences=occurrences))

        return backlinks

    def _unlinked(self, target: Document, skip: Set[str]) -> List[Backlink]:
        backlinks = []
        pattern = mention_pattern(target.basename)
        max_length = self.config.backlink_snippet_length

        for doc in self.store.list_all():
            if not doc.is_file or doc.path in skip or not self.config.is_markdown(doc.path):
                continue

            lines = self._read_lines(doc.path)
            if lines is None:
                continue

            occurrences = []
            for index, line in enumerate(lines):
                match = pattern.search(line)
                if match:
                    snippet = centered_snippet(line, match.start(), match.end(), max_length)
                    occurrences.append(BacklinkOccurrence(line=index + 1, snippet=snippet))

            if occurrences:
                backlinks.append(Backlink(source_path=doc.path, type="unlinked", occurrences=occurrences))

        return backlinks
