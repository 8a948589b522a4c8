"""A simple link oracle for vaults without a host application."""

import logging
from typing import Dict, List, Optional

from vault_query.config import EngineConfig
from vault_query.core.links import extract_headings, parse_wikilinks, strip_subpath
from vault_query.core.models import Document, NotFound
from vault_query.core.paths import normalize_path, parent_path
from vault_query.core.ports import ContentStore

logger = logging.getLogger(__name__)


class SimpleLinkOracle:
    """Resolves links the way a vault usually expects, without a metadata cache.

    Resolution order for link text ``t`` written in ``source``:
    1. ``t`` or ``t.md`` as a vault path
    2. ``t`` or ``t.md`` relative to the source's folder
    3. Any note whose path ends in ``/t.md`` or ``/t`` (case-insensitive),
       shortest path first
    """

    def __init__(self, store: ContentStore, config: Optional[EngineConfig] = None):
        self.store = store
        self.config = config or EngineConfig()

    def resolve(self, source_path: str, link_text: str) -> Optional[Document]:
        target = normalize_path(strip_subpath(link_text).strip())
        if not target:
            return self.store.get(source_path)

        files = [d for d in self.store.list_all() if d.is_file]
        by_path = {d.path: d for d in files}

        folder = parent_path(source_path)
        candidates = [target, f"{target}.md"]
        if folder:
            candidates += [f"{folder}/{target}", f"{folder}/{target}.md"]
        for candidate in candidates:
            if candidate in by_path:
                return by_path[candidate]

        lowered = target.lower()
        suffixes = (lowered, f"{lowered}.md")
        matches = [
            d for d in files
            if d.path.lower() in suffixes
            or any(d.path.lower().endswith('/' + s) for s in suffixes)
        ]
        if not matches:
            return None
        return min(matches, key=lambda d: (d.path.count('/'), len(d.path), d.path))

    def headings_of(self, document: Document) -> List[str]:
        try:
            return extract_headings(self.store.read(document.path))
        except (OSError, UnicodeDecodeError, NotFound) as e:
            logger.debug("Could not read headings of %s: %s", document.path, e)
            return []

    def resolved_link_map(self) -> Dict[str, Dict[str, int]]:
        """Parse every note and count resolved links per target."""
        link_map: Dict[str, Dict[str, int]] = {}

        for doc in self.store.list_all():
            if not doc.is_file or not self.config.is_markdown(doc.path):
                continue
            try:
                content = self.store.read(doc.path)
            except (OSError, UnicodeDecodeError, NotFound) as e:
                logger.debug("Skipping unreadable document %s: %s", doc.path, e)
                continue

            counts: Dict[str, int] = {}
            for link in parse_wikilinks(content):
                resolved = self.resolve(doc.path, link.target)
                if resolved is not None:
                    counts[resolved.path] = counts.get(resolved.path, 0) + 1
            link_map[doc.path] = counts

        return link_map
