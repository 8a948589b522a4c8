"""Waypoint plugin blocks and folder-note detection."""

import logging
import re
from typing import List, Optional

from vault_query.config import EngineConfig
from vault_query.core.models import (
    Document,
    FolderNoteInfo,
    NotFound,
    WaypointBlock,
    WaypointMatch,
)
from vault_query.core.ports import ContentStore
from vault_query.core.search import in_folder

logger = logging.getLogger(__name__)

WAYPOINT_START = re.compile(r'%% Begin Waypoint %%')
WAYPOINT_END = re.compile(r'%% End Waypoint %%')
LINK_PATTERN = re.compile(r'\[\[([^\]]+)\]\]')


def iter_waypoint_blocks(content: str):
    """Yield every closed waypoint block in ``content``."""
    start = None
    body: List[str] = []

    for index, line in enumerate(content.split('\n')):
        if WAYPOINT_START.search(line):
            start = index + 1
            body = []
        elif start is not None and WAYPOINT_END.search(line):
            raw = '\n'.join(body)
            yield WaypointBlock(
                has_waypoint=True,
                start=start,
                end=index + 1,
                links=[m.group(1) for m in LINK_PATTERN.finditer(raw)],
                raw_content=raw,
            )
            start = None
            body = []
        elif start is not None:
            body.append(line)


def extract_waypoint_block(content: str) -> WaypointBlock:
    """Return the first closed waypoint block, or an empty block if none."""
    return next(iter_waypoint_blocks(content), WaypointBlock(has_waypoint=False))


def has_waypoint_marker(content: str) -> bool:
    return bool(WAYPOINT_START.search(content) and WAYPOINT_END.search(content))


class WaypointScanner:
    """Vault-wide waypoint lookups."""

    def __init__(self, store: ContentStore, config: Optional[EngineConfig] = None):
        self.store = store
        self.config = config or EngineConfig()

    def documents(self, folder: Optional[str] = None) -> List[Document]:
        return [
            d for d in self.store.list_all()
            if d.is_file and self.config.is_markdown(d.path) and in_folder(d.path, folder)
        ]

    def search(self, folder: Optional[str] = None) -> List[WaypointMatch]:
        """Find every waypoint block in the vault, optionally under ``folder``."""
        results = []
        for doc in self.documents(folder):
            try:
                content = self.store.read(doc.path)
            except (OSError, UnicodeDecodeError, NotFound) as e:
                logger.debug("Skipping unreadable document %s: %s", doc.path, e)
                continue

            for block in iter_waypoint_blocks(content):
                results.append(WaypointMatch(
                    path=doc.path,
                    start=block.start,
                    end=block.end,
                    content=block.raw_content or "",
                    links=block.links,
                ))
        return results

    def is_folder_note(self, document: Document) -> FolderNoteInfo:
        """Check whether a note stands for its folder.

        A folder note shares its folder's name, or holds a waypoint block.
        """
        parent = document.parent
        basename_match = bool(parent) and parent.rsplit('/', 1)[-1] == document.basename

        try:
            has_waypoint = has_waypoint_marker(self.store.read(document.path))
        except (OSError, UnicodeDecodeError, NotFound) as e:
            logger.debug("Could not read %s for waypoint check: %s", document.path, e)
            has_waypoint = False

        if basename_match and has_waypoint:
            reason = "both"
        elif basename_match:
            reason = "basename_match"
        elif has_waypoint:
            reason = "waypoint_marker"
        else:
            reason = "none"

        return FolderNoteInfo(
            is_folder_note=basename_match or has_waypoint,
            reason=reason,
            folder_path=parent or None,
        )
