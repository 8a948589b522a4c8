"""YAML frontmatter parsing, list summaries and note body helpers."""

import datetime
import logging
import re
from typing import Any, Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)

# Obsidian comments, single or multi-line: %% ... %%
COMMENT_PATTERN = re.compile(r'%%.*?%%', re.DOTALL)


def split_frontmatter(content: str) -> Optional[str]:
    """Return the raw YAML between the leading ``---`` fences, if any."""
    if not content.startswith('---'):
        return None

    parts = content.split('---\n', 2)
    if len(parts) < 3:
        return None
    return parts[1]


def strip_frontmatter(content: str) -> str:
    """Return the note body that follows the frontmatter block."""
    if split_frontmatter(content) is None:
        return content
    return content.split('---\n', 2)[2]


def count_words(content: str) -> int:
    """Count whitespace-separated words, ignoring frontmatter and comments."""
    body = COMMENT_PATTERN.sub('', strip_frontmatter(content))
    return len(body.split())


def parse_frontmatter(content: str, path: str = "") -> Dict[str, Any]:
    """Parse YAML frontmatter from note content.

    Args:
        content: Full note text
        path: Note path, used only for log messages

    Returns:
        Frontmatter dict (empty if not found or invalid)
    """
    raw = split_frontmatter(content)
    if raw is None:
        return {}

    try:
        frontmatter = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        logger.warning("Failed to parse YAML frontmatter in %s: %s", path or "<content>", e)
        return {}

    if not isinstance(frontmatter, dict):
        return {}
    return frontmatter


def _as_list(value: Any) -> List[str]:
    if isinstance(value, list):
        return [str(v) for v in value]
    if isinstance(value, str):
        return [value]
    return []


def _plain(value: Any) -> Any:
    """Convert YAML dates into strings so summaries stay JSON friendly."""
    if isinstance(value, datetime.datetime):
        return value.isoformat()
    if isinstance(value, datetime.date):
        return value.strftime('%Y-%m-%d')
    if isinstance(value, list):
        return [_plain(v) for v in value]
    if isinstance(value, dict):
        return {str(k): _plain(v) for k, v in value.items()}
    return value


def summarize_frontmatter(frontmatter: Dict[str, Any]) -> Dict[str, Any]:
    """Build the list summary for a note's frontmatter.

    ``tags`` and ``aliases`` are always lists. Every other key is kept
    except ``position``.
    """
    summary: Dict[str, Any] = {}

    if frontmatter.get('title'):
        summary['title'] = str(frontmatter['title'])
    if 'tags' in frontmatter:
        summary['tags'] = _as_list(frontmatter['tags'])
    if 'aliases' in frontmatter:
        summary['aliases'] = _as_list(frontmatter['aliases'])

    for key, value in frontmatter.items():
        if key in ('title', 'tags', 'aliases', 'position'):
            continue
        summary[str(key)] = _plain(value)

    return summary
