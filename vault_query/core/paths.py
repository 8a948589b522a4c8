"""Store-relative path normalization and validation."""

import re

from vault_query.core.models import InvalidPath

_INVALID_CHARS = re.compile(r'[<>:"|?*\x00-\x1f]')
_DRIVE_LETTER = re.compile(r'^[A-Za-z]:')


def normalize_path(path: str) -> str:
    """Normalize a path to the vault's slash-delimited relative form.

    Converts backslashes, strips leading and trailing slashes, and
    collapses repeated separators.
    """
    if not path:
        return ""
    normalized = path.replace('\\', '/')
    normalized = re.sub(r'/+', '/', normalized)
    return normalized.strip('/')


def invalid_reason(path: str) -> str:
    """Return why ``path`` is not a valid vault path, or an empty string."""
    if not path or not path.strip():
        return "path is empty"
    if path.startswith('/') or path.startswith('\\') or _DRIVE_LETTER.match(path):
        return "absolute paths are not allowed"

    normalized = normalize_path(path)
    if any(segment == '..' for segment in normalized.split('/')):
        return "parent directory traversal is not allowed"
    if _INVALID_CHARS.search(normalized):
        return "path contains invalid characters"
    return ""


def is_valid_path(path: str) -> bool:
    return not invalid_reason(path)


def require_valid_path(path: str) -> str:
    """Validate and normalize a path.

    Args:
        path: Caller-supplied path

    Returns:
        The normalized path

    Raises:
        InvalidPath: If the path is empty, absolute, traverses upward,
            or contains disallowed characters
    """
    reason = invalid_reason(path)
    if reason:
        raise InvalidPath(path, reason)
    return normalize_path(path)


def basename(path: str) -> str:
    """Last path segment, extension included."""
    return normalize_path(path).rsplit('/', 1)[-1]


def stem(path: str) -> str:
    name = basename(path)
    if '.' in name.lstrip('.'):
        return name.rsplit('.', 1)[0]
    return name


def parent_path(path: str) -> str:
    normalized = normalize_path(path)
    return normalized.rsplit('/', 1)[0] if '/' in normalized else ""
