"""Glob pattern matching for filtering vault paths."""

import re
from typing import Iterable, Optional

from vault_query.core.models import InvalidQuery


class GlobMatcher:
    """A compiled glob pattern.

    Supports:
    - ``*`` any run of characters except ``/``
    - ``**`` any run including ``/`` (a following ``/`` is optional)
    - ``?`` a single character except ``/``
    - ``[abc]`` character classes
    - ``{a,b}`` alternatives
    """

    # Characters escaped outside of classes and alternatives
    _SPECIAL = set('/.()+^$|\\')

    def __init__(self, pattern: str):
        self.pattern = pattern
        try:
            self.regex = re.compile(self._to_regex(pattern))
        except re.error as e:
            raise InvalidQuery(f"Invalid glob pattern '{pattern}': {e}") from e

    def test(self, path: str) -> bool:
        """Return True if the whole of ``path`` matches the pattern."""
        return self.regex.fullmatch(path) is not None

    @classmethod
    def _to_regex(cls, pattern: str) -> str:
        parts = ['^']
        i = 0
        n = len(pattern)

        while i < n:
            char = pattern[i]

            if char == '*':
                if i + 1 < n and pattern[i + 1] == '*':
                    parts.append('.*')
                    i += 2
                    if i < n and pattern[i] == '/':
                        parts.append('/?')
                        i += 1
                else:
                    parts.append('[^/]*')
                    i += 1

            elif char == '?':
                parts.append('[^/]')
                i += 1

            elif char == '[':
                close = pattern.find(']', i + 1)
                if close == -1:
                    parts.append('\\[')
                    i += 1
                else:
                    parts.append('[' + pattern[i + 1:close] + ']')
                    i = close + 1

            elif char == '{':
                close = pattern.find('}', i + 1)
                if close == -1:
                    parts.append('\\{')
                    i += 1
                else:
                    alternatives = pattern[i + 1:close].split(',')
                    parts.append('(' + '|'.join(re.escape(a) for a in alternatives) + ')')
                    i = close + 1

            elif char in cls._SPECIAL or char in '}]':
                parts.append('\\' + char)
                i += 1

            else:
                parts.append(char)
                i += 1

        parts.append('$')
        return ''.join(parts)


def compile_glob(pattern: str) -> GlobMatcher:
    """Compile a glob pattern into a matcher."""
    return GlobMatcher(pattern)


def matches(path: str, pattern: str) -> bool:
    return compile_glob(pattern).test(path)


def matches_includes(path: str, includes: Optional[Iterable[str]] = None) -> bool:
    """True if no include patterns are given or any of them matches."""
    patterns = list(includes or [])
    if not patterns:
        return True
    return any(matches(path, p) for p in patterns)


def matches_excludes(path: str, excludes: Optional[Iterable[str]] = None) -> bool:
    """True if any exclude pattern matches."""
    return any(matches(path, p) for p in (excludes or []))


def should_include(
    path: str,
    includes: Optional[Iterable[str]] = None,
    excludes: Optional[Iterable[str]] = None,
) -> bool:
    """Check a path against include and exclude patterns.

    Excludes always win over includes.

    Args:
        path: Store-relative path to test
        includes: Patterns of which at least one must match (empty means all)
        excludes: Patterns of which none may match

    Returns:
        True if the path should be kept
    """
    if not matches_includes(path, includes):
        return False
    return not matches_excludes(path, excludes)
