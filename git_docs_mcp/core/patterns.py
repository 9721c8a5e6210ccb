"""Pattern matching utilities for folder classification.

Folder patterns are repository paths such as ``/docs``. A pattern matches
the folder itself and everything below it, using the same ``pattern + "/"``
prefix rule as path containment. Two glob forms are supported:

- ``**/name`` matches a folder called ``name`` at any depth
- ``fnmatch`` wildcards inside a segment (``/docs-*``)
"""

import fnmatch
from collections.abc import Iterable

from ..constants import ROOT_PATH
from .paths import is_within, normalize_repo_path

_WILDCARDS = frozenset('*?[')


def _ancestor_or_self(normalized_path: str) -> list[str]:
    """``/a/b/c`` -> ``["a", "a/b", "a/b/c"]``."""
    parts = [part for part in normalized_path.split('/') if part]
    return ['/'.join(parts[:i + 1]) for i in range(len(parts))]


def matches_folder_pattern(folder_path: str, patterns: Iterable[str]) -> bool:
    """Check if a folder path matches any of the folder patterns.

    Args:
        folder_path: Repository path to check (leading "/" optional)
        patterns: Folder patterns (e.g., ["/docs", "**/node_modules"])

    Returns:
        True if the folder, or one of its ancestors, matches a pattern
    """
    normalized_path = normalize_repo_path(folder_path)

    for pattern in patterns:
        raw_pattern = pattern.replace('\\', '/').strip()
        if not raw_pattern:
            continue
        normalized_pattern = raw_pattern.rstrip('/') or ROOT_PATH

        # Handle **/ prefix (matches any depth)
        if normalized_pattern.startswith('**/'):
            pattern_suffix = normalized_pattern[3:]
            for prefix in _ancestor_or_self(normalized_path):
                if fnmatch.fnmatch(prefix, pattern_suffix) or \
                   fnmatch.fnmatch(prefix, '*/' + pattern_suffix):
                    return True
            continue

        normalized_pattern = normalize_repo_path(normalized_pattern)
        if normalized_pattern == ROOT_PATH:
            return True

        # Wildcard segment pattern
        if _WILDCARDS.intersection(normalized_pattern):
            for prefix in _ancestor_or_self(normalized_path):
                if fnmatch.fnmatch('/' + prefix, normalized_pattern):
                    return True
            continue

        # Exact match or folder starts with pattern followed by /
        if normalized_path == normalized_pattern or \
           normalized_path.startswith(normalized_pattern + '/'):
            return True

    return False


def is_covered_by(folder_path: str, ignored_paths: Iterable[str]) -> bool:
    """True if the folder is one of, or below one of, the ignored paths."""
    return is_within(folder_path, ignored_paths)
