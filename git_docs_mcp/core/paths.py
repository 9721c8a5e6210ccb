"""Path boundary utilities.

Repository paths in this project are strings rooted at the repository
checkout: ``"/"`` is the repository root and ``"/docs/guide.md"`` a file
below it. Functions here are pure string arithmetic except
``ensure_no_symlink_escape``, which resolves links on disk.
"""

import os
from collections.abc import Iterable
from pathlib import Path

from ..constants import ROOT_PATH
from .errors import PathTraversalError


def normalize_repo_path(path: str) -> str:
    """Normalize a repository path.

    Separators are unified to ``/``, empty and ``.`` segments dropped, ``..``
    collapsed (never above the root) and trailing slashes removed.

    Examples:
        >>> normalize_repo_path("docs/guides/")
        '/docs/guides'
        >>> normalize_repo_path("//docs/./a/../b")
        '/docs/b'
        >>> normalize_repo_path("")
        '/'
    """
    parts: list[str] = []
    for segment in path.replace('\\', '/').split('/'):
        if segment in ('', '.'):
            continue
        if segment == '..':
            if parts:
                parts.pop()
            continue
        parts.append(segment)
    return '/' + '/'.join(parts)


def path_depth(path: str) -> int:
    """Number of segments in a repository path; the root has depth 0."""
    if path == ROOT_PATH:
        return 0
    return len([part for part in path.split('/') if part])


def is_well_formed(path: str) -> bool:
    """True if ``path`` is already in normalized repository form."""
    if not path.startswith('/') or '\0' in path or '\\' in path:
        return False
    if path == ROOT_PATH:
        return True
    return all(part not in ('', '.', '..') for part in path[1:].split('/'))


def is_within(target: str, roots: Iterable[str]) -> bool:
    """Check whether ``target`` equals or is nested under one of ``roots``.

    Uses a ``root + "/"`` prefix test on normalized paths so that root
    ``/docs`` does not match ``/docs-extra``. The root ``/`` matches
    everything.
    """
    normalized_target = normalize_repo_path(target)
    for root in roots:
        normalized_root = normalize_repo_path(root)
        if normalized_root == ROOT_PATH:
            return True
        if normalized_target == normalized_root:
            return True
        if normalized_target.startswith(normalized_root + '/'):
            return True
    return False


def relative_to(repo_root: str, absolute_path: str) -> str:
    """Compute the ``/``-prefixed repository path of an absolute filesystem path.

    Args:
        repo_root: Absolute path of the repository checkout
        absolute_path: Absolute path inside the checkout

    Returns:
        Repository path, ``"/"`` when both paths are identical

    Raises:
        PathTraversalError: If ``absolute_path`` is outside ``repo_root``
    """
    relative = os.path.relpath(absolute_path, repo_root).replace('\\', '/')
    if relative == '..' or relative.startswith('../'):
        raise PathTraversalError("Path is outside the repository")
    normalized = '/' + relative
    return ROOT_PATH if normalized == '/.' else normalized


def resolve_and_contain(repo_root: str, relative_path: str) -> str:
    """Join a repository path onto the checkout and verify it stays inside.

    This is the only way filesystem paths are built from caller input. No
    filesystem access happens here.

    Args:
        repo_root: Absolute path of the repository checkout
        relative_path: Repository path (leading ``/`` optional)

    Returns:
        Normalized absolute filesystem path

    Raises:
        PathTraversalError: If the path contains NUL bytes or escapes ``repo_root``
    """
    if '\0' in relative_path or '\0' in repo_root:
        raise PathTraversalError("Path contains a null byte")

    root = os.path.normpath(repo_root)
    cleaned = relative_path.replace('\\', '/').lstrip('/')
    absolute = os.path.normpath(os.path.join(root, cleaned)) if cleaned else root

    if absolute == root:
        return absolute
    if not absolute.startswith(root.rstrip(os.sep) + os.sep):
        raise PathTraversalError()
    return absolute


def ensure_no_symlink_escape(repo_root: str, absolute_path: str) -> Path:
    """Resolve symlinks and verify the real path is still inside the repository.

    Returns:
        The resolved path

    Raises:
        PathTraversalError: If a symlink points outside ``repo_root``
    """
    try:
        resolved = Path(absolute_path).resolve()
        real_root = Path(repo_root).resolve()
    except (OSError, RuntimeError) as e:
        # Symlink loops raise RuntimeError before Python 3.13
        raise PathTraversalError("Path cannot be resolved") from e
    if not resolved.is_relative_to(real_root):
        raise PathTraversalError("Symlink escapes repository boundary")
    return resolved
