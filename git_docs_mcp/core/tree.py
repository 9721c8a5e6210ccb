"""Document tree listing.

Clients send the folders they have open as a nested ``ExpandedTree``
(``{"docs": {"guides": {}}}`` means ``/docs`` and ``/docs/guides`` are
open). Internally everything works on flat path lists; the nested form is
converted only on the way in and on the way out.
"""

import os
from collections.abc import Callable, Iterable
from functools import partial

from ..constants import (
    DEFAULT_DOC_EXTENSIONS,
    MAX_DIRECTORY_ENTRIES,
    MAX_EXPANDED_PATHS,
    ROOT_DISPLAY_NAME,
    ROOT_PATH,
    FileType,
)
from ..models import ExpandedTree, FileEntry, TreeListing
from .errors import PathTraversalError, TooManyExpandedPathsError, TooManyFilesError
from .paths import (
    ensure_no_symlink_escape,
    is_well_formed,
    is_within,
    normalize_repo_path,
    path_depth,
    resolve_and_contain,
)

DirectoryLister = Callable[[str], list[FileEntry]]


def expanded_tree_to_paths(tree: ExpandedTree, base_path: str = "") -> list[str]:
    """Convert a nested tree to a flat list of paths (parents before children)."""
    paths: list[str] = []
    for name, subtree in tree.items():
        path = f"{base_path}/{name}"
        paths.append(path)
        paths.extend(expanded_tree_to_paths(subtree or {}, path))
    return paths


def paths_to_expanded_tree(paths: Iterable[str]) -> ExpandedTree:
    """Convert a flat list of paths to a nested tree.

    The root ``/`` has no segments and therefore no node of its own.
    """
    tree: ExpandedTree = {}
    for path in paths:
        current = tree
        for part in (p for p in path.split('/') if p):
            current = current.setdefault(part, {})
    return tree


def sort_paths_by_depth(paths: Iterable[str]) -> list[str]:
    """Sort paths shallowest first; ties keep their input order."""
    return sorted(paths, key=path_depth)


def display_name(path: str) -> str:
    """Get display name for a path."""
    if path == ROOT_PATH:
        return ROOT_DISPLAY_NAME
    return path.rstrip('/').rsplit('/', 1)[-1] or path


def _join(parent: str, name: str) -> str:
    return f"{parent.rstrip('/')}/{name}"


def list_directory(
    repo_root: str,
    path: str,
    extensions: Iterable[str] | None = None,
    max_entries: int = MAX_DIRECTORY_ENTRIES,
) -> list[FileEntry]:
    """List the immediate children of a repository folder.

    Directories come first, then document files, each sorted
    case-insensitively. Hidden entries and symlinks pointing outside the
    repository are skipped. Files are filtered to ``extensions``.

    Args:
        repo_root: Absolute path of the repository checkout
        path: Repository path of the folder
        extensions: Allowed file extensions without the dot (e.g. ["md", "mdx"])
        max_entries: Entry ceiling for a single directory

    Returns:
        FileEntry list for the folder's children

    Raises:
        PathTraversalError: If the path escapes the repository
        FileNotFoundError / NotADirectoryError: If the folder does not exist
        TooManyFilesError: If the folder holds more than ``max_entries`` entries
    """
    directory = resolve_and_contain(repo_root, path)
    ensure_no_symlink_escape(repo_root, directory)
    parent = normalize_repo_path(path)
    allowed = {ext.lower().lstrip('.') for ext in (extensions or DEFAULT_DOC_EXTENSIONS)}

    directories: list[FileEntry] = []
    files: list[FileEntry] = []
    with os.scandir(directory) as scanner:
        for count, entry in enumerate(scanner, start=1):
            if count > max_entries:
                raise TooManyFilesError(
                    f"Directory contains too many files (limit: {max_entries})"
                )
            if entry.name.startswith('.'):
                continue

            if entry.is_symlink():
                try:
                    ensure_no_symlink_escape(repo_root, entry.path)
                except PathTraversalError:
                    continue

            child_path = _join(parent, entry.name)
            if entry.is_dir():
                directories.append(FileEntry(name=entry.name, path=child_path, type=FileType.DIRECTORY))
            elif entry.is_file():
                extension = entry.name.rsplit('.', 1)[-1].lower() if '.' in entry.name else ''
                if extension in allowed:
                    files.append(FileEntry(name=entry.name, path=child_path, type=FileType.FILE))

    directories.sort(key=lambda e: e.name.lower())
    files.sort(key=lambda e: e.name.lower())
    return directories + files


def list_tree(
    repo_root: str,
    root_paths: Iterable[str],
    expanded: ExpandedTree | None = None,
    extensions: Iterable[str] | None = None,
    max_expanded_paths: int = MAX_EXPANDED_PATHS,
    lister: DirectoryLister | None = None,
) -> TreeListing:
    """Load the document tree for a set of root paths and expanded folders.

    Root paths are always expanded. Requested folders outside the roots, or
    folders that no longer exist, are dropped without error since the
    client's expansion state may be stale. The returned ``expanded`` tree
    holds exactly the folders that were listed, so the client can send it
    back unchanged on its next request.

    Raises:
        TooManyExpandedPathsError: If more than ``max_expanded_paths`` folders
            would be expanded; raised before any directory is read
        TooManyFilesError: If an expanded folder exceeds the entry ceiling
    """
    if lister is None:
        lister = partial(list_directory, repo_root, extensions=extensions)

    roots = list(dict.fromkeys(normalize_repo_path(root) for root in root_paths))
    requested = expanded_tree_to_paths(expanded or {})

    # Combine root paths with requested expanded paths
    paths_to_expand = list(dict.fromkeys([*roots, *requested]))
    if len(paths_to_expand) > max_expanded_paths:
        raise TooManyExpandedPathsError(f"Too many expanded paths (max {max_expanded_paths})")

    root_set = set(roots)
    entries: list[FileEntry] = []
    valid_expanded: list[str] = []

    for path in sort_paths_by_depth(paths_to_expand):
        if path in root_set:
            entries.append(FileEntry(name=display_name(path), path=path, type=FileType.DIRECTORY))

        if not is_well_formed(path) or not is_within(path, roots):
            continue

        try:
            children = lister(path)
        except (OSError, PathTraversalError):
            # Folder vanished, was replaced or is unreadable since the client last looked
            continue

        valid_expanded.append(path)

        parent_index = next((i for i, entry in enumerate(entries) if entry.path == path), None)
        if parent_index is None:
            entries.extend(children)
        else:
            entries[parent_index + 1:parent_index + 1] = children

    return TreeListing(
        entries=entries,
        expanded=paths_to_expanded_tree(valid_expanded),
        root_paths=roots,
    )
