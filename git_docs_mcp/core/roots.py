"""Documentation root path management.

A project's root paths are passed in and returned as plain lists; nothing
here keeps state between calls and nothing here touches files on disk
beyond inspecting the candidate folder.

Invariants of a root path set:

- every path is a normalized repository path (``/docs``, or ``/``)
- no path is equal to, or nested under, another path in the set
- all paths belong to the same repository
"""

import os
from collections.abc import Iterable
from pathlib import Path

from ..models import RootPathUpdate
from .errors import (
    DifferentRepoError,
    DuplicatePathError,
    FolderNotFoundError,
    NotADirectoryStorageError,
    NotGitRepoError,
    PathRequiredError,
    PathTraversalError,
    RootPathNotFoundError,
)
from .git import get_repository_handle
from .paths import is_within, normalize_repo_path, relative_to


def normalize_root_paths(root_paths: Iterable[str]) -> list[str]:
    """Normalize root paths and drop exact duplicates, keeping order."""
    return list(dict.fromkeys(normalize_repo_path(path) for path in root_paths))


def _validate_candidate(candidate_path: str) -> Path:
    if not candidate_path or not candidate_path.strip():
        raise PathRequiredError()
    if '\0' in candidate_path:
        raise PathTraversalError("Path contains a null byte")

    folder = Path(candidate_path)
    if not folder.is_absolute():
        raise FolderNotFoundError("Folder path must be absolute")
    if not folder.exists():
        raise FolderNotFoundError()
    if not folder.is_dir():
        raise NotADirectoryStorageError()
    return folder


async def add_folder(
    candidate_path: str,
    root_paths: Iterable[str],
    project_repo_root: str | None = None,
) -> RootPathUpdate:
    """Add a folder to a project's root paths.

    Adding a folder that contains existing root paths supersedes them: the
    nested roots are removed from the returned set and listed in
    ``superseded``.

    Args:
        candidate_path: Absolute path of the folder on disk
        root_paths: The project's current root paths
        project_repo_root: Repository the current root paths belong to;
            required when ``root_paths`` is not empty

    Returns:
        RootPathUpdate with the resolved repository and the new root path set

    Raises:
        PathRequiredError / FolderNotFoundError / NotADirectoryStorageError:
            Invalid candidate, raised before git is invoked
        NotGitRepoError: No repository above the folder
        DifferentRepoError: Existing root paths live in another repository
        DuplicatePathError: The folder is already covered by a root path
    """
    folder = _validate_candidate(candidate_path)
    existing = normalize_root_paths(root_paths)
    if existing and project_repo_root is None:
        raise ValueError("project_repo_root is required when root paths are configured")

    repository = await get_repository_handle(folder)
    if repository is None:
        raise NotGitRepoError()

    if existing and os.path.realpath(project_repo_root) != os.path.realpath(repository.repo_root):
        raise DifferentRepoError()

    # git reports the top level with symlinks resolved
    root_path = relative_to(repository.repo_root, os.path.realpath(folder))

    if is_within(root_path, existing):
        raise DuplicatePathError()

    superseded = [path for path in existing if is_within(path, [root_path])]
    updated = [path for path in existing if path not in superseded] + [root_path]

    return RootPathUpdate(
        repository=repository,
        root_paths=updated,
        added=root_path,
        superseded=superseded,
    )


def remove_folder(path: str, root_paths: Iterable[str]) -> list[str]:
    """Remove a root path from the set; files on disk are never touched.

    Raises:
        PathRequiredError: If ``path`` is empty
        RootPathNotFoundError: If ``path`` is not one of the root paths
    """
    if not path or not path.strip():
        raise PathRequiredError()

    target = normalize_repo_path(path)
    existing = normalize_root_paths(root_paths)
    if target not in existing:
        raise RootPathNotFoundError()
    return [root for root in existing if root != target]
