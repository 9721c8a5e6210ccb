"""Reading and writing documents inside a repository checkout.

Every path goes through ``resolve_and_contain`` first and is then checked
against the project's root paths, so a file is only reachable when it is
both inside the checkout and inside a configured documentation root.
"""

import os
from collections.abc import Iterable
from pathlib import Path

from ..constants import BINARY_SNIFF_BYTES, MAX_FILE_SIZE
from ..models import FileContent, WriteResult
from .errors import (
    BinaryFileError,
    FileMissingError,
    FileTooLargeError,
    IsADirectoryStorageError,
    PathOutsideRootsError,
    PathRequiredError,
    PathTraversalError,
)
from .paths import ensure_no_symlink_escape, is_within, relative_to, resolve_and_contain


def _real_roots(repo_root: str, real_root: str, root_paths: Iterable[str]) -> list[str]:
    """Root paths as they resolve on disk, skipping roots that cannot be resolved."""
    resolved = []
    for root in root_paths:
        try:
            real = ensure_no_symlink_escape(repo_root, resolve_and_contain(repo_root, root))
        except PathTraversalError:
            continue
        resolved.append(relative_to(real_root, str(real)))
    return resolved


def _resolve_document_path(repo_root: str, path: str, root_paths: Iterable[str]) -> tuple[str, Path]:
    """Return the repository path and real filesystem path of a document.

    Raises:
        PathRequiredError: Empty path
        PathTraversalError: Path or symlink escapes the checkout
        PathOutsideRootsError: Path is outside every root path
    """
    if not path or not path.strip():
        raise PathRequiredError()

    absolute = resolve_and_contain(repo_root, path)
    repo_path = relative_to(repo_root, absolute)

    if not is_within(repo_path, root_paths):
        raise PathOutsideRootsError()

    if '.git' in repo_path.split('/'):
        raise PathTraversalError("Access to the .git directory is not allowed")

    real_path = ensure_no_symlink_escape(repo_root, absolute)
    real_root = str(Path(repo_root).resolve())
    real_repo_path = relative_to(real_root, str(real_path))

    # A symlink inside a root may point elsewhere in the checkout
    if not is_within(real_repo_path, _real_roots(repo_root, real_root, root_paths)):
        raise PathOutsideRootsError()

    if '.git' in real_repo_path.split('/'):
        raise PathTraversalError("Access to the .git directory is not allowed")

    return repo_path, real_path


def read_file(
    repo_root: str,
    path: str,
    root_paths: Iterable[str],
    max_size: int = MAX_FILE_SIZE,
) -> FileContent:
    """Read a UTF-8 document.

    Raises:
        FileMissingError: The file does not exist
        IsADirectoryStorageError: The path is a folder
        FileTooLargeError: The file exceeds ``max_size`` bytes
        BinaryFileError: The file contains NUL bytes or is not valid UTF-8
    """
    repo_path, real_path = _resolve_document_path(repo_root, path, root_paths)

    if real_path.is_dir():
        raise IsADirectoryStorageError()
    if not real_path.is_file():
        raise FileMissingError()

    if real_path.stat().st_size > max_size:
        raise FileTooLargeError(f"File too large (limit: {max_size // (1024 * 1024)}MB)")

    data = real_path.read_bytes()
    if b'\0' in data[:BINARY_SNIFF_BYTES]:
        raise BinaryFileError()
    try:
        content = data.decode('utf-8')
    except UnicodeDecodeError as e:
        raise BinaryFileError() from e

    return FileContent(path=repo_path, content=content)


def write_file(
    repo_root: str,
    path: str,
    content: str,
    root_paths: Iterable[str],
    max_size: int = MAX_FILE_SIZE,
) -> WriteResult:
    """Write a UTF-8 document, creating parent folders as needed.

    Concurrent writers are not coordinated; the last write wins.

    Raises:
        FileTooLargeError: Encoded content exceeds ``max_size`` bytes
        IsADirectoryStorageError: The path is an existing folder
    """
    data = content.encode('utf-8')
    if len(data) > max_size:
        raise FileTooLargeError(f"File too large (limit: {max_size // (1024 * 1024)}MB)")

    repo_path, real_path = _resolve_document_path(repo_root, path, root_paths)
    if real_path.is_dir():
        raise IsADirectoryStorageError()

    os.makedirs(real_path.parent, exist_ok=True)
    real_path.write_bytes(data)

    return WriteResult(path=repo_path, bytes_written=len(data))
