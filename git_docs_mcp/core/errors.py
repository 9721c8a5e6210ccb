"""Error types and error reporting for git-docs.

Every error raised by the core carries a stable ``code`` so tool responses
can be matched by callers without parsing messages.
"""

import re
import sys
from datetime import datetime

from ..constants import ErrorCode


class StorageError(Exception):
    """Base class for validation and state errors raised by the core."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR
    default_message = "Storage operation failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, str]:
        return {"status": "error", "code": self.code.value, "message": self.message}


class PathRequiredError(StorageError):
    code = ErrorCode.PATH_REQUIRED
    default_message = "Path is required"


class PathTraversalError(StorageError):
    code = ErrorCode.PATH_TRAVERSAL
    default_message = "Path traversal detected"


class PathOutsideRootsError(StorageError):
    code = ErrorCode.PATH_OUTSIDE_ROOTS
    default_message = "Path is outside project boundaries"


class FolderNotFoundError(StorageError):
    code = ErrorCode.FOLDER_NOT_FOUND
    default_message = "Folder does not exist"


class NotADirectoryStorageError(StorageError):
    code = ErrorCode.NOT_DIRECTORY
    default_message = "Path is not a directory"


class FileMissingError(StorageError):
    code = ErrorCode.FILE_NOT_FOUND
    default_message = "File not found"


class IsADirectoryStorageError(StorageError):
    code = ErrorCode.IS_DIRECTORY
    default_message = "Path is a directory"


class BinaryFileError(StorageError):
    code = ErrorCode.BINARY_FILE
    default_message = "Cannot read binary file"


class FileTooLargeError(StorageError):
    code = ErrorCode.FILE_TOO_LARGE
    default_message = "File too large (limit: 5MB)"


class TooManyFilesError(StorageError):
    code = ErrorCode.TOO_MANY_FILES
    default_message = "Directory contains too many files (limit: 1000)"


class TooManyExpandedPathsError(StorageError):
    code = ErrorCode.TOO_MANY_EXPANDED_PATHS
    default_message = "Too many expanded paths (max 200)"


class NotGitRepoError(StorageError):
    code = ErrorCode.NOT_GIT_REPO
    default_message = "Folder is not inside a git repository"


class DifferentRepoError(StorageError):
    code = ErrorCode.DIFFERENT_REPO
    default_message = "Folder must be in the same git repository as existing folders"


class DuplicatePathError(StorageError):
    code = ErrorCode.DUPLICATE_PATH
    default_message = "This folder is already added"


class RootPathNotFoundError(StorageError):
    code = ErrorCode.ROOT_PATH_NOT_FOUND
    default_message = "Folder is not part of this project"


class CommitMessageError(StorageError):
    code = ErrorCode.MESSAGE_REQUIRED
    default_message = "Commit message is required"

    def __init__(self, code: ErrorCode, message: str):
        super().__init__(message)
        self.code = code


class GitNotFoundError(StorageError):
    code = ErrorCode.GIT_NOT_FOUND
    default_message = (
        "Git is required but not found. Please install git and ensure it's in your PATH."
    )


# Absolute path scrubbing for user-facing messages
_WINDOWS_PATH = re.compile(r'[A-Z]:\\[^\s]+')
_UNIX_PATH = re.compile(r'/[\w.\-/]+/[\w.\-/]+')


def sanitize_message(text: str) -> str:
    """Replace absolute filesystem paths in a message with ``[path]``."""
    text = _WINDOWS_PATH.sub('[path]', text)
    return _UNIX_PATH.sub('[path]', text)


def log_error(message: str) -> None:
    """Write a timestamped line to stderr (stdout belongs to the MCP transport)."""
    timestamp = datetime.now().isoformat()
    print(f"[{timestamp}] {message}", file=sys.stderr)


def handle_error(e: Exception, context: str = "", log_to_stderr: bool = True) -> str:
    """Consistent error formatting across all tools.

    Args:
        e: Exception that occurred
        context: Context where error occurred (e.g., tool name, operation)
        log_to_stderr: Whether to log the unsanitized error to stderr

    Returns:
        Formatted error message string with absolute paths removed
    """
    error_msg = f"Error: {type(e).__name__}"
    if context:
        error_msg += f" in {context}"

    if log_to_stderr:
        log_error(f"{error_msg}: {e}")

    return f"{error_msg}: {sanitize_message(str(e))}"


def error_response(e: Exception, context: str = "") -> dict[str, str]:
    """Tool response for a failed operation.

    ``StorageError`` codes pass through unchanged; anything else is logged
    and reported as ``INTERNAL_ERROR`` with a sanitized message.
    """
    if isinstance(e, StorageError):
        return e.to_dict()
    return {
        "status": "error",
        "code": ErrorCode.INTERNAL_ERROR.value,
        "message": handle_error(e, context),
    }
