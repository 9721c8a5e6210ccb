"""Constants and enums for git-docs MCP server."""

from enum import Enum

# Tree listing limits
MAX_EXPANDED_PATHS = 200  # Maximum expanded folders per tree request
MAX_DIRECTORY_ENTRIES = 1000  # Maximum entries read from a single directory

# File limits
MAX_FILE_SIZE = 5 * 1024 * 1024  # 5 MB read/write cap
BINARY_SNIFF_BYTES = 8000  # Bytes inspected for NUL when detecting binary files

# Git limits
GIT_TIMEOUT = 30  # Subprocess timeout in seconds
DEFAULT_REMOTE = "origin"
DEFAULT_LOG_LIMIT = 20
MAX_LOG_LIMIT = 100
COMMIT_MESSAGE_MIN_LENGTH = 3
COMMIT_MESSAGE_MAX_LENGTH = 500

# Folder classification
MAX_DOCUMENT_SCAN_ENTRIES = 10_000  # Entries visited while looking for a document file

DEFAULT_DOC_EXTENSIONS = ["md", "mdx"]

CONFIG_FILENAME = ".git-docs.yml"

ROOT_PATH = "/"
ROOT_DISPLAY_NAME = "Root"

# Default folder patterns for the documentation folder picker.
# Patterns are repository-relative; "**/" matches the folder at any depth.
DEFAULT_PRESELECT_PATTERNS = [
    "/docs",
    "/doc",
    "/documentation",
]

DEFAULT_SUGGEST_PATTERNS = [
    "/wiki",
    "/guides",
    "/handbook",
    "/notes",
    "/specs",
    "/adr",
    "/rfcs",
    "/design",
    "/website/docs",
    "**/docs",
]

DEFAULT_IGNORE_PATTERNS = [
    # Version Control
    "**/.git",
    "**/.svn",
    "**/.hg",

    # Dependencies
    "**/node_modules",
    "**/vendor",
    "**/.venv",
    "**/venv",
    "**/__pycache__",

    # Build outputs
    "**/dist",
    "**/build",
    "**/target",
    "**/out",
    "**/coverage",
    "**/.next",
    "**/.docusaurus",
    "**/_build",
    "**/site",
]


class FileType(str, Enum):
    """Kind of entry in a document tree."""
    FILE = "file"
    DIRECTORY = "directory"


class FolderCategory(str, Enum):
    """Folder picker categories."""
    PRESELECT = "preselect"
    SUGGEST = "suggest"
    IGNORE = "ignore"
    NORMAL = "normal"


class ChangeStatus(str, Enum):
    """Working tree change kinds reported by git status."""
    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"
    COPIED = "copied"
    UNTRACKED = "untracked"
    CONFLICTED = "conflicted"


class GitErrorCode(str, Enum):
    """Stable codes for classified git failures."""
    AUTH_FAILED = "AUTH_FAILED"
    NETWORK_ERROR = "NETWORK_ERROR"
    PUSH_REJECTED = "PUSH_REJECTED"
    MERGE_CONFLICT = "MERGE_CONFLICT"
    NOTHING_TO_COMMIT = "NOTHING_TO_COMMIT"
    TIMEOUT = "TIMEOUT"
    GIT_ERROR = "GIT_ERROR"


class ErrorCode(str, Enum):
    """Stable codes for validation and state errors."""
    PATH_REQUIRED = "PATH_REQUIRED"
    PATH_TRAVERSAL = "PATH_TRAVERSAL"
    PATH_OUTSIDE_ROOTS = "PATH_OUTSIDE_ROOTS"
    FOLDER_NOT_FOUND = "FOLDER_NOT_FOUND"
    NOT_DIRECTORY = "NOT_DIRECTORY"
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    IS_DIRECTORY = "IS_DIRECTORY"
    BINARY_FILE = "BINARY_FILE"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    TOO_MANY_FILES = "TOO_MANY_FILES"
    TOO_MANY_EXPANDED_PATHS = "TOO_MANY_EXPANDED_PATHS"
    NOT_GIT_REPO = "NOT_GIT_REPO"
    DIFFERENT_REPO = "DIFFERENT_REPO"
    DUPLICATE_PATH = "DUPLICATE_PATH"
    ROOT_PATH_NOT_FOUND = "ROOT_PATH_NOT_FOUND"
    MESSAGE_REQUIRED = "MESSAGE_REQUIRED"
    MESSAGE_TOO_SHORT = "MESSAGE_TOO_SHORT"
    MESSAGE_TOO_LONG = "MESSAGE_TOO_LONG"
    GIT_NOT_FOUND = "GIT_NOT_FOUND"
    CONFIG_EXISTS = "CONFIG_EXISTS"
    INTERNAL_ERROR = "INTERNAL_ERROR"
