"""Pydantic models for git-docs: data records and tool inputs."""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator

from .constants import (
    DEFAULT_LOG_LIMIT,
    MAX_LOG_LIMIT,
    ChangeStatus,
    FileType,
    FolderCategory,
    GitErrorCode,
)

# Nested mapping of path segments, e.g. {"docs": {"guides": {}}}
ExpandedTree = dict[str, Any]


def _validate_repo_root(v: str) -> str:
    """Shared validator for repo_root fields.

    Raises:
        ValueError: If the path is relative, missing or not a directory
    """
    if not v:
        raise ValueError("Repository root cannot be empty")

    path = Path(v)
    if not path.is_absolute():
        raise ValueError(f"Invalid repository root: must be an absolute path. Got relative path: '{v}'")

    if not path.exists():
        raise ValueError(f"Repository root does not exist: {v}")

    if not path.is_dir():
        raise ValueError(f"Repository root is not a directory: {v}")

    return str(path.resolve())


def _validate_expanded_tree(v: Any, depth: int = 0) -> ExpandedTree:
    if depth > 64:
        raise ValueError("Expanded tree is nested too deeply")
    if not isinstance(v, dict):
        raise ValueError("Expanded tree must be a mapping of folder names")
    for name, subtree in v.items():
        if not isinstance(name, str):
            raise ValueError("Expanded tree keys must be strings")
        _validate_expanded_tree(subtree, depth + 1)
    return v


# ============================================================================
# Data records
# ============================================================================

class RepositoryHandle(BaseModel):
    """Resolved git repository for an on-disk location."""
    model_config = ConfigDict(frozen=True)

    repo_root: str
    branch: str
    remote_url: str | None = None


class FileEntry(BaseModel):
    """One row of a document tree listing."""
    name: str
    path: str
    type: FileType


class GitErrorInfo(BaseModel):
    """User-safe classification of a git failure."""
    message: str
    code: GitErrorCode

    def to_dict(self) -> dict[str, str]:
        return {"status": "error", "code": self.code.value, "message": self.message}


class TreeListing(BaseModel):
    """Result of a tree listing request."""
    entries: list[FileEntry]
    expanded: ExpandedTree
    root_paths: list[str]


class FileContent(BaseModel):
    path: str
    content: str
    encoding: str = "utf-8"


class WriteResult(BaseModel):
    path: str
    bytes_written: int


class RootPathUpdate(BaseModel):
    """Root path set after adding a folder."""
    repository: RepositoryHandle
    root_paths: list[str]
    added: str
    superseded: list[str] = Field(default_factory=list)


class FolderSuggestion(BaseModel):
    """A folder offered in the documentation folder picker."""
    path: str
    name: str
    category: FolderCategory
    has_documents: bool


class ChangedFile(BaseModel):
    path: str
    status: ChangeStatus
    staged: bool
    original_path: str | None = None


class GitStatus(BaseModel):
    branch: str
    upstream: str | None = None
    ahead: int = 0
    behind: int = 0
    files: list[ChangedFile] = Field(default_factory=list)

    @computed_field
    @property
    def has_changes(self) -> bool:
        return bool(self.files)


class CommitInfo(BaseModel):
    sha: str
    short_sha: str
    author: str
    email: str
    date: str
    message: str


class CommitResult(BaseModel):
    sha: str
    message: str


class PushResult(BaseModel):
    pushed: bool
    branch: str


class PullResult(BaseModel):
    updated: bool
    previous_head: str | None = None
    head: str | None = None
    changed_files: list[str] = Field(default_factory=list)


# ============================================================================
# Tool inputs
# ============================================================================

class _RepoInput(BaseModel):
    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
        extra='forbid'
    )

    repo_root: str = Field(
        ...,
        description="Absolute path to the repository checkout (e.g., '/srv/repos/handbook')",
        min_length=1
    )

    @field_validator('repo_root')
    @classmethod
    def validate_repo_root(cls, v: str) -> str:
        return _validate_repo_root(v)


class ListTreeInput(_RepoInput):
    """Input for listing the document tree."""
    root_paths: list[str] = Field(
        default_factory=list,
        description="Configured documentation root paths (e.g., ['/docs'])"
    )
    expanded: ExpandedTree = Field(
        default_factory=dict,
        description="Nested folder names currently expanded by the client"
    )

    @field_validator('expanded', mode='before')
    @classmethod
    def validate_expanded(cls, v: Any) -> ExpandedTree:
        if v is None:
            return {}
        return _validate_expanded_tree(v)


class ReadFileInput(_RepoInput):
    """Input for reading a document."""
    path: str = Field(..., description="Repository path of the file (e.g., '/docs/intro.md')", min_length=1)
    root_paths: list[str] = Field(default_factory=list)


class WriteFileInput(ReadFileInput):
    """Input for writing a document.

    Document content is stored byte-for-byte, so only the path fields are
    stripped.
    """
    model_config = ConfigDict(
        str_strip_whitespace=False,
        validate_assignment=True,
        extra='forbid'
    )

    content: str = Field(..., description="UTF-8 file content")

    @field_validator('repo_root', 'path', mode='before')
    @classmethod
    def strip_path_fields(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v


class AddFolderInput(BaseModel):
    """Input for adding a documentation root folder."""
    model_config = ConfigDict(str_strip_whitespace=True, extra='forbid')

    path: str = Field(..., description="Absolute path of the folder on disk", min_length=1)
    root_paths: list[str] = Field(default_factory=list, description="Current root paths")
    repo_root: str | None = Field(
        default=None,
        description="Repository root the current root paths belong to"
    )

    @model_validator(mode='after')
    def require_repo_root_with_roots(self) -> 'AddFolderInput':
        if self.root_paths and not self.repo_root:
            raise ValueError("repo_root is required when root_paths is not empty")
        return self


class RemoveFolderInput(BaseModel):
    """Input for removing a documentation root folder."""
    model_config = ConfigDict(str_strip_whitespace=True, extra='forbid')

    path: str = Field(..., description="Root path to remove (e.g., '/docs')", min_length=1)
    root_paths: list[str] = Field(default_factory=list, description="Current root paths")


class SuggestFoldersInput(_RepoInput):
    """Input for the folder picker."""
    parent: str = Field(default="/", description="Repository folder to list sub-folders of")


class GitStatusInput(_RepoInput):
    """Input for git status."""


class GitLogInput(_RepoInput):
    """Input for git log."""
    limit: int = Field(default=DEFAULT_LOG_LIMIT, ge=1, le=MAX_LOG_LIMIT)
    path: str | None = Field(default=None, description="Restrict history to this repository path")


class GitCommitInput(_RepoInput):
    """Input for committing changes."""
    message: str = Field(default="", description="Commit message (3-500 characters)")
    paths: list[str] | None = Field(default=None, description="Repository paths to stage before committing")
    root_paths: list[str] | None = Field(default=None, description="Restrict staged paths to these roots")


class GitSyncInput(_RepoInput):
    """Input for push and pull."""


class InitConfigInput(_RepoInput):
    """Input for writing a default .git-docs.yml."""
    overwrite: bool = Field(default=False)
