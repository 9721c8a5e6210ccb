"""Pydantic schema for .git-docs.yml configuration file.

The file lives at the repository root and is optional. Everything has a
default, so a repository without the file behaves like one with an empty
file.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import (
    DEFAULT_DOC_EXTENSIONS,
    DEFAULT_IGNORE_PATTERNS,
    DEFAULT_PRESELECT_PATTERNS,
    DEFAULT_SUGGEST_PATTERNS,
    GIT_TIMEOUT,
)


class FolderPatterns(BaseModel):
    """Ordered folder pattern lists for the documentation folder picker."""

    model_config = ConfigDict(extra="forbid")

    preselect: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PRESELECT_PATTERNS),
        description="Folders automatically selected if they exist and contain documents"
    )
    suggest: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SUGGEST_PATTERNS),
        description="Folders highlighted but not selected if they contain documents"
    )
    ignore: list[str] = Field(
        default_factory=lambda: list(DEFAULT_IGNORE_PATTERNS),
        description="Folders hidden from the picker entirely"
    )

    @field_validator("preselect", "suggest", "ignore", mode="before")
    @classmethod
    def normalize_list_fields(cls, v: Any) -> list[str]:
        """Normalize None to empty list for list fields."""
        if v is None:
            return []
        return v


class GitDocsConfig(BaseModel):
    """Schema for .git-docs.yml configuration file."""

    model_config = ConfigDict(extra="allow")

    doc_extensions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_DOC_EXTENSIONS),
        description="File extensions shown in the document tree"
    )
    folder_patterns: FolderPatterns = Field(
        default_factory=FolderPatterns,
        description="Folder picker patterns"
    )
    use_gitignore: bool = Field(
        default=True,
        description="Whether the repository's ignore rules hide folders from the picker"
    )
    git_timeout: int = Field(
        default=GIT_TIMEOUT,
        ge=1,
        le=600,
        description="Timeout in seconds for a single git command"
    )

    @field_validator("doc_extensions", mode="before")
    @classmethod
    def normalize_extensions(cls, v: Any) -> list[str]:
        """Accept None and strip leading dots (".md" -> "md")."""
        if v is None:
            return list(DEFAULT_DOC_EXTENSIONS)
        return [str(ext).lower().lstrip('.') for ext in v]

    @field_validator("folder_patterns", mode="before")
    @classmethod
    def normalize_folder_patterns(cls, v: Any) -> Any:
        if v is None:
            return FolderPatterns()
        return v


def validate_config(data: dict[str, Any]) -> GitDocsConfig:
    """Validate .git-docs.yml configuration data.

    Args:
        data: Raw YAML data from file

    Returns:
        Validated GitDocsConfig model

    Raises:
        pydantic.ValidationError: If validation fails
    """
    return GitDocsConfig.model_validate(data)
