"""Configuration schemas."""

from .config import FolderPatterns, GitDocsConfig, validate_config

__all__ = ["FolderPatterns", "GitDocsConfig", "validate_config"]
