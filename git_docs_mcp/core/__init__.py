"""Core storage layer for git-docs.

This package contains focused modules for different concerns:
- paths: Repository path arithmetic and containment checks
- git: Git command execution and repository discovery
- tree: Document tree listing and expanded-folder bookkeeping
- patterns: Folder pattern matching
- classifier: Folder picker categories
- roots: Documentation root path management
- files: Document reads and writes
- sync: Status, history, commit, push and pull
- config: Configuration file management
- errors: Error types and error reporting
"""

# Folder classification
from .classifier import FolderClassifier, classify_folders

# Configuration
from .config import load_config, save_config

# Error handling
from .errors import StorageError, error_response, handle_error, log_error

# Document access
from .files import read_file, write_file

# Git operations
from .git import (
    GitCommandError,
    find_repo_root,
    get_repository_handle,
    list_ignored_paths,
    run_git,
)

# Path utilities
from .paths import is_within, normalize_repo_path, resolve_and_contain

# Pattern matching
from .patterns import matches_folder_pattern

# Root paths
from .roots import add_folder, remove_folder

# Synchronization
from .sync import SyncController, parse_git_error

# Tree listing
from .tree import expanded_tree_to_paths, list_tree, paths_to_expanded_tree

__all__ = [
    "FolderClassifier",
    "GitCommandError",
    "StorageError",
    "SyncController",
    "add_folder",
    "classify_folders",
    "error_response",
    "expanded_tree_to_paths",
    "find_repo_root",
    "get_repository_handle",
    "handle_error",
    "is_within",
    "list_ignored_paths",
    "list_tree",
    "load_config",
    "log_error",
    "matches_folder_pattern",
    "normalize_repo_path",
    "parse_git_error",
    "paths_to_expanded_tree",
    "read_file",
    "remove_folder",
    "resolve_and_contain",
    "run_git",
    "save_config",
    "write_file",
]
