#!/usr/bin/env python3
"""
git-docs MCP Server

An MCP server that stores documentation in plain git checkouts:
- Document tree listing with expanded-folder state
- Reading and writing documents inside configured root folders
- Root folder management and folder picker suggestions
- Status, history, commit, push and pull
"""

from typing import Any

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from .models import (
    AddFolderInput,
    GitCommitInput,
    GitLogInput,
    GitStatusInput,
    GitSyncInput,
    InitConfigInput,
    ListTreeInput,
    ReadFileInput,
    RemoveFolderInput,
    SuggestFoldersInput,
    WriteFileInput,
)
from .tools.config import init_config
from .tools.folders import add_root_folder, remove_root_folder, suggest_folders
from .tools.git import git_commit, git_log, git_pull, git_push, git_status
from .tools.storage import list_document_tree, read_document, write_document

# Initialize the MCP server
mcp = FastMCP("git_docs_mcp")

# ============================================================================
# Register Tools
# ============================================================================

# ----------------------------------------------------------------------------
# Documents
# ----------------------------------------------------------------------------

@mcp.tool(
    name="gitdocs_list_tree",
    annotations=ToolAnnotations(
        title="List Document Tree",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False
    )
)
async def tool_list_tree(
    repo_root: str,
    root_paths: list[str] | None = None,
    expanded: dict[str, Any] | None = None
) -> dict[str, Any]:
    """List documents and folders under the project's root paths.

    Root paths are always expanded. Pass back the returned `expanded` tree to
    keep the same folders open; folders that no longer exist are dropped.
    At most 200 folders can be expanded per request.
    """
    params = ListTreeInput(
        repo_root=repo_root,
        root_paths=root_paths or [],
        expanded=expanded
    )
    return await list_document_tree(params)

@mcp.tool(
    name="gitdocs_read_file",
    annotations=ToolAnnotations(
        title="Read Document",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False
    )
)
async def tool_read_file(
    repo_root: str,
    path: str,
    root_paths: list[str] | None = None
) -> dict[str, Any]:
    """Read a UTF-8 document (max 5MB) inside one of the root paths."""
    params = ReadFileInput(repo_root=repo_root, path=path, root_paths=root_paths or [])
    return await read_document(params)

@mcp.tool(
    name="gitdocs_write_file",
    annotations=ToolAnnotations(
        title="Write Document",
        readOnlyHint=False,
        destructiveHint=True,  # Overwrites existing files
        idempotentHint=True,
        openWorldHint=False
    )
)
async def tool_write_file(
    repo_root: str,
    path: str,
    content: str,
    root_paths: list[str] | None = None
) -> dict[str, Any]:
    """Write a UTF-8 document inside one of the root paths, creating parent folders.

    Changes are not committed; call gitdocs_git_commit afterwards.
    """
    params = WriteFileInput(
        repo_root=repo_root,
        path=path,
        content=content,
        root_paths=root_paths or []
    )
    return await write_document(params)

# ----------------------------------------------------------------------------
# Root folders
# ----------------------------------------------------------------------------

@mcp.tool(
    name="gitdocs_add_folder",
    annotations=ToolAnnotations(
        title="Add Documentation Folder",
        readOnlyHint=True,  # Returns the new root path set; nothing is written
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False
    )
)
async def tool_add_folder(
    path: str,
    root_paths: list[str] | None = None,
    repo_root: str | None = None
) -> dict[str, Any]:
    """Add a folder on disk as a documentation root.

    The folder must be inside a git repository, and inside the same repository
    as the existing root paths. Root paths nested under the new folder are
    replaced by it and reported in `superseded`.
    """
    params = AddFolderInput(path=path, root_paths=root_paths or [], repo_root=repo_root)
    return await add_root_folder(params)

@mcp.tool(
    name="gitdocs_remove_folder",
    annotations=ToolAnnotations(
        title="Remove Documentation Folder",
        readOnlyHint=True,  # Files on disk are never touched
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=False
    )
)
async def tool_remove_folder(
    path: str,
    root_paths: list[str]
) -> dict[str, Any]:
    """Remove a root path from the set. Files on disk are not deleted."""
    params = RemoveFolderInput(path=path, root_paths=root_paths)
    return await remove_root_folder(params)

@mcp.tool(
    name="gitdocs_suggest_folders",
    annotations=ToolAnnotations(
        title="Suggest Documentation Folders",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False
    )
)
async def tool_suggest_folders(
    repo_root: str,
    parent: str = "/"
) -> dict[str, Any]:
    """List sub-folders of `parent` with a category: preselect, suggest or normal.

    Folders matching ignore patterns or the repository's .gitignore are omitted.
    """
    params = SuggestFoldersInput(repo_root=repo_root, parent=parent)
    return await suggest_folders(params)

@mcp.tool(
    name="gitdocs_init_config",
    annotations=ToolAnnotations(
        title="Initialize Configuration",
        readOnlyHint=False,  # Creates .git-docs.yml
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False
    )
)
async def tool_init_config(
    repo_root: str,
    overwrite: bool = False
) -> dict[str, Any]:
    """Create .git-docs.yml with default folder patterns and document extensions."""
    params = InitConfigInput(repo_root=repo_root, overwrite=overwrite)
    return await init_config(params)

# ----------------------------------------------------------------------------
# Git
# ----------------------------------------------------------------------------

@mcp.tool(
    name="gitdocs_git_status",
    annotations=ToolAnnotations(
        title="Git Status",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False
    )
)
async def tool_git_status(repo_root: str) -> dict[str, Any]:
    """Branch, ahead/behind counts and changed files of the working tree."""
    return await git_status(GitStatusInput(repo_root=repo_root))

@mcp.tool(
    name="gitdocs_git_log",
    annotations=ToolAnnotations(
        title="Git History",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False
    )
)
async def tool_git_log(
    repo_root: str,
    limit: int = 20,
    path: str | None = None
) -> dict[str, Any]:
    """Recent commits, newest first (limit 1-100), optionally for a single path."""
    params = GitLogInput(repo_root=repo_root, limit=limit, path=path)
    return await git_log(params)

@mcp.tool(
    name="gitdocs_git_commit",
    annotations=ToolAnnotations(
        title="Commit Changes",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=False
    )
)
async def tool_git_commit(
    repo_root: str,
    message: str,
    paths: list[str] | None = None,
    root_paths: list[str] | None = None
) -> dict[str, Any]:
    """Stage `paths` and commit them with `message` (3-500 characters).

    Without `paths`, only changes that are already staged are committed.
    """
    params = GitCommitInput(
        repo_root=repo_root,
        message=message,
        paths=paths,
        root_paths=root_paths
    )
    return await git_commit(params)

@mcp.tool(
    name="gitdocs_git_push",
    annotations=ToolAnnotations(
        title="Push Commits",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=True  # Talks to the remote
    )
)
async def tool_git_push(repo_root: str) -> dict[str, Any]:
    """Push the current branch to origin."""
    return await git_push(GitSyncInput(repo_root=repo_root))

@mcp.tool(
    name="gitdocs_git_pull",
    annotations=ToolAnnotations(
        title="Pull Changes",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=True  # Talks to the remote
    )
)
async def tool_git_pull(repo_root: str) -> dict[str, Any]:
    """Fetch and merge the current branch from origin.

    Merge conflicts are reported with code MERGE_CONFLICT and left in the
    working tree for the user to resolve.
    """
    return await git_pull(GitSyncInput(repo_root=repo_root))

def main():
    """Entry point for the MCP server."""
    mcp.run()

if __name__ == "__main__":
    main()
