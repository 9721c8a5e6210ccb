"""Git synchronization tools.

Classified git failures come back as ``{"status": "error", "code": ...}``
with a user-safe message; the raw git output is only written to the log.
"""

from typing import Any

from pydantic import BaseModel

from ..core.config import load_config
from ..core.errors import error_response
from ..core.sync import SyncController
from ..models import GitCommitInput, GitErrorInfo, GitLogInput, GitStatusInput, GitSyncInput


def _controller(repo_root: str, root_paths: list[str] | None = None) -> SyncController:
    config = load_config(repo_root)
    return SyncController(repo_root, root_paths=root_paths, timeout=config.git_timeout)


def _response(result: BaseModel) -> dict[str, Any]:
    if isinstance(result, GitErrorInfo):
        return result.to_dict()
    return {"status": "success", **result.model_dump(mode="json")}


async def git_status(params: GitStatusInput) -> dict[str, Any]:
    try:
        return _response(await _controller(params.repo_root).status())
    except Exception as e:
        return error_response(e, "git_status")


async def git_log(params: GitLogInput) -> dict[str, Any]:
    try:
        result = await _controller(params.repo_root).log(params.limit, params.path)
        if isinstance(result, GitErrorInfo):
            return result.to_dict()
        return {
            "status": "success",
            "commits": [commit.model_dump(mode="json") for commit in result],
        }
    except Exception as e:
        return error_response(e, "git_log")


async def git_commit(params: GitCommitInput) -> dict[str, Any]:
    """Stage the given paths and commit.

    Without ``paths`` only what is already staged is committed.
    """
    try:
        controller = _controller(params.repo_root, params.root_paths)
        return _response(await controller.commit(params.message, params.paths))
    except Exception as e:
        return error_response(e, "git_commit")


async def git_push(params: GitSyncInput) -> dict[str, Any]:
    try:
        return _response(await _controller(params.repo_root).push())
    except Exception as e:
        return error_response(e, "git_push")


async def git_pull(params: GitSyncInput) -> dict[str, Any]:
    try:
        return _response(await _controller(params.repo_root).pull())
    except Exception as e:
        return error_response(e, "git_pull")
