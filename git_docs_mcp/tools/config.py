"""Configuration tool."""

from pathlib import Path
from typing import Any

from ..constants import CONFIG_FILENAME, ErrorCode
from ..core.config import save_config
from ..core.errors import error_response
from ..models import InitConfigInput
from ..schemas.config import GitDocsConfig


async def init_config(params: InitConfigInput) -> dict[str, Any]:
    """Write a default .git-docs.yml to the repository root.

    An existing file is left alone unless ``overwrite`` is set.
    """
    try:
        if (Path(params.repo_root) / CONFIG_FILENAME).exists() and not params.overwrite:
            return {
                "status": "error",
                "code": ErrorCode.CONFIG_EXISTS.value,
                "message": f"{CONFIG_FILENAME} already exists. Pass overwrite=true to replace it.",
            }

        config = GitDocsConfig()
        save_config(params.repo_root, config)
        return {
            "status": "success",
            "config_file": CONFIG_FILENAME,
            "config": config.model_dump(mode="json"),
        }
    except Exception as e:
        return error_response(e, "init_config")
