"""Configuration file management utilities.

This module loads and saves the optional .git-docs.yml file kept at the
repository root.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ..constants import CONFIG_FILENAME
from ..schemas.config import GitDocsConfig, validate_config
from .errors import log_error


def load_config(repo_root: str | Path) -> GitDocsConfig:
    """Load .git-docs.yml, falling back to defaults.

    A missing file yields the defaults silently. An unreadable or invalid
    file is logged and also yields the defaults, so a broken config never
    takes the document tree down.
    """
    config_path = Path(repo_root) / CONFIG_FILENAME
    if not config_path.exists():
        return GitDocsConfig()

    try:
        with open(config_path, encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{CONFIG_FILENAME} must contain a mapping")
        return validate_config(data)
    except (OSError, yaml.YAMLError, ValidationError, ValueError) as e:
        log_error(f"Ignoring invalid {CONFIG_FILENAME}: {e}")
        return GitDocsConfig()


def save_config(repo_root: str | Path, config: GitDocsConfig | dict[str, Any]) -> Path:
    """Save .git-docs.yml with a short guide appended as comments.

    Returns:
        Path of the written file

    Raises:
        OSError: If the file cannot be written
    """
    if isinstance(config, dict):
        config = validate_config(config)

    config_path = Path(repo_root) / CONFIG_FILENAME
    with open(config_path, 'w', encoding='utf-8') as f:
        yaml.dump(config.model_dump(mode="json"), f, default_flow_style=False, sort_keys=False)

        f.write("\n")
        f.write("# " + "=" * 76 + "\n")
        f.write("# Configuration Guide\n")
        f.write("# " + "=" * 76 + "\n")
        f.write("\n")
        f.write("# Folder Patterns\n")
        f.write("# ---------------\n")
        f.write("# Paths are relative to the repository root and start with '/'.\n")
        f.write("# A pattern matches the folder and everything below it.\n")
        f.write("#   preselect: selected automatically when they contain documents\n")
        f.write("#   suggest:   highlighted when they contain documents\n")
        f.write("#   ignore:    hidden from the folder picker (always wins)\n")
        f.write("# Examples:\n")
        f.write("#     - \"/docs\"               # Only the top-level docs folder\n")
        f.write("#     - \"**/node_modules\"     # node_modules at any depth\n")
        f.write("#     - \"/docs-*\"             # docs-v1, docs-v2, ...\n")
        f.write("\n")
        f.write("# use_gitignore\n")
        f.write("# -------------\n")
        f.write("# When true, folders excluded by .gitignore are hidden as well.\n")

    return config_path
