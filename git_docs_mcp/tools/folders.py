"""Documentation root folder tools."""

from typing import Any

from ..core.classifier import FolderClassifier
from ..core.config import load_config
from ..core.errors import error_response
from ..core.roots import add_folder, remove_folder
from ..models import AddFolderInput, RemoveFolderInput, SuggestFoldersInput


async def add_root_folder(params: AddFolderInput) -> dict[str, Any]:
    """Add a folder on disk as a documentation root.

    Returns the new root path set; the caller persists it.
    """
    try:
        update = await add_folder(params.path, params.root_paths, params.repo_root)
        return {"status": "success", **update.model_dump(mode="json")}
    except Exception as e:
        return error_response(e, "add_root_folder")


async def remove_root_folder(params: RemoveFolderInput) -> dict[str, Any]:
    try:
        root_paths = remove_folder(params.path, params.root_paths)
        return {"status": "success", "removed": params.path, "root_paths": root_paths}
    except Exception as e:
        return error_response(e, "remove_root_folder")


async def suggest_folders(params: SuggestFoldersInput) -> dict[str, Any]:
    """List sub-folders of ``parent`` with their picker category.

    Reads the repository ignore rules once per call when ``use_gitignore``
    is enabled in ``.git-docs.yml``.
    """
    try:
        config = load_config(params.repo_root)
        classifier = await FolderClassifier.load(
            params.repo_root,
            patterns=config.folder_patterns,
            extensions=config.doc_extensions,
            use_gitignore=config.use_gitignore,
            timeout=config.git_timeout,
        )
        suggestions = classifier.list_folder_suggestions(params.parent)
        return {
            "status": "success",
            "parent": params.parent,
            "folders": [suggestion.model_dump(mode="json") for suggestion in suggestions],
        }
    except Exception as e:
        return error_response(e, "suggest_folders")
