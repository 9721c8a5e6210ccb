"""Document tree and file tools."""

import asyncio
from typing import Any

from ..core.config import load_config
from ..core.errors import error_response
from ..core.files import read_file, write_file
from ..core.tree import list_tree
from ..models import ListTreeInput, ReadFileInput, WriteFileInput


async def list_document_tree(params: ListTreeInput) -> dict[str, Any]:
    """List the document tree for the project's root paths.

    Returns:
        dict with the flat ``entries`` list (parents before children) and the
        ``expanded`` tree of folders that were actually listed
    """
    try:
        config = load_config(params.repo_root)
        listing = await asyncio.to_thread(
            list_tree,
            params.repo_root,
            params.root_paths,
            params.expanded,
            extensions=config.doc_extensions,
        )
        return {"status": "success", **listing.model_dump(mode="json")}
    except Exception as e:
        return error_response(e, "list_document_tree")


async def read_document(params: ReadFileInput) -> dict[str, Any]:
    try:
        document = await asyncio.to_thread(read_file, params.repo_root, params.path, params.root_paths)
        return {"status": "success", **document.model_dump(mode="json")}
    except Exception as e:
        return error_response(e, "read_document")


async def write_document(params: WriteFileInput) -> dict[str, Any]:
    """Write a document inside one of the root paths.

    The file is not staged or committed; use the git tools for that.
    """
    try:
        result = await asyncio.to_thread(
            write_file, params.repo_root, params.path, params.content, params.root_paths
        )
        return {"status": "success", **result.model_dump(mode="json")}
    except Exception as e:
        return error_response(e, "write_document")
