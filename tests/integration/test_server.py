"""Integration tests for MCP tool registration and hints."""

import pytest

from git_docs_mcp import server

EXPECTED_READ_ONLY = {
    "gitdocs_list_tree": True,
    "gitdocs_read_file": True,
    "gitdocs_write_file": False,
    "gitdocs_add_folder": True,
    "gitdocs_remove_folder": True,
    "gitdocs_suggest_folders": True,
    "gitdocs_init_config": False,
    "gitdocs_git_status": True,
    "gitdocs_git_log": True,
    "gitdocs_git_commit": False,
    "gitdocs_git_push": False,
    "gitdocs_git_pull": False,
}


@pytest.mark.asyncio
class TestToolRegistration:

    async def test_all_tools_registered(self):
        tools = await server.mcp.list_tools()

        assert {tool.name for tool in tools} == set(EXPECTED_READ_ONLY)

    async def test_read_only_hints_match_behavior(self):
        tools = await server.mcp.list_tools()

        for tool in tools:
            assert tool.annotations.readOnlyHint == EXPECTED_READ_ONLY[tool.name], tool.name

    async def test_only_remote_operations_are_open_world(self):
        tools = await server.mcp.list_tools()

        open_world = {tool.name for tool in tools if tool.annotations.openWorldHint}
        assert open_world == {"gitdocs_git_push", "gitdocs_git_pull"}

    async def test_only_write_file_is_destructive(self):
        tools = await server.mcp.list_tools()

        destructive = {tool.name for tool in tools if tool.annotations.destructiveHint}
        assert destructive == {"gitdocs_write_file"}


@pytest.mark.asyncio
class TestToolCalls:

    async def test_call_through_server(self, tmp_path):
        (tmp_path / "docs").mkdir()
        (tmp_path / "docs" / "a.md").write_text("# A\n")

        result = await server.tool_read_file(str(tmp_path), "/docs/a.md", ["/docs"])

        assert result == {"status": "success", "path": "/docs/a.md", "content": "# A\n", "encoding": "utf-8"}
