"""Tool implementations registered by the MCP server."""
