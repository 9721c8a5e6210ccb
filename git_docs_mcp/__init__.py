"""git-docs: git-backed document storage exposed as MCP tools."""

__version__ = "0.1.0"
