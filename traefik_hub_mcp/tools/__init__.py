"""MCP tool implementations grouped by concern."""
