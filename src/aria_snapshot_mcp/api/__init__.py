"""API modules whose functions are registered as MCP tools."""
