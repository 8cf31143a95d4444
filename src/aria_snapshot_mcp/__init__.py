"""MCP server exposing ARIA snapshot template validation and matching."""
