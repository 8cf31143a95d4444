"""
Tests for the MCP Server

Tests the server initialization and tool registration.
"""

import pytest

from aria_snapshot_mcp.server import health_check, mcp


class TestServerSetup:
    """Tests for server configuration."""

    def test_server_name(self):
        """Test that the server has the correct name."""
        assert mcp.name == "ARIA Snapshot MCP Server"

    def test_server_has_instructions(self):
        """Test that the server has instructions defined."""
        assert mcp.instructions is not None
        assert "validate_aria_template" in mcp.instructions

    @pytest.mark.asyncio
    async def test_tools_registered(self):
        """Test that every snapshot tool is registered."""
        tools = await mcp.get_tools()
        for name in (
            "health_check",
            "validate_aria_template",
            "match_aria_snapshot",
            "regexify_aria_snapshot",
            "find_aria_nodes",
        ):
            assert name in tools


class TestHealthCheck:
    """Tests for the health_check tool."""

    @pytest.mark.asyncio
    async def test_health_check(self):
        """Test that health_check reports status and configuration."""
        result = await health_check.fn()

        assert result["status"] == "healthy"
        assert result["server"] == "ARIA Snapshot MCP Server"
        assert "version" in result
        assert result["update_snapshots"] in ("none", "all", "changed", "missing")
