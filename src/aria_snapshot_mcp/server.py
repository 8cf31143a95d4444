"""
ARIA Snapshot MCP Server

Exposes the ARIA snapshot template language to MCP clients:
1. Validates templates and reports errors with line, column and caret
2. Matches templates against rendered snapshots and returns the diff
3. Suggests templates for snapshots, with dynamic values as regexes
"""

import sys
from typing import Any

from fastmcp import FastMCP

from aria_snapshot_matcher import __version__
from aria_snapshot_matcher.config import load_matcher_config

from .api import snapshots
from .utils.logging_config import get_logger, log_dict, log_tool_result, setup_file_logging

config = load_matcher_config()

# Configure logging using centralized utility
setup_file_logging(log_file=config["log_file"], level=config["log_level"])
logger = get_logger(__name__)

logger.info(f"Python interpreter: {sys.executable}")
log_dict(logger, "Matcher configuration:", dict(config))

mcp = FastMCP(
    name="ARIA Snapshot MCP Server",
    instructions="""
    Validate and evaluate ARIA snapshot templates.

    A template is a YAML list of entries such as:
      - heading "Welcome" [level=1]
      - list:
        - listitem: /Item \\d+/

    Use validate_aria_template to check a template, match_aria_snapshot to
    compare it with a rendered snapshot, and regexify_aria_snapshot to turn
    a snapshot into a starting template.
    """,
)


# =============================================================================
# TOOLS
# =============================================================================


@mcp.tool()
async def health_check() -> dict[str, Any]:
    """
    Check the health status of the MCP server.

    Returns:
        A dictionary with the server status and configuration info.
    """
    return {
        "status": "healthy",
        "server": "ARIA Snapshot MCP Server",
        "version": __version__,
        "update_snapshots": config["update_snapshots"],
        "regexify_received": config["regexify_received"],
    }


mcp.tool()(log_tool_result(logger)(snapshots.validate_aria_template))
mcp.tool()(log_tool_result(logger)(snapshots.match_aria_snapshot))
mcp.tool()(log_tool_result(logger)(snapshots.regexify_aria_snapshot))
mcp.tool()(log_tool_result(logger)(snapshots.find_aria_nodes))


# =============================================================================
# RESOURCES
# =============================================================================


@mcp.resource("aria-snapshot://syntax")
async def get_syntax() -> str:
    """Quick reference for the template syntax."""
    return """
    - role "name" [attr=value]        node with accessible name and attributes
    - role /regex/                    name matched as a full-string regex
    - role: text                      node whose only child is the given text
    - text: value                     a text node
    - /children: contain|equal|deep-equal
    - /url: value                     property of the enclosing node

    Attributes: checked, pressed (true|false|mixed); disabled, expanded,
    selected (true|false); level (integer). A bare [attr] means true.
    """


# =============================================================================
# MAIN
# =============================================================================


def main() -> None:
    """Run the MCP server."""
    logger.info("Starting ARIA Snapshot MCP Server...")
    mcp.run()


if __name__ == "__main__":
    main()
