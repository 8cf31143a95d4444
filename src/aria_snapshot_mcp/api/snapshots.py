"""
Snapshot API Module

Async functions registered as MCP tools. Templates and snapshots are passed
as text; malformed input is reported in the response rather than raised, so
the client sees the error location and caret excerpt.
"""

import logging
from typing import Any

from aria_snapshot_matcher import (
    AriaSnapshotParser,
    AriaSnapshotSerializer,
    ParseError,
    find_matches,
    load_snapshot,
    regexify,
    render_template,
    to_match_aria_snapshot,
)
from aria_snapshot_matcher.config import load_matcher_config

from ..types import (
    FindNodesResponse,
    MatchSnapshotResponse,
    RegexifySnapshotResponse,
    TemplateErrorInfo,
    ValidateTemplateResponse,
)

logger = logging.getLogger(__name__)


def _error_info(error: ParseError) -> TemplateErrorInfo:
    return {
        "kind": error.kind.value,
        "message": error.message,
        "line": error.line,
        "column": error.column,
        "formatted": error.format(),
    }


async def validate_aria_template(template: str) -> ValidateTemplateResponse:
    """
    Check that an ARIA snapshot template parses.

    Args:
        template: Template text, e.g. '- heading "Welcome" [level=1]'

    Returns:
        A dictionary containing:
        - valid: Whether the template parsed
        - normalized: The template re-rendered in canonical form
        - entries: Number of top-level entries
        - error: kind, message, line, column and caret excerpt when invalid
    """
    try:
        pattern = AriaSnapshotParser().parse(template)
    except ParseError as e:
        logger.info(f"Template rejected: {e.kind.value} at line {e.line}, column {e.column}")
        return {"valid": False, "normalized": None, "entries": 0, "error": _error_info(e)}

    return {
        "valid": True,
        "normalized": render_template(pattern),
        "entries": len(pattern.children),
        "error": None,
    }


async def match_aria_snapshot(
    template: str,
    snapshot: str,
    negate: bool = False,
    deep: bool = False,
) -> MatchSnapshotResponse:
    """
    Match a template against a rendered snapshot.

    Args:
        template: Expected template text
        snapshot: Captured snapshot in rendered form
        negate: Assert that the template does NOT match
        deep: Search every subtree instead of matching at the root

    Returns:
        A dictionary containing:
        - success: False when either input failed to parse
        - matched: Whether the template matched
        - passed: Outcome of the assertion, taking negate into account
        - message: Diff or explanation suitable for a test report
        - received_raw / received_regex: Renderings of the snapshot
    """
    try:
        received = load_snapshot(snapshot)
        config = load_matcher_config()
        config["ignore_snapshots"] = False
        result = to_match_aria_snapshot(
            received, template, is_not=negate, update_mode="none", config=config, deep=deep
        )
    except ParseError as e:
        return {"success": False, "error": _error_info(e)}

    actual = result.actual
    return {
        "success": True,
        "matched": result.pass_ != negate,
        "passed": result.pass_,
        "message": result.message(),
        "received_raw": getattr(actual, "raw", None),
        "received_regex": getattr(actual, "regex", None),
        "error": None,
    }


async def regexify_aria_snapshot(snapshot: str) -> RegexifySnapshotResponse:
    """
    Suggest a template for a snapshot, with dynamic-looking values as regexes.

    Args:
        snapshot: Captured snapshot in rendered form

    Returns:
        A dictionary containing:
        - success: False when the snapshot failed to parse
        - template: Suggested template text
    """
    try:
        received = load_snapshot(snapshot)
    except ParseError as e:
        return {"success": False, "error": _error_info(e)}
    return {"success": True, "template": render_template(regexify(received)), "error": None}


async def find_aria_nodes(template: str, snapshot: str, limit: int = 50) -> FindNodesResponse:
    """
    Find every node of a snapshot that matches a single-entry template.

    Args:
        template: Template describing one node, e.g. '- button /Save.*/'
        snapshot: Captured snapshot in rendered form
        limit: Maximum number of nodes returned

    Returns:
        A dictionary containing:
        - success: False when either input failed to parse
        - count: Number of matching nodes
        - nodes: Matching nodes as JSON objects, in document order
    """
    try:
        pattern = AriaSnapshotParser().parse(template)
        received = load_snapshot(snapshot)
    except ParseError as e:
        return {"success": False, "error": _error_info(e)}

    found = find_matches(pattern, received)
    serializer = AriaSnapshotSerializer()
    nodes: list[dict[str, Any]] = [serializer.to_dict(node) for node in found[:limit]]  # type: ignore[misc]
    return {"success": True, "count": len(found), "nodes": nodes, "error": None}
