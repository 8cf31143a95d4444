"""
Type Definitions

TypedDict classes for the responses of the ARIA snapshot tools.
"""

from typing import Any

from typing_extensions import TypedDict


class TemplateErrorInfo(TypedDict):
    """Location and category of a template error."""

    kind: str
    message: str
    line: int | None
    column: int | None
    formatted: str


class ValidateTemplateResponse(TypedDict, total=False):
    """
    Response from validate_aria_template.

    ``normalized`` is the template re-rendered in canonical form.
    """

    valid: bool
    normalized: str | None
    entries: int
    error: TemplateErrorInfo | None


class MatchSnapshotResponse(TypedDict, total=False):
    """Response from match_aria_snapshot."""

    success: bool
    matched: bool
    passed: bool
    message: str
    received_raw: str | None
    received_regex: str | None
    error: TemplateErrorInfo | None


class RegexifySnapshotResponse(TypedDict, total=False):
    """Response from regexify_aria_snapshot."""

    success: bool
    template: str
    error: TemplateErrorInfo | None


class FindNodesResponse(TypedDict, total=False):
    """Response from find_aria_nodes."""

    success: bool
    count: int
    nodes: list[dict[str, Any]]
    error: TemplateErrorInfo | None
