"""
ARIA Snapshot Matcher

A Python library for parsing ARIA snapshot templates and matching them
against captured accessibility trees.
"""

__version__ = "0.1.0"

from .assertion import MatcherResult, to_match_aria_snapshot
from .baseline import BaselineStore
from .diff import format_error, print_diff, unified_diff
from .exceptions import (
    AriaSnapshotError,
    AttributeValueError,
    ErrorKind,
    LexerError,
    ParseError,
    UnexpectedInputError,
    UnexpectedScalarAtNodeEnd,
    UnsupportedAttributeError,
    ValidationError,
    YamlSyntaxError,
)
from .matcher import find_matches, match_aria_snapshot, matches, matches_deep
from .parser import AriaSnapshotParser
from .regexify import DEFAULT_POLICY, RegexifyPolicy, RegexifyRule, regexify, regexify_text
from .serializer import AriaSnapshotSerializer, render_snapshot, render_template
from .snapshot import load_snapshot
from .types import (
    NOT_FOUND,
    AriaTextValue,
    ContainmentMode,
    MatchResult,
    PatternNode,
    ReceivedSnapshot,
    SnapshotNode,
)

__all__ = [
    # Main classes
    "AriaSnapshotParser",
    "AriaSnapshotSerializer",
    "BaselineStore",
    "RegexifyPolicy",
    "RegexifyRule",
    # Data types
    "AriaTextValue",
    "ContainmentMode",
    "MatchResult",
    "MatcherResult",
    "PatternNode",
    "ReceivedSnapshot",
    "SnapshotNode",
    "NOT_FOUND",
    "DEFAULT_POLICY",
    # Exceptions
    "AriaSnapshotError",
    "AttributeValueError",
    "ErrorKind",
    "LexerError",
    "ParseError",
    "UnexpectedInputError",
    "UnexpectedScalarAtNodeEnd",
    "UnsupportedAttributeError",
    "ValidationError",
    "YamlSyntaxError",
    # Functions
    "find_matches",
    "format_error",
    "load_snapshot",
    "match_aria_snapshot",
    "matches",
    "matches_deep",
    "print_diff",
    "regexify",
    "regexify_text",
    "render_snapshot",
    "render_template",
    "to_match_aria_snapshot",
    "unified_diff",
    # Convenience function
    "parse",
]


def parse(text: str) -> PatternNode:
    """
    Parse an ARIA template.

    This is a convenience function that creates a parser instance and parses the input.

    Args:
        text: Template text

    Returns:
        ``fragment`` pattern node holding the top-level entries

    Raises:
        ParseError: on the first error in the template

    Example:
        >>> pattern = parse('- heading "Welcome" [level=1]')
        >>> matches(pattern, load_snapshot('- heading "Welcome" [level=1]'))
        True
    """
    parser = AriaSnapshotParser()
    return parser.parse(text)
