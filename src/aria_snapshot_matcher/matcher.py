"""Match a parsed ARIA template against a captured snapshot tree."""

import logging
import re
from functools import lru_cache

from .serializer import render_snapshot
from .types import (
    NOT_FOUND,
    AriaTextValue,
    AttributeValue,
    ContainmentMode,
    MatchResult,
    PatternNode,
    ReceivedSnapshot,
    SnapshotNode,
    _NotFound,
)

logger = logging.getLogger(__name__)

WILDCARD_ROLES = frozenset({"fragment", "none"})

SnapshotChild = SnapshotNode | str


@lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern)


def matches_text(value: str | None, expected: AriaTextValue | None) -> bool:
    """
    Compare a concrete value with a literal or regex expectation.

    No expectation matches anything; a literal must be equal; a regex must
    match the whole value.
    """
    if expected is None:
        return True
    if value is None:
        return False
    if expected.is_regex:
        return _compile(expected.value).fullmatch(value) is not None
    return value == expected.value


def _attribute_equals(expected: AttributeValue, actual: AttributeValue | None) -> bool:
    # bool is an int subclass, so compare types as well as values
    return actual is not None and type(expected) is type(actual) and expected == actual


def _text_child(pattern: PatternNode) -> PatternNode:
    return PatternNode(role="text", text=pattern.text)


def _child_patterns(pattern: PatternNode) -> tuple[PatternNode, ...]:
    if pattern.text is not None and not pattern.is_text:
        return (_text_child(pattern), *pattern.children)
    return pattern.children


def _matches_text_node(text: str, pattern: PatternNode) -> bool:
    return matches_text(text, pattern.text) and matches_text(text, pattern.name)


def matches_node(snapshot: SnapshotChild, pattern: PatternNode, inherited_deep_equal: bool = False) -> bool:
    """
    Match one snapshot node (or text node) against one pattern node.

    Args:
        snapshot: Snapshot node, or a string for a text node
        pattern: Pattern node
        inherited_deep_equal: Whether an ancestor declared ``deep-equal``
            that has not been overridden since

    Returns:
        True if the node and its children satisfy the pattern
    """
    if isinstance(snapshot, str):
        return pattern.is_text and _matches_text_node(snapshot, pattern)
    if pattern.is_text:
        return False

    if pattern.role not in WILDCARD_ROLES and pattern.role != snapshot.role:
        return False
    for key, expected in pattern.attributes.items():
        if not _attribute_equals(expected, snapshot.attributes.get(key)):
            return False
    if not matches_text(snapshot.name, pattern.name):
        return False
    for key, expected in pattern.props.items():
        if not matches_text(snapshot.props.get(key), expected):
            return False

    mode = pattern.containment_mode
    children = snapshot.children
    expected_children = _child_patterns(pattern)
    if mode is ContainmentMode.CONTAIN:
        return contains_list(children, expected_children)
    if mode is ContainmentMode.EQUAL:
        return list_equal(children, expected_children, deep_equal=False)
    if mode is ContainmentMode.DEEP_EQUAL or inherited_deep_equal:
        return list_equal(children, expected_children, deep_equal=True)
    return contains_list(children, expected_children)


def list_equal(
    children: tuple[SnapshotChild, ...], patterns: tuple[PatternNode, ...], deep_equal: bool
) -> bool:
    """Pairwise match of two lists of the same length."""
    if len(children) != len(patterns):
        return False
    return all(matches_node(child, pattern, deep_equal) for child, pattern in zip(children, patterns))


def contains_list(children: tuple[SnapshotChild, ...], patterns: tuple[PatternNode, ...]) -> bool:
    """
    Patterns must appear, in order, as a subsequence of the children.

    Each pattern takes the earliest remaining child it matches; there is no
    backtracking.
    """
    if len(patterns) > len(children):
        return False
    position = 0
    for pattern in patterns:
        while position < len(children) and not matches_node(children[position], pattern):
            position += 1
        if position == len(children):
            return False
        position += 1
    return True


def matches(pattern: PatternNode, snapshot: SnapshotNode | _NotFound) -> bool:
    """
    Match a template root against a snapshot root.

    The root pattern's entries are matched against the snapshot root's
    children using the root's ``/children`` mode (``contain`` by default).
    A snapshot node that is not a ``fragment`` is treated as the only
    root-level child. A missing snapshot never matches.
    """
    if snapshot is NOT_FOUND:
        return False
    if snapshot.role != "fragment":
        snapshot = SnapshotNode(role="fragment", children=(snapshot,))
    result = matches_node(snapshot, pattern)
    logger.debug(f"Template {'matched' if result else 'did not match'} snapshot root")
    return result


def find_matches(pattern: PatternNode, snapshot: SnapshotNode, collect_all: bool = True) -> list[SnapshotNode]:
    """
    Search every subtree of ``snapshot`` for nodes matching ``pattern``.

    A root template with a single entry and no ``/children`` directive is
    searched for as that entry. When a text pattern matches, the text node's
    parent is reported.
    """
    target = pattern
    if (
        pattern.role == "fragment"
        and len(pattern.children) == 1
        and pattern.containment_mode in (None, ContainmentMode.CONTAIN)
        and not pattern.props
    ):
        target = pattern.children[0]

    results: list[SnapshotNode] = []

    def visit(node: SnapshotChild, parent: SnapshotNode | None) -> bool:
        if matches_node(node, target):
            found = parent if isinstance(node, str) else node
            if found is not None:
                results.append(found)
            return not collect_all
        if isinstance(node, str):
            return False
        return any(visit(child, node) for child in node.children)

    visit(snapshot, None)
    return results


def matches_deep(pattern: PatternNode, snapshot: SnapshotNode | _NotFound) -> bool:
    if snapshot is NOT_FOUND:
        return False
    return bool(find_matches(pattern, snapshot, collect_all=False))


def match_aria_snapshot(
    pattern: PatternNode, snapshot: SnapshotNode | _NotFound, deep: bool = False
) -> MatchResult:
    """Match and render the received side for reporting."""
    if snapshot is NOT_FOUND:
        return MatchResult(matches=False, received=NOT_FOUND)
    result = matches_deep(pattern, snapshot) if deep else matches(pattern, snapshot)
    received = ReceivedSnapshot(
        raw=render_snapshot(snapshot, mode="raw"),
        regex=render_snapshot(snapshot, mode="regex"),
    )
    return MatchResult(matches=result, received=received)
