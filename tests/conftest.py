"""
Pytest Configuration and Fixtures

This module provides shared fixtures for all tests.
"""

import pytest

from aria_snapshot_matcher import AriaSnapshotParser, AriaSnapshotSerializer, SnapshotNode
from aria_snapshot_matcher.config import DEFAULT_CONFIG, MatcherConfig


@pytest.fixture
def parser() -> AriaSnapshotParser:
    """Provide a template parser."""
    return AriaSnapshotParser()


@pytest.fixture
def serializer() -> AriaSnapshotSerializer:
    """Provide a serializer."""
    return AriaSnapshotSerializer()


@pytest.fixture
def matcher_config() -> MatcherConfig:
    """Provide default matcher configuration, independent of the environment."""
    return MatcherConfig(**DEFAULT_CONFIG)


@pytest.fixture
def todo_snapshot() -> SnapshotNode:
    """A small captured page: heading, counter and a list of todos."""
    return SnapshotNode(
        role="fragment",
        children=(
            SnapshotNode(role="heading", name="todos", attributes={"level": 1}, children=("todos",)),
            SnapshotNode(role="textbox", name="What needs to be done?"),
            SnapshotNode(
                role="list",
                children=(
                    SnapshotNode(
                        role="listitem",
                        children=(
                            SnapshotNode(role="checkbox", name="Toggle Todo", attributes={"checked": True}),
                            "Buy milk",
                        ),
                    ),
                    SnapshotNode(
                        role="listitem",
                        children=(
                            SnapshotNode(role="checkbox", name="Toggle Todo", attributes={"checked": False}),
                            "Walk the dog",
                        ),
                    ),
                ),
            ),
            SnapshotNode(role="status", children=("Total: 1,234 items",)),
        ),
    )


@pytest.fixture
def list_snapshot() -> SnapshotNode:
    """A list with three text-only items."""
    return SnapshotNode(
        role="fragment",
        children=(
            SnapshotNode(
                role="list",
                children=tuple(SnapshotNode(role="listitem", children=(text,)) for text in ("One", "Two", "Three")),
            ),
        ),
    )


@pytest.fixture
def rendered_snapshot() -> str:
    """A snapshot as rendered for agents, with ref and cursor markers."""
    return """
    - banner:
      - heading "Welcome" [level=1] [ref=e2]
    - navigation "Main":
      - link "Docs" [ref=e5] [cursor=pointer]:
        - /url: https://example.com/docs
      - link "Blog" [active] [ref=e6]:
        - /url: /blog
    - list:
      - listitem: Item 1
      - listitem:
        - checkbox "Done" [checked]
        - text: Order 12345 shipped
    """
