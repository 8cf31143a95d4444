"""Data models for the ARIA snapshot matcher."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal, Union

Tristate = bool | Literal["mixed"]
AttributeValue = bool | Literal["mixed"] | int


class ContainmentMode(str, Enum):
    """How strictly a node's expected children must line up with actual ones."""

    CONTAIN = "contain"
    EQUAL = "equal"
    DEEP_EQUAL = "deep-equal"


@dataclass(frozen=True)
class SourceSpan:
    """1-based position of a template entry in the un-indented text."""

    line: int
    column: int


@dataclass(frozen=True)
class AriaTextValue:
    """Text value that can be literal string or regex pattern."""

    value: str
    is_regex: bool = False

    def __str__(self) -> str:
        if self.is_regex:
            return f"/{self.value}/"
        return f'"{self.value}"'


@dataclass(frozen=True)
class PatternNode:
    """
    Expected element parsed from an ARIA template.

    The template root is a ``fragment`` node whose children are the
    top-level entries. ``containment_mode`` is ``None`` unless the entry
    declared ``/children:`` itself.
    """

    role: str
    name: AriaTextValue | None = None
    text: AriaTextValue | None = None
    attributes: dict[str, AttributeValue] = field(default_factory=dict)
    children: tuple["PatternNode", ...] = field(default_factory=tuple)
    containment_mode: ContainmentMode | None = None
    props: dict[str, AriaTextValue] = field(default_factory=dict)
    source_span: SourceSpan | None = field(default=None, compare=False)

    @property
    def is_text(self) -> bool:
        return self.role == "text"

    @property
    def url(self) -> AriaTextValue | None:
        return self.props.get("url")


@dataclass(frozen=True)
class SnapshotNode:
    """
    Captured accessibility node.

    String children are text nodes. The root of a captured tree is a
    ``fragment`` node. ``ref``, ``cursor`` and ``active`` only come from
    snapshots rendered for agents and never take part in matching.
    """

    role: str
    name: str = ""
    attributes: dict[str, AttributeValue] = field(default_factory=dict)
    children: tuple[Union["SnapshotNode", str], ...] = field(default_factory=tuple)
    props: dict[str, str] = field(default_factory=dict)

    ref: str | None = None
    cursor: str | None = None
    active: bool | None = None

    @property
    def url(self) -> str | None:
        return self.props.get("url")


# Parse-time entry variants. Each template line resolves to exactly one.


@dataclass(frozen=True)
class RoleEntry:
    node: PatternNode


@dataclass(frozen=True)
class ChildrenDirective:
    mode: ContainmentMode


@dataclass(frozen=True)
class PropertyDirective:
    key: str
    value: AriaTextValue


TemplateEntry = RoleEntry | ChildrenDirective | PropertyDirective


class _NotFound:
    """Sentinel for "no element matched the locator"."""

    _instance: "_NotFound | None" = None

    def __new__(cls) -> "_NotFound":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NOT_FOUND"

    def __bool__(self) -> bool:
        return False


NOT_FOUND = _NotFound()


@dataclass(frozen=True)
class ReceivedSnapshot:
    """Raw and best-guess-regex renderings of a captured tree."""

    raw: str
    regex: str


@dataclass(frozen=True)
class MatchResult:
    matches: bool
    received: ReceivedSnapshot | _NotFound
