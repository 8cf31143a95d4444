"""ARIA template parser combining ruamel.yaml composition and the key scanner."""

import logging
import re
from dataclasses import dataclass, field
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import MarkedYAMLError
from ruamel.yaml.nodes import MappingNode, Node, ScalarNode, SequenceNode

from .exceptions import (
    InvalidRegexError,
    ParseError,
    UnexpectedScalarAtNodeEnd,
    YamlSyntaxError,
)
from .key_parser import KeyParser, ParsedKey
from .source import TemplateSource
from .types import (
    AriaTextValue,
    ChildrenDirective,
    ContainmentMode,
    PatternNode,
    PropertyDirective,
    RoleEntry,
    SourceSpan,
    TemplateEntry,
)
from .utils import normalize_text

logger = logging.getLogger(__name__)

COLON_HINT = 'Hint: Strings containing colons need to be quoted, e.g., "Items: 42"'


def value_or_regex(value: str) -> AriaTextValue | None:
    """Read ``/pattern/`` as a regex, anything else as normalized literal text."""
    if len(value) > 1 and value.startswith("/") and value.endswith("/"):
        return AriaTextValue(value[1:-1], is_regex=True)
    text = normalize_text(value)
    return AriaTextValue(text) if text else None


def compose_template(yaml: YAML, source: TemplateSource) -> Node | None:
    """Compose the prepared YAML text, translating ruamel errors."""
    try:
        return yaml.compose(source.yaml_text)
    except MarkedYAMLError as e:
        mark = e.problem_mark or e.context_mark
        problem = e.problem or e.context or "invalid YAML"
        line = mark.line if mark is not None else 0
        column = source.original_column(line, mark.column) if mark is not None else 0

        if "<scalar>" in problem:
            raise UnexpectedScalarAtNodeEnd(
                "Unexpected scalar at node end",
                line=line + 1,
                column=column + 1,
                source_line=source.line(line),
            ) from e

        message = f"YAML syntax error in aria snapshot: {problem}"
        if "mapping values are not allowed" in problem:
            message += f"\n\n{COLON_HINT}"
        raise YamlSyntaxError(
            message, line=line + 1, column=column + 1, source_line=source.line(line)
        ) from e


@dataclass
class _Container:
    """Accumulates the entries of one node before it is frozen."""

    children: list[PatternNode] = field(default_factory=list)
    containment_mode: ContainmentMode | None = None
    props: dict[str, AriaTextValue] = field(default_factory=dict)

    def add(self, entry: TemplateEntry) -> None:
        if isinstance(entry, RoleEntry):
            self.children.append(entry.node)
        elif isinstance(entry, ChildrenDirective):
            self.containment_mode = entry.mode
        else:
            self.props[entry.key] = entry.value


class AriaSnapshotParser:
    """Parser for the ARIA template language."""

    def __init__(self) -> None:
        self.yaml = YAML()

    def parse(self, text: str) -> PatternNode:
        """
        Parse an ARIA template into a pattern tree.

        Args:
            text: Template text, optionally indented as a whole

        Returns:
            ``fragment`` node whose children are the top-level entries

        Raises:
            ParseError: on the first syntax or attribute error
        """
        source = TemplateSource.from_text(text)
        document = compose_template(self.yaml, source)

        if not isinstance(document, SequenceNode):
            raise YamlSyntaxError(
                'Aria snapshot must be a YAML sequence, elements starting with " -"',
                line=1,
                column=1,
                source_line=source.line(0),
            )

        root = _Container()
        self._convert_sequence(root, document, source)
        logger.debug(f"Parsed template with {len(root.children)} top-level entries")
        return PatternNode(
            role="fragment",
            children=tuple(root.children),
            containment_mode=root.containment_mode,
            props=root.props,
            source_span=SourceSpan(1, 1),
        )

    def _convert_sequence(self, container: _Container, seq: SequenceNode, source: TemplateSource) -> None:
        for item in seq.value:
            if isinstance(item, ScalarNode):
                container.add(RoleEntry(self._key_node(item, source)))
            elif isinstance(item, MappingNode):
                for key_node, value_node in item.value:
                    container.add(self._resolve_entry(key_node, value_node, source))
            else:
                raise self._error(ParseError, "Sequence items should be strings or maps", item, source)

    def _resolve_entry(self, key_node: Node, value_node: Node, source: TemplateSource) -> TemplateEntry:
        if not isinstance(key_node, ScalarNode):
            raise self._error(ParseError, "Only string keys are supported", key_node, source)
        key = key_node.value

        # - text: "text"
        if key == "text":
            value = self._scalar_value(value_node, "Text value should be a string", source)
            return RoleEntry(
                PatternNode(
                    role="text",
                    text=self._text_value(value, value_node, source),
                    source_span=self._span(key_node, source),
                )
            )

        # - /children: equal
        if key == "/children":
            value = self._scalar_value(value_node, None, source)
            try:
                return ChildrenDirective(ContainmentMode(value))
            except ValueError:
                raise self._error(
                    ParseError,
                    'Strict value should be "contain", "equal" or "deep-equal"',
                    value_node,
                    source,
                ) from None

        # - /url: "about:blank"
        if key.startswith("/"):
            value = self._scalar_value(value_node, "Property value should be a string", source)
            text = self._text_value(value, value_node, source) or AriaTextValue("")
            return PropertyDirective(key[1:], text)

        node = self._key_node(key_node, source)

        # - role "name": "text"
        if isinstance(value_node, ScalarNode):
            if value_node.value == "" and value_node.style is None:
                return RoleEntry(node)
            return RoleEntry(
                PatternNode(
                    role=node.role,
                    name=node.name,
                    text=self._text_value(value_node.value, value_node, source),
                    attributes=node.attributes,
                    source_span=node.source_span,
                )
            )

        # - role "name":
        #   - child
        if isinstance(value_node, SequenceNode):
            container = _Container()
            self._convert_sequence(container, value_node, source)
            return RoleEntry(
                PatternNode(
                    role=node.role,
                    name=node.name,
                    attributes=node.attributes,
                    children=tuple(container.children),
                    containment_mode=container.containment_mode,
                    props=container.props,
                    source_span=node.source_span,
                )
            )

        raise self._error(ParseError, "Map values should be strings or sequences", value_node, source)

    def _key_node(self, scalar: ScalarNode, source: TemplateSource) -> PatternNode:
        parsed = self._parse_key(scalar, source)
        return PatternNode(
            role=parsed.role,
            name=parsed.name,
            attributes=parsed.attributes,
            source_span=self._span(scalar, source),
        )

    def _parse_key(self, scalar: ScalarNode, source: TemplateSource, **kwargs: Any) -> ParsedKey:
        try:
            return KeyParser.parse(scalar.value, **kwargs)
        except ParseError as e:
            line = scalar.start_mark.line
            base = source.scalar_column(line, scalar.start_mark.column, scalar.style is not None)
            raise type(e)(
                e.message,
                line=line + 1,
                column=base + e.caret_offset + 1,
                source_line=e.source_line,
                caret_offset=e.caret_offset,
            ) from None

    def _scalar_value(self, node: Node, message: str | None, source: TemplateSource) -> str:
        if not isinstance(node, ScalarNode):
            raise self._error(ParseError, message or "Value should be a string", node, source)
        return node.value

    def _text_value(self, value: str, node: Node, source: TemplateSource) -> AriaTextValue | None:
        text = value_or_regex(value)
        if text is not None and text.is_regex:
            try:
                re.compile(text.value)
            except re.error as e:
                raise self._error(InvalidRegexError, f"Invalid regular expression: {e}", node, source) from e
        return text

    def _span(self, node: Node, source: TemplateSource) -> SourceSpan:
        line = node.start_mark.line
        column = source.scalar_column(line, node.start_mark.column, getattr(node, "style", None) is not None)
        return SourceSpan(line + 1, column + 1)

    def _error(self, cls: type[ParseError], message: str, node: Node, source: TemplateSource) -> ParseError:
        line = node.start_mark.line
        column = source.original_column(line, node.start_mark.column)
        return cls(message, line=line + 1, column=column + 1, source_line=source.line(line))
