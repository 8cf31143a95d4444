"""Build snapshot trees from rendered snapshot text."""

import logging

from ruamel.yaml.nodes import MappingNode, Node, ScalarNode, SequenceNode

from .exceptions import ParseError, YamlSyntaxError
from .parser import AriaSnapshotParser, compose_template
from .source import TemplateSource
from .types import SnapshotNode
from .utils import normalize_text

logger = logging.getLogger(__name__)


class SnapshotLoader(AriaSnapshotParser):
    """
    Reads the raw rendering of a captured tree back into a ``SnapshotNode``.

    The syntax is the template syntax with literal values only. Entry keys
    may also carry the ``[ref=...]``, ``[cursor=...]`` and ``[active]``
    markers emitted in snapshots rendered for agents.
    """

    def load(self, text: str) -> SnapshotNode:
        source = TemplateSource.from_text(text)
        document = compose_template(self.yaml, source)
        if document is None:
            return SnapshotNode(role="fragment")
        if not isinstance(document, SequenceNode):
            raise YamlSyntaxError(
                'Aria snapshot must be a YAML sequence, elements starting with " -"',
                line=1,
                column=1,
                source_line=source.line(0),
            )

        children, _ = self._load_sequence(document, source)
        logger.debug(f"Loaded snapshot with {len(children)} top-level nodes")
        return SnapshotNode(role="fragment", children=tuple(children))

    def _load_sequence(
        self, seq: SequenceNode, source: TemplateSource
    ) -> tuple[list[SnapshotNode | str], dict[str, str]]:
        children: list[SnapshotNode | str] = []
        props: dict[str, str] = {}
        for item in seq.value:
            if isinstance(item, ScalarNode):
                children.append(self._load_node(item, None, source))
            elif isinstance(item, MappingNode):
                for key_node, value_node in item.value:
                    key = key_node.value if isinstance(key_node, ScalarNode) else None
                    if key == "text":
                        value = self._scalar_value(value_node, "Text value should be a string", source)
                        children.append(normalize_text(value))
                    elif key is not None and key.startswith("/"):
                        if key == "/children":
                            raise self._error(
                                ParseError, "Snapshots cannot contain /children directives", key_node, source
                            )
                        props[key[1:]] = self._scalar_value(value_node, "Property value should be a string", source)
                    elif key is not None:
                        children.append(self._load_node(key_node, value_node, source))
                    else:
                        raise self._error(ParseError, "Only string keys are supported", key_node, source)
            else:
                raise self._error(ParseError, "Sequence items should be strings or maps", item, source)

        return children, props

    def _load_node(self, key_node: ScalarNode, value_node: Node | None, source: TemplateSource) -> SnapshotNode:
        parsed = self._parse_key(key_node, source, allow_snapshot_only=True)
        if parsed.name is not None and parsed.name.is_regex:
            raise self._error(ParseError, "Snapshot names must be literal strings", key_node, source)

        children: list[SnapshotNode | str] = []
        props: dict[str, str] = {}
        if isinstance(value_node, ScalarNode):
            text = normalize_text(value_node.value)
            if text:
                children.append(text)
        elif isinstance(value_node, SequenceNode):
            children, props = self._load_sequence(value_node, source)
        elif value_node is not None:
            raise self._error(ParseError, "Map values should be strings or sequences", value_node, source)

        markers = parsed.markers
        return SnapshotNode(
            role=parsed.role,
            name=parsed.name.value if parsed.name is not None else "",
            attributes=parsed.attributes,
            children=tuple(children),
            props=props,
            ref=markers.get("ref"),
            cursor=markers.get("cursor"),
            active=markers.get("active"),
        )


def load_snapshot(text: str) -> SnapshotNode:
    """
    Parse rendered snapshot text into a ``fragment``-rooted snapshot tree.

    Raises:
        ParseError: when the text is not a well-formed rendering
    """
    return SnapshotLoader().load(text)
