"""Template-syntax rendering and JSON serialization of pattern and snapshot trees."""

import json
from typing import Any, Literal

from .regexify import DEFAULT_POLICY, RegexifyPolicy, to_template
from .types import AriaTextValue, PatternNode, SnapshotNode
from .utils import quote_name, yaml_escape_key_if_needed, yaml_escape_value_if_needed

ATTRIBUTE_ORDER = ("checked", "disabled", "expanded", "level", "pressed", "selected")

INDENT = "  "


def _render_key(node: PatternNode) -> str:
    key = node.role
    if node.name is not None:
        key += " " + (f"/{node.name.value}/" if node.name.is_regex else quote_name(node.name.value))
    for attr in ATTRIBUTE_ORDER:
        value = node.attributes.get(attr)
        if value is None:
            continue
        if value is True:
            key += f" [{attr}]"
        elif value is False:
            key += f" [{attr}=false]"
        else:
            key += f" [{attr}={value}]"
    return yaml_escape_key_if_needed(key)


def _render_value(value: AriaTextValue) -> str:
    return yaml_escape_value_if_needed(f"/{value.value}/" if value.is_regex else value.value)


def _render_node(node: PatternNode, indent: str, lines: list[str]) -> None:
    if node.is_text and not node.children:
        if node.text is None:
            lines.append(f"{indent}- text")
        else:
            lines.append(f"{indent}- text: {_render_value(node.text)}")
        return

    key = _render_key(node)
    has_block = bool(node.children or node.props or node.containment_mode is not None)
    if not has_block:
        if node.text is not None:
            lines.append(f"{indent}- {key}: {_render_value(node.text)}")
        else:
            lines.append(f"{indent}- {key}")
        return

    lines.append(f"{indent}- {key}:")
    _render_block(node, indent + INDENT, lines)


def _render_block(node: PatternNode, indent: str, lines: list[str]) -> None:
    if node.containment_mode is not None:
        lines.append(f"{indent}- /children: {node.containment_mode.value}")
    for name, value in node.props.items():
        lines.append(f"{indent}- /{name}: {_render_value(value)}")
    if node.text is not None and not node.is_text:
        lines.append(f"{indent}- text: {_render_value(node.text)}")
    for child in node.children:
        _render_node(child, indent, lines)


def render_template(pattern: PatternNode) -> str:
    """
    Render a pattern tree in template syntax.

    A ``fragment`` root renders as its entries at the top level.
    """
    lines: list[str] = []
    if pattern.role == "fragment":
        _render_block(pattern, "", lines)
    else:
        _render_node(pattern, "", lines)
    return "\n".join(lines)


def render_snapshot(
    snapshot: SnapshotNode,
    mode: Literal["raw", "regex"] = "raw",
    policy: RegexifyPolicy = DEFAULT_POLICY,
) -> str:
    """
    Render a captured tree in template syntax.

    ``raw`` keeps every value literal; ``regex`` renders the best-guess
    regex form used on the received side of a failure diff.
    """
    return render_template(to_template(snapshot, policy if mode == "regex" else None))


def _text_to_dict(value: AriaTextValue | None) -> dict[str, Any] | None:
    if value is None:
        return None
    return {"value": value.value, "is_regex": value.is_regex}


class AriaSnapshotSerializer:
    """Serialize pattern and snapshot trees to template text or JSON."""

    def to_yaml(self, node: PatternNode | SnapshotNode, mode: Literal["raw", "regex"] = "raw") -> str:
        if isinstance(node, SnapshotNode):
            return render_snapshot(node, mode=mode)
        return render_template(node)

    def to_dict(
        self, node: PatternNode | SnapshotNode | str | list[Any] | None
    ) -> dict[str, Any] | str | list[Any] | None:
        """
        Convert node to dictionary (recursive).

        Args:
            node: Node to convert

        Returns:
            Dictionary representation
        """
        if node is None:
            return None

        if isinstance(node, str):
            return node

        if isinstance(node, list):
            return [self.to_dict(item) for item in node]

        result: dict[str, Any] = {"role": node.role}

        if isinstance(node, SnapshotNode):
            if node.name:
                result["name"] = node.name
            result.update(node.attributes)
            for marker in ("ref", "cursor", "active"):
                value = getattr(node, marker)
                if value is not None:
                    result[marker] = value
            if node.props:
                result["props"] = dict(node.props)
        else:
            if node.name is not None:
                result["name"] = _text_to_dict(node.name)
            if node.text is not None:
                result["text"] = _text_to_dict(node.text)
            result.update(node.attributes)
            if node.containment_mode is not None:
                result["children_mode"] = node.containment_mode.value
            if node.props:
                result["props"] = {key: _text_to_dict(value) for key, value in node.props.items()}
            if node.source_span is not None:
                result["line"] = node.source_span.line
                result["column"] = node.source_span.column

        # Recursively convert children
        if node.children:
            result["children"] = [self.to_dict(child) for child in node.children]

        return result

    def to_json(
        self, node: PatternNode | SnapshotNode | str | list[Any] | None, indent: int | None = 2, **kwargs: Any
    ) -> str:
        """
        Convert node to JSON string.

        Args:
            node: Node to convert
            indent: Number of spaces for indentation
            **kwargs: Additional arguments for json.dumps

        Returns:
            JSON string
        """
        return json.dumps(self.to_dict(node), indent=indent, **kwargs)

    def to_json_file(
        self, node: PatternNode | SnapshotNode | str | list[Any] | None, filepath: str, **kwargs: Any
    ) -> None:
        """
        Write node to JSON file.

        Args:
            node: Node to convert
            filepath: Path to output file
            **kwargs: Additional arguments for json.dump
        """
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(node), f, indent=2, **kwargs)
