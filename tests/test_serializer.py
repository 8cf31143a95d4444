"""Tests for rendering and JSON serialization."""

import json

from aria_snapshot_matcher import SnapshotNode, parse, render_snapshot, render_template
from aria_snapshot_matcher.types import AriaTextValue, ContainmentMode, PatternNode


class TestRenderTemplate:
    """Tests for template rendering."""

    def test_attribute_order_and_values(self):
        """Test attributes render in a fixed order with their values."""
        node = PatternNode(
            role="treeitem",
            name=AriaTextValue("Docs"),
            attributes={"selected": True, "level": 2, "expanded": False, "checked": "mixed"},
        )
        root = PatternNode(role="fragment", children=(node,))
        assert render_template(root) == '- treeitem "Docs" [checked=mixed] [expanded=false] [level=2] [selected]'

    def test_text_leaves_and_directives(self):
        """Test directives come before children."""
        root = PatternNode(
            role="fragment",
            children=(
                PatternNode(
                    role="list",
                    containment_mode=ContainmentMode.EQUAL,
                    props={"url": AriaTextValue("/a")},
                    children=(
                        PatternNode(role="listitem", text=AriaTextValue("One")),
                        PatternNode(role="text", text=AriaTextValue(r"\d+", is_regex=True)),
                        PatternNode(role="text"),
                    ),
                ),
            ),
        )
        assert render_template(root).splitlines() == [
            "- list:",
            "  - /children: equal",
            "  - /url: /a",
            "  - listitem: One",
            r"  - text: /\d+/",
            "  - text",
        ]

    def test_yaml_quoting(self):
        """Test keys and values YAML would misread are quoted."""
        root = PatternNode(
            role="fragment",
            children=(
                PatternNode(role="button", name=AriaTextValue("Step: one")),
                PatternNode(role="cell", text=AriaTextValue("true")),
                PatternNode(role="cell", text=AriaTextValue('say "hi"')),
            ),
        )
        assert render_template(root).splitlines() == [
            "- 'button \"Step: one\"'",
            '- cell: "true"',
            "- cell: say \"hi\"",
        ]

    def test_non_fragment_root(self):
        """Test a single node renders as one entry."""
        assert render_template(PatternNode(role="button", name=AriaTextValue("OK"))) == '- button "OK"'


class TestRenderSnapshot:
    """Tests for snapshot rendering modes."""

    def test_raw_and_regex(self):
        """Test the two rendering modes of one snapshot."""
        snapshot = SnapshotNode(
            role="fragment",
            children=(SnapshotNode(role="listitem", children=("Item 42",)),),
        )
        assert render_snapshot(snapshot) == "- listitem: Item 42"
        assert render_snapshot(snapshot, mode="regex") == r"- listitem: /Item \d+/"

    def test_empty_snapshot(self):
        """Test an empty tree renders as empty text."""
        assert render_snapshot(SnapshotNode(role="fragment")) == ""


class TestAriaSnapshotSerializer:
    """Tests for JSON output."""

    def test_pattern_to_dict(self, serializer):
        """Test a parsed template as a dictionary."""
        pattern = parse('- heading /Wel.*/ [level=1]\n- list:\n  - /children: equal\n  - listitem: One')
        data = serializer.to_dict(pattern)

        assert data["role"] == "fragment"
        heading, todo_list = data["children"]
        assert heading["name"] == {"value": "Wel.*", "is_regex": True}
        assert heading["level"] == 1
        assert heading["line"] == 1
        assert todo_list["children_mode"] == "equal"
        assert todo_list["children"][0]["text"] == {"value": "One", "is_regex": False}

    def test_snapshot_to_dict(self, serializer):
        """Test snapshot nodes keep string children and markers."""
        snapshot = SnapshotNode(
            role="link",
            name="Docs",
            props={"url": "/docs"},
            children=("Docs",),
            ref="e5",
        )
        assert serializer.to_dict(snapshot) == {
            "role": "link",
            "name": "Docs",
            "ref": "e5",
            "props": {"url": "/docs"},
            "children": ["Docs"],
        }

    def test_to_dict_passthrough(self, serializer):
        """Test None, strings and lists."""
        assert serializer.to_dict(None) is None
        assert serializer.to_dict("text") == "text"
        assert serializer.to_dict([SnapshotNode(role="button")]) == [{"role": "button"}]

    def test_to_json(self, serializer):
        """Test JSON string output."""
        output = serializer.to_json(parse("- button"))
        assert json.loads(output)["children"][0]["role"] == "button"

    def test_to_json_file(self, serializer, tmp_path):
        """Test writing JSON to a file."""
        path = tmp_path / "tree.json"
        serializer.to_json_file(parse("- button"), str(path))
        assert json.loads(path.read_text())["children"][0]["role"] == "button"

    def test_to_yaml(self, serializer):
        """Test template text for either tree type."""
        assert serializer.to_yaml(parse('- button "OK"')) == '- button "OK"'
        snapshot = SnapshotNode(role="fragment", children=(SnapshotNode(role="button", name="Item 42"),))
        assert serializer.to_yaml(snapshot, mode="regex") == r"- button /Item \d+/"
