"""Tests for the snapshot tool functions."""

import pytest

from aria_snapshot_mcp.api.snapshots import (
    find_aria_nodes,
    match_aria_snapshot,
    regexify_aria_snapshot,
    validate_aria_template,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep environment configuration out of tool results."""
    for name in ("ARIA_SNAPSHOT_IGNORE", "ARIA_SNAPSHOT_REGEXIFY", "ARIA_SNAPSHOT_UPDATE"):
        monkeypatch.delenv(name, raising=False)


class TestValidateAriaTemplate:
    """Tests for validate_aria_template."""

    @pytest.mark.asyncio
    async def test_valid(self):
        """Test a valid template is normalized and counted."""
        result = await validate_aria_template('- heading "Welcome" [level=1]\n- list:\n  - listitem')

        assert result["valid"] is True
        assert result["entries"] == 2
        assert result["error"] is None
        assert result["normalized"].startswith('- heading "Welcome" [level=1]')

    @pytest.mark.asyncio
    async def test_invalid_attribute(self):
        """Test an invalid template reports where it failed."""
        result = await validate_aria_template("- heading [level=a]")

        assert result["valid"] is False
        assert result["normalized"] is None
        error = result["error"]
        assert error["kind"] == "InvalidAttributeValue"
        assert error["line"] == 1
        assert "^" in error["formatted"]

    @pytest.mark.asyncio
    async def test_not_a_sequence(self):
        """Test a mapping at the top level is rejected."""
        result = await validate_aria_template("heading: Welcome")

        assert result["valid"] is False
        assert result["error"]["kind"] == "YamlSyntax"


class TestMatchAriaSnapshot:
    """Tests for match_aria_snapshot."""

    @pytest.mark.asyncio
    async def test_match(self, rendered_snapshot):
        """Test a matching template."""
        result = await match_aria_snapshot('- navigation "Main":\n  - link "Docs"', rendered_snapshot)

        assert result["success"] is True
        assert result["matched"] is True
        assert result["passed"] is True
        assert 'navigation "Main"' in result["received_raw"]

    @pytest.mark.asyncio
    async def test_root_and_deep(self, rendered_snapshot):
        """Test nested nodes only match with deep search."""
        root = await match_aria_snapshot('- heading "Welcome"', rendered_snapshot)
        deep = await match_aria_snapshot('- heading "Welcome"', rendered_snapshot, deep=True)

        assert root["matched"] is False
        assert root["message"].startswith("- Expected  - 1\n+ Received  + ")
        assert deep["matched"] is True

    @pytest.mark.asyncio
    async def test_negate(self, rendered_snapshot):
        """Test negate passes when the template does not match."""
        result = await match_aria_snapshot("- contentinfo", rendered_snapshot, negate=True)

        assert result["matched"] is False
        assert result["passed"] is True

    @pytest.mark.asyncio
    async def test_invalid_snapshot(self):
        """Test a malformed snapshot is reported, not raised."""
        result = await match_aria_snapshot("- button", "- button /OK/")

        assert result["success"] is False
        assert "literal" in result["error"]["message"]


class TestRegexifyAriaSnapshot:
    """Tests for regexify_aria_snapshot."""

    @pytest.mark.asyncio
    async def test_regexify(self):
        """Test numbers become regexes in the suggested template."""
        result = await regexify_aria_snapshot('- heading "Inbox" [level=2]\n- status: "Total: 1,234 items"')

        assert result["success"] is True
        assert result["template"].startswith('- heading "Inbox" [level=2]')
        assert r'- status: "/Total: \\d+,\\d+ items/"' in result["template"]

    @pytest.mark.asyncio
    async def test_invalid_snapshot(self):
        """Test a snapshot that is not a list."""
        result = await regexify_aria_snapshot("status: ok")
        assert result["success"] is False


class TestFindAriaNodes:
    """Tests for find_aria_nodes."""

    @pytest.mark.asyncio
    async def test_find(self, rendered_snapshot):
        """Test every matching node is returned in document order."""
        result = await find_aria_nodes("- link", rendered_snapshot)

        assert result["success"] is True
        assert result["count"] == 2
        assert [node["name"] for node in result["nodes"]] == ["Docs", "Blog"]
        assert result["nodes"][0]["role"] == "link"

    @pytest.mark.asyncio
    async def test_limit(self, rendered_snapshot):
        """Test the limit caps the returned nodes but not the count."""
        result = await find_aria_nodes("- link", rendered_snapshot, limit=1)

        assert result["count"] == 2
        assert len(result["nodes"]) == 1

    @pytest.mark.asyncio
    async def test_invalid_template(self, rendered_snapshot):
        """Test a malformed template is reported."""
        result = await find_aria_nodes('- link "Docs', rendered_snapshot)

        assert result["success"] is False
        assert result["error"]["kind"] == "UnterminatedString"
