"""
Line-level preparation of template text before YAML composition.

Templates are usually written inline in tests, indented to fit the
surrounding code. This module removes that indentation, checks that every
line is a list entry nested in two-space steps, and quotes values that
YAML would otherwise split on ``": "``. It keeps enough bookkeeping to map
positions in the rewritten text back to the text the user wrote.
"""

import logging
import re
from dataclasses import dataclass, field

from .exceptions import UnexpectedScalarAtNodeEnd
from .utils import unshift

logger = logging.getLogger(__name__)

INDENT_STEP = 2

_ENTRY = re.compile(r"^( *)-(?:[ \t]+(.*?))?[ \t]*$")
_KEY_START = re.compile(r"^[A-Za-z/]")


def _needs_quoting(text: str) -> bool:
    return ": " in text or "%" in text


def _escape(text: str) -> str:
    return (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )


def _is_quoted(text: str) -> bool:
    return text[:1] in ('"', "'")


def _split_key_value(body: str) -> tuple[str, str | None] | None:
    """
    Split ``key: value`` at the first ``:`` that ends the key.

    Colons inside a double-quoted name or a ``/regex/`` name do not count.
    Returns ``(key, None)`` for ``key:`` and None when there is no separator.
    """
    in_string = False
    in_regex = False
    escaped = False
    for i, ch in enumerate(body):
        if escaped:
            escaped = False
            continue
        if ch == "\\" and (in_string or in_regex):
            escaped = True
            continue
        if in_string:
            in_string = ch != '"'
            continue
        if in_regex:
            in_regex = ch != "/"
            continue
        if ch == '"':
            in_string = True
        elif ch == "/" and i > 0 and body[i - 1].isspace():
            in_regex = True
        elif ch == ":":
            rest = body[i + 1 :]
            if not rest:
                return body[:i], None
            if rest[0] in " \t":
                return body[:i], rest.lstrip(" \t")
    return None


@dataclass
class TemplateSource:
    """
    Un-indented template text plus the YAML text actually composed.

    ``rewrites`` maps the (0-based line, column) of every opening quote
    inserted by auto-quoting to the column where the quoted content starts
    in ``lines``.
    """

    text: str
    lines: list[str]
    yaml_text: str
    rewrites: dict[tuple[int, int], int] = field(default_factory=dict)

    @classmethod
    def from_text(cls, text: str) -> "TemplateSource":
        unshifted = unshift(text)
        lines = unshifted.split("\n") if unshifted else []
        _check_structure(lines)
        yaml_lines, rewrites = _auto_quote(lines)
        return cls(text=unshifted, lines=lines, yaml_text="\n".join(yaml_lines), rewrites=rewrites)

    def line(self, index: int) -> str:
        """Un-indented source line for a 0-based index."""
        if 0 <= index < len(self.lines):
            return self.lines[index]
        return ""

    def scalar_column(self, line: int, column: int, quoted: bool) -> int:
        """0-based column of the first content character of a composed scalar."""
        if (line, column) in self.rewrites:
            return self.rewrites[(line, column)]
        return column + 1 if quoted else column

    def original_column(self, line: int, column: int) -> int:
        """Best-effort mapping of a composed-text column back to the source."""
        shift = sum(1 for (ln, col) in self.rewrites if ln == line and col < column)
        return max(column - shift, 0)


def _check_structure(lines: list[str]) -> None:
    """Every line must be a list entry, nested exactly one step under an open entry."""
    open_indents: list[int] = []
    opens_children = False
    for index, line in enumerate(lines):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        match = _ENTRY.match(line)
        leading = len(line) - len(line.lstrip())
        if not match:
            raise UnexpectedScalarAtNodeEnd(
                "Unexpected scalar at node end",
                line=index + 1,
                column=leading + 1,
                source_line=line,
            )

        indent = len(match.group(1))
        while open_indents and open_indents[-1] > indent:
            open_indents.pop()

        if open_indents and open_indents[-1] == indent:
            pass
        elif not open_indents and indent == 0:
            open_indents.append(indent)
        elif open_indents and opens_children and indent == open_indents[-1] + INDENT_STEP:
            open_indents.append(indent)
        else:
            raise UnexpectedScalarAtNodeEnd(
                "Unexpected scalar at node end",
                line=index + 1,
                column=indent + 1,
                source_line=line,
            )

        body = _strip_comment(match.group(2) or "")
        opens_children = body.endswith(":")


def _strip_comment(body: str) -> str:
    hash_at = body.find(" #")
    if hash_at >= 0 and '"' not in body[:hash_at]:
        return body[:hash_at].rstrip()
    return body


def _auto_quote(lines: list[str]) -> tuple[list[str], dict[tuple[int, int], int]]:
    """Quote keys and values containing ``": "`` or ``%`` so YAML keeps them whole."""
    out: list[str] = []
    rewrites: dict[tuple[int, int], int] = {}
    for index, line in enumerate(lines):
        match = _ENTRY.match(line)
        body = match.group(2) if match else None
        if not body or _is_quoted(body):
            out.append(line)
            continue

        body_start = match.start(2)
        split = _split_key_value(body)
        if split is None or not _KEY_START.match(split[0]):
            if _needs_quoting(body):
                rewrites[(index, body_start)] = body_start
                out.append(f'{line[:body_start]}"{_escape(body)}"')
            else:
                out.append(line)
            continue

        key, value = split
        new_key = key
        shift = 0
        if _needs_quoting(key):
            new_key = f'"{_escape(key)}"'
            rewrites[(index, body_start)] = body_start
            shift = len(new_key) - len(key)

        if value is None:
            out.append(f"{line[:body_start]}{new_key}:")
            continue

        value_start = body_start + len(body) - len(value)
        new_value = value
        if not _is_quoted(value) and _needs_quoting(value):
            new_value = f'"{_escape(value)}"'
            rewrites[(index, value_start + shift)] = value_start
        separator = line[body_start + len(key) : value_start]
        out.append(f"{line[:body_start]}{new_key}{separator}{new_value}")

    if rewrites:
        logger.debug(f"Auto-quoted {len(rewrites)} template scalar(s)")
    return out, rewrites
