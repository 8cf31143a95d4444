"""Utility functions for ARIA snapshot matcher."""

import json
import re

_REGEX_SPECIAL = re.compile(r"[.*+?^${}()|\[\]\\/]")
_YAML_CONTROL = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
_YAML_VALUE_ESCAPES = re.compile(r'[\\"\x00-\x1f\x7f-\x9f]')
_YAML_KEYWORDS = {"y", "n", "yes", "no", "true", "false", "on", "off", "null"}
_NUMBER = re.compile(
    r"^[+-]?(?:\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?|0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+|Infinity)$"
)


def normalize_text(text: str) -> str:
    """
    Normalize text following Playwright's rules:
    1. Remove zero-width characters and soft hyphens
    2. Collapse whitespace (multiple spaces -> single space)
    3. Trim leading/trailing whitespace

    Args:
        text: Text to normalize

    Returns:
        Normalized text
    """
    # Remove zero-width space (\u200b) and soft hyphen (\u00ad)
    text = text.replace("\u200b", "").replace("\u00ad", "")

    # Collapse all whitespace runs to single space
    text = re.sub(r"\s+", " ", text)

    # Trim leading/trailing whitespace
    return text.strip()


def unshift(text: str) -> str:
    """
    Remove the indentation of the first non-blank line from every line.

    Blank lines are kept (as empty lines) so line numbers still refer to
    the caller's text.
    """
    lines = text.split("\n")
    prefix: str | None = None
    for line in lines:
        stripped = line.strip()
        if stripped:
            prefix = line[: len(line) - len(line.lstrip())]
            break
    if prefix is None:
        return ""
    return "\n".join(line[len(prefix) :] if line.strip() else "" for line in lines)


def indent(text: str, prefix: str) -> str:
    return "\n".join(prefix + line for line in text.split("\n"))


def escape_regex(text: str) -> str:
    r"""Escape regex metacharacters, including ``/`` so the result can sit between slashes."""
    return _REGEX_SPECIAL.sub(lambda m: "\\" + m.group(0), text)


def yaml_string_needs_quotes(text: str) -> bool:
    """Whether ``text`` would be misread as a plain YAML scalar."""
    if not text:
        return True
    if re.search(r"^\s|\s$", text):
        return True
    if _YAML_CONTROL.search(text):
        return True
    if text.startswith("-"):
        return True
    if re.search(r"[\n:](\s|$)", text):
        return True
    if re.search(r"\s#", text):
        return True
    if re.search(r"[\n\r]", text):
        return True
    if re.match(r"^[&*\],?!>|@\"'#%]", text):
        return True
    if re.search(r"[{}`]", text):
        return True
    if text.startswith("["):
        return True
    if _NUMBER.match(text.strip()) or text.lower() in _YAML_KEYWORDS:
        return True
    return False


def yaml_escape_key_if_needed(text: str) -> str:
    if not yaml_string_needs_quotes(text):
        return text
    return "'" + text.replace("'", "''") + "'"


def _escape_value_char(match: re.Match[str]) -> str:
    ch = match.group(0)
    if ch == "\\":
        return "\\\\"
    if ch == '"':
        return '\\"'
    if ch == "\b":
        return "\\b"
    if ch == "\f":
        return "\\f"
    if ch == "\n":
        return "\\n"
    if ch == "\r":
        return "\\r"
    if ch == "\t":
        return "\\t"
    return f"\\x{ord(ch):02x}"


def yaml_escape_value_if_needed(text: str) -> str:
    if not yaml_string_needs_quotes(text):
        return text
    return '"' + _YAML_VALUE_ESCAPES.sub(_escape_value_char, text) + '"'


def quote_name(name: str) -> str:
    """Double-quote an accessible name the way the template grammar reads it back."""
    return json.dumps(name, ensure_ascii=False)
