"""Scanner for the ``role "name" [attr=value]`` part of a template entry."""

import re
from dataclasses import dataclass, field

from .attributes import InvalidAttributeValue, UnknownAttribute, validate_attribute
from .exceptions import (
    AttributeValueError,
    InvalidRegexError,
    ParseError,
    UnexpectedInputError,
    UnsupportedAttributeError,
    UnterminatedRegexError,
    UnterminatedStringError,
)
from .types import AriaTextValue, AttributeValue
from .utils import normalize_text


@dataclass
class ParsedKey:
    role: str
    name: AriaTextValue | None = None
    attributes: dict[str, AttributeValue] = field(default_factory=dict)
    markers: dict[str, bool | str] = field(default_factory=dict)


class KeyParser:
    """
    Hand-rolled scanner over a single entry key.

    Errors are raised with ``caret_offset`` set to the offending index in
    the key text; the caller attaches the line and column.
    """

    def __init__(self, text: str, *, allow_snapshot_only: bool = False) -> None:
        self._input = text
        self._pos = 0
        self._length = len(text)
        self._allow_snapshot_only = allow_snapshot_only

    @classmethod
    def parse(cls, text: str, *, allow_snapshot_only: bool = False) -> ParsedKey:
        return cls(text, allow_snapshot_only=allow_snapshot_only)._parse()

    def _peek(self) -> str:
        return self._input[self._pos] if self._pos < self._length else ""

    def _next(self) -> str:
        ch = self._peek()
        if ch:
            self._pos += 1
        return ch

    def _eof(self) -> bool:
        return self._pos >= self._length

    def _skip_whitespace(self) -> None:
        while not self._eof() and self._peek().isspace():
            self._pos += 1

    def _error(self, cls: type[ParseError], message: str, pos: int | None = None) -> ParseError:
        return cls(
            message,
            source_line=self._input,
            caret_offset=self._pos if pos is None else pos,
        )

    def _read_identifier(self, extra: str = "") -> str:
        start = self._pos
        while not self._eof() and ((self._peek().isascii() and self._peek().isalpha()) or self._peek() in extra):
            self._pos += 1
        return self._input[start : self._pos]

    def _read_string(self) -> str:
        result = []
        escaped = False
        while not self._eof():
            ch = self._next()
            if escaped:
                result.append(ch)
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                return "".join(result)
            else:
                result.append(ch)
        raise self._error(UnterminatedStringError, "Unterminated string")

    def _read_regex(self) -> str:
        result = []
        escaped = False
        inside_class = False
        while not self._eof():
            ch = self._next()
            if escaped:
                escaped = False
                result.append(ch)
            elif ch == "\\":
                escaped = True
                result.append(ch)
            elif ch == "/" and not inside_class:
                return "".join(result)
            elif ch == "[":
                inside_class = True
                result.append(ch)
            elif ch == "]" and inside_class:
                inside_class = False
                result.append(ch)
            else:
                result.append(ch)
        raise self._error(UnterminatedRegexError, "Unterminated regex")

    def _read_string_or_regex(self) -> AriaTextValue | None:
        ch = self._peek()
        if ch == '"':
            self._next()
            return AriaTextValue(normalize_text(self._read_string()))
        if ch == "/":
            start = self._pos
            self._next()
            pattern = self._read_regex()
            try:
                re.compile(pattern)
            except re.error as e:
                raise self._error(InvalidRegexError, f"Invalid regular expression: {e}", start) from e
            return AriaTextValue(pattern, is_regex=True)
        return None

    def _read_attributes(self, result: ParsedKey) -> None:
        while True:
            self._skip_whitespace()
            if self._peek() != "[":
                return
            self._next()
            while True:
                self._skip_whitespace()
                key_pos = self._pos
                key = self._read_identifier()
                if not key:
                    raise self._error(UnexpectedInputError, "Unexpected input")
                self._skip_whitespace()

                value = None
                value_pos = self._pos
                if self._peek() == "=":
                    self._next()
                    self._skip_whitespace()
                    value_pos = self._pos
                    start = self._pos
                    while not self._eof() and self._peek() not in "],=" and not self._peek().isspace():
                        self._pos += 1
                    value = self._input[start : self._pos]
                self._apply_attribute(result, key, value, key_pos, value_pos)

                self._skip_whitespace()
                if self._peek() == ",":
                    self._next()
                    continue
                if self._peek() == "]":
                    self._next()
                    break
                raise self._error(UnexpectedInputError, "Expected ]")

    def _apply_attribute(
        self, result: ParsedKey, key: str, value: str | None, key_pos: int, value_pos: int
    ) -> None:
        try:
            typed = validate_attribute(key, value, allow_snapshot_only=self._allow_snapshot_only)
        except UnknownAttribute:
            raise self._error(UnsupportedAttributeError, f"Unsupported attribute [{key}]", key_pos) from None
        except InvalidAttributeValue as e:
            raise self._error(AttributeValueError, str(e), value_pos) from None

        if key in ("ref", "cursor", "active"):
            result.markers[key] = typed
        else:
            result.attributes[key] = typed

    def _parse(self) -> ParsedKey:
        self._skip_whitespace()
        start = self._pos
        role = self._read_identifier("-")
        if not role:
            raise self._error(UnexpectedInputError, "Unexpected input", start)
        result = ParsedKey(role=role)

        self._skip_whitespace()
        name = self._read_string_or_regex()
        # An empty literal name places no constraint on the name.
        if name is not None and (name.is_regex or name.value):
            result.name = name

        self._read_attributes(result)
        self._skip_whitespace()
        if not self._eof():
            raise self._error(UnexpectedInputError, "Unexpected input")
        return result
