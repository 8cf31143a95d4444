"""Custom exceptions for aria-snapshot-matcher."""

from enum import Enum

from .diff import format_error


class ErrorKind(str, Enum):
    """Machine-readable category of a template error."""

    UNTERMINATED_STRING = "UnterminatedString"
    UNTERMINATED_REGEX = "UnterminatedRegex"
    INVALID_REGEX = "InvalidRegex"
    UNEXPECTED_INPUT = "UnexpectedInput"
    UNEXPECTED_SCALAR_AT_NODE_END = "UnexpectedScalarAtNodeEnd"
    UNSUPPORTED_ATTRIBUTE = "UnsupportedAttribute"
    INVALID_ATTRIBUTE_VALUE = "InvalidAttributeValue"
    INVALID_STRUCTURE = "InvalidStructure"
    YAML_SYNTAX = "YamlSyntax"


class AriaSnapshotError(Exception):
    """Base exception for aria-snapshot-matcher."""

    pass


class ParseError(AriaSnapshotError):
    """Error during parsing.

    ``line`` and ``column`` are 1-based and point into the un-indented
    template text. ``source_line`` is the text the caret is drawn under.
    """

    kind = ErrorKind.INVALID_STRUCTURE

    def __init__(
        self,
        message: str,
        line: int | None = None,
        column: int | None = None,
        source_line: str | None = None,
        caret_offset: int | None = None,
    ):
        self.message = message
        self.line = line
        self.column = column
        self.source_line = source_line
        # Column of the caret inside source_line (0-based); defaults to column.
        if caret_offset is None and column is not None:
            caret_offset = column - 1
        self.caret_offset = caret_offset

        super().__init__(self.format())

    def format(self) -> str:
        """Render as ``<message>:\\n\\n<source line>\\n<caret>``."""
        if self.source_line is None or self.caret_offset is None:
            location = []
            if self.line is not None:
                location.append(f"line {self.line}")
            if self.column is not None:
                location.append(f"column {self.column}")
            loc_str = ", ".join(location)
            return f"{self.message} ({loc_str})" if loc_str else self.message

        return format_error(self.message, self.source_line, self.caret_offset)

    def to_dict(self) -> dict[str, str | int | None]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "line": self.line,
            "column": self.column,
        }


class LexerError(ParseError):
    """Error during tokenization of a single template line."""

    pass


class UnterminatedStringError(LexerError):
    kind = ErrorKind.UNTERMINATED_STRING


class UnterminatedRegexError(LexerError):
    kind = ErrorKind.UNTERMINATED_REGEX


class InvalidRegexError(LexerError):
    kind = ErrorKind.INVALID_REGEX


class UnexpectedInputError(ParseError):
    kind = ErrorKind.UNEXPECTED_INPUT


class YamlSyntaxError(ParseError):
    """The template is not a well-formed list of entries."""

    kind = ErrorKind.YAML_SYNTAX


class UnexpectedScalarAtNodeEnd(YamlSyntaxError):
    """A line is not an entry or is indented inconsistently."""

    kind = ErrorKind.UNEXPECTED_SCALAR_AT_NODE_END


class ValidationError(ParseError):
    """Error validating attribute or value."""

    kind = ErrorKind.INVALID_ATTRIBUTE_VALUE


class UnsupportedAttributeError(ValidationError):
    kind = ErrorKind.UNSUPPORTED_ATTRIBUTE


class AttributeValueError(ValidationError):
    """Attribute value has the wrong type for its key."""

    kind = ErrorKind.INVALID_ATTRIBUTE_VALUE
