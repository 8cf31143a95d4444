"""Type checking and coercion of bracketed template attributes."""

import re
from collections.abc import Callable

from .types import AttributeValue, Tristate

_INTEGER = re.compile(r"-?\d+")


class InvalidAttributeValue(ValueError):
    """Raised by a coercer; the parser attaches the position."""


class UnknownAttribute(KeyError):
    pass


def parse_boolean(key: str, value: str) -> bool:
    """
    Parse ``true`` / ``false`` (case-sensitive).

    Raises:
        InvalidAttributeValue: for anything else, including ``TRUE`` or ``1``
    """
    if value == "true":
        return True
    if value == "false":
        return False
    raise InvalidAttributeValue(f'Value of "{key}" attribute must be a boolean')


def parse_mixed_boolean(key: str, value: str) -> Tristate:
    """Parse a tristate value for ``checked`` / ``pressed``."""
    if value == "mixed":
        return "mixed"
    if value in ("true", "false"):
        return value == "true"
    raise InvalidAttributeValue(f'Value of "{key}" attribute must be a boolean or "mixed"')


def parse_level(key: str, value: str) -> int:
    """Parse an integer with an optional leading ``-``."""
    value = value.strip()
    if not _INTEGER.fullmatch(value):
        raise InvalidAttributeValue(f'Value of "{key}" attribute must be a number')
    return int(value)


def _parse_string(key: str, value: str) -> str:
    return value


TEMPLATE_ATTRIBUTES: dict[str, Callable[[str, str], AttributeValue]] = {
    "checked": parse_mixed_boolean,
    "disabled": parse_boolean,
    "expanded": parse_boolean,
    "level": parse_level,
    "pressed": parse_mixed_boolean,
    "selected": parse_boolean,
}

# Markers that appear in snapshots rendered for agents but are never matched.
SNAPSHOT_ONLY_ATTRIBUTES: dict[str, Callable[[str, str], bool | str]] = {
    "active": parse_boolean,
    "ref": _parse_string,
    "cursor": _parse_string,
}


def validate_attribute(key: str, raw_value: str | None, *, allow_snapshot_only: bool = False):
    """
    Coerce the raw text of one attribute to its typed value.

    A missing value (bare ``[key]``) means ``true``.

    Args:
        key: Attribute name as written in the template
        raw_value: Text after ``=``, or None for the bare form
        allow_snapshot_only: Also accept ``ref``, ``cursor`` and ``active``

    Returns:
        bool, "mixed", int, or str for snapshot-only markers

    Raises:
        UnknownAttribute: key outside the supported set
        InvalidAttributeValue: value of the wrong type for the key
    """
    coercer = TEMPLATE_ATTRIBUTES.get(key)
    if coercer is None and allow_snapshot_only:
        coercer = SNAPSHOT_ONLY_ATTRIBUTES.get(key)
    if coercer is None:
        raise UnknownAttribute(key)

    if raw_value is None:
        raw_value = "true"
    return coercer(key, raw_value)
