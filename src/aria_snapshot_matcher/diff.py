"""Human-readable output for failed expectations and template errors."""

import difflib


def format_error(message: str, source_line: str, column: int) -> str:
    """
    Render an error with the offending line and a caret under ``column``.

    Args:
        message: Error message
        source_line: Line of template text the error refers to
        column: 0-based offset of the caret within ``source_line``

    Returns:
        ``<message>:\\n\\n<source_line>\\n<spaces>^\\n``
    """
    return f"{message}:\n\n{source_line}\n{' ' * max(column, 0)}^\n"


def _lines(text: str) -> list[str]:
    return text.split("\n") if text else []


def print_diff(expected: str, received: str) -> str:
    """
    Line diff in the style of a test-runner assertion message.

    Removed lines are prefixed with ``- ``, added lines with ``+ `` and
    unchanged lines with two spaces. The header counts both sides.
    """
    expected_lines = _lines(expected)
    received_lines = _lines(received)
    body: list[str] = []
    removed = 0
    added = 0

    matcher = difflib.SequenceMatcher(None, expected_lines, received_lines, autojunk=False)
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            body.extend(f"  {line}" for line in expected_lines[i1:i2])
            continue
        if tag in ("delete", "replace"):
            body.extend(f"- {line}" for line in expected_lines[i1:i2])
            removed += i2 - i1
        if tag in ("insert", "replace"):
            body.extend(f"+ {line}" for line in received_lines[j1:j2])
            added += j2 - j1

    header = [f"- Expected  - {removed}", f"+ Received  + {added}", ""]
    return "\n".join(header + body)


def unified_diff(expected: str, received: str, context: int = 3) -> str:
    """Standard unified diff of two renderings, empty when they are equal."""
    return "".join(
        difflib.unified_diff(
            [line + "\n" for line in _lines(expected)],
            [line + "\n" for line in _lines(received)],
            fromfile="expected",
            tofile="received",
            n=context,
        )
    )
