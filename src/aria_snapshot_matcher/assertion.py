"""
Assertion-style entry point: match a captured snapshot against an inline
template or a stored baseline and report the outcome like a test matcher.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from .baseline import BaselineStore
from .config import MatcherConfig, UpdateMode, load_matcher_config
from .diff import print_diff
from .matcher import match_aria_snapshot
from .parser import AriaSnapshotParser
from .types import NOT_FOUND, ReceivedSnapshot, SnapshotNode, _NotFound
from .utils import indent, unshift

logger = logging.getLogger(__name__)

MATCHER_NAME = "to_match_aria_snapshot"

# Template that cannot match, used to run the full pipeline when a baseline is missing.
GENERATING_BASELINE_TEMPLATE = '- none "Generating new baseline"'

ELEMENT_NOT_FOUND = "<element not found>"


@dataclass
class MatcherResult:
    """
    Outcome of one assertion.

    ``pass_`` is the outcome of the assertion as written, so a negated
    assertion passes when the template does not match.
    """

    pass_: bool
    message: Callable[[], str]
    name: str = MATCHER_NAME
    expected: str | None = None
    actual: ReceivedSnapshot | _NotFound | None = None
    suggested_rebaseline: str | None = None
    log: list[str] = field(default_factory=list)


def _call_log_text(log: list[str]) -> str:
    if not log:
        return ""
    return "\nCall log:\n" + "\n".join(f"  - {entry}" for entry in log) + "\n"


def _drop_blank_lines(text: str) -> str:
    return "\n".join(line for line in text.split("\n") if line.strip())


def _relative(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


def to_match_aria_snapshot(
    received: SnapshotNode | _NotFound,
    expected: str | None = None,
    *,
    is_not: bool = False,
    update_mode: UpdateMode | None = None,
    store: BaselineStore | None = None,
    name: str | None = None,
    config: MatcherConfig | None = None,
    deep: bool = False,
    log: list[str] | None = None,
) -> MatcherResult:
    """
    Assert that a captured snapshot matches a template.

    Args:
        received: Captured snapshot, or NOT_FOUND when no element was found
        expected: Inline template text; when None the baseline ``name`` is
            read from ``store``
        is_not: Negate the assertion
        update_mode: Baseline update mode, defaults to the configured one
        store: Baseline store, defaults to one rooted at the configured
            snapshot directory
        name: Baseline name, defaults to the store's next numbered name
        config: Matcher configuration, defaults to the environment
        deep: Search the whole snapshot instead of matching at the root
        log: Call log lines appended to failure messages

    Returns:
        MatcherResult

    Raises:
        ParseError: if the template is malformed
    """
    config = config or load_matcher_config()
    log = list(log or [])

    if config["ignore_snapshots"]:
        return MatcherResult(pass_=True, message=lambda: "", expected="")

    update_mode = update_mode or config["update_snapshots"]

    expected_path: Path | None = None
    if expected is None:
        store = store or BaselineStore(config["snapshot_dir"])
        name = name or store.next_name()
        expected_path = store.resolve(name)
        expected = store.read(name)
        log.append(f"reading baseline {_relative(expected_path)}")

    generate_missing_baseline = update_mode == "missing" and not expected
    if generate_missing_baseline:
        if is_not:
            message = 'Matchers using ".not" can\'t generate new baselines'
            return MatcherResult(pass_=False, message=lambda: message)
        expected = GENERATING_BASELINE_TEMPLATE

    # Error line numbers refer to the un-indented text, blank lines included.
    expected = unshift(expected)
    pattern = AriaSnapshotParser().parse(expected)
    expected = _drop_blank_lines(expected)

    # A missing element fails the assertion with or without .not
    if received is NOT_FOUND:
        return MatcherResult(
            pass_=False,
            message=lambda: f"Expected: {expected}\nReceived: {ELEMENT_NOT_FOUND}\n" + _call_log_text(log),
            expected=expected,
            actual=NOT_FOUND,
            log=log,
        )

    result = match_aria_snapshot(pattern, received, deep=deep)
    matched = result.matches
    typed_received = result.received
    logger.debug(f"{MATCHER_NAME}: template {'matched' if matched else 'did not match'}")

    # Passing: show the raw tree. Failing: show the regex form so dynamic values
    # already written as regexes in the template do not show up as differences.
    if matched or not config["regexify_received"]:
        received_text = typed_received.raw
    else:
        received_text = typed_received.regex

    def message() -> str:
        if matched:
            text = f"Expected: not {expected}\nReceived: {received_text}\n"
        else:
            text = print_diff(expected, received_text) + "\n"
        return text + _call_log_text(log)

    if not is_not and (
        update_mode == "all" or (update_mode == "changed" and not matched) or generate_missing_baseline
    ):
        return _update_baseline(typed_received, update_mode, store, name, expected_path, log)

    return MatcherResult(
        pass_=matched != is_not,
        message=message,
        expected=expected,
        actual=typed_received,
        log=log,
    )


def _update_baseline(
    received: ReceivedSnapshot,
    update_mode: str,
    store: BaselineStore | None,
    name: str | None,
    expected_path: Path | None,
    log: list[str],
) -> MatcherResult:
    if store is not None and name is not None and expected_path is not None:
        path = store.write(name, received.regex, path=expected_path)
        if update_mode == "missing":
            message = f"A snapshot doesn't exist at {_relative(path)}, writing actual."
            return MatcherResult(pass_=False, message=lambda: message, log=log)
        logger.info(f"A snapshot is generated at {_relative(path)}.")
        return MatcherResult(pass_=True, message=lambda: "", log=log)

    suggested = indent(received.regex, "  ")
    if update_mode == "missing":
        message = "A snapshot is not provided, generating new baseline."
    else:
        message = f"New baseline suggested:\n\n{suggested}\n"
    return MatcherResult(
        pass_=False,
        message=lambda: message,
        suggested_rebaseline=received.regex,
        log=log,
    )
