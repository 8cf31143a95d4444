"""
Best-guess regex rendering of captured snapshots.

When an assertion fails, the received tree is shown with likely-dynamic
substrings (counts, prices, sizes, durations) replaced by regex fragments,
so that an expectation already written as ``/Total: \\d+ items/`` is not
reported as a difference against ``Total: 42 items``. None of this is
used for matching.
"""

import re
from dataclasses import dataclass
from difflib import SequenceMatcher

from .types import AriaTextValue, PatternNode, SnapshotNode
from .utils import escape_regex

# Names longer than this are left out of rendered keys.
MAX_RENDERED_NAME_LENGTH = 900


@dataclass(frozen=True)
class RegexifyRule:
    """A dynamic-looking substring and the regex fragment that replaces it."""

    pattern: str
    replacement: str


DEFAULT_RULES: tuple[RegexifyRule, ...] = (
    # 2mb, 1.5KB
    RegexifyRule(r"\b[\d,.]+[bkmBKM]+\b", r"[\d,.]+[bkmBKM]+"),
    # 2ms, 20s
    RegexifyRule(r"\b\d+[hmsp]+\b", r"\d+[hmsp]+"),
    RegexifyRule(r"\b[\d,.]+[hmsp]+\b", r"[\d,.]+[hmsp]+"),
    # Single digits are left alone: 22, 22.3, 2.33, 2,333
    RegexifyRule(r"\b\d+,\d+\b", r"\d+,\d+"),
    RegexifyRule(r"\b\d+\.\d{2,}\b", r"\d+\.\d+"),
    RegexifyRule(r"\b\d{2,}\.\d+\b", r"\d+\.\d+"),
    RegexifyRule(r"\b\d{2,}\b", r"\d+"),
)


class RegexifyPolicy:
    """
    Ordered substitution rules applied left to right over a value.

    At each position the first rule that matches wins. Text between matches
    is escaped literally, so currency symbols and percent signs around a
    number survive as literals.
    """

    def __init__(self, rules: tuple[RegexifyRule, ...] = DEFAULT_RULES) -> None:
        self.rules = rules
        self._combined = re.compile("|".join(f"({rule.pattern})" for rule in rules)) if rules else None
        # Outer group number of each rule; rule patterns may carry groups of their own.
        self._group_of_rule = []
        group = 1
        for rule in rules:
            self._group_of_rule.append(group)
            group += re.compile(rule.pattern).groups + 1

    def _replacement_for(self, match: re.Match[str]) -> str:
        for rule, group in zip(self.rules, self._group_of_rule):
            if match.group(group) is not None:
                return rule.replacement
        return escape_regex(match.group(0))

    def apply(self, text: str) -> AriaTextValue:
        if self._combined is None:
            return AriaTextValue(text)

        pattern = []
        last_index = 0
        for match in self._combined.finditer(text):
            pattern.append(escape_regex(text[last_index : match.start()]))
            pattern.append(self._replacement_for(match))
            last_index = match.end()

        if not pattern:
            return AriaTextValue(text)
        pattern.append(escape_regex(text[last_index:]))
        return AriaTextValue("".join(pattern), is_regex=True)


DEFAULT_POLICY = RegexifyPolicy()


def regexify_text(text: str, policy: RegexifyPolicy = DEFAULT_POLICY) -> AriaTextValue:
    """Render one value, as a regex only if some substring was substituted."""
    return policy.apply(text)


def longest_common_substring(a: str, b: str) -> str:
    match = SequenceMatcher(None, a, b, autojunk=False).find_longest_match(0, len(a), 0, len(b))
    return a[match.a : match.a + match.size]


def text_contributes_info(node: SnapshotNode, text: str) -> bool:
    """Whether a text child says more than the accessible name already does."""
    if not text:
        return False
    if not node.name:
        return True
    if len(node.name) > len(text):
        return False
    substr = longest_common_substring(text, node.name) if len(text) <= 200 and len(node.name) <= 200 else ""
    filtered = text
    while substr and substr in filtered:
        filtered = filtered.replace(substr, "", 1)
    return len(filtered.strip()) / len(text) > 0.1


def to_template(snapshot: SnapshotNode, policy: RegexifyPolicy | None = None) -> PatternNode:
    """
    Convert a snapshot into the template that would describe it.

    Without a policy the values stay literal (the raw rendering). With one,
    names and text are regexified and text children that merely repeat the
    parent's name are dropped.
    """

    def render_value(text: str) -> AriaTextValue:
        return policy.apply(text) if policy is not None else AriaTextValue(text)

    def include_text(parent: SnapshotNode, text: str) -> bool:
        if policy is None:
            return bool(text)
        return text_contributes_info(parent, text)

    def convert(node: SnapshotNode) -> PatternNode:
        name = None
        if node.name and len(node.name) <= MAX_RENDERED_NAME_LENGTH:
            name = render_value(node.name)
        attributes = {key: value for key, value in node.attributes.items() if value is not False}
        props = {key: AriaTextValue(value) for key, value in node.props.items()}

        if len(node.children) == 1 and isinstance(node.children[0], str) and not props:
            text = node.children[0]
            return PatternNode(
                role=node.role,
                name=name,
                text=render_value(text) if include_text(node, text) else None,
                attributes=attributes,
            )

        children = []
        for child in node.children:
            if isinstance(child, str):
                if include_text(node, child):
                    children.append(PatternNode(role="text", text=render_value(child)))
            else:
                children.append(convert(child))
        return PatternNode(
            role=node.role,
            name=name,
            attributes=attributes,
            children=tuple(children),
            props=props,
        )

    return convert(snapshot)


def regexify(snapshot: SnapshotNode, policy: RegexifyPolicy = DEFAULT_POLICY) -> PatternNode:
    """Best-guess template for a snapshot; also the suggested new baseline."""
    return to_template(snapshot, policy)
