"""
Draft-to-ready normalization for Tealstreet custom modules.

Turns a draft module (the file the author iterates on in the local preview)
into the paste-ready text Tealstreet expects:

1. Import lines are dropped (the host injects ``React`` and ``api`` globally).
2. The ``CustomModuleName`` declaration and the scaffold comments are dropped.
3. The development-only ``export default Component`` is dropped.
4. Runs of blank lines collapse to a single blank line.
5. The text is trimmed and the bare ``Component`` reference is appended.

This is line-oriented text processing, not a parser. Rules live in
``DEFAULT_RULES`` so new scaffold markers can be added without touching
the control flow.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

MODULE_NAME_IDENTIFIER = "CustomModuleName"
TRAILING_SYMBOL = "Component"
TRAILING_SEPARATOR = "\n\n"

MODULE_NAME_PATTERN = re.compile(
    rf"const\s+{MODULE_NAME_IDENTIFIER}\s*=\s*['\"`]([^'\"`]+)['\"`]"
)

_BLANK_RUN = re.compile(r"\n\n\n+")


class LineAction(str, Enum):
    """What to do with a line matched by a rule."""

    BLANK = "blank"  # keep the line break, drop the content
    DROP = "drop"  # remove the line entirely


@dataclass(frozen=True)
class LineRule:
    """A single ``(line predicate, action)`` normalization rule."""

    name: str
    pattern: re.Pattern[str]
    action: LineAction = LineAction.BLANK

    def matches(self, line: str) -> bool:
        return self.pattern.match(line) is not None


def _rule(name: str, regex: str) -> LineRule:
    return LineRule(name=name, pattern=re.compile(regex))


DEFAULT_RULES: tuple[LineRule, ...] = (
    _rule("import", r"^import.*$"),
    _rule(
        "module-name",
        rf"^const\s+{MODULE_NAME_IDENTIFIER}\s*=\s*['\"`][^'\"`]+['\"`].*$",
    ),
    # Naming/versioning instructions from the scaffold
    _rule("naming-hint", rf"^// Choose a {MODULE_NAME_IDENTIFIER}.*$"),
    _rule("rename-hint", r"^// Make sure to change the name.*$"),
    _rule("confirm-hint", r"^// After confirming the desired name.*$"),
    _rule("versioning-hint", r"^// Each time you save this script.*$"),
    # Development markers
    _rule("ts-nocheck", r"^// @ts-nocheck.*$"),
    _rule("dev-only", r"^// For development.*$"),
    _rule("host-note", r"^// For Tealstreet:.*$"),
    _rule("build-here", r"^// Build here.*$"),
    _rule("default-export", rf"^export default {TRAILING_SYMBOL}.*$"),
)


@dataclass
class NormalizeResult:
    """Output of :func:`normalize`."""

    ready_text: str
    module_name: str | None = None
    removed: dict[str, int] = field(default_factory=dict)


def extract_module_name(draft_text: str) -> str | None:
    """
    Return the value of the first ``const CustomModuleName = '...'`` declaration.

    Single, double or back quotes are accepted. No declaration means no
    versioning for this build, so ``None`` is a normal result.
    """
    match = MODULE_NAME_PATTERN.search(draft_text)
    return match.group(1) if match else None


def _apply_rules(
    lines: list[str], rules: tuple[LineRule, ...], removed: dict[str, int]
) -> list[str]:
    out: list[str] = []
    for line in lines:
        rule = next((r for r in rules if r.matches(line)), None)
        if rule is None:
            out.append(line)
            continue
        removed[rule.name] = removed.get(rule.name, 0) + 1
        if rule.action is LineAction.BLANK:
            out.append("")
    return out


def _strip_trailing_symbol(body: str) -> str:
    # Already-normalized input must not end up with the symbol twice
    if body == TRAILING_SYMBOL:
        return ""
    suffix = "\n" + TRAILING_SYMBOL
    if body.endswith(suffix):
        return body[: -len(suffix)].strip()
    return body


def normalize(draft_text: str, rules: tuple[LineRule, ...] = DEFAULT_RULES) -> NormalizeResult:
    """
    Normalize a draft module into a Tealstreet-ready artifact.

    Never raises: empty or unrecognizable input yields just the trailing
    ``Component`` reference.

    Args:
        draft_text: Raw draft module source
        rules: Line rules to apply (defaults to :data:`DEFAULT_RULES`)

    Returns:
        NormalizeResult with the ready text and the extracted module name
    """
    removed: dict[str, int] = {}
    lines = _apply_rules(draft_text.replace("\r\n", "\n").split("\n"), rules, removed)
    body = _BLANK_RUN.sub("\n\n", "\n".join(lines)).strip()
    body = _strip_trailing_symbol(body)

    return NormalizeResult(
        ready_text=body + TRAILING_SEPARATOR + TRAILING_SYMBOL,
        module_name=extract_module_name(draft_text),
        removed=removed,
    )
