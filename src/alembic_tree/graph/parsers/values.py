"""Right-hand-side value interpretation for migration declarations.

Alembic writes ``revision`` and ``down_revision`` as plain Python
assignments, but hand-edited and generated files vary: single or double
quotes, tuples or lists for merges, ``None``, trailing comments, type
annotations. This module turns the raw right-hand side of such an
assignment into a revision string or a list of parent revisions.

Parent values are interpreted by DOWN_REVISION_RULES, an ordered list of
ValueRule entries where the first matching rule wins. New literal forms are
added by inserting a rule, not by editing the others.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

QUOTE_CHARS = "'\""
COMMENT_MARKER = "#"

WHITESPACE_PATTERN = re.compile(r"\s+")

# "abc" or 'abc' spanning the whole value
QUOTED_LITERAL_PATTERN = re.compile(r"^(['\"])([^'\"]+)\1$")
QUOTED_TOKEN_PATTERN = re.compile(r"(['\"])([^'\"]+)\1")
SEQUENCE_PATTERN = re.compile(r"^[(\[].*(['\"])[^'\"]+\1.*[)\]]$")
# "a", "b" - a tuple written without parentheses
BARE_TUPLE_PATTERN = re.compile(
    r"^(['\"])[^'\"]+\1(?:\s*,\s*(['\"])[^'\"]+\2)+\s*,?$"
)
NONE_PATTERN = re.compile(r"^(None|null)$", re.IGNORECASE)
BARE_TOKEN_PATTERN = re.compile(r"^[0-9A-Za-z_]+$")


def strip_inline_comment(text: str) -> str:
    """Remove a trailing ``# comment`` that is not inside a quoted string.

    A quote left open at the end of the text does not hide a comment: the
    text is cut at the first ``#`` after that opening quote.

    Args:
        text: A single line (or right-hand side) of source text.

    Returns:
        The text before the comment marker, right-stripped.
    """
    quote: str | None = None
    hash_in_quote: int | None = None
    escaped = False
    for i, ch in enumerate(text):
        if escaped:
            escaped = False
            continue
        if ch == "\\":
            escaped = True
        elif quote:
            if ch == quote:
                quote = None
                hash_in_quote = None
            elif ch == COMMENT_MARKER and hash_in_quote is None:
                hash_in_quote = i
        elif ch in QUOTE_CHARS:
            quote = ch
        elif ch == COMMENT_MARKER:
            return text[:i].rstrip()
    if quote and hash_in_quote is not None:
        return text[:hash_in_quote].rstrip()
    return text.rstrip()


def normalize_rhs(raw: str) -> str:
    """Normalize an assignment's right-hand side.

    Strips a trailing inline comment, collapses whitespace runs to a single
    space and trims. Applying it twice gives the same result as once.
    """
    return WHITESPACE_PATTERN.sub(" ", strip_inline_comment(raw)).strip()


def bracket_depth(text: str) -> int:
    """Count unclosed ``(`` / ``[`` outside quoted strings.

    Used to detect tuple or list values that continue on following lines.
    """
    depth = 0
    quote: str | None = None
    for ch in strip_inline_comment(text):
        if quote:
            if ch == quote:
                quote = None
        elif ch in QUOTE_CHARS:
            quote = ch
        elif ch in "([":
            depth += 1
        elif ch in ")]":
            depth -= 1
    return depth


def parse_revision(raw: str) -> str:
    """Interpret the right-hand side of a ``revision`` assignment.

    A quoted literal spanning the whole value is unwrapped and its inner
    text used as-is. Anything else falls back to the normalized text with
    leading and trailing quote characters removed.

    Args:
        raw: Raw right-hand side text.

    Returns:
        The revision identifier; empty string when nothing usable remains.
    """
    normalized = normalize_rhs(raw)

    match = QUOTED_LITERAL_PATTERN.match(normalized)
    if match:
        return match.group(2)

    return normalized.strip(QUOTE_CHARS).strip()


@dataclass(frozen=True)
class ValueRule:
    """One matcher/extractor pair of the down_revision interpretation pipeline.

    Attributes:
        name: Short rule name, for diagnostics.
        pattern: Matched against the normalized value.
        extract: Builds the parent list from the normalized value and match.
    """

    name: str
    pattern: re.Pattern[str]
    extract: Callable[[str, re.Match[str]], list[str]]

    def apply(self, value: str) -> list[str] | None:
        """Return the parent list, or None when the rule does not match."""
        match = self.pattern.match(value)
        if match is None:
            return None
        return self.extract(value, match)


DOWN_REVISION_RULES: list[ValueRule] = [
    ValueRule("none", NONE_PATTERN, lambda value, m: []),
    ValueRule("quoted", QUOTED_LITERAL_PATTERN, lambda value, m: [m.group(2)]),
    ValueRule(
        "sequence",
        SEQUENCE_PATTERN,
        lambda value, m: [t.group(2) for t in QUOTED_TOKEN_PATTERN.finditer(value)],
    ),
    ValueRule(
        "bare_tuple",
        BARE_TUPLE_PATTERN,
        lambda value, m: [t.group(2) for t in QUOTED_TOKEN_PATTERN.finditer(value)],
    ),
    ValueRule("bare", BARE_TOKEN_PATTERN, lambda value, m: [value]),
    # Unrecognized expressions are treated as "no parents"
    ValueRule("fallback", re.compile(r".*"), lambda value, m: []),
]


def parse_down_revisions(
    raw: str | None,
    rules: list[ValueRule] | None = None,
) -> list[str]:
    """Interpret the right-hand side of a ``down_revision`` assignment.

    Args:
        raw: Raw right-hand side text, or None when the file has no
            down_revision line.
        rules: Rule list to use instead of DOWN_REVISION_RULES.

    Returns:
        Parent revisions in order of appearance (not de-duplicated).
    """
    if not raw:
        return []

    normalized = normalize_rhs(raw)
    for rule in rules if rules is not None else DOWN_REVISION_RULES:
        parents = rule.apply(normalized)
        if parents is not None:
            return parents
    return []


def match_rule(raw: str, rules: list[ValueRule] | None = None) -> str | None:
    """Return the name of the rule that interprets ``raw``, if any."""
    normalized = normalize_rhs(raw)
    for rule in rules if rules is not None else DOWN_REVISION_RULES:
        if rule.pattern.match(normalized):
            return rule.name
    return None


__all__ = [
    "DOWN_REVISION_RULES",
    "ValueRule",
    "bracket_depth",
    "match_rule",
    "normalize_rhs",
    "parse_down_revisions",
    "parse_revision",
    "strip_inline_comment",
]
