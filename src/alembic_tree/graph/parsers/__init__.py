"""Migration parsers - Line-claiming declaration extraction.

A migration file is read by a small set of parsers, each looking for one
top-level assignment. Parsers run in priority order and a line can be
claimed by at most one of them, so a line already consumed as part of a
``down_revision`` tuple is never offered to a later parser.

Exports:
- NumberedLine: ``(line_number, text)`` pair, 1-indexed
- ParseContext: Source reference handed to parsers
- Claim: One assignment found by a parser
- DeclarationClaimer: Protocol for parser implementations
- ParserRegistry: Priority-ordered parser orchestration
- number_lines: Split text into NumberedLine pairs
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Protocol, Tuple, runtime_checkable

NumberedLine = Tuple[int, str]


@dataclass(frozen=True)
class ParseContext:
    """What parsers know about the text they are reading.

    Attributes:
        source: Opaque source reference, usually the migration file path.
    """

    source: str


@dataclass(frozen=True)
class Claim:
    """An assignment claimed by a parser.

    Attributes:
        name: Binding that was assigned ("revision", "down_revision").
        start_line: Line of the assignment (1-indexed).
        end_line: Last claimed line, inclusive. Differs from start_line
            when a bracketed value continues on following lines.
        value: Raw right-hand side; continuation lines are joined with a
            space after their comments are removed.
        raw_text: The claimed lines exactly as they appear in the source.
    """

    name: str
    start_line: int
    end_line: int
    value: str
    raw_text: str = ""

    @property
    def line_numbers(self) -> range:
        """Line numbers covered by this claim."""
        return range(self.start_line, self.end_line + 1)

    @property
    def line_count(self) -> int:
        return len(self.line_numbers)


@runtime_checkable
class DeclarationClaimer(Protocol):
    """Protocol for parsers that claim one assignment.

    ``claim`` receives only the lines no earlier parser has taken and
    returns the first matching assignment, or None.
    """

    name: str
    priority: int

    def claim(self, lines: list[NumberedLine], context: ParseContext) -> Claim | None:
        ...


class ParserRegistry:
    """Priority-ordered set of DeclarationClaimers.

    Lower priority values run first; parsers with equal priority run in
    registration order.
    """

    def __init__(self, parsers: Iterable[DeclarationClaimer] = ()) -> None:
        self._parsers: list[DeclarationClaimer] = []
        for parser in parsers:
            self.register(parser)

    def register(self, parser: DeclarationClaimer) -> None:
        """Insert a parser at its priority position."""
        index = len(self._parsers)
        while index > 0 and self._parsers[index - 1].priority > parser.priority:
            index -= 1
        self._parsers.insert(index, parser)

    def get_ordered(self) -> list[DeclarationClaimer]:
        """Return the parsers in the order they run."""
        return list(self._parsers)

    def claim_all(self, lines: list[NumberedLine], context: ParseContext) -> dict[str, Claim]:
        """Offer the lines to every parser, withholding lines already claimed.

        Args:
            lines: The numbered lines of one migration file.
            context: Source information for the parsers.

        Returns:
            The first claim per binding name, in the order parsers ran.
            Bindings no parser found are absent.
        """
        taken: set[int] = set()
        claims: dict[str, Claim] = {}

        for parser in self._parsers:
            remaining = [line for line in lines if line[0] not in taken]
            if not remaining:
                break
            claim = parser.claim(remaining, context)
            if claim is None:
                continue
            taken.update(claim.line_numbers)
            claims.setdefault(claim.name, claim)

        return claims


def number_lines(text: str) -> list[NumberedLine]:
    """Split text on newlines into 1-indexed ``(line_number, text)`` pairs."""
    return list(enumerate(text.split("\n"), start=1))


__all__ = [
    "Claim",
    "DeclarationClaimer",
    "NumberedLine",
    "ParseContext",
    "ParserRegistry",
    "number_lines",
]
