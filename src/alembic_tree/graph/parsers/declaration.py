"""DeclarationParser - Claims ``name = value`` assignment lines.

RevisionParser (priority 10) claims the ``revision`` line and
DownRevisionParser (priority 20) claims the ``down_revision`` line,
including continuation lines of a tuple or list split across lines.
"""

from __future__ import annotations

import re

from alembic_tree.graph.parsers import Claim, NumberedLine, ParseContext
from alembic_tree.graph.parsers.values import bracket_depth, strip_inline_comment


def declaration_pattern(name: str) -> re.Pattern[str]:
    """Compile the assignment pattern for a binding name.

    Matches ``name = value`` and the annotated ``name: Type = value``.
    """
    return re.compile(
        rf"^\s*{re.escape(name)}\s*(?::\s*[^=]+)?\s*=\s*(?P<value>.+?)\s*$"
    )


class DeclarationParser:
    """Parser for a single top-level assignment.

    Claims the first line assigning to ``name``. When ``multiline`` is set
    and the value leaves a bracket open, following lines are claimed until
    the bracket closes or the text ends.

    Attributes:
        name: Binding name to look for.
        priority: Registry priority (lower = earlier).
        multiline: Whether to follow unclosed brackets onto later lines.
    """

    def __init__(self, name: str, priority: int, multiline: bool = False) -> None:
        self.name = name
        self.priority = priority
        self.multiline = multiline
        self.pattern = declaration_pattern(name)

    def claim(self, lines: list[NumberedLine], context: ParseContext) -> Claim | None:
        """Claim the first assignment line for this binding.

        Args:
            lines: Unclaimed (line_number, text) pairs.
            context: Parsing context.

        Returns:
            The Claim, or None when the binding is not assigned.
        """
        for i, (ln, text) in enumerate(lines):
            match = self.pattern.match(text)
            if not match:
                continue

            value = match.group("value")
            end_line = ln
            raw_lines = [text]

            if self.multiline and bracket_depth(value) > 0:
                parts = [strip_inline_comment(value)]
                for next_ln, next_text in lines[i + 1 :]:
                    # Only follow directly adjacent lines
                    if next_ln != end_line + 1:
                        break
                    parts.append(strip_inline_comment(next_text))
                    raw_lines.append(next_text)
                    end_line = next_ln
                    if bracket_depth(" ".join(parts)) <= 0:
                        break
                value = " ".join(parts)

            return Claim(
                name=self.name,
                start_line=ln,
                end_line=end_line,
                value=value,
                raw_text="\n".join(raw_lines),
            )
        return None


class RevisionParser(DeclarationParser):
    """Parser for the ``revision`` identifier line.

    Priority: 10 (runs first)
    """

    def __init__(self) -> None:
        super().__init__("revision", priority=10)


class DownRevisionParser(DeclarationParser):
    """Parser for the ``down_revision`` parent line.

    Priority: 20 (after the revision line)
    """

    def __init__(self) -> None:
        super().__init__("down_revision", priority=20, multiline=True)


__all__ = ["DeclarationParser", "DownRevisionParser", "RevisionParser", "declaration_pattern"]
