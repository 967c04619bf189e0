"""MigrationParser - Turns one migration file's text into a MigrationNode.

The parser is permissive by design of the file format it reads: text without
a ``revision`` assignment is not a migration and yields None, and an
unrecognized ``down_revision`` expression yields a node without parents.
It never raises for any text input.
"""

from __future__ import annotations

import os
from typing import Iterable, Iterator, Union

from alembic_tree.graph.MigrationNode import MigrationNode
from alembic_tree.graph.parsers import Claim, ParseContext, ParserRegistry, number_lines
from alembic_tree.graph.parsers.declaration import DownRevisionParser, RevisionParser
from alembic_tree.graph.parsers.values import parse_down_revisions, parse_revision

SourceRef = Union[str, "os.PathLike[str]"]


def create_registry() -> ParserRegistry:
    """Create the standard registry with revision and down_revision parsers."""
    return ParserRegistry([RevisionParser(), DownRevisionParser()])


class MigrationParser:
    """Parser for a single migration file.

    Example:
        >>> node = MigrationParser().parse('revision = "a1"\\n', "versions/a1_init.py")
        >>> node.id, node.parent_ids, node.label
        ('a1', (), 'a1 (a1_init)')
    """

    def __init__(self, registry: ParserRegistry | None = None) -> None:
        self.registry = registry or create_registry()

    def claim(self, text: str, source: SourceRef) -> dict[str, Claim]:
        """Run the registry over ``text`` and return the claims by binding name."""
        return self.registry.claim_all(number_lines(text), ParseContext(source=str(source)))

    def parse(self, text: str, source: SourceRef) -> MigrationNode | None:
        """Parse migration text.

        Args:
            text: Full text of the migration file.
            source: Opaque source reference, usually the file path.

        Returns:
            The parsed MigrationNode, or None if the text declares no
            revision.
        """
        claims = self.claim(text, source)

        revision_claim = claims.get("revision")
        if revision_claim is None:
            return None

        revision = parse_revision(revision_claim.value)
        if not revision:
            return None

        down_claim = claims.get("down_revision")
        parents = parse_down_revisions(down_claim.value if down_claim else None)

        return MigrationNode(id=revision, parent_ids=tuple(parents), source=str(source))

    def parse_many(
        self, blobs: Iterable[tuple[str, SourceRef]]
    ) -> Iterator[MigrationNode]:
        """Parse ``(text, source)`` pairs, skipping blobs without a revision."""
        for text, source in blobs:
            node = self.parse(text, source)
            if node is not None:
                yield node


_default_parser = MigrationParser()


def parse_migration(text: str, source: SourceRef) -> MigrationNode | None:
    """Parse one migration file's text with the default parser."""
    return _default_parser.parse(text, source)


__all__ = ["MigrationParser", "create_registry", "parse_migration"]
