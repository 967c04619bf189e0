"""MigrationNode - One parsed migration in the revision graph.

This module provides the node value produced by the declaration parser:
- MigrationNode: revision identifier, ordered parents and display label
- make_label: Derive the "<revision> (<file stem>)" display label
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Iterable


def make_label(revision: str, source: str) -> str:
    """Build the display label for a migration.

    Args:
        revision: The revision identifier.
        source: Source reference, usually a file path.

    Returns:
        "<revision> (<basename without extension>)".
    """
    return f"{revision} ({PurePath(source).stem})"


def _dedupe(values: Iterable[str]) -> tuple[str, ...]:
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return tuple(result)


@dataclass(frozen=True)
class MigrationNode:
    """A single migration declaration.

    MigrationNode is immutable once created. Parent identifiers are
    de-duplicated on construction (first occurrence wins) so a node never
    lists the same parent twice.

    Attributes:
        id: The revision identifier, never empty.
        parent_ids: Ordered down-revision identifiers; empty for a base.
        source: Opaque reference to where the node came from.
        label: Human-readable display label, derived when omitted.
    """

    id: str
    parent_ids: tuple[str, ...] = ()
    source: str = ""
    label: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        # frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "parent_ids", _dedupe(self.parent_ids))
        if not self.label:
            object.__setattr__(self, "label", make_label(self.id, self.source))

    @property
    def is_base(self) -> bool:
        """True if this migration declares no parent."""
        return len(self.parent_ids) == 0

    @property
    def is_merge(self) -> bool:
        """True if this migration unites more than one parent."""
        return len(self.parent_ids) > 1

    def __str__(self) -> str:
        return self.label


__all__ = ["MigrationNode", "make_label"]
