"""Relations - Edges between migrations.

This module defines the consumer-facing edge record:
- Edge: parent revision -> child revision
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, order=True)
class Edge:
    """A directed edge from a parent migration to a child migration.

    Both endpoints are revision identifiers. Edges are only emitted when
    both endpoints exist in the graph.

    Attributes:
        source: The parent (down) revision.
        target: The child revision that declares the parent.
    """

    source: str
    target: str

    @property
    def is_self_loop(self) -> bool:
        """True if the migration lists itself as its parent."""
        return self.source == self.target

    def to_dict(self) -> dict[str, Any]:
        """Return the {"from", "to"} form used by serializers."""
        return {"from": self.source, "to": self.target}

    def __str__(self) -> str:
        return f"{self.source} -> {self.target}"


__all__ = ["Edge"]
