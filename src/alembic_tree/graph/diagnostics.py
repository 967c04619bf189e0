"""Diagnostic records captured while building a MigrationGraph.

These are data-level findings, never exceptions:
- BrokenReference: a down_revision pointing at a revision that was not scanned
- DuplicateRevision: a revision declared by more than one file
- CycleInfo: revisions that (transitively) depend on themselves
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, order=True)
class BrokenReference:
    """A reference to a non-existent parent revision.

    Attributes:
        source_id: Revision of the migration containing the reference.
        target_id: Parent revision that was referenced but not found.
    """

    source_id: str
    target_id: str

    def __str__(self) -> str:
        """Human-readable representation."""
        return f"{self.source_id} --[down_revision]--> {self.target_id} (missing)"


@dataclass(frozen=True, order=True)
class DuplicateRevision:
    """A revision identifier declared by more than one source.

    The graph keeps the later declaration (last-write-wins); the earlier
    one is recorded here so it is not silently lost.

    Attributes:
        revision: The colliding revision identifier.
        kept_source: Source of the declaration kept in the index.
        discarded_source: Source of the declaration that was replaced.
    """

    revision: str
    kept_source: str
    discarded_source: str

    def __str__(self) -> str:
        return f"{self.revision}: {self.discarded_source} replaced by {self.kept_source}"


@dataclass
class CycleInfo:
    """Pure data structure for cycle detection results.

    Attributes:
        cycle_members: Every revision that lies on some cycle.
        cycle_paths: One closed path per detected cycle, first element
            repeated at the end (e.g. ["a", "b", "a"]).
    """

    cycle_members: set[str] = field(default_factory=set)
    cycle_paths: list[list[str]] = field(default_factory=list)

    def has_cycles(self) -> bool:
        """Check if any cycle was found."""
        return bool(self.cycle_paths)


__all__ = ["BrokenReference", "CycleInfo", "DuplicateRevision"]
