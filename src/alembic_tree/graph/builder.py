"""Graph Builder - Constructs a MigrationGraph from parsed migrations.

This module provides the builder for turning a complete sequence of
MigrationNode values into an immutable MigrationGraph with:
- an identifier -> node index (last declaration of a revision wins)
- a parent -> sorted children adjacency index
- bases, heads and missing parents, each sorted

Building never raises: duplicates, dangling parents and self references are
recorded as data on the graph.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping

from alembic_tree.graph.diagnostics import BrokenReference, CycleInfo, DuplicateRevision
from alembic_tree.graph.MigrationNode import MigrationNode
from alembic_tree.graph.relations import Edge


@dataclass(frozen=True)
class GraphSummary:
    """Counts reported after each rebuild.

    Attributes:
        parsed: Nodes handed to the builder, duplicates included.
        bases: Number of base revisions.
        heads: Number of head revisions.
        missing: Number of missing parent revisions.
        duplicates: Number of discarded duplicate declarations.
    """

    parsed: int
    bases: int
    heads: int
    missing: int
    duplicates: int = 0

    def __str__(self) -> str:
        text = (
            f"Parsed: {self.parsed}, bases: {self.bases}, "
            f"heads: {self.heads}, missing: {self.missing}"
        )
        if self.duplicates:
            text += f", duplicates: {self.duplicates}"
        return text


@dataclass(frozen=True)
class MigrationGraph:
    """Immutable revision graph.

    Produced by GraphBuilder.build() / build_graph(). All collections are
    read-only; a refresh produces a new MigrationGraph instead of mutating
    this one.

    Attributes:
        nodes_by_id: Revision -> MigrationNode.
        children_by_parent: Parent revision -> sorted child revisions, from
            every parsed declaration including replaced duplicates. Keys
            include missing parents.
        bases: Sorted revisions without parents.
        heads: Sorted revisions that no migration names as a parent.
        missing_parents: Sorted revisions referenced as parents but absent.
        duplicates: Declarations dropped by last-write-wins indexing.
        parsed_count: Number of nodes handed to the builder.
    """

    nodes_by_id: Mapping[str, MigrationNode] = field(default_factory=dict)
    children_by_parent: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    bases: tuple[str, ...] = ()
    heads: tuple[str, ...] = ()
    missing_parents: tuple[str, ...] = ()
    duplicates: tuple[DuplicateRevision, ...] = ()
    parsed_count: int = 0

    # Membership sets, derived
    _base_set: frozenset[str] = field(init=False, repr=False, compare=False)
    _head_set: frozenset[str] = field(init=False, repr=False, compare=False)
    _missing_set: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "nodes_by_id", MappingProxyType(dict(self.nodes_by_id)))
        object.__setattr__(
            self, "children_by_parent", MappingProxyType(dict(self.children_by_parent))
        )
        object.__setattr__(self, "_base_set", frozenset(self.bases))
        object.__setattr__(self, "_head_set", frozenset(self.heads))
        object.__setattr__(self, "_missing_set", frozenset(self.missing_parents))

    # ─────────────────────────────────────────────────────────────────────────
    # Lookup
    # ─────────────────────────────────────────────────────────────────────────

    def find_by_id(self, revision: str) -> MigrationNode | None:
        """Find a migration by revision.

        Args:
            revision: The revision identifier to find.

        Returns:
            The matching MigrationNode, or None if not found.
        """
        return self.nodes_by_id.get(revision)

    def __contains__(self, revision: object) -> bool:
        return revision in self.nodes_by_id

    def node_count(self) -> int:
        """Return total number of migrations in the graph."""
        return len(self.nodes_by_id)

    def all_nodes(self) -> Iterator[MigrationNode]:
        """Iterate all migrations in index order."""
        yield from self.nodes_by_id.values()

    def iter_roots(self) -> Iterator[MigrationNode]:
        """Iterate base migrations in sorted order."""
        for revision in self.bases:
            yield self.nodes_by_id[revision]

    def children_of(self, revision: str) -> tuple[str, ...]:
        """Return the sorted child revisions of ``revision`` (empty if none)."""
        return self.children_by_parent.get(revision, ())

    def parents_of(self, revision: str) -> tuple[str, ...]:
        """Return the declared parents of ``revision`` (empty if unknown)."""
        node = self.nodes_by_id.get(revision)
        return node.parent_ids if node else ()

    # ─────────────────────────────────────────────────────────────────────────
    # Classification
    # ─────────────────────────────────────────────────────────────────────────

    def is_base(self, revision: str) -> bool:
        """Check if a revision is a base."""
        return revision in self._base_set

    def is_head(self, revision: str) -> bool:
        """Check if a revision is a head."""
        return revision in self._head_set

    def is_missing(self, revision: str) -> bool:
        """Check if a revision is referenced as a parent but was not found."""
        return revision in self._missing_set

    def is_merge(self, revision: str) -> bool:
        """Check if a revision is a merge migration."""
        node = self.nodes_by_id.get(revision)
        return node is not None and node.is_merge

    def merges(self) -> list[str]:
        """Return sorted revisions of merge migrations."""
        return sorted(n.id for n in self.nodes_by_id.values() if n.is_merge)

    def has_missing_parents(self) -> bool:
        """Check if any parent reference is dangling."""
        return len(self.missing_parents) > 0

    def has_duplicates(self) -> bool:
        """Check if any revision was declared more than once."""
        return len(self.duplicates) > 0

    def broken_references(self) -> list[BrokenReference]:
        """Get one BrokenReference per dangling down_revision, sorted.

        Returns:
            List of BrokenReference instances.
        """
        return sorted(
            BrokenReference(source_id=node.id, target_id=parent)
            for node in self.nodes_by_id.values()
            for parent in node.parent_ids
            if parent in self._missing_set
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Edges and traversal
    # ─────────────────────────────────────────────────────────────────────────

    def iter_edges(self) -> Iterator[Edge]:
        """Iterate parent -> child edges whose endpoints both exist.

        Yields:
            Edge instances in index order, parents in declaration order.
        """
        for node in self.nodes_by_id.values():
            for parent in node.parent_ids:
                if parent in self.nodes_by_id:
                    yield Edge(source=parent, target=node.id)

    def edges(self) -> list[Edge]:
        """Return the edge list (computed on each call)."""
        return list(self.iter_edges())

    def walk(self, order: str = "pre") -> Iterator[MigrationNode]:
        """Iterate migrations reachable from the bases, each exactly once.

        Args:
            order: Traversal order:
                - "pre": depth-first, parent before children
                - "level": breadth-first from all bases

        Yields:
            MigrationNode instances in the specified order.
        """
        if order == "pre":
            yield from self._walk_preorder()
        elif order == "level":
            yield from self._walk_level()
        else:
            raise ValueError(f"Unknown traversal order: {order}")

    def _walk_preorder(self) -> Iterator[MigrationNode]:
        visited: set[str] = set()
        for base in self.bases:
            stack = [base]
            while stack:
                revision = stack.pop()
                if revision in visited or revision not in self.nodes_by_id:
                    continue
                visited.add(revision)
                yield self.nodes_by_id[revision]
                stack.extend(reversed(self.children_of(revision)))

    def _walk_level(self) -> Iterator[MigrationNode]:
        visited: set[str] = set(self.bases)
        queue: deque[str] = deque(self.bases)
        while queue:
            revision = queue.popleft()
            yield self.nodes_by_id[revision]
            for child in self.children_of(revision):
                if child not in visited and child in self.nodes_by_id:
                    visited.add(child)
                    queue.append(child)

    def ancestors(self, revision: str) -> set[str]:
        """Return every existing revision ``revision`` depends on, transitively."""
        seen: set[str] = set()
        queue: deque[str] = deque(self.parents_of(revision))
        while queue:
            parent = queue.popleft()
            if parent in seen or parent not in self.nodes_by_id:
                continue
            seen.add(parent)
            queue.extend(self.parents_of(parent))
        return seen

    def descendants(self, revision: str) -> set[str]:
        """Return every revision that depends on ``revision``, transitively."""
        seen: set[str] = set()
        queue: deque[str] = deque(self.children_of(revision))
        while queue:
            child = queue.popleft()
            if child in seen:
                continue
            seen.add(child)
            queue.extend(self.children_of(child))
        return seen

    def find_cycles(self) -> CycleInfo:
        """Detect revisions that depend on themselves. PURE - no mutation.

        Follows down_revision links between existing migrations with an
        iterative DFS, so long linear histories do not hit the recursion
        limit. A migration listing itself as parent is reported as the
        cycle ``[rev, rev]``.

        Returns:
            CycleInfo with cycle_members and cycle_paths.
        """
        on_stack = 1
        done = 2
        state: dict[str, int] = {}
        cycle_members: set[str] = set()
        cycle_paths: list[list[str]] = []

        def resolved_parents(revision: str) -> Iterator[str]:
            return (p for p in self.parents_of(revision) if p in self.nodes_by_id)

        for start in sorted(self.nodes_by_id):
            if start in state:
                continue

            state[start] = on_stack
            path = [start]
            stack = [(start, resolved_parents(start))]

            while stack:
                revision, parents = stack[-1]
                for parent in parents:
                    parent_state = state.get(parent)
                    if parent_state == on_stack:
                        cycle_start = path.index(parent)
                        cycle_paths.append(path[cycle_start:] + [parent])
                        cycle_members.update(path[cycle_start:])
                    elif parent_state is None:
                        state[parent] = on_stack
                        path.append(parent)
                        stack.append((parent, resolved_parents(parent)))
                        break
                else:
                    stack.pop()
                    path.pop()
                    state[revision] = done

        return CycleInfo(cycle_members=cycle_members, cycle_paths=cycle_paths)

    # ─────────────────────────────────────────────────────────────────────────
    # Reporting
    # ─────────────────────────────────────────────────────────────────────────

    def summary(self) -> GraphSummary:
        """Return the counts for this graph."""
        return GraphSummary(
            parsed=self.parsed_count,
            bases=len(self.bases),
            heads=len(self.heads),
            missing=len(self.missing_parents),
            duplicates=len(self.duplicates),
        )


class GraphBuilder:
    """Builder for constructing a MigrationGraph from parsed migrations.

    Usage:
        builder = GraphBuilder()
        for node in nodes:
            builder.add_node(node)
        graph = builder.build()

    The builder only collects; all indexing happens in build(), so the
    graph is computed from the complete node sequence in one pass.
    """

    def __init__(self) -> None:
        self._nodes: list[MigrationNode] = []

    def add_node(self, node: MigrationNode) -> GraphBuilder:
        """Add one parsed migration."""
        self._nodes.append(node)
        return self

    def add_nodes(self, nodes: Iterable[MigrationNode]) -> GraphBuilder:
        """Add parsed migrations in order."""
        self._nodes.extend(nodes)
        return self

    def build(self) -> MigrationGraph:
        """Build the complete graph.

        Returns:
            A new MigrationGraph.
        """
        nodes_by_id, duplicates = self._index()
        children_by_parent = self._invert(self._nodes)

        referenced_as_parent: set[str] = set()
        for node in nodes_by_id.values():
            referenced_as_parent.update(node.parent_ids)

        bases = sorted(rev for rev, node in nodes_by_id.items() if node.is_base)
        heads = sorted(rev for rev in nodes_by_id if rev not in referenced_as_parent)
        missing = sorted(rev for rev in referenced_as_parent if rev not in nodes_by_id)

        return MigrationGraph(
            nodes_by_id=nodes_by_id,
            children_by_parent=children_by_parent,
            bases=tuple(bases),
            heads=tuple(heads),
            missing_parents=tuple(missing),
            duplicates=tuple(duplicates),
            parsed_count=len(self._nodes),
        )

    def _index(self) -> tuple[dict[str, MigrationNode], list[DuplicateRevision]]:
        """Index nodes by revision, later declarations replacing earlier ones."""
        nodes_by_id: dict[str, MigrationNode] = {}
        discarded: dict[str, list[MigrationNode]] = {}

        for node in self._nodes:
            previous = nodes_by_id.get(node.id)
            if previous is not None:
                discarded.setdefault(node.id, []).append(previous)
            nodes_by_id[node.id] = node

        duplicates = [
            DuplicateRevision(
                revision=revision,
                kept_source=nodes_by_id[revision].source,
                discarded_source=old.source,
            )
            for revision in sorted(discarded)
            for old in discarded[revision]
        ]
        return nodes_by_id, duplicates

    @staticmethod
    def _invert(nodes: Iterable[MigrationNode]) -> dict[str, tuple[str, ...]]:
        """Build parent -> sorted, de-duplicated children.

        Every parsed node contributes, including declarations that a later
        duplicate replaced in the revision index.
        """
        children: dict[str, set[str]] = {}
        for node in nodes:
            for parent in node.parent_ids:
                children.setdefault(parent, set()).add(node.id)
        return {parent: tuple(sorted(kids)) for parent, kids in children.items()}


def build_graph(nodes: Iterable[MigrationNode]) -> MigrationGraph:
    """Build a MigrationGraph from a complete node sequence.

    Args:
        nodes: Parsed migrations, in scan order.

    Returns:
        A new MigrationGraph.
    """
    return GraphBuilder().add_nodes(nodes).build()


__all__ = ["GraphBuilder", "GraphSummary", "MigrationGraph", "build_graph"]
