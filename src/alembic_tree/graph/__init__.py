"""Graph module - Migration graph data structures.

Exports:
- MigrationNode: One parsed migration
- Edge: Parent -> child edge between existing migrations
- BrokenReference: Reference to a revision that was not found (detection)
- DuplicateRevision: Revision declared by more than one file (detection)
- CycleInfo: Cycle detection results
- MigrationGraph, GraphBuilder, GraphSummary, build_graph

Note: to build from disk use graph.factory.build_graph_from_config()
"""

from alembic_tree.graph.builder import GraphBuilder, GraphSummary, MigrationGraph, build_graph
from alembic_tree.graph.diagnostics import BrokenReference, CycleInfo, DuplicateRevision
from alembic_tree.graph.MigrationNode import MigrationNode, make_label
from alembic_tree.graph.relations import Edge

__all__ = [
    "MigrationNode",
    "make_label",
    "Edge",
    "BrokenReference",
    "CycleInfo",
    "DuplicateRevision",
    "GraphBuilder",
    "GraphSummary",
    "MigrationGraph",
    "build_graph",
]
