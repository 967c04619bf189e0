"""
alembic-tree - Alembic migration graph analysis

alembic-tree reads the revision files of an Alembic versions directory,
reconstructs the revision DAG and reports its bases, heads, merges and
dangling down_revision references.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("alembic-tree")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"  # Not installed
__license__ = "MIT"

from alembic_tree.graph import (
    Edge,
    GraphBuilder,
    GraphSummary,
    MigrationGraph,
    MigrationNode,
    build_graph,
)
from alembic_tree.graph.parsers.migration import MigrationParser, parse_migration

__all__ = [
    "__version__",
    "Edge",
    "GraphBuilder",
    "GraphSummary",
    "MigrationGraph",
    "MigrationNode",
    "MigrationParser",
    "build_graph",
    "parse_migration",
]
