"""
alembic_tree.commands.common - Helpers shared by CLI commands.
"""

import argparse
from pathlib import Path

from alembic_tree.graph.builder import MigrationGraph
from alembic_tree.graph.factory import build_graph_from_config


def load_graph(args: argparse.Namespace) -> MigrationGraph:
    """Build the graph using the global --config / --versions-dir options."""
    return build_graph_from_config(
        repo_root=Path.cwd(),
        versions_dir=getattr(args, "versions_dir", None),
        config_path=getattr(args, "config", None),
    )


def node_tags(graph: MigrationGraph, revision: str) -> list[str]:
    """Return the classification tags shown next to a revision."""
    tags = []
    if graph.is_base(revision):
        tags.append("base")
    if graph.is_merge(revision):
        tags.append("merge")
    if graph.is_head(revision):
        tags.append("head")
    if graph.is_missing(revision):
        tags.append("missing")
    return tags
