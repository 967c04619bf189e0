"""Graph Serialization - Export MigrationGraph to various formats.

This module provides functions to serialize MigrationGraph and
MigrationNode to JSON-compatible dicts, graph-viewer elements, markdown,
and CSV formats.
"""

from __future__ import annotations

import csv
import io
from pathlib import PurePath
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from alembic_tree.graph.builder import MigrationGraph
    from alembic_tree.graph.MigrationNode import MigrationNode


def serialize_node(node: MigrationNode) -> dict[str, Any]:
    """Serialize a MigrationNode to a JSON-compatible dict.

    Args:
        node: The node to serialize.

    Returns:
        Dict with id, parent_ids, source and label.
    """
    return {
        "id": node.id,
        "parent_ids": list(node.parent_ids),
        "source": node.source,
        "label": node.label,
    }


def serialize_graph(graph: MigrationGraph) -> dict[str, Any]:
    """Serialize a MigrationGraph to a JSON-compatible dict.

    Args:
        graph: The graph to serialize.

    Returns:
        Dict with nodes, edges, classifications and metadata.
    """
    nodes = {}
    for node in graph.all_nodes():
        data = serialize_node(node)
        data["children"] = list(graph.children_of(node.id))
        data["is_base"] = graph.is_base(node.id)
        data["is_head"] = graph.is_head(node.id)
        data["is_merge"] = node.is_merge
        nodes[node.id] = data

    summary = graph.summary()
    return {
        "nodes": nodes,
        "edges": [edge.to_dict() for edge in graph.iter_edges()],
        "bases": list(graph.bases),
        "heads": list(graph.heads),
        "merges": graph.merges(),
        "missing_parents": list(graph.missing_parents),
        "duplicates": [
            {
                "revision": d.revision,
                "kept_source": d.kept_source,
                "discarded_source": d.discarded_source,
            }
            for d in graph.duplicates
        ],
        "metadata": {
            "node_count": graph.node_count(),
            "parsed_count": summary.parsed,
            "base_count": summary.bases,
            "head_count": summary.heads,
            "missing_count": summary.missing,
        },
    }


def pretty_slug(source: str) -> str:
    """Turn ``versions/ab12_add_users.py`` into ``ab12 add users``."""
    return PurePath(source).stem.replace("_", " ")


def to_elements(graph: MigrationGraph) -> list[dict[str, Any]]:
    """Build node and edge elements for a graph viewer.

    Node ids are prefixed with ``rev:``; edges are only emitted when both
    endpoints are present.

    Args:
        graph: The graph to convert.

    Returns:
        List of ``{"data": {...}}`` element dicts, nodes first.
    """
    elements: list[dict[str, Any]] = []

    for node in graph.all_nodes():
        elements.append(
            {
                "data": {
                    "id": f"rev:{node.id}",
                    "rev": node.id,
                    "label": f"{node.id}\n({pretty_slug(node.source)})",
                    "fullLabel": node.label,
                    "filePath": node.source,
                    "isBase": graph.is_base(node.id),
                    "isHead": graph.is_head(node.id),
                    "isMerge": node.is_merge,
                }
            }
        )

    for edge in graph.iter_edges():
        elements.append(
            {
                "data": {
                    "id": f"edge:{edge.source}->{edge.target}",
                    "source": f"rev:{edge.source}",
                    "target": f"rev:{edge.target}",
                }
            }
        )

    return elements


def to_markdown(graph: MigrationGraph) -> str:
    """Generate a markdown table of migrations.

    Args:
        graph: The MigrationGraph to render.

    Returns:
        Markdown string, one row per migration in walk order, then any
        migrations not reachable from a base.
    """
    lines = [
        "# Migrations",
        "",
        "| Revision | Down revision | Kind | File |",
        "|----------|---------------|------|------|",
    ]

    ordered = list(graph.walk())
    seen = {node.id for node in ordered}
    ordered.extend(node for node in graph.all_nodes() if node.id not in seen)

    for node in ordered:
        kinds = []
        if node.is_base:
            kinds.append("base")
        if node.is_merge:
            kinds.append("merge")
        if graph.is_head(node.id):
            kinds.append("head")
        down = ", ".join(node.parent_ids) or "-"
        lines.append(f"| {node.id} | {down} | {', '.join(kinds)} | {node.source} |")

    if graph.missing_parents:
        lines.extend(["", "## Missing parents", ""])
        for revision in graph.missing_parents:
            referenced_by = ", ".join(graph.children_of(revision))
            lines.append(f"- {revision} (referenced by {referenced_by})")

    return "\n".join(lines) + "\n"


def to_csv(graph: MigrationGraph) -> str:
    """Generate the edge list as CSV.

    Args:
        graph: The MigrationGraph to export.

    Returns:
        CSV string with ``from,to`` header.
    """
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(["from", "to"])
    for edge in graph.iter_edges():
        writer.writerow([edge.source, edge.target])
    return output.getvalue()


__all__ = [
    "pretty_slug",
    "serialize_graph",
    "serialize_node",
    "to_csv",
    "to_elements",
    "to_markdown",
]
