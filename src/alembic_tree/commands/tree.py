"""
alembic_tree.commands.tree - Print the revision tree.

Bases are the roots; each migration is listed under every parent it
declares, so a merge appears once per branch. The first occurrence is
expanded, later ones are marked and not repeated. Missing parents are
listed first so migrations hanging off them remain visible.
"""

import argparse
from typing import List, Set

from alembic_tree.commands.common import load_graph
from alembic_tree.graph.builder import MigrationGraph


def run(args: argparse.Namespace) -> int:
    """Run the tree command."""
    graph = load_graph(args)

    if graph.node_count() == 0:
        print("No migrations found")
        return 0

    for line in render_tree(graph, show_files=getattr(args, "files", False)):
        print(line)
    return 0


def render_tree(graph: MigrationGraph, show_files: bool = False) -> List[str]:
    """Render the graph as indented text lines.

    Args:
        graph: The graph to render.
        show_files: Append each migration's source path.

    Returns:
        Lines of the tree, without trailing newlines.
    """
    lines: List[str] = []
    printed: Set[str] = set()

    def describe(revision: str) -> str:
        node = graph.find_by_id(revision)
        if node is None:
            return f"{revision} (not found)"
        text = node.label
        if node.is_merge:
            text += " [merge]"
        if graph.is_head(revision):
            text += " [head]"
        if show_files and node.source:
            text += f"  {node.source}"
        return text

    def print_tree(root: str, root_indent: int) -> None:
        # Explicit stack: linear histories can be thousands of revisions deep
        stack = [(root, root_indent)]
        while stack:
            revision, indent = stack.pop()
            prefix = "  " * indent
            if revision in printed:
                lines.append(f"{prefix}{revision} (see above)")
                continue
            printed.add(revision)
            lines.append(f"{prefix}{describe(revision)}")

            children = sorted(
                graph.children_of(revision),
                key=lambda rev: graph.find_by_id(rev).label,
            )
            # A single child continues the current branch at the same depth
            child_indent = indent if len(children) == 1 else indent + 1
            for child in reversed(children):
                stack.append((child, child_indent))

    if graph.has_missing_parents():
        lines.append(f"Missing parent revisions ({len(graph.missing_parents)})")
        for revision in graph.missing_parents:
            print_tree(revision, 1)
        lines.append("")

    for revision in graph.bases:
        print_tree(revision, 0)

    unreachable = sorted(rev for rev in graph.nodes_by_id if rev not in printed)
    if unreachable:
        lines.append("")
        lines.append(f"Unreachable from any base ({len(unreachable)})")
        for revision in unreachable:
            if revision not in printed:
                print_tree(revision, 1)

    return lines
