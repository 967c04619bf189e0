"""
alembic_tree.commands.analyze - Classification reports.

Implements the ``summary``, ``heads``, ``bases``, ``missing`` and ``check``
commands.
"""

import argparse
import json

from alembic_tree.commands.common import load_graph, node_tags
from alembic_tree.graph.builder import MigrationGraph


def run_summary(args: argparse.Namespace) -> int:
    """Print the rebuild counts plus duplicate and cycle findings."""
    graph = load_graph(args)
    summary = graph.summary()
    cycles = graph.find_cycles()

    if getattr(args, "json", False):
        data = {
            "parsed": summary.parsed,
            "bases": summary.bases,
            "heads": summary.heads,
            "missing": summary.missing,
            "merges": len(graph.merges()),
            "duplicates": summary.duplicates,
            "cycles": len(cycles.cycle_paths),
        }
        print(json.dumps(data, indent=2))
        return 0

    print("Migration Graph Summary")
    print("=" * 40)
    print(f"  Parsed:      {summary.parsed}")
    print(f"  Migrations:  {graph.node_count()}")
    print(f"  Bases:       {summary.bases}")
    print(f"  Heads:       {summary.heads}")
    print(f"  Merges:      {len(graph.merges())}")
    print(f"  Missing:     {summary.missing}")
    if summary.duplicates:
        print(f"  Duplicates:  {summary.duplicates}")
    if cycles.has_cycles():
        print(f"  Cycles:      {len(cycles.cycle_paths)}")
    return 0


def _print_revisions(
    graph: MigrationGraph, title: str, revisions, own_tag: str, as_json: bool
) -> None:
    if as_json:
        print(json.dumps(list(revisions)))
        return

    print(f"{title} ({len(revisions)}):")
    for revision in revisions:
        node = graph.find_by_id(revision)
        label = node.label if node else revision
        tags = [t for t in node_tags(graph, revision) if t != own_tag]
        suffix = f"  [{', '.join(tags)}]" if tags else ""
        print(f"  {label}{suffix}")


def run_heads(args: argparse.Namespace) -> int:
    """List head revisions."""
    graph = load_graph(args)
    _print_revisions(graph, "Heads", graph.heads, "head", getattr(args, "json", False))
    return 0


def run_bases(args: argparse.Namespace) -> int:
    """List base revisions."""
    graph = load_graph(args)
    _print_revisions(graph, "Bases", graph.bases, "base", getattr(args, "json", False))
    return 0


def run_missing(args: argparse.Namespace) -> int:
    """List missing parent revisions and the migrations referencing them."""
    graph = load_graph(args)

    if getattr(args, "json", False):
        data = {rev: list(graph.children_of(rev)) for rev in graph.missing_parents}
        print(json.dumps(data, indent=2))
        return 0

    if not graph.has_missing_parents():
        print("✓ No missing parent revisions")
        return 0

    print(f"Missing parent revisions ({len(graph.missing_parents)}):")
    print("-" * 40)
    for revision in graph.missing_parents:
        print(f"  {revision}")
        for child in graph.children_of(revision):
            node = graph.find_by_id(child)
            print(f"    referenced by {node.label if node else child}")
    return 0


def run_check(args: argparse.Namespace) -> int:
    """Exit non-zero when the graph has structural problems."""
    graph = load_graph(args)
    problems = find_problems(graph, single_head=getattr(args, "single_head", False))

    if not problems:
        if not getattr(args, "quiet", False):
            print(f"✓ {graph.summary()}")
        return 0

    for problem in problems:
        print(f"✗ {problem}")
    return 1


def find_problems(graph: MigrationGraph, single_head: bool = False) -> list:
    """Collect human-readable problem descriptions.

    Args:
        graph: The graph to check.
        single_head: Treat more than one head as a problem.

    Returns:
        List of problem strings, empty when the graph is clean.
    """
    problems = []
    for reference in graph.broken_references():
        problems.append(f"Missing parent: {reference}")
    for duplicate in graph.duplicates:
        problems.append(f"Duplicate revision {duplicate}")
    for path in graph.find_cycles().cycle_paths:
        problems.append(f"Cycle: {' -> '.join(path)}")
    if single_head and len(graph.heads) > 1:
        problems.append(f"Multiple heads: {', '.join(graph.heads)}")
    return problems
