"""
alembic_tree.commands.show - Show one migration.
"""

import argparse
import json
import sys

from alembic_tree.commands.common import load_graph, node_tags
from alembic_tree.graph.serialize import serialize_node


def run(args: argparse.Namespace) -> int:
    """Run the show command."""
    graph = load_graph(args)
    revision = args.revision
    node = graph.find_by_id(revision)

    if node is None:
        if graph.is_missing(revision):
            referenced_by = ", ".join(graph.children_of(revision))
            print(
                f"Revision {revision} not found (referenced by {referenced_by})",
                file=sys.stderr,
            )
        else:
            print(f"Revision {revision} not found", file=sys.stderr)
        return 1

    if getattr(args, "json", False):
        data = serialize_node(node)
        data["children"] = list(graph.children_of(revision))
        data["tags"] = node_tags(graph, revision)
        print(json.dumps(data, indent=2))
        return 0

    print(node.label)
    print(f"  File:     {node.source}")
    print(f"  Down:     {', '.join(node.parent_ids) or '(base)'}")
    print(f"  Children: {', '.join(graph.children_of(revision)) or '(none)'}")
    tags = node_tags(graph, revision)
    if tags:
        print(f"  Tags:     {', '.join(tags)}")
    missing = [p for p in node.parent_ids if graph.is_missing(p)]
    if missing:
        print(f"  Missing:  {', '.join(missing)}")
    return 0
