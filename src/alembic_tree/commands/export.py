"""
alembic_tree.commands.export - Export the graph to JSON, CSV or markdown.
"""

import argparse
import json
import sys

from alembic_tree.commands.common import load_graph
from alembic_tree.graph.serialize import serialize_graph, to_csv, to_elements, to_markdown


def run(args: argparse.Namespace) -> int:
    """Run the export command."""
    graph = load_graph(args)
    fmt = args.format

    if fmt == "json":
        content = json.dumps(serialize_graph(graph), indent=2) + "\n"
    elif fmt == "elements":
        content = json.dumps(to_elements(graph), indent=2) + "\n"
    elif fmt == "csv":
        content = to_csv(graph)
    elif fmt == "markdown":
        content = to_markdown(graph)
    else:
        print(f"Unknown format: {fmt}", file=sys.stderr)
        return 1

    if args.output:
        args.output.write_text(content, encoding="utf-8")
        if not getattr(args, "quiet", False):
            print(f"Wrote {args.output}")
    else:
        sys.stdout.write(content)
    return 0
