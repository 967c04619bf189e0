"""
alembic_tree.cli - Command-line interface.

Main entry point for the alembic-tree CLI tool.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from alembic_tree import __version__
from alembic_tree.commands import analyze, export, init, show, tree
from alembic_tree.exceptions import AlembicTreeError


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="alembic-tree",
        description="Alembic migration graph analysis",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  alembic-tree summary                # Counts of migrations, bases, heads, missing
  alembic-tree tree                   # Revision tree from the bases
  alembic-tree heads                  # List head revisions
  alembic-tree missing                # Dangling down_revision references
  alembic-tree show ae1027a6acf       # One migration's details
  alembic-tree export --format json   # Full graph as JSON
  alembic-tree check --single-head    # Fail on missing/duplicate/cycles/branches

Configuration:
  alembic-tree init                   # Create .alembic-tree.toml in current directory

For detailed command help: alembic-tree <command> --help
        """,
    )

    # Global options
    parser.add_argument(
        "--version",
        action="version",
        version=f"alembic-tree {__version__}",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration file",
        metavar="PATH",
    )
    parser.add_argument(
        "--versions-dir",
        type=Path,
        help="Override migrations versions directory",
        metavar="PATH",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress non-error output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    summary_parser = subparsers.add_parser(
        "summary",
        help="Show migration, base, head and missing-parent counts",
    )
    summary_parser.add_argument("-j", "--json", action="store_true", help="Output JSON")

    tree_parser = subparsers.add_parser(
        "tree",
        help="Print the revision tree starting from the bases",
    )
    tree_parser.add_argument(
        "--files",
        action="store_true",
        help="Show the source file of each migration",
    )

    for name, help_text in (
        ("heads", "List head revisions"),
        ("bases", "List base revisions"),
        ("missing", "List missing parent revisions"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("-j", "--json", action="store_true", help="Output JSON")

    show_parser = subparsers.add_parser("show", help="Show one migration")
    show_parser.add_argument("revision", help="Revision identifier")
    show_parser.add_argument("-j", "--json", action="store_true", help="Output JSON")

    export_parser = subparsers.add_parser(
        "export",
        help="Export the graph",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Formats:
  json       Nodes, edges, classifications and counts
  elements   Node/edge elements for a graph viewer
  csv        Edge list (from,to)
  markdown   Migration table
""",
    )
    export_parser.add_argument(
        "--format",
        choices=["json", "elements", "csv", "markdown"],
        default="json",
        help="Output format (default: json)",
    )
    export_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Write to file instead of stdout",
        metavar="FILE",
    )

    check_parser = subparsers.add_parser(
        "check",
        help="Exit non-zero on missing parents, duplicates or cycles",
    )
    check_parser.add_argument(
        "--single-head",
        action="store_true",
        help="Also fail when there is more than one head",
    )

    init_parser = subparsers.add_parser("init", help="Create .alembic-tree.toml")
    init_parser.add_argument(
        "path",
        nargs="?",
        type=Path,
        help="Directory or file to create (default: current directory)",
    )
    init_parser.add_argument(
        "--versions-path",
        help="Versions directory to record (default: migrations/versions)",
    )
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing file",
    )

    return parser


class CLILogHandler(logging.StreamHandler):
    """stderr handler installed by configure_logging."""

    def __init__(self) -> None:
        super().__init__(sys.stderr)
        self.setFormatter(logging.Formatter("%(message)s"))


def configure_logging(verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """Send library diagnostics to stderr at the requested level.

    Only the ``alembic_tree`` package logger is configured; calling this
    again replaces the handler instead of adding a second one.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    logger = logging.getLogger("alembic_tree")
    for handler in list(logger.handlers):
        if isinstance(handler, CLILogHandler):
            logger.removeHandler(handler)

    logger.addHandler(CLILogHandler())
    logger.setLevel(level)
    return logger


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()

    # Enable shell tab-completion if argcomplete is installed
    # Install with: pip install alembic-tree[completion]
    try:
        import argcomplete

        argcomplete.autocomplete(parser)
    except ImportError:
        pass

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    configure_logging(args.verbose, args.quiet)

    try:
        if args.command == "summary":
            return analyze.run_summary(args)
        elif args.command == "tree":
            return tree.run(args)
        elif args.command == "heads":
            return analyze.run_heads(args)
        elif args.command == "bases":
            return analyze.run_bases(args)
        elif args.command == "missing":
            return analyze.run_missing(args)
        elif args.command == "show":
            return show.run(args)
        elif args.command == "export":
            return export.run(args)
        elif args.command == "check":
            return analyze.run_check(args)
        elif args.command == "init":
            return init.run(args)
        else:
            parser.print_help()
            return 1
    except KeyboardInterrupt:
        print("\nOperation cancelled.", file=sys.stderr)
        return 130
    except AlembicTreeError as e:
        if args.verbose:
            raise
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
