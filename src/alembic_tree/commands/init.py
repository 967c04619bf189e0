"""
alembic_tree.commands.init - Create a starter configuration file.
"""

import argparse
from pathlib import Path

from alembic_tree.config import init_config


def run(args: argparse.Namespace) -> int:
    """Run the init command."""
    target = args.path or Path.cwd()
    path = init_config(target, versions_path=args.versions_path, force=args.force)
    print(f"Created {path}")
    return 0
