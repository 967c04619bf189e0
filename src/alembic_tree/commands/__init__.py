"""
alembic_tree.commands - CLI command implementations
"""

__all__ = [
    "analyze",
    "common",
    "export",
    "init",
    "show",
    "tree",
]
