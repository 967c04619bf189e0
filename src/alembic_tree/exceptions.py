"""
alembic_tree.exceptions - Errors raised by collaborators around the graph engine.

The parser and graph engine never raise; these cover misconfiguration only.
"""


class AlembicTreeError(Exception):
    """Base class for alembic-tree errors."""


class ConfigError(AlembicTreeError):
    """Configuration file could not be read or parsed."""


class ScanError(AlembicTreeError):
    """Migration directory could not be scanned."""


__all__ = ["AlembicTreeError", "ConfigError", "ScanError"]
