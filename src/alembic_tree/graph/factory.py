"""Graph Factory - Shared utility for building a MigrationGraph from disk.

This module provides a single entry point for all commands to build a
MigrationGraph from configuration and a versions directory. Commands should
use this instead of implementing their own file reading logic.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from alembic_tree.config import get_config, get_versions_directory
from alembic_tree.exceptions import ScanError
from alembic_tree.graph.builder import MigrationGraph, build_graph
from alembic_tree.graph.deserializer import MigrationDirectory, deserialize
from alembic_tree.graph.MigrationNode import MigrationNode
from alembic_tree.graph.parsers.migration import MigrationParser

logger = logging.getLogger(__name__)


def scan_migrations(
    source: MigrationDirectory, parser: MigrationParser | None = None
) -> list[MigrationNode]:
    """Read and parse every migration file of a directory.

    Args:
        source: The directory source to scan.
        parser: Parser to use (optional).

    Returns:
        Parsed nodes in sorted file order.

    Raises:
        ScanError: If the directory does not exist.
    """
    if not source.path.exists():
        raise ScanError(f"Versions directory not found: {source.path}")

    logger.info("Scanning %s", source.path)
    nodes = list(deserialize(source, parser))
    logger.debug("Parsed %d migration(s)", len(nodes))
    return nodes


def log_graph_diagnostics(graph: MigrationGraph) -> None:
    """Log the rebuild summary and any anomalies worth surfacing."""
    for duplicate in graph.duplicates:
        logger.warning("Duplicate revision %s", duplicate)
    for reference in graph.broken_references():
        logger.debug("Missing parent: %s", reference)
    logger.info("%s", graph.summary())


def build_graph_from_config(
    config: dict[str, Any] | None = None,
    repo_root: Path | None = None,
    versions_dir: Path | None = None,
    config_path: Path | None = None,
) -> MigrationGraph:
    """Build a MigrationGraph from the configured versions directory.

    This is the standard way for commands to obtain a MigrationGraph.
    It handles:
    - Configuration loading (auto-discovery or explicit)
    - Versions directory resolution
    - File discovery, reading and parsing
    - Graph construction and summary logging

    Args:
        config: Pre-loaded config dict (optional).
        repo_root: Repository root for relative paths (defaults to cwd).
        versions_dir: Explicit versions directory (optional).
        config_path: Path to config file (optional).

    Returns:
        Complete MigrationGraph.

    Priority:
        versions_dir > config > config_path > defaults
    """
    if repo_root is None:
        repo_root = Path.cwd()

    if config is None:
        config = get_config(config_path, repo_root)

    directory = get_versions_directory(config, repo_root, versions_dir)
    source = MigrationDirectory.from_config(directory, config)

    graph = build_graph(scan_migrations(source))
    log_graph_diagnostics(graph)
    return graph


__all__ = ["build_graph_from_config", "log_graph_diagnostics", "scan_migrations"]
