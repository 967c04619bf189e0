"""
alembic_tree.workspace - Cached migration graph for long-lived callers.

Editor integrations and servers ask for the graph repeatedly. The workspace
rebuilds it only when forced or when migration files were added, removed or
modified since the last build, and publishes each new graph with a single
reference swap so readers never see a half-built state.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from alembic_tree.config import get_config, get_versions_directory
from alembic_tree.graph.builder import MigrationGraph, build_graph
from alembic_tree.graph.deserializer import MigrationDirectory
from alembic_tree.graph.factory import log_graph_diagnostics, scan_migrations

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GraphState:
    """A published graph together with what it was built from.

    Attributes:
        graph: The built MigrationGraph.
        file_stamps: ``(mtime_ns, size)`` of every scanned file at build time.
        built_at: Unix timestamp of the build.
    """

    graph: MigrationGraph
    file_stamps: dict[Path, tuple[int, int]]
    built_at: float


@dataclass
class MigrationWorkspace:
    """Manages the migration graph for one versions directory.

    Attributes:
        versions_dir: Directory holding the migration files.
        config: Configuration dict (scan settings).
    """

    versions_dir: Path
    config: dict[str, Any] = field(default_factory=dict)
    _state: GraphState | None = field(default=None, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    @classmethod
    def from_directory(
        cls, directory: Path, versions_dir: Path | None = None
    ) -> MigrationWorkspace:
        """Initialize a workspace from a project directory.

        Loads configuration from ``.alembic-tree.toml`` if found.

        Args:
            directory: Project directory.
            versions_dir: Explicit versions directory (optional).

        Returns:
            Initialized MigrationWorkspace.
        """
        directory = directory.resolve()
        config = get_config(None, directory)
        return cls(
            versions_dir=get_versions_directory(config, directory, versions_dir),
            config=config,
        )

    def _source(self) -> MigrationDirectory:
        return MigrationDirectory.from_config(self.versions_dir, self.config)

    def get_graph(self, force_refresh: bool = False) -> MigrationGraph:
        """Get the migration graph, rebuilding it if needed.

        The graph is rebuilt if:
        - No graph has been built yet
        - force_refresh=True is passed
        - Any migration file was added, removed or modified since last build

        Args:
            force_refresh: If True, ignore the cached graph.

        Returns:
            The current MigrationGraph.
        """
        state = self._state
        if state is None or force_refresh or self.is_graph_stale():
            state = self.refresh()
        return state.graph

    def refresh(self) -> GraphState:
        """Rescan the versions directory and publish a new graph."""
        with self._lock:
            source = self._source()
            file_stamps = self._current_stamps(source)
            graph = build_graph(scan_migrations(source))
            log_graph_diagnostics(graph)
            state = GraphState(graph=graph, file_stamps=file_stamps, built_at=time.time())
            self._state = state
        return state

    def invalidate(self) -> None:
        """Drop the cached graph; the next get_graph() rebuilds."""
        self._state = None

    def is_graph_stale(self) -> bool:
        """Check if the cached graph no longer matches the files on disk."""
        return bool(self.get_stale_files()) or self._state is None

    def get_stale_files(self) -> list[Path]:
        """Get files added, removed or modified since the last build.

        Returns:
            Sorted list of stale paths (empty when nothing was built yet).
        """
        state = self._state
        if state is None:
            return []

        current = self._current_stamps(self._source())
        stale = {
            path
            for path, stamp in state.file_stamps.items()
            if current.get(path) != stamp
        }
        stale.update(path for path in current if path not in state.file_stamps)
        return sorted(stale)

    def get_graph_built_at(self) -> float | None:
        """Get the timestamp of the last build, or None if never built."""
        state = self._state
        return state.built_at if state else None

    @staticmethod
    def _current_stamps(source: MigrationDirectory) -> dict[Path, tuple[int, int]]:
        stamps: dict[Path, tuple[int, int]] = {}
        for path in source.iter_files():
            try:
                stat = path.stat()
                stamps[path] = (stat.st_mtime_ns, stat.st_size)
            except OSError:
                # Vanished between listing and stat
                continue
        return stamps


__all__ = ["GraphState", "MigrationWorkspace"]
