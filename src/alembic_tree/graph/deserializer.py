"""Migration sources - Iterates raw migration text for the parser.

This module provides the collaborators that supply ``(context, text)``
pairs: MigrationDirectory for a versions directory on disk and
MigrationText for in-memory content (stdin, tests).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, Protocol, runtime_checkable

from alembic_tree.graph.MigrationNode import MigrationNode
from alembic_tree.graph.parsers.migration import MigrationParser

logger = logging.getLogger(__name__)


@dataclass
class SourceContext:
    """Context for a source being read.

    Attributes:
        source_type: Type of source ("file", "stdin").
        source_id: Identifier for the source (file path, etc.).
        metadata: Additional metadata about the source.
    """

    source_type: str
    source_id: str
    metadata: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class MigrationSource(Protocol):
    """Protocol for migration sources."""

    def iterate_sources(self) -> Iterator[tuple[SourceContext, str]]:
        """Iterate over sources, yielding context and content."""
        ...


def deserialize(
    source: MigrationSource, parser: MigrationParser | None = None
) -> Iterator[MigrationNode]:
    """Parse every blob of a source, skipping blobs without a revision.

    Args:
        source: Where to read migration text from.
        parser: Parser to use (default: a new MigrationParser).

    Yields:
        MigrationNode for each blob that declares a revision.
    """
    parser = parser or MigrationParser()
    for ctx, content in source.iterate_sources():
        node = parser.parse(content, ctx.source_id)
        if node is None:
            logger.debug("Skipped (no revision): %s", ctx.source_id)
            continue
        yield node


class MigrationDirectory:
    """Source for a directory of migration files (or a single file).

    Files are yielded in sorted path order so repeated scans of the same
    tree produce the same node sequence. Unreadable files are logged and
    skipped.
    """

    def __init__(
        self,
        path: Path | str,
        patterns: list[str] | None = None,
        recursive: bool = True,
        skip_dirs: list[str] | None = None,
        skip_files: list[str] | None = None,
    ) -> None:
        """Initialize the directory source.

        Args:
            path: Path to a versions directory or a single file.
            patterns: Glob patterns (default: ["*.py"]).
            recursive: Whether to search subdirectories.
            skip_dirs: Directory names to skip (default: ["__pycache__"]).
            skip_files: File names to skip (e.g., ["__init__.py"]).
        """
        self.path = Path(path)
        self.patterns = patterns or ["*.py"]
        self.recursive = recursive
        self.skip_dirs = ["__pycache__"] if skip_dirs is None else skip_dirs
        self.skip_files = skip_files or []

    @classmethod
    def from_config(cls, path: Path, config: dict[str, Any]) -> MigrationDirectory:
        """Create a source using the ``[migrations]`` settings."""
        settings = config.get("migrations", {})
        return cls(
            path,
            patterns=settings.get("patterns"),
            recursive=settings.get("recursive", True),
            skip_dirs=settings.get("skip_dirs"),
            skip_files=settings.get("skip_files"),
        )

    def _should_skip(self, file_path: Path) -> bool:
        """Check if a file should be skipped based on skip_dirs and skip_files."""
        if file_path.name in self.skip_files:
            return True

        try:
            rel_path = file_path.relative_to(self.path)
        except ValueError:
            rel_path = file_path
        return any(part in self.skip_dirs for part in rel_path.parts[:-1])

    def iter_files(self) -> list[Path]:
        """Return matching files, sorted and de-duplicated across patterns."""
        if self.path.is_file():
            return [] if self._should_skip(self.path) else [self.path]
        if not self.path.is_dir():
            return []

        found: set[Path] = set()
        for pattern in self.patterns:
            file_iter = self.path.rglob(pattern) if self.recursive else self.path.glob(pattern)
            for file_path in file_iter:
                if file_path.is_file() and not self._should_skip(file_path):
                    found.add(file_path)
        return sorted(found)

    def iterate_sources(self) -> Iterator[tuple[SourceContext, str]]:
        """Iterate over file sources.

        Yields:
            Tuples of (SourceContext, file_content).
        """
        for file_path in self.iter_files():
            try:
                content = file_path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("Failed to read %s: %s", file_path, e)
                continue
            ctx = SourceContext(
                source_type="file",
                source_id=str(file_path),
                metadata={"path": file_path},
            )
            yield ctx, content


class MigrationText:
    """Source for in-memory migration text."""

    def __init__(self, blobs: list[tuple[str, str]]) -> None:
        """Initialize the in-memory source.

        Args:
            blobs: ``(text, source_id)`` pairs.
        """
        self.blobs = blobs

    def iterate_sources(self) -> Iterator[tuple[SourceContext, str]]:
        """Yield each blob with a "stdin" context."""
        for text, source_id in self.blobs:
            yield SourceContext(source_type="stdin", source_id=source_id), text


__all__ = [
    "MigrationDirectory",
    "MigrationSource",
    "MigrationText",
    "SourceContext",
    "deserialize",
]
