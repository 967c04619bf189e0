"""
alembic_tree.config - Configuration loading and defaults

Configuration lives in ``.alembic-tree.toml`` (searched upward from the
working directory) or in a ``[tool.alembic-tree]`` table of
``pyproject.toml``. Values can be overridden with ``ALEMBIC_TREE_*``
environment variables.
"""

from __future__ import annotations

import copy
import json
import os
from pathlib import Path
from typing import Any

import tomlkit
from tomlkit.exceptions import TOMLKitError

from alembic_tree.exceptions import ConfigError

CONFIG_FILENAME = ".alembic-tree.toml"
PYPROJECT_FILENAME = "pyproject.toml"
PYPROJECT_TABLE = "alembic-tree"
ENV_PREFIX = "ALEMBIC_TREE_"

DEFAULT_CONFIG: dict[str, Any] = {
    "project": {
        "name": "",
    },
    "migrations": {
        "versions_path": "migrations/versions",
        "patterns": ["*.py"],
        "recursive": True,
        "skip_dirs": ["__pycache__"],
        "skip_files": [],
    },
    "output": {
        "format": "text",
    },
}


def parse_toml(content: str) -> dict[str, Any]:
    """Parse TOML text into plain Python values (dicts, lists, str, ...).

    Raises:
        ConfigError: If the text is not valid TOML.
    """
    try:
        return tomlkit.parse(content).unwrap()
    except TOMLKitError as e:
        raise ConfigError(f"Invalid TOML: {e}") from e


def merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge ``override`` into a copy of ``base``.

    Nested tables are merged key by key; any other value in ``override``
    replaces the base value.
    """
    result = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def find_config_file(start: Path) -> Path | None:
    """Find the nearest configuration file at or above ``start``.

    ``.alembic-tree.toml`` wins over ``pyproject.toml`` in the same
    directory; a pyproject only counts when it has a
    ``[tool.alembic-tree]`` table.

    Args:
        start: Directory to start searching from.

    Returns:
        Path to the config file, or None if not found.
    """
    current = start.resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate

        pyproject = current / PYPROJECT_FILENAME
        if pyproject.is_file() and _pyproject_has_table(pyproject):
            return pyproject

        if current == current.parent:
            return None
        current = current.parent


def _pyproject_has_table(path: Path) -> bool:
    try:
        data = parse_toml(path.read_text(encoding="utf-8"))
    except (OSError, ConfigError):
        return False
    return PYPROJECT_TABLE in data.get("tool", {})


def load_config(config_path: Path) -> dict[str, Any]:
    """Load a configuration file merged over DEFAULT_CONFIG.

    Args:
        config_path: Path to ``.alembic-tree.toml`` or ``pyproject.toml``.

    Returns:
        Complete configuration dict.

    Raises:
        ConfigError: If the file cannot be read or is not valid TOML.
    """
    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read config file {config_path}: {e}") from e

    data = parse_toml(content)
    if config_path.name == PYPROJECT_FILENAME:
        data = data.get("tool", {}).get(PYPROJECT_TABLE, {})

    return merge_configs(DEFAULT_CONFIG, data)


def _try_parse_env_value(value: str) -> Any:
    """Parse an environment variable value.

    JSON arrays and objects become lists and dicts, ``true``/``false``
    (any case) become booleans, anything else stays a string.
    """
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    if value.startswith(("[", "{")):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value
    return value


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """Apply ``ALEMBIC_TREE_<SECTION>_<KEY>`` overrides in place.

    The section is the first underscore-separated word; the rest, lowercased,
    is the key (``ALEMBIC_TREE_MIGRATIONS_VERSIONS_PATH`` sets
    ``migrations.versions_path``).
    """
    for name, raw in os.environ.items():
        if not name.startswith(ENV_PREFIX):
            continue
        remainder = name[len(ENV_PREFIX) :].lower()
        if "_" not in remainder:
            continue
        section, key = remainder.split("_", 1)
        table = config.setdefault(section, {})
        if isinstance(table, dict):
            table[key] = _try_parse_env_value(raw)
    return config


def get_config(config_path: Path | None = None, repo_root: Path | None = None) -> dict[str, Any]:
    """Resolve the effective configuration.

    Priority: explicit ``config_path`` > discovered file > defaults, with
    environment overrides applied last.

    Args:
        config_path: Explicit config file (optional).
        repo_root: Directory to start discovery from (defaults to cwd).

    Returns:
        Complete configuration dict.
    """
    if config_path is None:
        config_path = find_config_file(repo_root or Path.cwd())

    if config_path is not None:
        config = load_config(config_path)
    else:
        config = copy.deepcopy(DEFAULT_CONFIG)

    return _apply_env_overrides(config)


def get_versions_directory(
    config: dict[str, Any],
    repo_root: Path,
    override: Path | None = None,
) -> Path:
    """Resolve the migration versions directory.

    Args:
        config: Configuration dict.
        repo_root: Base for relative paths.
        override: Explicit directory (e.g. from ``--versions-dir``).

    Returns:
        Absolute path of the versions directory (may not exist).
    """
    if override is not None:
        path = override
    else:
        path = Path(config.get("migrations", {}).get("versions_path", "migrations/versions"))
    if not path.is_absolute():
        path = repo_root / path
    return path


def init_config(path: Path, versions_path: str | None = None, force: bool = False) -> Path:
    """Write a starter ``.alembic-tree.toml``.

    Args:
        path: Target file, or a directory to create it in.
        versions_path: Value for ``migrations.versions_path``.
        force: Overwrite an existing file.

    Returns:
        Path of the written file.

    Raises:
        ConfigError: If the file exists and ``force`` is not set.
    """
    if path.is_dir():
        path = path / CONFIG_FILENAME
    if path.exists() and not force:
        raise ConfigError(f"{path} already exists (use --force to overwrite)")

    migrations = DEFAULT_CONFIG["migrations"]
    doc = tomlkit.document()
    doc.add(tomlkit.comment("alembic-tree configuration"))
    doc.add(tomlkit.nl())

    project = tomlkit.table()
    project.add("name", path.resolve().parent.name)
    doc.add("project", project)

    table = tomlkit.table()
    table.add("versions_path", versions_path or migrations["versions_path"])
    table["versions_path"].comment("Directory holding Alembic revision files")
    table.add("patterns", migrations["patterns"])
    table.add("recursive", migrations["recursive"])
    table.add("skip_dirs", migrations["skip_dirs"])
    table.add("skip_files", migrations["skip_files"])
    doc.add("migrations", table)

    path.write_text(tomlkit.dumps(doc), encoding="utf-8")
    return path


__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_CONFIG",
    "find_config_file",
    "get_config",
    "get_versions_directory",
    "init_config",
    "load_config",
    "merge_configs",
    "parse_toml",
]
