"""Tests for ALEMBIC_TREE_* environment variable overrides."""

import os

import pytest

from alembic_tree.config import _apply_env_overrides, _try_parse_env_value, get_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in list(os.environ):
        if name.startswith("ALEMBIC_TREE_"):
            monkeypatch.delenv(name)


class TestTryParseEnvValue:
    @pytest.mark.parametrize("raw, expected", [("true", True), ("TRUE", True), ("False", False)])
    def test_booleans(self, raw, expected):
        assert _try_parse_env_value(raw) is expected

    def test_json_list(self):
        assert _try_parse_env_value('["*.py", "*.pyi"]') == ["*.py", "*.pyi"]

    def test_invalid_json_stays_string(self):
        assert _try_parse_env_value("[not json") == "[not json"

    def test_plain_string(self):
        assert _try_parse_env_value("db/versions") == "db/versions"


class TestApplyEnvOverrides:
    def test_section_and_key(self, monkeypatch):
        monkeypatch.setenv("ALEMBIC_TREE_MIGRATIONS_VERSIONS_PATH", "db/versions")

        config = _apply_env_overrides({"migrations": {"versions_path": "x"}})

        assert config["migrations"]["versions_path"] == "db/versions"

    def test_creates_missing_section(self, monkeypatch):
        monkeypatch.setenv("ALEMBIC_TREE_OUTPUT_FORMAT", "json")

        assert _apply_env_overrides({}) == {"output": {"format": "json"}}

    def test_boolean_value(self, monkeypatch):
        monkeypatch.setenv("ALEMBIC_TREE_MIGRATIONS_RECURSIVE", "false")

        config = _apply_env_overrides({"migrations": {"recursive": True}})

        assert config["migrations"]["recursive"] is False

    def test_name_without_key_ignored(self, monkeypatch):
        monkeypatch.setenv("ALEMBIC_TREE_MIGRATIONS", "x")

        assert _apply_env_overrides({}) == {}

    def test_unrelated_variables_ignored(self, monkeypatch):
        monkeypatch.setenv("OTHER_MIGRATIONS_VERSIONS_PATH", "x")

        assert _apply_env_overrides({}) == {}


def test_env_overrides_config_file(tmp_path, monkeypatch):
    path = tmp_path / ".alembic-tree.toml"
    path.write_text('[migrations]\nversions_path = "from/file"\n', encoding="utf-8")
    monkeypatch.setenv("ALEMBIC_TREE_MIGRATIONS_VERSIONS_PATH", "from/env")

    config = get_config(path, tmp_path)

    assert config["migrations"]["versions_path"] == "from/env"
