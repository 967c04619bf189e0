"""Tests for the tree command renderer."""

import argparse

from alembic_tree.commands import tree
from alembic_tree.commands.tree import render_tree
from tests.core.graph_test_helpers import graph_of, write_migration


class TestRenderTree:
    def test_branches_merge_and_missing(self):
        graph = graph_of(
            "a1",
            ("b2", ["a1"]),
            ("x9", ["a1"]),
            ("c3", ["b2", "x9"]),
            ("d4", ["zzz"]),
        )

        assert render_tree(graph) == [
            "Missing parent revisions (1)",
            "  zzz (not found)",
            "  d4 (d4_migration) [head]",
            "",
            "a1 (a1_migration)",
            "  b2 (b2_migration)",
            "  c3 (c3_migration) [merge] [head]",
            "  x9 (x9_migration)",
            "  c3 (see above)",
        ]

    def test_linear_chain_stays_flat(self):
        graph = graph_of("a1", ("b2", ["a1"]), ("c3", ["b2"]))

        assert render_tree(graph) == [
            "a1 (a1_migration)",
            "b2 (b2_migration)",
            "c3 (c3_migration) [head]",
        ]

    def test_show_files(self):
        graph = graph_of("a1")

        assert render_tree(graph, show_files=True) == [
            "a1 (a1_migration) [head]  versions/a1_migration.py"
        ]

    def test_cycle_listed_as_unreachable(self):
        graph = graph_of(("a", ["b"]), ("b", ["a"]))

        assert render_tree(graph) == [
            "",
            "Unreachable from any base (2)",
            "  a (a_migration)",
            "  b (b_migration)",
            "  a (see above)",
        ]

    def test_deep_history(self):
        chain = ["r0"] + [(f"r{i}", [f"r{i - 1}"]) for i in range(1, 3000)]

        lines = render_tree(graph_of(*chain))

        assert len(lines) == 3000


class TestRun:
    def test_empty_directory(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        args = argparse.Namespace(versions_dir=tmp_path, config=None, files=False)

        assert tree.run(args) == 0
        assert "No migrations found" in capsys.readouterr().out

    def test_prints_tree(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        write_migration(tmp_path, "a1_initial.py", "a1")
        write_migration(tmp_path, "b2_users.py", "b2", "a1")
        args = argparse.Namespace(versions_dir=tmp_path, config=None, files=False)

        assert tree.run(args) == 0
        assert capsys.readouterr().out.splitlines() == [
            "a1 (a1_initial)",
            "b2 (b2_users) [head]",
        ]
