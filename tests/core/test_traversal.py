"""Tests for MigrationGraph traversal: walk, ancestry and cycle detection."""

import pytest

from tests.core.graph_test_helpers import graph_of


class TestWalk:
    def test_preorder_visits_each_once(self, diamond):
        assert [n.id for n in diamond.walk()] == ["a1", "b2", "d4", "e5", "c3"]

    def test_level_order(self, diamond):
        assert [n.id for n in diamond.walk("level")] == ["a1", "b2", "c3", "d4", "e5"]

    def test_unknown_order_raises(self, diamond):
        with pytest.raises(ValueError, match="Unknown traversal order"):
            list(diamond.walk("post"))

    def test_multiple_bases_in_sorted_order(self):
        graph = graph_of("z1", "a1", ("a2", ["a1"]))

        assert [n.id for n in graph.walk()] == ["a1", "a2", "z1"]

    def test_nodes_below_missing_parent_not_walked(self):
        graph = graph_of("a1", ("d4", ["zzz"]))

        assert [n.id for n in graph.walk()] == ["a1"]

    def test_long_chain_does_not_recurse(self):
        chain = ["r0"] + [(f"r{i}", [f"r{i - 1}"]) for i in range(1, 5000)]
        graph = graph_of(*chain)

        assert sum(1 for _ in graph.walk()) == 5000

    def test_iter_roots(self, diamond):
        assert [n.id for n in diamond.iter_roots()] == ["a1"]


class TestAncestry:
    def test_ancestors(self, diamond):
        assert diamond.ancestors("e5") == {"a1", "b2", "c3", "d4"}

    def test_ancestors_of_base_is_empty(self, diamond):
        assert diamond.ancestors("a1") == set()

    def test_ancestors_skip_missing(self):
        graph = graph_of("a1", ("b2", ["a1", "zzz"]))

        assert graph.ancestors("b2") == {"a1"}

    def test_descendants(self, diamond):
        assert diamond.descendants("b2") == {"d4", "e5"}

    def test_descendants_of_missing_parent(self):
        graph = graph_of(("d4", ["zzz"]), ("e5", ["d4"]))

        assert graph.descendants("zzz") == {"d4", "e5"}

    def test_parents_of(self, diamond):
        assert diamond.parents_of("d4") == ("b2", "c3")
        assert diamond.parents_of("unknown") == ()


class TestFindCycles:
    def test_acyclic(self, diamond):
        info = diamond.find_cycles()

        assert not info.has_cycles()
        assert info.cycle_members == set()

    def test_self_reference(self):
        info = graph_of(("s1", ["s1"])).find_cycles()

        assert info.has_cycles()
        assert info.cycle_paths == [["s1", "s1"]]
        assert info.cycle_members == {"s1"}

    def test_two_node_cycle(self):
        info = graph_of(("a", ["b"]), ("b", ["a"])).find_cycles()

        assert info.cycle_paths == [["a", "b", "a"]]
        assert info.cycle_members == {"a", "b"}

    def test_cycle_does_not_include_tail(self):
        graph = graph_of(("a", ["b"]), ("b", ["c"]), ("c", ["b"]))

        info = graph.find_cycles()

        assert info.cycle_members == {"b", "c"}

    def test_cyclic_graph_still_builds(self):
        graph = graph_of(("a", ["b"]), ("b", ["a"]))

        assert graph.bases == ()
        assert graph.heads == ()
        assert list(graph.walk()) == []
