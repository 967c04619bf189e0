"""Pytest fixtures for core tests."""

import pytest


@pytest.fixture
def branched_graph():
    """a1 -> b2, x9 -> c3 (merge), plus d4 whose parent zzz is missing."""
    from tests.core.graph_test_helpers import graph_of

    return graph_of(
        "a1",
        ("b2", ["a1"]),
        ("x9", ["a1"]),
        ("c3", ["b2", "x9"]),
        ("d4", ["zzz"]),
    )


@pytest.fixture
def diamond():
    """a1 -> b2, c3 -> d4 (merge) -> e5."""
    from tests.core.graph_test_helpers import graph_of

    return graph_of(
        "a1",
        ("b2", ["a1"]),
        ("c3", ["a1"]),
        ("d4", ["b2", "c3"]),
        ("e5", ["d4"]),
    )


@pytest.fixture
def builder():
    """Fresh GraphBuilder instance."""
    from alembic_tree.graph.builder import GraphBuilder

    return GraphBuilder()
