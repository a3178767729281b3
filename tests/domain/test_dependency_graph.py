from __future__ import annotations

from domain.models import CANONICAL_TYPE_ORDER
from domain.services.dependency_graph import (
    assign_dependency_ranks,
    build_dependency_graph,
    rank_by_type,
)


def test_graph_deduplicates_edges_and_ignores_unknown_nodes() -> None:
    graph = build_dependency_graph(
        ["a", "b", "c"],
        [("a", "b"), ("a", "b"), ("b", "c"), ("c", "zzz"), ("a", "a")],
    )

    assert graph.outgoing == {"a": ["b"], "b": ["c"], "c": []}
    assert graph.incoming == {"a": [], "b": ["a"], "c": ["b"]}
    assert graph.roots() == ["a"]


def test_breadth_first_ranks() -> None:
    graph = build_dependency_graph(
        ["user", "web", "api", "db", "cache"],
        [("user", "web"), ("web", "api"), ("api", "db"), ("api", "cache"), ("web", "cache")],
    )

    assert assign_dependency_ranks(graph) == [["user"], ["web"], ["api", "cache"], ["db"]]


def test_isolated_nodes_are_roots() -> None:
    graph = build_dependency_graph(["a", "b", "lonely"], [("a", "b")])
    assert assign_dependency_ranks(graph) == [["a", "lonely"], ["b"]]


def test_cycle_without_entry_point_goes_to_overflow_rank() -> None:
    graph = build_dependency_graph(
        ["root", "x", "y", "z"],
        [("root", "x"), ("y", "z"), ("z", "y")],
    )
    assert assign_dependency_ranks(graph) == [["root"], ["x"], ["y", "z"]]


def test_reachable_cycle_terminates() -> None:
    graph = build_dependency_graph(["a", "b", "c"], [("a", "b"), ("b", "c"), ("c", "b")])
    assert assign_dependency_ranks(graph) == [["a"], ["b"], ["c"]]


def test_fully_cyclic_graph_has_no_dependency_ranks() -> None:
    graph = build_dependency_graph(["a", "b"], [("a", "b"), ("b", "a")])
    assert assign_dependency_ranks(graph) is None


def test_rank_by_type_uses_canonical_order() -> None:
    node_ids = ["db", "svc", "ext", "user", "gw", "cache2", "q", "web", "svc2"]
    node_types = {
        "db": "database",
        "svc": "service",
        "ext": "external",
        "user": "actor",
        "gw": "gateway",
        "cache2": "cache",
        "q": "queue",
        "web": "ui",
        "svc2": "service",
    }

    ranks = rank_by_type(node_ids, node_types)

    assert ranks == [["user"], ["web"], ["gw"], ["svc", "svc2"], ["q"], ["cache2"], ["db"], ["ext"]]
    assert [node_types[rank[0]] for rank in ranks] == list(CANONICAL_TYPE_ORDER)


def test_rank_by_type_skips_missing_types_and_keeps_unknown_last() -> None:
    ranks = rank_by_type(["a", "b", "c"], {"a": "database", "b": "mainframe", "c": "service"})
    assert ranks == [["c"], ["a"], ["b"]]
