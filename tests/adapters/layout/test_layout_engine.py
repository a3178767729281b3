from __future__ import annotations

from typing import Any

import pytest

from adapters.layout.config import LayoutConfig
from adapters.layout.engine import ArchitectureLayoutEngine
from adapters.layout.grid import grid_dimensions
from adapters.layout.routing import is_on_boundary
from domain.models import ArchitectureDocument, PositionedLayout
from domain.services.validate_architecture import parse_architecture


def _plan(engine: ArchitectureLayoutEngine, payload: dict[str, Any]) -> PositionedLayout:
    return engine.build_plan(parse_architecture(payload))


def _services(count: int) -> list[dict[str, str]]:
    return [{"id": f"n{idx}", "type": "service", "label": f"N{idx}"} for idx in range(count)]


def test_actor_to_service_top_to_bottom(
    layout_engine: ArchitectureLayoutEngine, actor_service_payload: dict[str, Any]
) -> None:
    plan = _plan(layout_engine, actor_service_payload)
    nodes = plan.node_index()
    user, service = nodes["u"], nodes["s"]

    assert plan.ranks == [["u"], ["s"]]
    assert user.y + user.height < service.y
    assert plan.diagnostics == []

    (connection,) = plan.connections
    assert connection.from_point.y == user.y + user.height
    assert connection.from_point.x == user.x + user.width / 2
    assert connection.to_point.y == service.y
    assert connection.to_point.x == service.x + service.width / 2


def test_ranks_are_centered_on_canvas_midline(
    layout_engine: ArchitectureLayoutEngine, actor_service_payload: dict[str, Any]
) -> None:
    plan = _plan(layout_engine, actor_service_payload)
    midline = layout_engine.config.canvas_width / 2

    for node in plan.nodes:
        assert node.x + node.width / 2 == pytest.approx(midline)
    assert plan.nodes[0].y == layout_engine.config.padding


def test_bottom_to_top_mirrors_rank_axis(
    layout_engine: ArchitectureLayoutEngine, actor_service_payload: dict[str, Any]
) -> None:
    actor_service_payload["layout"]["direction"] = "BT"
    plan = _plan(layout_engine, actor_service_payload)
    user, service = plan.node_index()["u"], plan.node_index()["s"]

    assert service.y + service.height < user.y
    (connection,) = plan.connections
    assert connection.from_point.y == user.y
    assert connection.to_point.y == service.y + service.height


def test_left_to_right_and_right_to_left(
    layout_engine: ArchitectureLayoutEngine, actor_service_payload: dict[str, Any]
) -> None:
    actor_service_payload["layout"]["direction"] = "LR"
    plan = _plan(layout_engine, actor_service_payload)
    user, service = plan.node_index()["u"], plan.node_index()["s"]
    assert user.x + user.width < service.x
    assert user.y + user.height / 2 == pytest.approx(layout_engine.config.canvas_height / 2)
    assert plan.connections[0].from_point.x == user.x + user.width

    actor_service_payload["layout"]["direction"] = "RL"
    plan = _plan(layout_engine, actor_service_payload)
    user, service = plan.node_index()["u"], plan.node_index()["s"]
    assert service.x + service.width < user.x
    assert plan.connections[0].from_point.x == user.x


def test_nodes_in_one_rank_do_not_overlap(layout_engine: ArchitectureLayoutEngine) -> None:
    payload = {
        "nodes": [
            {"id": "gw", "type": "gateway", "label": "Gateway"},
            {"id": "a", "type": "service", "label": "A"},
            {"id": "b", "type": "cache", "label": "B"},
            {"id": "c", "type": "database", "label": "C"},
        ],
        "connections": [
            {"from": "gw", "to": "a", "type": "http"},
            {"from": "gw", "to": "b", "type": "http"},
            {"from": "gw", "to": "c", "type": "http"},
        ],
    }
    plan = _plan(layout_engine, payload)
    rank = sorted((plan.node_index()[node_id] for node_id in plan.ranks[1]), key=lambda n: n.x)

    assert [node.node_id for node in rank] == ["a", "b", "c"]
    for left, right in zip(rank, rank[1:]):
        assert right.x - (left.x + left.width) == pytest.approx(layout_engine.config.node_spacing)


@pytest.mark.parametrize(
    ("count", "expected"),
    [(0, (0, 0)), (1, (1, 1)), (2, (2, 1)), (9, (3, 3)), (10, (4, 3)), (17, (5, 4))],
)
def test_grid_dimensions(count: int, expected: tuple[int, int]) -> None:
    assert grid_dimensions(count) == expected


@pytest.mark.parametrize(("count", "cols", "rows"), [(9, 3, 3), (10, 4, 3)])
def test_grid_layout_places_nodes_row_major(
    layout_engine: ArchitectureLayoutEngine, count: int, cols: int, rows: int
) -> None:
    plan = _plan(
        layout_engine,
        {"nodes": _services(count), "connections": [], "layout": {"type": "grid"}},
    )

    xs = sorted({node.x for node in plan.nodes})
    ys = sorted({node.y for node in plan.nodes})
    assert (len(xs), len(ys)) == (cols, rows)
    assert plan.ranks == []
    for index, node in enumerate(plan.nodes):
        row, col = divmod(index, cols)
        assert (node.x, node.y) == (xs[col], ys[row])
    last_row = [node for node in plan.nodes if node.y == ys[-1]]
    assert len(last_row) == count - cols * (rows - 1)


def test_layered_orders_by_node_type(layout_engine: ArchitectureLayoutEngine) -> None:
    payload = {
        "nodes": [
            {"id": "db", "type": "database", "label": "DB"},
            {"id": "svc", "type": "service", "label": "Service"},
            {"id": "user", "type": "actor", "label": "User"},
        ],
        "connections": [{"from": "db", "to": "user", "type": "data_flow"}],
        "layout": {"type": "layered"},
    }
    plan = _plan(layout_engine, payload)
    nodes = plan.node_index()

    assert plan.ranks == [["user"], ["svc"], ["db"]]
    assert nodes["user"].y < nodes["svc"].y < nodes["db"].y
    assert nodes["svc"].y == pytest.approx(
        layout_engine.config.padding + 80 + layout_engine.config.layered_rank_spacing
    )


def test_fully_cyclic_graph_falls_back_to_type_order(
    layout_engine: ArchitectureLayoutEngine,
) -> None:
    payload = {
        "nodes": [
            {"id": "db", "type": "database", "label": "DB"},
            {"id": "svc", "type": "service", "label": "Service"},
        ],
        "connections": [
            {"from": "db", "to": "svc", "type": "sync"},
            {"from": "svc", "to": "db", "type": "query"},
        ],
    }
    plan = _plan(layout_engine, payload)

    assert plan.ranks == [["svc"], ["db"]]
    assert any("no root nodes" in message for message in plan.diagnostics)


def test_unknown_layout_type_falls_back_to_hierarchical(
    layout_engine: ArchitectureLayoutEngine, actor_service_payload: dict[str, Any]
) -> None:
    expected = _plan(layout_engine, actor_service_payload)
    actor_service_payload["layout"]["type"] = "force"

    plan = _plan(layout_engine, actor_service_payload)

    assert plan.layout_type == "hierarchical"
    assert plan.nodes == expected.nodes
    assert len(plan.diagnostics) == 1
    assert "'force'" in plan.diagnostics[0]


def test_layout_is_idempotent(layout_engine: ArchitectureLayoutEngine) -> None:
    payload = {
        "nodes": [
            {"id": "user", "type": "actor", "label": "User"},
            {"id": "web", "type": "ui", "label": "Web"},
            {"id": "api", "type": "service", "label": "API"},
            {"id": "db", "type": "database", "label": "DB"},
            {"id": "loner", "type": "external", "label": "Loner"},
        ],
        "connections": [
            {"from": "user", "to": "web", "type": "http"},
            {"from": "web", "to": "api", "type": "http"},
            {"from": "api", "to": "db", "type": "query"},
        ],
    }
    document = parse_architecture(payload)

    first = layout_engine.build_plan(document)
    second = layout_engine.build_plan(document)

    assert first == second


def test_group_bounds_are_padded_union(layout_engine: ArchitectureLayoutEngine) -> None:
    payload = {
        "nodes": [
            {"id": "user", "type": "actor", "label": "User"},
            {"id": "api", "type": "service", "label": "API"},
            {"id": "db", "type": "database", "label": "DB"},
        ],
        "connections": [
            {"from": "user", "to": "api", "type": "http"},
            {"from": "api", "to": "db", "type": "query"},
        ],
        "groups": [{"id": "backend", "label": "Backend", "contains": ["api", "db"]}],
    }
    plan = _plan(layout_engine, payload)
    nodes = plan.node_index()
    (group,) = plan.groups
    members = [nodes["api"], nodes["db"]]
    padding = layout_engine.config.group_padding

    assert group.member_ids == ("api", "db")
    assert group.x == min(node.x for node in members) - padding
    assert group.y == min(node.y for node in members) - padding
    assert group.x + group.width == max(node.x + node.width for node in members) + padding
    assert group.y + group.height == max(node.y + node.height for node in members) + padding


def test_groups_with_missing_members(layout_engine: ArchitectureLayoutEngine) -> None:
    payload = {
        "nodes": [{"id": "api", "type": "service", "label": "API"}],
        "connections": [],
        "groups": [
            {"id": "partial", "label": "Partial", "contains": ["api", "ghost"]},
            {"id": "empty", "label": "Empty", "contains": ["nobody"]},
        ],
    }
    plan = _plan(layout_engine, payload)

    assert [group.group_id for group in plan.groups] == ["partial"]
    assert plan.groups[0].member_ids == ("api",)
    assert any("'ghost'" in message for message in plan.diagnostics)
    assert any("'empty'" in message and "omitted" in message for message in plan.diagnostics)


def test_group_nested_nodes_join_layout(layout_engine: ArchitectureLayoutEngine) -> None:
    payload = {
        "nodes": [{"id": "api", "type": "service", "label": "API"}],
        "connections": [{"from": "api", "to": "db", "type": "query"}],
        "groups": [
            {
                "id": "data",
                "label": "Data",
                "type": "layer",
                "nodes": [{"id": "db", "type": "database", "label": "DB"}],
            }
        ],
    }
    plan = _plan(layout_engine, payload)

    assert plan.ranks == [["api"], ["db"]]
    assert [connection.connection_id for connection in plan.connections] == ["conn_api_db"]
    assert plan.groups[0].member_ids == ("db",)


def test_dangling_connection_is_dropped_with_diagnostic(
    layout_engine: ArchitectureLayoutEngine, actor_service_payload: dict[str, Any]
) -> None:
    actor_service_payload["connections"].append({"from": "s", "to": "ghost", "type": "async"})

    plan = _plan(layout_engine, actor_service_payload)

    assert [(c.source, c.target) for c in plan.connections] == [("u", "s")]
    assert len(plan.diagnostics) == 1
    assert "ghost" in plan.diagnostics[0]
    assert plan.ranks == [["u"], ["s"]]


def test_composite_nodes_contain_their_children(layout_engine: ArchitectureLayoutEngine) -> None:
    payload = {
        "nodes": [
            {"id": "user", "type": "actor", "label": "User"},
            {
                "id": "platform",
                "type": "service",
                "label": "Platform",
                "nodes": [
                    {"id": "api", "type": "service", "label": "API"},
                    {"id": "cache", "type": "cache", "label": "Cache"},
                ],
            },
        ],
        "connections": [{"from": "user", "to": "api", "type": "http"}],
    }
    plan = _plan(layout_engine, payload)
    nodes = plan.node_index()
    parent = nodes["platform"]
    config = layout_engine.config

    assert plan.ranks == [["user"], ["platform"]]
    assert (parent.width, parent.height) == (180, 210)
    assert [child.node_id for child in parent.children] == ["api", "cache"]
    for child in parent.children:
        assert parent.x <= child.x and child.x + child.width <= parent.x + parent.width
        assert parent.y <= child.y and child.y + child.height <= parent.y + parent.height
        assert child.x + child.width / 2 == pytest.approx(parent.x + parent.width / 2)
    api, cache = parent.children
    assert api.y == parent.y + config.child_padding_top
    assert cache.y == api.y + api.height + config.child_gap

    (connection,) = plan.connections
    assert is_on_boundary(connection.to_point, api.rect)


def test_spacing_overrides_and_config(actor_service_payload: dict[str, Any]) -> None:
    actor_service_payload["layout"]["spacing"] = {"node": 10, "rank": 30}
    engine = ArchitectureLayoutEngine(LayoutConfig(padding=0, canvas_width=400))

    plan = _plan(engine, actor_service_payload)
    user, service = plan.node_index()["u"], plan.node_index()["s"]

    assert user.y == 0
    assert service.y == 80 + 30
    assert user.x == 200 - 60


def test_wide_ranks_stay_on_positive_canvas(layout_engine: ArchitectureLayoutEngine) -> None:
    plan = _plan(layout_engine, {"nodes": _services(12), "connections": []})

    assert len(plan.ranks) == 1
    assert min(node.x for node in plan.nodes) == layout_engine.config.padding
    assert plan.bounds.min_x == layout_engine.config.padding
    assert plan.bounds.width == 12 * 140 + 11 * layout_engine.config.node_spacing


def test_empty_architecture(layout_engine: ArchitectureLayoutEngine) -> None:
    plan = layout_engine.build_plan(ArchitectureDocument(nodes=[], connections=[]))

    assert plan.nodes == []
    assert plan.ranks == []
    assert plan.diagnostics == []
    assert (plan.bounds.width, plan.bounds.height) == (0, 0)
