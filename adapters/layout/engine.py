from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from adapters.layout.config import LayoutConfig
from adapters.layout.grid import place_grid
from adapters.layout.nesting import build_positioned_tree, measure_nodes, preorder
from adapters.layout.ranked import place_ranks
from adapters.layout.routing import place_label, route
from domain.diagnostics import Diagnostics
from domain.models import (
    LAYOUT_GRID,
    LAYOUT_HIERARCHICAL,
    LAYOUT_LAYERED,
    SUPPORTED_LAYOUTS,
    ArchitectureDocument,
    Bounds,
    Connection,
    Group,
    LayoutOptions,
    Node,
    PositionedConnection,
    PositionedGroup,
    PositionedLayout,
    PositionedNode,
    iter_positioned_nodes,
)
from domain.ports.layout import LayoutEngine
from domain.services.dependency_graph import (
    assign_dependency_ranks,
    build_dependency_graph,
    rank_by_type,
)

logger = logging.getLogger(__name__)


class ArchitectureLayoutEngine(LayoutEngine):
    def __init__(self, config: LayoutConfig | None = None) -> None:
        self.config = config or LayoutConfig()

    def build_plan(self, document: ArchitectureDocument) -> PositionedLayout:
        diagnostics = Diagnostics()
        layout_type = self._resolve_layout_type(document.layout.type, diagnostics)
        roots = document.layout_nodes()
        measured = measure_nodes(roots, self.config, diagnostics)
        sizes = {node.id: measured[node.id].size for node in roots}
        node_spacing, rank_spacing = self._spacing(document.layout, layout_type)

        ranks: list[list[str]] = []
        if layout_type == LAYOUT_GRID:
            origins = place_grid(
                [node.id for node in roots], sizes, node_spacing, rank_spacing, self.config
            )
        else:
            ranks = self._assign_ranks(layout_type, roots, document.connections, diagnostics)
            origins = place_ranks(
                ranks,
                sizes,
                document.layout.direction,
                node_spacing,
                rank_spacing,
                self.config,
            )

        nodes = [
            build_positioned_tree(node, origins[node.id], measured, self.config) for node in roots
        ]
        node_index = {node.node_id: node for node in iter_positioned_nodes(nodes)}
        connections = self._position_connections(document.connections, node_index, diagnostics)
        groups = self._position_groups(document.groups, node_index, diagnostics)
        plan = PositionedLayout(
            layout_type=layout_type,
            direction=document.layout.direction,
            nodes=nodes,
            connections=connections,
            groups=groups,
            bounds=compute_bounds(nodes),
            ranks=ranks,
            diagnostics=diagnostics.snapshot(),
        )
        logger.debug(
            "Built %s layout: %d nodes, %d connections, %d groups, bounds %.0fx%.0f",
            layout_type,
            len(nodes),
            len(connections),
            len(groups),
            plan.bounds.width,
            plan.bounds.height,
        )
        return plan

    def _resolve_layout_type(self, layout_type: str, diagnostics: Diagnostics) -> str:
        if layout_type in SUPPORTED_LAYOUTS:
            return layout_type
        diagnostics.add(
            f"Unknown layout type '{layout_type}', falling back to '{LAYOUT_HIERARCHICAL}'"
        )
        return LAYOUT_HIERARCHICAL

    def _spacing(self, options: LayoutOptions, layout_type: str) -> tuple[float, float]:
        rank_default = (
            self.config.layered_rank_spacing
            if layout_type == LAYOUT_LAYERED
            else self.config.rank_spacing
        )
        spacing = options.spacing
        if spacing is None:
            return self.config.node_spacing, rank_default
        node_spacing = spacing.node if spacing.node is not None else self.config.node_spacing
        rank_spacing = spacing.rank if spacing.rank is not None else rank_default
        return node_spacing, rank_spacing

    def _assign_ranks(
        self,
        layout_type: str,
        roots: list[Node],
        connections: Iterable[Connection],
        diagnostics: Diagnostics,
    ) -> list[list[str]]:
        node_ids = [node.id for node in roots]
        node_types = {node.id: node.type for node in roots}
        if layout_type == LAYOUT_LAYERED:
            return rank_by_type(node_ids, node_types)

        owners: dict[str, str] = {}
        for root in roots:
            for node in preorder([root]):
                owners[node.id] = root.id
        edges = [
            (owners[conn.source], owners[conn.target])
            for conn in connections
            if conn.source in owners and conn.target in owners
        ]
        graph = build_dependency_graph(node_ids, edges)
        ranks = assign_dependency_ranks(graph)
        if ranks is not None:
            return ranks
        if node_ids:
            diagnostics.add("Dependency graph has no root nodes; ranking nodes by type order")
        return rank_by_type(node_ids, node_types)

    def _position_connections(
        self,
        connections: Iterable[Connection],
        node_index: Mapping[str, PositionedNode],
        diagnostics: Diagnostics,
    ) -> list[PositionedConnection]:
        positioned: list[PositionedConnection] = []
        for conn in connections:
            source = node_index.get(conn.source)
            target = node_index.get(conn.target)
            if source is None or target is None:
                missing = [
                    node_id
                    for node_id in (conn.source, conn.target)
                    if node_id not in node_index
                ]
                diagnostics.add(
                    f"Connection '{conn.connection_id()}' references missing node(s): "
                    f"{', '.join(missing)}; dropped"
                )
                continue
            anchors = route(source.rect, target.rect)
            positioned.append(
                PositionedConnection(
                    connection_id=conn.connection_id(),
                    source=conn.source,
                    target=conn.target,
                    connection_type=conn.type,
                    from_point=anchors.from_point,
                    to_point=anchors.to_point,
                    label_position=place_label(
                        anchors.from_point, anchors.to_point, self.config.label_offset
                    ),
                    label=conn.label,
                    bidirectional=conn.bidirectional,
                )
            )
        return positioned

    def _position_groups(
        self,
        groups: Iterable[Group],
        node_index: Mapping[str, PositionedNode],
        diagnostics: Diagnostics,
    ) -> list[PositionedGroup]:
        positioned: list[PositionedGroup] = []
        padding = self.config.group_padding
        for group in groups:
            members: list[PositionedNode] = []
            for member_id in group.member_ids():
                member = node_index.get(member_id)
                if member is None:
                    diagnostics.add(
                        f"Group '{group.id}' references missing node '{member_id}'; member dropped"
                    )
                    continue
                members.append(member)
            if not members:
                diagnostics.add(f"Group '{group.id}' has no resolvable members; omitted")
                continue
            bounds = compute_bounds(members)
            positioned.append(
                PositionedGroup(
                    group_id=group.id,
                    label=group.label,
                    group_type=group.type,
                    member_ids=tuple(member.node_id for member in members),
                    x=bounds.min_x - padding,
                    y=bounds.min_y - padding,
                    width=bounds.width + 2 * padding,
                    height=bounds.height + 2 * padding,
                )
            )
        return positioned


def compute_bounds(nodes: Iterable[PositionedNode]) -> Bounds:
    nodes = list(nodes)
    if not nodes:
        return Bounds(0.0, 0.0, 0.0, 0.0)
    return Bounds(
        min_x=min(node.x for node in nodes),
        min_y=min(node.y for node in nodes),
        max_x=max(node.x + node.width for node in nodes),
        max_y=max(node.y + node.height for node in nodes),
    )

