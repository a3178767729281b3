from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from adapters.layout.config import LayoutConfig
from domain.diagnostics import Diagnostics
from domain.models import Node, NodeStyle, Point, PositionedNode, Size
from domain.styles import resolve_node_style


@dataclass(frozen=True)
class MeasuredNode:
    style: NodeStyle
    size: Size


def preorder(roots: Iterable[Node]) -> list[Node]:
    ordered: list[Node] = []
    stack = list(reversed(list(roots)))
    while stack:
        node = stack.pop()
        ordered.append(node)
        stack.extend(reversed(node.nodes))
    return ordered


def measure_nodes(
    roots: Iterable[Node], config: LayoutConfig, diagnostics: Diagnostics
) -> dict[str, MeasuredNode]:
    measured: dict[str, MeasuredNode] = {}
    # Reversed pre-order visits every child before its parent.
    for node in reversed(preorder(roots)):
        style = resolve_node_style(node.type, diagnostics)
        width, height = style.width, style.height
        if node.nodes:
            child_sizes = [measured[child.id].size for child in node.nodes]
            stacked = sum(size.height for size in child_sizes) + config.child_gap * len(child_sizes)
            width = max(width, max(size.width for size in child_sizes) + 2 * config.child_padding_side)
            height = max(height, config.child_padding_top + stacked)
        measured[node.id] = MeasuredNode(style=style, size=Size(width, height))
    return measured


def build_positioned_tree(
    root: Node,
    origin: Point,
    measured: dict[str, MeasuredNode],
    config: LayoutConfig,
) -> PositionedNode:
    origins: dict[str, Point] = {root.id: origin}
    ordered = preorder([root])
    for node in ordered:
        parent_origin = origins[node.id]
        parent_size = measured[node.id].size
        cursor_y = parent_origin.y + config.child_padding_top
        for child in node.nodes:
            child_size = measured[child.id].size
            origins[child.id] = Point(
                x=parent_origin.x + (parent_size.width - child_size.width) / 2,
                y=cursor_y,
            )
            cursor_y += child_size.height + config.child_gap

    built: dict[str, PositionedNode] = {}
    for node in reversed(ordered):
        info = measured[node.id]
        built[node.id] = PositionedNode(
            node_id=node.id,
            node_type=node.type,
            label=node.label,
            x=origins[node.id].x,
            y=origins[node.id].y,
            width=info.size.width,
            height=info.size.height,
            style=info.style,
            attributes=dict(node.metadata),
            children=tuple(built[child.id] for child in node.nodes),
        )
    return built[root.id]
