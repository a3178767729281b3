from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from domain.models import (
    CUSTOM_DATA_KEY,
    DOCUMENT_SOURCE,
    METADATA_SCHEMA_VERSION,
    ExcalidrawDocument,
    Point,
    PositionedConnection,
    PositionedGroup,
    PositionedLayout,
    PositionedNode,
)
from domain.services.render_context import RenderContext
from domain.styles import resolve_connection_style, resolve_group_style

logger = logging.getLogger(__name__)

Metadata = dict[str, Any]
Element = dict[str, Any]

SHAPE_TYPES = {"rectangle", "ellipse", "diamond"}
NODE_FONT_SIZE = 16
NODE_TEXT_HEIGHT = 20.0
EDGE_FONT_SIZE = 12
EDGE_TEXT_HEIGHT = 16.0
GROUP_FONT_SIZE = 14


@dataclass
class ElementRegistry:
    elements: list[Element] = field(default_factory=list)
    index: dict[str, Element] = field(default_factory=dict)

    def add(self, element: Element) -> None:
        self.elements.append(element)
        element_id = element.get("id")
        if isinstance(element_id, str):
            self.index[element_id] = element


class ArchitectureToExcalidrawConverter:
    def __init__(self, source: str = DOCUMENT_SOURCE, grid_size: int = 20) -> None:
        self.source = source
        self.grid_size = grid_size

    def convert(
        self, layout: PositionedLayout, context: RenderContext | None = None
    ) -> ExcalidrawDocument:
        ctx = context or RenderContext()
        registry = ElementRegistry()
        base_metadata: Metadata = {
            "schema_version": METADATA_SCHEMA_VERSION,
            "layout_type": layout.layout_type,
            "direction": layout.direction,
        }

        self._build_groups(layout.groups, registry, base_metadata, ctx)
        shape_ids = self._build_nodes(layout.nodes, registry, base_metadata, ctx)
        self._build_connections(layout.connections, shape_ids, registry, base_metadata, ctx)

        logger.debug("Synthesized %d Excalidraw elements", len(registry.elements))
        return ExcalidrawDocument(
            elements=registry.elements,
            app_state=self._build_app_state(),
            files={},
            source=self.source,
        )

    def _build_app_state(self) -> dict[str, Any]:
        return {
            "viewBackgroundColor": "#ffffff",
            "gridSize": self.grid_size,
            "zoom": {"value": 1},
            "scrollX": 0,
            "scrollY": 0,
        }

    def _build_groups(
        self,
        groups: Iterable[PositionedGroup],
        registry: ElementRegistry,
        base_metadata: Metadata,
        ctx: RenderContext,
    ) -> None:
        for group in groups:
            stroke_color, stroke_style, background = resolve_group_style(group.group_type)
            group_meta = {
                "role": "group",
                "group_id": group.group_id,
                "group_type": group.group_type,
                "member_ids": list(group.member_ids),
            }
            registry.add(
                self._base_shape(
                    element_id=ctx.next_id("group"),
                    type_name="rectangle",
                    position=Point(group.x, group.y),
                    width=group.width,
                    height=group.height,
                    metadata=self._with_base_metadata(group_meta, base_metadata),
                    ctx=ctx,
                    extra={
                        "strokeColor": stroke_color,
                        "backgroundColor": background,
                        "fillStyle": "hachure",
                        "strokeWidth": 1,
                        "strokeStyle": stroke_style,
                        "opacity": 50,
                    },
                )
            )
            registry.add(
                self._text_element(
                    element_id=ctx.next_id("group_label"),
                    text=group.label,
                    origin=Point(group.x + 10, group.y - 25),
                    width=max(100.0, len(group.label) * 8.0),
                    height=NODE_TEXT_HEIGHT,
                    font_size=GROUP_FONT_SIZE,
                    container_id=None,
                    metadata=self._with_base_metadata(
                        {"role": "group_label", "group_id": group.group_id}, base_metadata
                    ),
                    ctx=ctx,
                    text_align="left",
                    vertical_align="top",
                    stroke_color="#666666",
                )
            )

    def _build_nodes(
        self,
        nodes: Iterable[PositionedNode],
        registry: ElementRegistry,
        base_metadata: Metadata,
        ctx: RenderContext,
    ) -> dict[str, str]:
        shape_ids: dict[str, str] = {}
        stack: list[tuple[PositionedNode, str | None]] = [
            (node, None) for node in reversed(list(nodes))
        ]
        while stack:
            node, parent_id = stack.pop()
            shape_id = ctx.next_id("node")
            text_id = ctx.next_id("text")
            shape_ids[node.node_id] = shape_id

            node_meta: Metadata = {
                "role": "node",
                "node_id": node.node_id,
                "node_type": node.node_type,
            }
            if parent_id:
                node_meta["parent_node_id"] = parent_id
            if node.attributes:
                node_meta["attributes"] = dict(node.attributes)
            shape = self._base_shape(
                element_id=shape_id,
                type_name=self._shape_type(node.style.shape),
                position=Point(node.x, node.y),
                width=node.width,
                height=node.height,
                metadata=self._with_base_metadata(node_meta, base_metadata),
                ctx=ctx,
                extra={
                    "strokeColor": node.style.stroke_color,
                    "backgroundColor": node.style.fill_color,
                },
            )
            shape["boundElements"].append({"id": text_id, "type": "text"})
            registry.add(shape)

            text_width = max(0.0, min(len(node.label) * 9.0, node.width - 20))
            origin = Point(
                x=node.x + (node.width - text_width) / 2,
                y=node.y + (node.height - NODE_TEXT_HEIGHT) / 2,
            )
            vertical_align = "middle"
            if node.children:
                origin = Point(origin.x, node.y + 10)
                vertical_align = "top"
            registry.add(
                self._text_element(
                    element_id=text_id,
                    text=node.label,
                    origin=origin,
                    width=text_width,
                    height=NODE_TEXT_HEIGHT,
                    font_size=NODE_FONT_SIZE,
                    container_id=shape_id,
                    metadata=self._with_base_metadata(
                        {"role": "node_label", "node_id": node.node_id}, base_metadata
                    ),
                    ctx=ctx,
                    vertical_align=vertical_align,
                )
            )
            stack.extend((child, node.node_id) for child in reversed(node.children))
        return shape_ids

    def _build_connections(
        self,
        connections: Iterable[PositionedConnection],
        shape_ids: dict[str, str],
        registry: ElementRegistry,
        base_metadata: Metadata,
        ctx: RenderContext,
    ) -> None:
        for conn in connections:
            start_binding = shape_ids.get(conn.source)
            end_binding = shape_ids.get(conn.target)
            if start_binding is None or end_binding is None:
                logger.warning(
                    "Skipping connection %s without rendered endpoints", conn.connection_id
                )
                continue
            edge_meta = {
                "role": "edge",
                "connection_id": conn.connection_id,
                "connection_type": conn.connection_type,
                "source_node_id": conn.source,
                "target_node_id": conn.target,
            }
            arrow = self._arrow_element(
                element_id=ctx.next_id("arrow"),
                connection=conn,
                metadata=self._with_base_metadata(edge_meta, base_metadata),
                start_binding=start_binding,
                end_binding=end_binding,
                ctx=ctx,
            )
            registry.add(arrow)
            self._bind_arrow(registry.index, arrow)

            label = (conn.label or "").strip()
            if not label:
                continue
            width = min(len(label) * 7.0, 150.0)
            registry.add(
                self._text_element(
                    element_id=ctx.next_id("label"),
                    text=label,
                    origin=Point(
                        conn.label_position.x - width / 2,
                        conn.label_position.y - EDGE_TEXT_HEIGHT / 2,
                    ),
                    width=width,
                    height=EDGE_TEXT_HEIGHT,
                    font_size=EDGE_FONT_SIZE,
                    container_id=None,
                    metadata=self._with_base_metadata(
                        {"role": "edge_label", "connection_id": conn.connection_id},
                        base_metadata,
                    ),
                    ctx=ctx,
                    background_color="#ffffff",
                )
            )

    def _arrow_element(
        self,
        element_id: str,
        connection: PositionedConnection,
        metadata: Metadata,
        start_binding: str,
        end_binding: str,
        ctx: RenderContext,
    ) -> Element:
        style = resolve_connection_style(connection.connection_type)
        start, end = connection.path
        dx = end.x - start.x
        dy = end.y - start.y
        return {
            "id": element_id,
            "type": "arrow",
            "x": start.x,
            "y": start.y,
            "width": abs(dx),
            "height": abs(dy),
            "angle": 0,
            "strokeColor": style.stroke_color,
            "backgroundColor": "transparent",
            "fillStyle": "solid",
            "strokeWidth": 2,
            "strokeStyle": style.stroke_style,
            "roughness": 1,
            "opacity": 100,
            "groupIds": [],
            "roundness": {"type": 2},
            "seed": ctx.rand_seed(),
            "version": 1,
            "versionNonce": ctx.rand_seed(),
            "isDeleted": False,
            "boundElements": [],
            "updated": ctx.timestamp,
            "link": None,
            "locked": False,
            "points": [[0, 0], [dx, dy]],
            "lastCommittedPoint": None,
            "startBinding": {"elementId": start_binding, "focus": 0.0, "gap": 0},
            "endBinding": {"elementId": end_binding, "focus": 0.0, "gap": 0},
            "startArrowhead": style.arrowhead if connection.bidirectional else None,
            "endArrowhead": style.arrowhead,
            "customData": {CUSTOM_DATA_KEY: metadata},
        }

    def _text_element(
        self,
        element_id: str,
        text: str,
        origin: Point,
        width: float,
        height: float,
        font_size: int,
        container_id: str | None,
        metadata: Metadata,
        ctx: RenderContext,
        text_align: str = "center",
        vertical_align: str = "middle",
        stroke_color: str = "#000000",
        background_color: str = "transparent",
    ) -> Element:
        return {
            "id": element_id,
            "type": "text",
            "x": origin.x,
            "y": origin.y,
            "width": width,
            "height": height,
            "angle": 0,
            "strokeColor": stroke_color,
            "backgroundColor": background_color,
            "fillStyle": "solid",
            "strokeWidth": 1,
            "strokeStyle": "solid",
            "roughness": 1,
            "opacity": 100,
            "groupIds": [],
            "roundness": None,
            "seed": ctx.rand_seed(),
            "version": 1,
            "versionNonce": ctx.rand_seed(),
            "isDeleted": False,
            "boundElements": None,
            "updated": ctx.timestamp,
            "link": None,
            "locked": False,
            "text": text,
            "originalText": text,
            "fontSize": font_size,
            "fontFamily": 1,
            "textAlign": text_align,
            "verticalAlign": vertical_align,
            "baseline": height / 2,
            "containerId": container_id,
            "autoResize": container_id is None,
            "customData": {CUSTOM_DATA_KEY: metadata},
        }

    def _base_shape(
        self,
        element_id: str,
        type_name: str,
        position: Point,
        width: float,
        height: float,
        metadata: Metadata,
        ctx: RenderContext,
        extra: dict[str, Any] | None = None,
    ) -> Element:
        return {
            "id": element_id,
            "type": type_name,
            "x": position.x,
            "y": position.y,
            "width": width,
            "height": height,
            "angle": 0,
            "fillStyle": "solid",
            "strokeWidth": 2,
            "strokeStyle": "solid",
            "roughness": 1,
            "opacity": 100,
            "groupIds": [],
            "roundness": None,
            "seed": ctx.rand_seed(),
            "version": 1,
            "versionNonce": ctx.rand_seed(),
            "isDeleted": False,
            "boundElements": [],
            "updated": ctx.timestamp,
            "link": None,
            "locked": False,
            "customData": {CUSTOM_DATA_KEY: metadata},
            **(extra or {}),
        }

    def _shape_type(self, shape: str) -> str:
        return shape if shape in SHAPE_TYPES else "rectangle"

    def _bind_arrow(self, element_index: dict[str, Element], arrow: Element) -> None:
        arrow_id = arrow["id"]
        for key in ("startBinding", "endBinding"):
            binding = arrow.get(key)
            if not binding:
                continue
            target = element_index.get(binding.get("elementId"))
            if target is None:
                continue
            bound = target.setdefault("boundElements", [])
            if not any(item.get("id") == arrow_id for item in bound):
                bound.append({"id": arrow_id, "type": "arrow"})

    def _with_base_metadata(self, metadata: Metadata, base: Metadata) -> Metadata:
        merged = dict(base)
        merged.update(metadata)
        return merged
