from __future__ import annotations

from typing import Dict

from domain.diagnostics import Diagnostics
from domain.models import ConnectionStyle, NodeStyle

DEFAULT_NODE_TYPE = "service"
DEFAULT_CONNECTION_TYPE = "none"

NODE_STYLES: Dict[str, NodeStyle] = {
    "actor": NodeStyle("ellipse", "#e1f5fe", "#0277bd", 120, 80),
    "service": NodeStyle("rectangle", "#f3e5f5", "#7b1fa2", 140, 80),
    "database": NodeStyle("rectangle", "#e8f5e8", "#388e3c", 120, 80),
    "queue": NodeStyle("rectangle", "#fff3e0", "#f57c00", 130, 70),
    "cache": NodeStyle("rectangle", "#fce4ec", "#c2185b", 110, 70),
    "gateway": NodeStyle("diamond", "#f1f8e9", "#689f38", 100, 100),
    "ui": NodeStyle("rectangle", "#e3f2fd", "#1976d2", 130, 80),
    "external": NodeStyle("rectangle", "#fafafa", "#616161", 120, 80),
}

CONNECTION_STYLES: Dict[str, ConnectionStyle] = {
    "http": ConnectionStyle("#1976d2", "solid"),
    "async": ConnectionStyle("#f57c00", "dashed"),
    "query": ConnectionStyle("#388e3c", "solid"),
    "sync": ConnectionStyle("#7b1fa2", "solid"),
    "data_flow": ConnectionStyle("#616161", "dotted"),
    "none": ConnectionStyle("#1e1e1e", "solid"),
}

# stroke color, stroke style, background color
GROUP_STYLES: Dict[str, tuple[str, str, str]] = {
    "boundary": ("#868e96", "dashed", "transparent"),
    "layer": ("#adb5bd", "solid", "#f8f9fa"),
    "cluster": ("#adb5bd", "dotted", "transparent"),
}


def resolve_node_style(node_type: str, diagnostics: Diagnostics | None = None) -> NodeStyle:
    style = NODE_STYLES.get(node_type)
    if style is not None:
        return style
    if diagnostics is not None:
        diagnostics.add(
            f"Unknown node type '{node_type}', using '{DEFAULT_NODE_TYPE}' style"
        )
    return NODE_STYLES[DEFAULT_NODE_TYPE]


def resolve_connection_style(connection_type: str) -> ConnectionStyle:
    return CONNECTION_STYLES.get(connection_type, CONNECTION_STYLES[DEFAULT_CONNECTION_TYPE])


def resolve_group_style(group_type: str) -> tuple[str, str, str]:
    return GROUP_STYLES.get(group_type, GROUP_STYLES["boundary"])
