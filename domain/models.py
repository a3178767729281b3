from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)

METADATA_SCHEMA_VERSION = "1.0"
CUSTOM_DATA_KEY = "archdraw"
DOCUMENT_SOURCE = "archdraw"

NodeType = Literal["actor", "service", "database", "queue", "cache", "gateway", "ui", "external"]
ConnectionType = Literal["http", "async", "query", "sync", "data_flow", "none"]
GroupType = Literal["layer", "boundary", "cluster"]
Direction = Literal["TB", "BT", "LR", "RL"]

LAYOUT_HIERARCHICAL = "hierarchical"
LAYOUT_GRID = "grid"
LAYOUT_LAYERED = "layered"
SUPPORTED_LAYOUTS = (LAYOUT_HIERARCHICAL, LAYOUT_GRID, LAYOUT_LAYERED)

CANONICAL_TYPE_ORDER: Tuple[str, ...] = (
    "actor",
    "ui",
    "gateway",
    "service",
    "queue",
    "cache",
    "database",
    "external",
)


class DuplicateNodeIdError(ValueError):
    def __init__(self, node_id: str, path: str) -> None:
        super().__init__(f"Duplicate node id '{node_id}' at {path}")
        self.node_id = node_id
        self.path = path


class Node(BaseModel):
    id: str = Field(..., min_length=1)
    type: NodeType
    label: str
    description: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    nodes: List[Node] = Field(default_factory=list)

    def has_children(self) -> bool:
        return bool(self.nodes)


Node.model_rebuild()


class Connection(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    source: str = Field(..., alias="from", min_length=1)
    target: str = Field(..., alias="to", min_length=1)
    type: ConnectionType
    label: Optional[str] = None
    bidirectional: bool = False

    def connection_id(self) -> str:
        return self.id or f"conn_{self.source}_{self.target}"


class Group(BaseModel):
    id: str = Field(..., min_length=1)
    label: str
    type: GroupType = "boundary"
    contains: List[str] = Field(default_factory=list)
    nodes: List[Node] = Field(default_factory=list)

    def member_ids(self) -> List[str]:
        members = list(self.contains)
        members.extend(node.id for node in self.nodes if node.id not in members)
        return members


class Spacing(BaseModel):
    node: Optional[float] = Field(default=None, ge=0)
    rank: Optional[float] = Field(default=None, ge=0)


class LayoutOptions(BaseModel):
    type: str = LAYOUT_HIERARCHICAL
    direction: Direction = "TB"
    spacing: Optional[Spacing] = None

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, value: object) -> str:
        if value is None:
            return LAYOUT_HIERARCHICAL
        return str(value).strip().lower() or LAYOUT_HIERARCHICAL


class ArchitectureDocument(BaseModel):
    nodes: List[Node]
    connections: List[Connection]
    groups: List[Group] = Field(default_factory=list)
    layout: LayoutOptions = Field(default_factory=LayoutOptions)

    @field_validator("groups", "layout", mode="before")
    @classmethod
    def default_when_null(cls, value: object, info: ValidationInfo) -> object:
        if value is None:
            return [] if info.field_name == "groups" else {}
        return value

    @model_validator(mode="after")
    def ensure_unique_node_ids(self) -> ArchitectureDocument:
        seen: set[str] = set()
        for path, node in self.iter_nodes_with_paths():
            if node.id in seen:
                raise DuplicateNodeIdError(node.id, f"{path}.id")
            seen.add(node.id)
        return self

    def layout_nodes(self) -> List[Node]:
        # Nodes declared inside groups are laid out next to the top-level ones.
        nodes = list(self.nodes)
        for group in self.groups:
            nodes.extend(group.nodes)
        return nodes

    def iter_nodes_with_paths(self) -> Iterator[tuple[str, Node]]:
        roots: list[tuple[str, Node]] = [
            (f"nodes[{idx}]", node) for idx, node in enumerate(self.nodes)
        ]
        for group_idx, group in enumerate(self.groups):
            roots.extend(
                (f"groups[{group_idx}].nodes[{idx}]", node) for idx, node in enumerate(group.nodes)
            )
        stack = list(reversed(roots))
        while stack:
            path, node = stack.pop()
            yield path, node
            stack.extend(
                (f"{path}.nodes[{idx}]", child)
                for idx, child in reversed(list(enumerate(node.nodes)))
            )

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass(frozen=True)
class NodeStyle:
    shape: str
    fill_color: str
    stroke_color: str
    width: float
    height: float


@dataclass(frozen=True)
class ConnectionStyle:
    stroke_color: str
    stroke_style: str
    arrowhead: str | None = "arrow"


@dataclass(frozen=True)
class PositionedNode:
    node_id: str
    node_type: str
    label: str
    x: float
    y: float
    width: float
    height: float
    style: NodeStyle
    attributes: Dict[str, Any] = field(default_factory=dict)
    children: Tuple[PositionedNode, ...] = ()

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)


def iter_positioned_nodes(nodes: Iterable[PositionedNode]) -> Iterator[PositionedNode]:
    stack = list(reversed(list(nodes)))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


@dataclass(frozen=True)
class PositionedConnection:
    connection_id: str
    source: str
    target: str
    connection_type: str
    from_point: Point
    to_point: Point
    label_position: Point
    label: str | None = None
    bidirectional: bool = False

    @property
    def path(self) -> Tuple[Point, Point]:
        return (self.from_point, self.to_point)


@dataclass(frozen=True)
class PositionedGroup:
    group_id: str
    label: str
    group_type: str
    member_ids: Tuple[str, ...]
    x: float
    y: float
    width: float
    height: float

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)


@dataclass(frozen=True)
class Bounds:
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


@dataclass(frozen=True)
class PositionedLayout:
    layout_type: str
    direction: str
    nodes: List[PositionedNode]
    connections: List[PositionedConnection]
    groups: List[PositionedGroup]
    bounds: Bounds
    ranks: List[List[str]] = field(default_factory=list)
    diagnostics: List[str] = field(default_factory=list)

    def iter_nodes(self) -> Iterator[PositionedNode]:
        return iter_positioned_nodes(self.nodes)

    def node_index(self) -> Dict[str, PositionedNode]:
        return {node.node_id: node for node in self.iter_nodes()}


@dataclass(frozen=True)
class ExcalidrawDocument:
    elements: List[dict]
    app_state: dict
    files: dict = field(default_factory=dict)
    source: str = DOCUMENT_SOURCE

    def to_dict(self) -> dict:
        return {
            "type": "excalidraw",
            "version": 2,
            "source": self.source,
            "elements": self.elements,
            "appState": self.app_state,
            "files": self.files,
        }
