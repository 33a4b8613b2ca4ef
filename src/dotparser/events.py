"""Graph events: the format-agnostic output of every parser.

A parse produces an ordered list of GraphEvent instances framed by BatchStart
and BatchEnd. Each sum type of the model (NodeType, EdgeType, GroupType,
LayoutType, Position) is a base class whose variants are small dataclasses;
consumers dispatch on the concrete class.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass
from enum import Enum, auto
from typing import Any

# ─── Enums ───────────────────────────────────────────────────────────────────


class Direction(Enum):
    TopToBottom = auto()
    BottomToTop = auto()
    LeftToRight = auto()
    RightToLeft = auto()

    @classmethod
    def default(cls) -> Direction:
        return cls.TopToBottom


class StateType(Enum):
    Initial = auto()
    Final = auto()
    Normal = auto()
    Composite = auto()
    History = auto()


class MessageType(Enum):
    Synchronous = auto()
    Asynchronous = auto()
    Return = auto()
    Create = auto()
    Destroy = auto()


# ─── Node types ──────────────────────────────────────────────────────────────


class NodeType:
    """Kind of a node; one of the variants below."""


@dataclass
class PlainNode(NodeType):
    """Standard node (default)."""


@dataclass
class ActorNode(NodeType):
    actor_type: str


@dataclass
class StateNode(NodeType):
    state_type: StateType


@dataclass
class ProcessNode(NodeType):
    pass


@dataclass
class DataStoreNode(NodeType):
    pass


@dataclass
class ExternalNode(NodeType):
    pass


@dataclass
class CustomNode(NodeType):
    name: str


# ─── Edge types ──────────────────────────────────────────────────────────────


class EdgeType:
    """Kind of a connection; one of the variants below."""


@dataclass
class DirectedEdge(EdgeType):
    pass


@dataclass
class UndirectedEdge(EdgeType):
    pass


@dataclass
class BidirectionalEdge(EdgeType):
    pass


@dataclass
class MessageEdge(EdgeType):
    """Message in a sequence diagram; sequence is its position in the message order."""

    message_type: MessageType
    sequence: int | None = None


@dataclass
class TransitionEdge(EdgeType):
    trigger: str | None = None
    guard: str | None = None
    action: str | None = None


@dataclass
class AssociationEdge(EdgeType):
    association_type: str


@dataclass
class CustomEdge(EdgeType):
    name: str


# ─── Group types ─────────────────────────────────────────────────────────────


class GroupType:
    """Kind of a group; one of the variants below."""


@dataclass
class ClusterGroup(GroupType):
    pass


@dataclass
class SequentialGroup(GroupType):
    """alt/loop/opt style fragment."""

    sequence_type: str


@dataclass
class ParallelGroup(GroupType):
    pass


@dataclass
class ContainerGroup(GroupType):
    pass


@dataclass
class CustomGroup(GroupType):
    name: str


# ─── Layout hints ────────────────────────────────────────────────────────────


class LayoutType:
    """Layout hint for visualization; one of the variants below."""


@dataclass
class HierarchicalLayout(LayoutType):
    direction: Direction = field(default_factory=Direction.default)


@dataclass
class ForceLayout(LayoutType):
    pass


@dataclass
class CircularLayout(LayoutType):
    pass


@dataclass
class GridLayout(LayoutType):
    columns: int | None = None


@dataclass
class SequentialLayout(LayoutType):
    direction: Direction = Direction.LeftToRight


@dataclass
class LayeredLayout(LayoutType):
    direction: Direction = field(default_factory=Direction.default)


@dataclass
class CustomLayout(LayoutType):
    name: str


# ─── Positions ───────────────────────────────────────────────────────────────


class Position:
    """Positional hint; one of the variants below."""


@dataclass
class AbsolutePosition(Position):
    x: float
    y: float
    z: float | None = None


@dataclass
class RelativePosition(Position):
    anchor: str
    offset_x: float
    offset_y: float
    offset_z: float | None = None


@dataclass
class GridPosition(Position):
    row: int
    column: int


@dataclass
class SequentialPosition(Position):
    order: int


@dataclass
class LayerPosition(Position):
    level: int


# ─── Properties ──────────────────────────────────────────────────────────────


@dataclass
class Style:
    color: str | None = None
    background_color: str | None = None
    border_style: str | None = None
    border_color: str | None = None
    border_width: float | None = None
    shape: str | None = None
    size: float | None = None
    font_size: float | None = None
    font_family: str | None = None
    opacity: float | None = None


@dataclass
class Properties:
    """Generic properties attached to any element."""

    style: Style | None = None
    position: Position | None = None
    custom: dict[str, str] = field(default_factory=dict)

    @classmethod
    def at(cls, position: Position) -> Properties:
        return cls(position=position)


# ─── Events ──────────────────────────────────────────────────────────────────


class GraphEvent:
    """One atomic graph mutation instruction."""

    def to_dict(self) -> dict[str, Any]:
        """JSON-compatible view of the event with a "type" discriminator."""
        return _to_plain(self)


@dataclass
class AddNode(GraphEvent):
    id: str
    label: str | None = None
    node_type: NodeType = field(default_factory=PlainNode)
    properties: Properties = field(default_factory=Properties)

    @classmethod
    def simple(cls, id: str, label: str) -> AddNode:
        return cls(id=id, label=label)


@dataclass
class UpdateNode(GraphEvent):
    id: str
    label: str | None = None
    properties: Properties = field(default_factory=Properties)


@dataclass
class RemoveNode(GraphEvent):
    id: str


@dataclass
class AddEdge(GraphEvent):
    id: str
    from_id: str
    to_id: str
    edge_type: EdgeType = field(default_factory=DirectedEdge)
    label: str | None = None
    properties: Properties = field(default_factory=Properties)

    @classmethod
    def simple(cls, from_id: str, to_id: str) -> AddEdge:
        return cls(id=f"{from_id}->{to_id}", from_id=from_id, to_id=to_id)


@dataclass
class UpdateEdge(GraphEvent):
    id: str
    label: str | None = None
    properties: Properties = field(default_factory=Properties)


@dataclass
class RemoveEdge(GraphEvent):
    id: str


@dataclass
class AddGroup(GraphEvent):
    id: str
    label: str | None = None
    members: list[str] = field(default_factory=list)
    group_type: GroupType = field(default_factory=ClusterGroup)
    properties: Properties = field(default_factory=Properties)


@dataclass
class UpdateGroup(GraphEvent):
    id: str
    members: list[str] = field(default_factory=list)


@dataclass
class RemoveGroup(GraphEvent):
    id: str


@dataclass
class SetLayout(GraphEvent):
    layout_type: LayoutType
    properties: Properties = field(default_factory=Properties)


@dataclass
class Clear(GraphEvent):
    pass


@dataclass
class BatchStart(GraphEvent):
    pass


@dataclass
class BatchEnd(GraphEvent):
    pass


# ─── Results of applying events ──────────────────────────────────────────────


class EventResult:
    """Outcome of applying one event to a graph consumer."""


@dataclass
class Success(EventResult):
    pass


@dataclass
class NodeExists(EventResult):
    id: str


@dataclass
class NodeNotFound(EventResult):
    id: str


@dataclass
class EdgeExists(EventResult):
    id: str


@dataclass
class EdgeNotFound(EventResult):
    id: str


@dataclass
class Invalid(EventResult):
    reason: str


# ─── Helpers ─────────────────────────────────────────────────────────────────


def _to_plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.name
    if is_dataclass(value) and not isinstance(value, type):
        out: dict[str, Any] = {"type": type(value).__name__}
        for f in fields(value):
            out[f.name] = _to_plain(getattr(value, f.name))
        return out
    if isinstance(value, dict):
        return {k: _to_plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_to_plain(v) for v in value]
    return value
