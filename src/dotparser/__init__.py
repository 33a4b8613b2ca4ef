"""dotparser: DOT graphs and PlantUML sequence diagrams to graph event streams."""

from dotparser.config import ParseConfig
from dotparser.events import (
    AddEdge,
    AddGroup,
    AddNode,
    BatchEnd,
    BatchStart,
    Clear,
    Direction,
    EdgeType,
    GraphEvent,
    GroupType,
    LayoutType,
    MessageType,
    NodeType,
    Position,
    Properties,
    RemoveEdge,
    RemoveGroup,
    RemoveNode,
    SetLayout,
    Style,
    UpdateEdge,
    UpdateGroup,
    UpdateNode,
)
from dotparser.ir import EventGraph
from dotparser.parsers import DotParseError, ParseError, detect_type, parse, parse_dot, parse_plantuml

__all__ = [
    "AddEdge",
    "AddGroup",
    "AddNode",
    "BatchEnd",
    "BatchStart",
    "Clear",
    "Direction",
    "DotParseError",
    "EdgeType",
    "EventGraph",
    "GraphEvent",
    "GroupType",
    "LayoutType",
    "MessageType",
    "NodeType",
    "ParseConfig",
    "ParseError",
    "Position",
    "Properties",
    "RemoveEdge",
    "RemoveGroup",
    "RemoveNode",
    "SetLayout",
    "Style",
    "UpdateEdge",
    "UpdateGroup",
    "UpdateNode",
    "detect_type",
    "parse",
    "parse_dot",
    "parse_plantuml",
]
