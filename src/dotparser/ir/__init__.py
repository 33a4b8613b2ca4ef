"""Event consumers: replay an event stream into graph state."""

from dotparser.ir.graph import EdgeData, EventGraph, GroupData, NodeData

__all__ = [
    "EdgeData",
    "EventGraph",
    "GroupData",
    "NodeData",
]
