"""Event graph: replays a GraphEvent stream into a networkx MultiDiGraph.

This is the reference consumer of the event stream: it owns node, edge and
group state, applies each event in order, and reports per-event outcomes as
EventResult values instead of raising.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

import networkx as nx

from dotparser.events import (
    AddEdge,
    AddGroup,
    AddNode,
    BatchEnd,
    BatchStart,
    Clear,
    EdgeExists,
    EdgeNotFound,
    EdgeType,
    EventResult,
    GraphEvent,
    GroupType,
    Invalid,
    LayoutType,
    NodeExists,
    NodeNotFound,
    NodeType,
    Properties,
    RemoveEdge,
    RemoveGroup,
    RemoveNode,
    SetLayout,
    Success,
    UpdateEdge,
    UpdateGroup,
    UpdateNode,
)


@dataclass
class NodeData:
    id: str
    label: str | None
    node_type: NodeType
    properties: Properties


@dataclass
class EdgeData:
    id: str
    from_id: str
    to_id: str
    edge_type: EdgeType
    label: str | None
    properties: Properties


@dataclass
class GroupData:
    id: str
    label: str | None
    group_type: GroupType
    members: list[str] = field(default_factory=list)
    properties: Properties = field(default_factory=Properties)


def _merge_properties(current: Properties, update: Properties) -> Properties:
    """Custom keys are merged; style and position replace only when set."""
    return Properties(
        style=update.style if update.style is not None else current.style,
        position=update.position if update.position is not None else current.position,
        custom={**current.custom, **update.custom},
    )


class EventGraph:
    """Graph state built by applying events in order.

    Wraps a networkx MultiDiGraph keyed by node id; parallel edges are keyed by
    their event edge id.
    """

    def __init__(self) -> None:
        self.digraph: nx.MultiDiGraph = nx.MultiDiGraph()
        self.groups: dict[str, GroupData] = {}
        self.layout: LayoutType | None = None
        self._edge_index: dict[str, tuple[str, str]] = {}

    @classmethod
    def from_events(cls, events: Iterable[GraphEvent]) -> EventGraph:
        graph = cls()
        graph.apply_all(events)
        return graph

    def apply_all(self, events: Iterable[GraphEvent]) -> list[EventResult]:
        return [self.apply(event) for event in events]

    def apply(self, event: GraphEvent) -> EventResult:
        if isinstance(event, AddNode):
            if event.id in self.digraph:
                return NodeExists(event.id)
            data = NodeData(event.id, event.label, event.node_type, event.properties)
            self.digraph.add_node(event.id, data=data)
            return Success()
        if isinstance(event, UpdateNode):
            if event.id not in self.digraph:
                return NodeNotFound(event.id)
            data = self.digraph.nodes[event.id]["data"]
            if event.label is not None:
                data.label = event.label
            data.properties = _merge_properties(data.properties, event.properties)
            return Success()
        if isinstance(event, RemoveNode):
            if event.id not in self.digraph:
                return NodeNotFound(event.id)
            for edge_id, (u, v) in list(self._edge_index.items()):
                if event.id in (u, v):
                    del self._edge_index[edge_id]
            self.digraph.remove_node(event.id)
            for group in self.groups.values():
                if event.id in group.members:
                    group.members.remove(event.id)
            return Success()
        if isinstance(event, AddEdge):
            if event.id in self._edge_index:
                return EdgeExists(event.id)
            for endpoint in (event.from_id, event.to_id):
                if endpoint not in self.digraph:
                    return Invalid(f"edge {event.id} references unknown node {endpoint}")
            data = EdgeData(event.id, event.from_id, event.to_id, event.edge_type, event.label, event.properties)
            self.digraph.add_edge(event.from_id, event.to_id, key=event.id, data=data)
            self._edge_index[event.id] = (event.from_id, event.to_id)
            return Success()
        if isinstance(event, UpdateEdge):
            edge = self.edge(event.id)
            if edge is None:
                return EdgeNotFound(event.id)
            if event.label is not None:
                edge.label = event.label
            edge.properties = _merge_properties(edge.properties, event.properties)
            return Success()
        if isinstance(event, RemoveEdge):
            if event.id not in self._edge_index:
                return EdgeNotFound(event.id)
            u, v = self._edge_index.pop(event.id)
            self.digraph.remove_edge(u, v, key=event.id)
            return Success()
        if isinstance(event, AddGroup):
            if event.id in self.groups:
                return Invalid(f"group {event.id} already exists")
            self.groups[event.id] = GroupData(
                event.id, event.label, event.group_type, list(event.members), event.properties
            )
            return Success()
        if isinstance(event, UpdateGroup):
            if event.id not in self.groups:
                return Invalid(f"group {event.id} not found")
            self.groups[event.id].members = list(event.members)
            return Success()
        if isinstance(event, RemoveGroup):
            if self.groups.pop(event.id, None) is None:
                return Invalid(f"group {event.id} not found")
            return Success()
        if isinstance(event, SetLayout):
            self.layout = event.layout_type
            return Success()
        if isinstance(event, Clear):
            self.digraph.clear()
            self.groups.clear()
            self._edge_index.clear()
            self.layout = None
            return Success()
        if isinstance(event, (BatchStart, BatchEnd)):
            return Success()
        return Invalid(f"unsupported event {type(event).__name__}")

    # ── Queries ───────────────────────────────────────────────────────────────

    def node(self, node_id: str) -> NodeData | None:
        if node_id not in self.digraph:
            return None
        return self.digraph.nodes[node_id]["data"]

    def edge(self, edge_id: str) -> EdgeData | None:
        if edge_id not in self._edge_index:
            return None
        u, v = self._edge_index[edge_id]
        return self.digraph.edges[u, v, edge_id]["data"]

    def node_count(self) -> int:
        return self.digraph.number_of_nodes()

    def edge_count(self) -> int:
        return self.digraph.number_of_edges()

    def successors(self, node_id: str) -> list[str]:
        if node_id not in self.digraph:
            return []
        return list(self.digraph.successors(node_id))

    def roots(self) -> list[str]:
        """Nodes without incoming edges, in insertion order."""
        return [n for n in self.digraph.nodes if self.digraph.in_degree(n) == 0]

    def is_dag(self) -> bool:
        return nx.is_directed_acyclic_graph(self.digraph)

    def topological_order(self) -> list[str] | None:
        try:
            return list(nx.topological_sort(self.digraph))
        except nx.NetworkXUnfeasible:
            return None
