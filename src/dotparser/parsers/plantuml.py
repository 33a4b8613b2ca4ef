"""PlantUML sequence diagram parser.

Parses the text with the PEG grammar from grammar.py, then walks the tree with
a NodeVisitor that emits graph events statement by statement. Grammar errors
and unknown arrow shapes abort the whole parse: no partial event list is
ever returned.
"""

from __future__ import annotations

import logging
from typing import Any

from parsimonious.exceptions import ParseError as GrammarError
from parsimonious.grammar import Grammar
from parsimonious.nodes import Node, NodeVisitor

from dotparser.config import ParseConfig
from dotparser.events import (
    ActorNode,
    AddEdge,
    AddNode,
    BatchEnd,
    BatchStart,
    DataStoreNode,
    Direction,
    ExternalNode,
    GraphEvent,
    MessageEdge,
    NodeType,
    ProcessNode,
    Properties,
    SequentialLayout,
    SequentialPosition,
    SetLayout,
    UpdateNode,
)
from dotparser.grammar import GRAMMAR
from dotparser.parsers.base import ParseError
from dotparser.types import ArrowType

logger = logging.getLogger(__name__)

PLANTUML_GRAMMAR = Grammar(GRAMMAR)

_ESCAPES = {"n": "\n", "t": "\t", '"': '"', "\\": "\\"}


def participant_node_type(keyword: str) -> NodeType:
    """Map a participant declaration keyword to its node type."""
    if keyword == "actor":
        return ActorNode(actor_type="human")
    if keyword == "database":
        return DataStoreNode()
    if keyword == "entity":
        return ExternalNode()
    if keyword in ("boundary", "control"):
        return ProcessNode()
    return ActorNode(actor_type=keyword)


def unquote(raw: str) -> str:
    """Strip the surrounding quotes of a quoted_string token and resolve escapes."""
    body = raw[1:-1]
    buf: list[str] = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == "\\" and i + 1 < len(body):
            nxt = body[i + 1]
            buf.append(_ESCAPES.get(nxt, nxt))
            i += 2
        else:
            buf.append(ch)
            i += 1
    return "".join(buf)


class _SequenceVisitor(NodeVisitor):
    """Walks one parse tree; all bookkeeping lives on the instance."""

    unwrapped_exceptions = (ParseError,)

    def __init__(self) -> None:
        self.events: list[GraphEvent] = []
        self.participant_order = 0
        self.sequence_number = 0
        self.aliases: dict[str, str] = {}
        self.known_ids: set[str] = set()

    # ── Participants ──────────────────────────────────────────────────────────

    def add_participant(self, node_id: str, label: str, node_type: NodeType) -> None:
        self.events.append(
            AddNode(
                id=node_id,
                label=label,
                node_type=node_type,
                properties=Properties.at(SequentialPosition(order=self.participant_order)),
            )
        )
        self.known_ids.add(node_id)
        self.participant_order += 1

    def resolve(self, name: str) -> str:
        return self.aliases.get(name, name)

    def ensure_participant(self, name: str) -> str:
        node_id = self.resolve(name)
        if node_id not in self.known_ids:
            logger.debug("auto-declaring participant %r", node_id)
            self.add_participant(node_id, name, ActorNode(actor_type="participant"))
        return node_id

    # ── Statements ────────────────────────────────────────────────────────────

    def visit_participant_declaration(self, node: Node, visited_children: list[Any]) -> None:
        keyword, _, node_id, alias, _ = visited_children
        alias = alias[0] if isinstance(alias, list) else None
        if alias is not None:
            self.aliases[alias] = node_id
        self.add_participant(node_id, alias if alias is not None else node_id, participant_node_type(keyword))

    def visit_message(self, node: Node, visited_children: list[Any]) -> None:
        first, _, token, _, second, _, label = visited_children
        arrow = ArrowType.from_token(token)
        if arrow is None:
            raise ParseError(f"Unknown arrow type: {token}")
        if arrow.is_reversed:
            first, second = second, first

        from_id = self.ensure_participant(first)
        to_id = self.ensure_participant(second)
        text = label[0] if isinstance(label, list) else ""

        self.events.append(
            AddEdge(
                id=f"msg-{self.sequence_number}",
                from_id=from_id,
                to_id=to_id,
                edge_type=MessageEdge(message_type=arrow.message_type, sequence=self.sequence_number),
                label=text or None,
            )
        )
        self.sequence_number += 1

    def visit_activation(self, node: Node, visited_children: list[Any]) -> None:
        self.events.append(_activation_update(visited_children[2], True))

    def visit_deactivation(self, node: Node, visited_children: list[Any]) -> None:
        self.events.append(_activation_update(visited_children[2], False))

    # ── Tokens ────────────────────────────────────────────────────────────────

    def visit_participant_type(self, node: Node, visited_children: list[Any]) -> str:
        return node.text

    def visit_alias(self, node: Node, visited_children: list[Any]) -> str:
        return visited_children[3]

    def visit_arrow(self, node: Node, visited_children: list[Any]) -> str:
        return node.text

    def visit_message_label(self, node: Node, visited_children: list[Any]) -> str:
        return visited_children[1]

    def visit_message_text(self, node: Node, visited_children: list[Any]) -> str:
        return node.text.strip()

    def visit_identifier(self, node: Node, visited_children: list[Any]) -> str:
        return visited_children[0]

    def visit_quoted_string(self, node: Node, visited_children: list[Any]) -> str:
        return unquote(node.text)

    def visit_simple_identifier(self, node: Node, visited_children: list[Any]) -> str:
        return node.text

    def generic_visit(self, node: Node, visited_children: list[Any]) -> Any:
        return visited_children or node


def _activation_update(node_id: str, active: bool) -> UpdateNode:
    return UpdateNode(
        id=node_id,
        label=None,
        properties=Properties(custom={"activated": "true" if active else "false"}),
    )


class PlantUMLParser:
    """PlantUML sequence diagram parser."""

    def parse(self, src: str, config: ParseConfig | None = None) -> list[GraphEvent]:
        try:
            tree = PLANTUML_GRAMMAR.parse(src)
        except GrammarError as exc:
            raise ParseError(f"Parse error: {exc}") from exc

        visitor = _SequenceVisitor()
        visitor.visit(tree)

        events: list[GraphEvent] = [
            BatchStart(),
            SetLayout(layout_type=SequentialLayout(direction=Direction.LeftToRight)),
        ]
        events.extend(visitor.events)
        events.append(BatchEnd())
        logger.debug(
            "PlantUML parse produced %d events (%d participants, %d messages)",
            len(events),
            visitor.participant_order,
            visitor.sequence_number,
        )
        return events


def parse_plantuml(src: str, config: ParseConfig | None = None) -> list[GraphEvent]:
    """Parse a PlantUML sequence diagram into an event stream.

    Raises:
        ParseError: If the text does not match the grammar or uses an unknown arrow.
    """
    return PlantUMLParser().parse(src, config)
