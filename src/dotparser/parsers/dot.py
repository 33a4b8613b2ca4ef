"""DOT parser: heuristic line scanner producing graph events.

Two dialects are recognized by sniffing the content up front:

  - edge-based DOT: node definitions with a bounded attribute vocabulary
    (type, level, label) plus ``->`` / ``--`` edges;
  - nested-subgraph org charts: ``subgraph cluster_*`` blocks whose ``label=``
    lines become a parent chain, with standalone ``[label="..."]`` leaves.

The scanner is permissive: any line that matches no known pattern is skipped.
With ``ParseConfig(strict=True)`` the edge-based dialect raises DotParseError
for such lines instead.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from dotparser.config import ParseConfig
from dotparser.events import (
    AddEdge,
    AddNode,
    BatchEnd,
    BatchStart,
    CustomNode,
    Direction,
    DirectedEdge,
    GraphEvent,
    HierarchicalLayout,
    LayerPosition,
    NodeType,
    PlainNode,
    Properties,
    SetLayout,
    UndirectedEdge,
)
from dotparser.parsers.base import DotParseError

logger = logging.getLogger(__name__)

# ─── Patterns ────────────────────────────────────────────────────────────────

_DIRECTED_ARROW = "->"
_UNDIRECTED_ARROW = "--"

_RANKDIR_RE = re.compile(r'\brankdir\s*=\s*"?([A-Za-z]+)"?')
_RANKDIRS: dict[str, Direction] = {
    "BT": Direction.BottomToTop,
    "LR": Direction.LeftToRight,
    "RL": Direction.RightToLeft,
}

# Attribute default statements: node [...], edge [...], graph [...]
_DEFAULTS_RE = re.compile(r"^(node|edge|graph)\s*\[")
_HEADER_RE = re.compile(r"^(strict\s+)?(di)?graph\b[^\[]*\{?$|^subgraph\b[^\[]*\{?$|^\{$")
_GRAPH_ATTR_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*\s*=\s*[^\[\]]+;?$")
_BARE_NODE_RE = re.compile(r'^("[^"]*"|[A-Za-z0-9_.]+);?$')
_CLUSTER_LABEL_RE = re.compile(r"^[Ll]abel\s*=")


@dataclass
class _NodeAttrs:
    node_type: str | None = None
    level: int | None = None
    label: str | None = None
    custom: dict[str, str] = field(default_factory=dict)


@dataclass
class _Frame:
    cluster: str
    node_id: str | None = None


def _is_skippable(trimmed: str) -> bool:
    return not trimmed or trimmed.startswith("//")


def _unquote(raw: str) -> str:
    """Trim whitespace, trailing semicolons, and surrounding double quotes."""
    return raw.strip().rstrip(";").strip().strip('"')


def _has_arrow(text: str) -> bool:
    return _DIRECTED_ARROW in text or _UNDIRECTED_ARROW in text


# ─── Edge-based dialect ──────────────────────────────────────────────────────


def _extract_rankdir(content: str) -> str | None:
    for line in content.splitlines():
        trimmed = line.strip()
        if trimmed.startswith("//"):
            continue
        m = _RANKDIR_RE.search(trimmed)
        if m:
            return m.group(1)
    return None


def _parse_attr_list(attrs_str: str) -> _NodeAttrs:
    attrs = _NodeAttrs()
    for attr in attrs_str.split(","):
        parts = attr.split("=")
        if len(parts) != 2:
            continue
        key = parts[0].strip()
        value = parts[1].strip().strip('"')
        if key == "type":
            attrs.node_type = value
        elif key == "level":
            if value.isascii() and value.isdigit():
                attrs.level = int(value)
        elif key == "label":
            attrs.label = value
        else:
            attrs.custom[key] = value
    return attrs


def _node_event(node_id: str, attrs: _NodeAttrs) -> AddNode:
    properties = Properties(custom=dict(attrs.custom))
    if attrs.level is not None:
        properties.position = LayerPosition(level=attrs.level)
    node_type: NodeType = CustomNode(attrs.node_type) if attrs.node_type is not None else PlainNode()
    return AddNode(
        id=node_id,
        label=attrs.label if attrs.label is not None else node_id,
        node_type=node_type,
        properties=properties,
    )


@dataclass
class _EdgeDialect:
    """Per-call state of the edge-based scanner."""

    lines: list[str]
    directed: bool
    strict: bool = False
    events: list[GraphEvent] = field(default_factory=list)
    node_attributes: dict[str, _NodeAttrs] = field(default_factory=dict)

    @property
    def arrow(self) -> str:
        return _DIRECTED_ARROW if self.directed else _UNDIRECTED_ARROW

    def is_node_definition(self, trimmed: str) -> bool:
        if "[" not in trimmed or "]" not in trimmed or self.arrow in trimmed:
            return False
        return not _DEFAULTS_RE.match(trimmed)

    def parse_nodes(self) -> None:
        for line in self.lines:
            trimmed = line.strip()
            if _is_skippable(trimmed) or not self.is_node_definition(trimmed):
                continue
            start = trimmed.index("[")
            node_id = trimmed[:start].strip().strip('"')
            if not node_id:
                logger.debug("skipping attribute list without node id: %s", trimmed)
                continue
            end = trimmed.rfind("]")
            attrs = _parse_attr_list(trimmed[start + 1 : end])
            self.node_attributes[node_id] = attrs
            self.events.append(_node_event(node_id, attrs))

    def ensure_node(self, node_id: str) -> None:
        if node_id in self.node_attributes:
            return
        self.events.append(AddNode.simple(node_id, node_id))
        self.node_attributes[node_id] = _NodeAttrs()

    def parse_edges(self) -> None:
        arrow = self.arrow
        edge_type = DirectedEdge() if self.directed else UndirectedEdge()
        for line in self.lines:
            trimmed = line.strip()
            if _is_skippable(trimmed) or arrow not in trimmed:
                continue
            # Attributes trail the last endpoint: A -> B [label="x->y"];
            bracket = trimmed.find("[", trimmed.index(arrow))
            if bracket != -1:
                trimmed = trimmed[:bracket]
            segments = trimmed.split(arrow)
            endpoints = [_unquote(s) for s in segments]
            if not all(endpoints):
                logger.debug("skipping edge with empty endpoint: %s", trimmed)
                continue
            for from_id, to_id in zip(endpoints, endpoints[1:]):
                self.ensure_node(from_id)
                self.ensure_node(to_id)
                self.events.append(
                    AddEdge(
                        id=f"{from_id}{arrow}{to_id}",
                        from_id=from_id,
                        to_id=to_id,
                        edge_type=edge_type,
                    )
                )

    def check_lines(self) -> None:
        """Reject lines no rule of this dialect accounts for."""
        for line_no, line in enumerate(self.lines, start=1):
            trimmed = line.strip()
            if _is_skippable(trimmed) or trimmed in ("{", "}", "};"):
                continue
            if self.arrow in trimmed or self.is_node_definition(trimmed) or _DEFAULTS_RE.match(trimmed):
                continue
            if _HEADER_RE.match(trimmed) or _GRAPH_ATTR_RE.match(trimmed) or _BARE_NODE_RE.match(trimmed):
                continue
            if self.strict:
                raise DotParseError(line_no, trimmed)
            logger.debug("skipping unrecognized line %d: %s", line_no, trimmed)


def _parse_edge_dialect(content: str, strict: bool) -> list[GraphEvent]:
    scan = _EdgeDialect(lines=content.splitlines(), directed="digraph" in content, strict=strict)
    scan.check_lines()

    rankdir = _extract_rankdir(content)
    if rankdir is not None:
        direction = _RANKDIRS.get(rankdir, Direction.TopToBottom)
        scan.events.append(SetLayout(layout_type=HierarchicalLayout(direction=direction)))

    scan.parse_nodes()
    scan.parse_edges()
    return scan.events


# ─── Nested-subgraph (org chart) dialect ─────────────────────────────────────


def extract_label_value(line: str) -> str:
    """Value of a ``label=`` line, keeping only the text after the last colon.

    ``label="Tenant: Acme Corp";`` yields ``Acme Corp``.
    """
    value = _unquote(line[line.find("=") + 1 :])
    if ":" in value:
        value = value.rsplit(":", 1)[1].strip()
    return value


def extract_node_label(line: str) -> str | None:
    """Contents of the first quoted ``label="..."`` on a line, with ``\\n`` turned into spaces."""
    start = line.find("label=")
    if start < 0:
        return None
    rest = line[start + len("label=") :]
    first = rest.find('"')
    if first < 0:
        return None
    second = rest.find('"', first + 1)
    if second < 0:
        return None
    return rest[first + 1 : second].replace("\\n", " ").strip()


def _cluster_node_type(label: str) -> NodeType:
    lower = label.lower()
    if "tenant" in lower or "organization" in lower:
        return CustomNode("organization")
    if "contact center" in lower:
        return CustomNode("line_of_business")
    if "site" in lower:
        return CustomNode("site")
    return PlainNode()


def _leaf_node_type(label: str) -> NodeType:
    if "supervisor" in label.lower():
        return CustomNode("team")
    return CustomNode("user")


def _child_edge(parent_id: str, node_id: str) -> AddEdge:
    return AddEdge(id=f"{parent_id}->{node_id}", from_id=parent_id, to_id=node_id, edge_type=DirectedEdge())


def _parse_nested_subgraphs(content: str) -> list[GraphEvent]:
    events: list[GraphEvent] = []
    stack: list[_Frame] = []

    for line in content.splitlines():
        trimmed = line.strip()

        if trimmed.startswith("subgraph"):
            start = trimmed.find("cluster_")
            if start >= 0:
                cluster = trimmed[start:].split()[0].rstrip("{")
                stack.append(_Frame(cluster=cluster))
            continue

        if _CLUSTER_LABEL_RE.match(trimmed) and stack:
            label = extract_label_value(trimmed)
            events.append(
                AddNode(
                    id=label,
                    label=label,
                    node_type=_cluster_node_type(label),
                    properties=Properties.at(LayerPosition(level=len(stack) - 1)),
                )
            )
            if len(stack) > 1 and stack[-2].node_id is not None:
                events.append(_child_edge(stack[-2].node_id, label))
            stack[-1].node_id = label
            continue

        if "[" in trimmed and "label=" in trimmed and _DIRECTED_ARROW not in trimmed:
            if _DEFAULTS_RE.match(trimmed):
                continue
            label = extract_node_label(trimmed)
            if label is None:
                label = trimmed[: trimmed.index("[")].strip().strip('"')
            events.append(
                AddNode(
                    id=label,
                    label=label,
                    node_type=_leaf_node_type(label),
                    properties=Properties.at(LayerPosition(level=len(stack))),
                )
            )
            if stack and stack[-1].node_id is not None:
                events.append(_child_edge(stack[-1].node_id, label))
            continue

        if trimmed == "}" and stack:
            stack.pop()

    return events


# ─── Public API ──────────────────────────────────────────────────────────────


def is_nested_subgraph_dialect(content: str) -> bool:
    return "subgraph" in content and not _has_arrow(content)


class DotParser:
    """DOT graph parser (edge-based and nested-subgraph dialects)."""

    def parse(self, src: str, config: ParseConfig | None = None) -> list[GraphEvent]:
        config = config or ParseConfig()
        events: list[GraphEvent] = [BatchStart()]
        if is_nested_subgraph_dialect(src):
            logger.debug("parsing DOT as nested-subgraph dialect")
            events.extend(_parse_nested_subgraphs(src))
        else:
            logger.debug("parsing DOT as edge-based dialect")
            events.extend(_parse_edge_dialect(src, config.strict))
        events.append(BatchEnd())
        logger.debug("DOT parse produced %d events", len(events))
        return events


def parse_dot(src: str, config: ParseConfig | None = None) -> list[GraphEvent]:
    """Parse DOT text into an event stream framed by BatchStart/BatchEnd.

    Never raises unless ``config.strict`` is set.
    """
    return DotParser().parse(src, config)
