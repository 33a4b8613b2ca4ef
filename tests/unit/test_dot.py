"""Tests for dotparser.parsers.dot: edge-based and nested-subgraph dialects."""

import pytest

from dotparser.config import ParseConfig
from dotparser.events import (
    AddEdge,
    AddNode,
    BatchEnd,
    BatchStart,
    CustomNode,
    DirectedEdge,
    Direction,
    HierarchicalLayout,
    LayerPosition,
    PlainNode,
    SetLayout,
    UndirectedEdge,
)
from dotparser.parsers.base import DotParseError
from dotparser.parsers.dot import extract_label_value, extract_node_label, parse_dot


def _nodes(events):
    return [e for e in events if isinstance(e, AddNode)]


def _edges(events):
    return [e for e in events if isinstance(e, AddEdge)]


ORG_CHART = r"""
digraph org {
    rankdir=LR;
    subgraph cluster_tenant {
        color=blue;
        label="Acme Organization";
        subgraph cluster_lob {
            style=filled;
            Label="Support Contact Center";
            subgraph cluster_site {
                label="Berlin Site";
                fillcolor=white;
                user1 [shape=box, label="Jane Doe"];
            }
            sup1 [label="Supervisor\nTeam Blue"];
        }
    }
}
"""


# ─── Edge-based dialect ──────────────────────────────────────────────────────


def test_parse_simple_graph():
    events = parse_dot("digraph {\n    A -> B;\n    B -> C;\n}\n")
    assert events[0] == BatchStart()
    assert events[-1] == BatchEnd()
    assert sum(isinstance(e, BatchStart) for e in events) == 1
    assert sum(isinstance(e, BatchEnd) for e in events) == 1
    assert [n.id for n in _nodes(events)] == ["A", "B", "C"]
    assert [e.id for e in _edges(events)] == ["A->B", "B->C"]


def test_auto_declared_nodes_precede_their_edge():
    events = parse_dot("digraph {\n    A -> B;\n}\n")
    assert events[1:4] == [
        AddNode(id="A", label="A", node_type=PlainNode()),
        AddNode(id="B", label="B", node_type=PlainNode()),
        AddEdge(id="A->B", from_id="A", to_id="B", edge_type=DirectedEdge()),
    ]


def test_parse_node_with_attributes():
    dot = """
        digraph {
            "Node1" [type="team", level="2", label="Team Alpha"];
            "Node2" [type="user", level="1"];
            "Node1" -> "Node2";
        }
    """
    events = parse_dot(dot)
    node1 = next(n for n in _nodes(events) if n.id == "Node1")
    assert node1.label == "Team Alpha"
    assert node1.node_type == CustomNode("team")
    assert node1.properties.position == LayerPosition(level=2)

    node2 = next(n for n in _nodes(events) if n.id == "Node2")
    assert node2.label == "Node2"
    assert node2.node_type == CustomNode("user")

    # Both endpoints were declared with attributes, so no default nodes are added.
    assert len(_nodes(events)) == 2
    edge = _edges(events)[0]
    assert (edge.from_id, edge.to_id) == ("Node1", "Node2")


def test_unknown_attributes_become_custom_properties():
    events = parse_dot('digraph {\n    A [color="red", shape=box];\n}\n')
    node = _nodes(events)[0]
    assert node.node_type == PlainNode()
    assert node.label == "A"
    assert node.properties.custom == {"color": "red", "shape": "box"}
    assert node.properties.position is None


def test_non_numeric_level_is_ignored():
    events = parse_dot('digraph {\n    A [level="high"];\n}\n')
    assert _nodes(events)[0].properties.position is None


def test_layout_detection():
    events = parse_dot("digraph {\n    rankdir=LR;\n    A -> B;\n}\n")
    layouts = [e for e in events if isinstance(e, SetLayout)]
    assert layouts == [SetLayout(layout_type=HierarchicalLayout(direction=Direction.LeftToRight))]
    assert events[1] == layouts[0]


@pytest.mark.parametrize(
    "rankdir,direction",
    [
        ("BT", Direction.BottomToTop),
        ("RL", Direction.RightToLeft),
        ("TB", Direction.TopToBottom),
        ('"LR"', Direction.LeftToRight),
    ],
)
def test_rankdir_values(rankdir, direction):
    events = parse_dot(f"digraph {{\n    rankdir={rankdir};\n    A -> B;\n}}\n")
    assert events[1] == SetLayout(layout_type=HierarchicalLayout(direction=direction))


def test_no_rankdir_no_layout():
    events = parse_dot("digraph {\n    A -> B;\n}\n")
    assert not any(isinstance(e, SetLayout) for e in events)


def test_undirected_graph():
    events = parse_dot("graph {\n    A -- B;\n}\n")
    edge = _edges(events)[0]
    assert edge.id == "A--B"
    assert edge.edge_type == UndirectedEdge()
    assert edge.label is None


def test_edge_attributes_are_dropped():
    events = parse_dot('digraph {\n    A -> B [label="calls"];\n}\n')
    edge = _edges(events)[0]
    assert edge.to_id == "B"
    assert edge.label is None


def test_arrow_inside_edge_attributes():
    events = parse_dot('digraph {\n    A -> B [label="x->y"];\n}\n')
    assert [(e.from_id, e.to_id) for e in _edges(events)] == [("A", "B")]
    assert [n.id for n in _nodes(events)] == ["A", "B"]


def test_undirected_token_in_digraph_node_label():
    events = parse_dot('digraph {\n    A [label="a--b"];\n    A -> B;\n}\n')
    assert [(n.id, n.label) for n in _nodes(events)] == [("A", "a--b"), ("B", "B")]


def test_undirected_token_in_digraph_node_label_is_strict_valid():
    events = parse_dot('digraph {\n    A [label="a--b"];\n}\n', ParseConfig(strict=True))
    assert _nodes(events)[0].label == "a--b"


def test_edge_chain():
    events = parse_dot("digraph {\n    A -> B -> C;\n}\n")
    assert [e.id for e in _edges(events)] == ["A->B", "B->C"]
    assert [n.id for n in _nodes(events)] == ["A", "B", "C"]


def test_comments_and_blank_lines_skipped():
    events = parse_dot("digraph {\n\n    // A -> Z;\n    A -> B;\n}\n")
    assert [n.id for n in _nodes(events)] == ["A", "B"]


def test_attribute_defaults_are_not_nodes():
    events = parse_dot("digraph {\n    node [shape=box];\n    edge [color=red];\n    A -> B;\n}\n")
    assert [n.id for n in _nodes(events)] == ["A", "B"]


def test_malformed_lines_are_skipped():
    events = parse_dot("digraph {\n    A -> B;\n    %%% not dot at all\n    -> ;\n}\n")
    assert [e.id for e in _edges(events)] == ["A->B"]


def test_empty_input():
    assert parse_dot("") == [BatchStart(), BatchEnd()]


def test_parse_is_idempotent():
    dot = 'digraph {\n    rankdir=LR;\n    "X" [type="team", level="2"];\n    X -> Y;\n}\n'
    assert parse_dot(dot) == parse_dot(dot)


# ─── Strict mode ─────────────────────────────────────────────────────────────


def test_strict_mode_rejects_unrecognized_line():
    dot = "digraph {\n    A -> B;\n    this is garbage\n}\n"
    with pytest.raises(DotParseError) as excinfo:
        parse_dot(dot, ParseConfig(strict=True))
    assert excinfo.value.line_no == 3
    assert "this is garbage" in str(excinfo.value)


def test_strict_mode_accepts_valid_dot():
    dot = """digraph G {
    rankdir=LR;
    node [shape=box];
    "A" [label="Alpha"];
    B;
    A -> B [color=red];
}
"""
    events = parse_dot(dot, ParseConfig(strict=True))
    assert [n.id for n in _nodes(events)] == ["A", "B"]
    assert _nodes(events)[0].label == "Alpha"


def test_permissive_mode_ignores_garbage():
    dot = "digraph {\n    A -> B;\n    this is garbage\n}\n"
    assert len(_edges(parse_dot(dot))) == 1


# ─── Nested-subgraph dialect ─────────────────────────────────────────────────


def test_org_chart_parent_chain():
    events = parse_dot(ORG_CHART)
    nodes = _nodes(events)
    assert [n.id for n in nodes] == [
        "Acme Organization",
        "Support Contact Center",
        "Berlin Site",
        "Jane Doe",
        "Supervisor Team Blue",
    ]
    assert [(e.from_id, e.to_id) for e in _edges(events)] == [
        ("Acme Organization", "Support Contact Center"),
        ("Support Contact Center", "Berlin Site"),
        ("Berlin Site", "Jane Doe"),
        ("Support Contact Center", "Supervisor Team Blue"),
    ]


def test_org_chart_node_types_and_levels():
    nodes = {n.id: n for n in _nodes(parse_dot(ORG_CHART))}
    assert nodes["Acme Organization"].node_type == CustomNode("organization")
    assert nodes["Acme Organization"].properties.position == LayerPosition(level=0)
    assert nodes["Support Contact Center"].node_type == CustomNode("line_of_business")
    assert nodes["Support Contact Center"].properties.position == LayerPosition(level=1)
    assert nodes["Berlin Site"].node_type == CustomNode("site")
    assert nodes["Berlin Site"].properties.position == LayerPosition(level=2)
    assert nodes["Jane Doe"].node_type == CustomNode("user")
    assert nodes["Jane Doe"].properties.position == LayerPosition(level=3)
    assert nodes["Supervisor Team Blue"].node_type == CustomNode("team")
    assert nodes["Supervisor Team Blue"].properties.position == LayerPosition(level=2)


def test_org_chart_three_levels_and_leaf():
    dot = """digraph {
    subgraph cluster_a {
        label="Tenant: Globex Tenant";
        subgraph cluster_b {
            label="Organization: North";
            subgraph cluster_c {
                style=dashed;
                label="Site: Oslo";
                u [label="Sam"];
            }
        }
    }
}
"""
    events = parse_dot(dot)
    assert len(_nodes(events)) == 4
    assert [(e.from_id, e.to_id) for e in _edges(events)] == [
        ("Globex Tenant", "North"),
        ("North", "Oslo"),
        ("Oslo", "Sam"),
    ]
    assert all(e.edge_type == DirectedEdge() for e in _edges(events))


def test_org_chart_never_sets_layout():
    assert not any(isinstance(e, SetLayout) for e in parse_dot(ORG_CHART))


def test_subgraph_with_arrow_uses_edge_dialect():
    dot = "digraph {\n    subgraph cluster_x {\n        label=\"X\";\n        A -> B;\n    }\n}\n"
    events = parse_dot(dot)
    assert [n.id for n in _nodes(events)] == ["A", "B"]


def test_extract_label_value_keeps_text_after_last_colon():
    assert extract_label_value('label="Tenant: Acme Corp";') == "Acme Corp"
    assert extract_label_value('label="a: b: c"') == "c"
    assert extract_label_value("label=Plain;") == "Plain"


def test_extract_node_label():
    assert extract_node_label(r'u1 [label="First\nLast", shape=box];') == "First Last"
    assert extract_node_label("u1 [label=bare];") is None
