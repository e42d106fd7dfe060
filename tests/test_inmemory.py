import pytest

from aircontrib.graph.datatype import DataType
from aircontrib.graph.inmemory import TraversalEdge, TraversalGraph, TraversalNode
from aircontrib.graph.model import Attribute, Edge, GraphImpl, Node


def make_node(node_type, key, **values):
    node = Node(node_type, [key])
    for name, value in values.items():
        node.attributes[name] = Attribute(name, DataType.STRING, value)
    return node


@pytest.fixture
def graph():
    return TraversalGraph("model", "g1")


def test_upsert_new_node(graph):
    node = make_node("airport", "SFO", city="San Francisco")
    result = graph.upsert_node(node)
    assert isinstance(result, TraversalNode)
    assert graph.get_node(node.node_id) is result
    assert result.node_id == node.node_id
    assert list(graph.nodes_by_type("airport").values()) == [result]
    assert graph.nodes_by_type("city") == {}


def test_upsert_existing_node_updates_values(graph):
    first = graph.upsert_node(make_node("airport", "SFO", city="old"))
    second = graph.upsert_node(make_node("airport", "SFO", city="new", extra="x"))
    assert second is first
    assert first.attributes["city"].value == "new"
    assert first.attributes["extra"].value == "x"
    assert len(graph.nodes) == 1


def test_update_skips_missing_values(graph):
    tnode = graph.upsert_node(make_node("airport", "SFO", city="kept"))
    tnode.update(make_node("airport", "SFO", city=None))
    assert tnode.attributes["city"].value == "kept"


def test_update_converts_integer_values():
    node = Node("airport", ["SFO"])
    node.attributes["elevation"] = Attribute("elevation", DataType.INTEGER, 1)
    tnode = TraversalNode(node)
    other = Node("airport", ["SFO"])
    other.attributes["elevation"] = Attribute("elevation", DataType.STRING, "42")
    tnode.update(other)
    assert tnode.attributes["elevation"].value == 42


def test_upsert_edge_links_nodes(graph):
    sfo = make_node("airport", "SFO")
    lax = make_node("airport", "LAX")
    edge = Edge("route", ["UA"], sfo, lax)
    tedge = graph.upsert_edge(edge, sfo, lax)

    assert isinstance(tedge, TraversalEdge)
    assert graph.get_edge(edge.edge_id) is tedge
    source = graph.get_node(sfo.node_id)
    target = graph.get_node(lax.node_id)
    assert tedge.all_nodes() == [source, target]
    assert source.edges(True) == {str(edge.edge_id): tedge}
    assert source.edges(False) == {}
    assert target.edges(False) == {str(edge.edge_id): tedge}
    assert target.all_edges() == {str(edge.edge_id): tedge}
    assert source.edges_by_type("route", True) == {str(edge.edge_id): tedge}
    assert source.edges_by_type("other", True) == {}


def test_upsert_existing_edge_updates(graph):
    sfo = make_node("airport", "SFO")
    lax = make_node("airport", "LAX")
    edge = Edge("route", ["UA"], sfo, lax)
    edge.attributes["gate"] = Attribute("gate", DataType.STRING, "A1")
    first = graph.upsert_edge(edge, sfo, lax)

    again = Edge("route", ["UA"], sfo, lax)
    again.attributes["gate"] = Attribute("gate", DataType.STRING, "B2")
    second = graph.upsert_edge(again, sfo, lax)
    assert second is first
    assert first.attributes["gate"].value == "B2"
    assert len(graph.edges) == 1


def test_upsert_graph_copies_everything(graph):
    source = GraphImpl("model", "src")
    sfo = source.upsert_node("airport", ["SFO"])
    lax = source.upsert_node("airport", ["LAX"])
    city = source.upsert_node("city", ["LA"])
    source.upsert_edge("route", ["UA"], sfo, lax)
    source.upsert_edge("located_in", [], lax, city)

    graph.upsert_graph(source)
    assert set(graph.nodes) == set(source.nodes)
    assert set(graph.edges) == set(source.edges)
    located = graph.get_node(lax.node_id)
    assert set(located.all_edges()) == {str(edge_id) for edge_id in source.edges}


def test_upsert_graph_missing_endpoint(graph):
    source = GraphImpl("model", "src")
    sfo = source.upsert_node("airport", ["SFO"])
    stray = Node("airport", ["LAX"])
    source.upsert_edge("route", ["UA"], sfo, stray)
    with pytest.raises(KeyError):
        graph.upsert_graph(source)


def test_key_names(graph):
    graph.model = {
        "nodes": {"keyMap": {"airport": ["iata"]}},
        "edges": {"keyMap": {"route": ["airline"]}},
    }
    assert graph.key_names_for_node("airport") == ["iata"]
    assert graph.key_names_for_edge("route") == ["airline"]
    assert graph.key_names_for_node("city") == []


def test_edge_id_matches_original(graph):
    sfo = make_node("airport", "SFO")
    lax = make_node("airport", "LAX")
    edge = Edge("route", ["UA"], sfo, lax)
    tedge = graph.upsert_edge(edge, sfo, lax)
    assert tedge.edge_id == edge.edge_id
    assert tedge.from_node_id == sfo.node_id
    assert tedge.to_node_id == lax.node_id