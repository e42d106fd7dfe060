import pytest

from aircontrib.graph.datatype import DataType
from aircontrib.graph.helper import hash_key
from aircontrib.graph.model import (
    Attribute,
    Edge,
    GraphImpl,
    Node,
    NodeId,
    attribute_text,
    new_node_id,
)


def test_node_id_text():
    assert str(NodeId("airport", "abc")) == "airport_abc"


def test_node_id_round_trip_with_underscore_in_type():
    node_id = new_node_id("my_airport", ["SFO"])
    assert NodeId.from_string(str(node_id)) == node_id


def test_node_id_from_string_requires_separator():
    with pytest.raises(ValueError):
        NodeId.from_string("nounderscore")


def test_attribute_set_value_converts_integers():
    attribute = Attribute("count", DataType.INTEGER)
    attribute.set_value("5")
    assert attribute.value == 5
    attribute.set_value(None)
    assert attribute.value is None


def test_attribute_set_value_rejects_bad_integer():
    attribute = Attribute("count", DataType.LONG, 3)
    with pytest.raises(ValueError):
        attribute.set_value("abc")
    assert attribute.value == 3


def test_attribute_create_drops_unconvertible_value():
    assert Attribute.create("n", DataType.INTEGER, "abc").value is None
    assert Attribute.create("n", DataType.STRING, "abc").value == "abc"


def test_attribute_text():
    assert attribute_text(None) == ""
    assert attribute_text(Attribute("n", DataType.STRING, "  hi  ")) == "hi"


def test_node_identity():
    node = Node("airport", ["SFO"])
    assert node.node_id == new_node_id("airport", ["SFO"])
    assert node.key_hash == hash_key(["SFO"])


def test_edge_id_parts():
    a = Node("airport", ["SFO"])
    b = Node("airport", ["LAX"])
    edge = Edge("route", ["r1"], a, b)
    assert str(edge.edge_id).split("_") == ["route", edge.key_hash, a.key_hash, b.key_hash]
    assert edge.from_node_id == a.node_id
    assert edge.to_node_id == b.node_id


def test_update_to_changes_edge_id():
    a = Node("airport", ["SFO"])
    b = Node("airport", ["LAX"])
    c = Node("airport", ["JFK"])
    edge = Edge("route", [], a, b)
    before = edge.edge_id
    edge.update_to(c)
    assert edge.edge_id != before
    assert edge.to_node_id == c.node_id


def test_upsert_node_returns_existing():
    graph = GraphImpl("model", "graph")
    first = graph.upsert_node("airport", ["SFO"])
    second = graph.upsert_node("airport", ["SFO"])
    assert first is second
    assert list(graph.nodes_by_type("airport").values()) == [first]
    assert graph.nodes_by_type("city") == {}


def test_upsert_edge_returns_existing():
    graph = GraphImpl("model", "graph")
    a = graph.upsert_node("airport", ["SFO"])
    b = graph.upsert_node("airport", ["LAX"])
    first = graph.upsert_edge("route", ["r1"], a, b)
    assert graph.upsert_edge("route", ["r1"], a, b) is first
    assert graph.get_edge(first.edge_id) is first
    assert len(graph.edges) == 1


def test_merge_combines_attributes():
    target = GraphImpl("model", "g1")
    node = target.upsert_node("airport", ["SFO"])
    node.attributes["x"] = Attribute("x", DataType.INTEGER, 1)

    source = GraphImpl("model", "g2")
    other = source.upsert_node("airport", ["SFO"])
    other.attributes["x"] = Attribute("x", DataType.INTEGER, 2)
    other.attributes["y"] = Attribute("y", DataType.STRING, "v")
    new = source.upsert_node("airport", ["LAX"])
    source.upsert_edge("route", [], other, new)

    target.merge(source)

    merged = target.get_node(node.node_id)
    assert merged is node
    assert merged.attributes["x"].value == 2
    assert merged.attributes["y"].value == "v"
    assert target.get_node(new.node_id) is new
    assert len(target.edges) == 1


def test_merge_edge_attributes():
    graph = GraphImpl("model", "g")
    a = graph.upsert_node("t", [1])
    b = graph.upsert_node("t", [2])
    edge = graph.upsert_edge("e", [], a, b)
    edge.attributes["w"] = Attribute("w", DataType.STRING, "old")
    incoming = Edge("e", [], a, b)
    incoming.attributes["w"] = Attribute("w", DataType.STRING, "new")
    graph.merge_edge(incoming)
    assert graph.get_edge(edge.edge_id).attributes["w"].value == "new"


def test_key_names_from_model():
    graph = GraphImpl("model", "g")
    graph.model = {
        "nodes": {"keyMap": {"airport": ["code"]}},
        "edges": {"keyMap": {"route": ["id"]}},
    }
    assert graph.key_names_for_node("airport") == ["code"]
    assert graph.key_names_for_edge("route") == ["id"]
    assert graph.key_names_for_node("city") == []


def test_key_names_without_model():
    graph = GraphImpl("model", "g")
    with pytest.raises(KeyError):
        graph.key_names_for_node("airport")


def test_clear():
    graph = GraphImpl("model", "g")
    a = graph.upsert_node("t", [1])
    b = graph.upsert_node("t", [2])
    graph.upsert_edge("e", [], a, b)
    graph.clear()
    assert graph.nodes == {}
    assert graph.edges == {}
    assert graph.nodes_by_type("t") == {}
    assert graph.id == "g"