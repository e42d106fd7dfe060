import json

import pytest

from aircontrib.graph.datatype import DataType
from aircontrib.graph.metadata import (
    AttributeDefinition,
    EdgeDefinition,
    EdgeDirection,
    EntityDefinition,
    GraphDefinition,
    NodeDefinition,
    parse_graph_model,
    to_edge_direction,
)

MODEL = {
    "nodes": [
        {
            "name": "airport",
            "key": ["iata"],
            "attributes": [
                {"name": "iata", "type": "String"},
                {"name": "elevation", "type": "Integer"},
                {"name": "open"},
                {"name": "weird", "type": "quaternion"},
            ],
        },
        {"name": "city", "key": ["name"], "attributes": [{"name": "name"}]},
    ],
    "edges": [
        {
            "name": "route",
            "from": "airport",
            "to": "airport",
            "direction": "bidirectional",
            "key": ["airline"],
            "attributes": [{"name": "airline"}, {"name": "distance", "type": "double"}],
        },
        {"name": "located_in", "from": "airport", "to": "city", "direction": 1},
        {"name": "near", "from": "city", "to": "city"},
    ],
}


@pytest.fixture
def definition() -> GraphDefinition:
    return parse_graph_model("flights", json.dumps(MODEL))


def test_parse_nodes(definition):
    assert definition.id == "flights"
    airport = definition.node_definition("airport")
    assert isinstance(airport, NodeDefinition)
    assert airport.type == "airport"
    assert airport.key_definition == ["iata"]
    assert airport.attributes["elevation"].data_type is DataType.INTEGER
    assert airport.attributes["open"].data_type is DataType.STRING
    assert airport.attributes["weird"].data_type is DataType.STRING


def test_parse_edges(definition):
    route = definition.edge_definition("route")
    assert isinstance(route, EdgeDefinition)
    assert route.direction is EdgeDirection.BIDIRECTIONAL
    assert (route.from_node_type, route.to_node_type) == ("airport", "airport")
    assert route.attributes["distance"].data_type is DataType.DOUBLE
    assert definition.edge_definition("located_in").direction is EdgeDirection.DIRECTIONAL
    assert definition.edge_definition("near").direction is EdgeDirection.DIRECTIONAL
    assert definition.edge_definition("near").key_definition == []


def test_missing_definitions_are_none(definition):
    assert definition.node_definition("missing") is None
    assert definition.edge_definition("missing") is None


def test_export_shape(definition):
    exported = definition.export()
    nodes = exported["nodes"]
    edges = exported["edges"]
    assert set(nodes["types"]) == {"airport", "city"}
    assert nodes["keyMap"]["airport"] == ["iata"]
    assert nodes["attrTypeMap"]["airport"]["elevation"] == "Integer"
    assert nodes["attrTypeMap"]["city"]["name"] == "String"
    assert set(edges["types"]) == {"route", "located_in", "near"}
    assert edges["directionMap"]["route"] == EdgeDirection.BIDIRECTIONAL.value
    assert edges["directionMap"]["located_in"] == EdgeDirection.DIRECTIONAL.value
    assert edges["vertexes"]["located_in"] == ["airport", "city"]
    assert edges["keyMap"]["route"] == ["airline"]
    assert edges["attrTypeMap"]["route"]["distance"] == "Double"


def test_export_is_a_copy(definition):
    exported = definition.export()
    exported["nodes"]["keyMap"]["airport"].append("extra")
    assert definition.node_definition("airport").key_definition == ["iata"]


@pytest.mark.parametrize(
    "value, expected",
    [
        ("Nondirectional", EdgeDirection.NONDIRECTIONAL),
        ("0", EdgeDirection.NONDIRECTIONAL),
        ("DIRECTIONAL", EdgeDirection.DIRECTIONAL),
        ("2", EdgeDirection.BIDIRECTIONAL),
        (1, EdgeDirection.DIRECTIONAL),
        (2.0, EdgeDirection.BIDIRECTIONAL),
        (0.9, EdgeDirection.NONDIRECTIONAL),
    ],
)
def test_to_edge_direction(value, expected):
    assert to_edge_direction(value) is expected


@pytest.mark.parametrize("value", ["sideways", 7, -1.0, None, True, [1]])
def test_to_edge_direction_rejects(value):
    with pytest.raises(ValueError):
        to_edge_direction(value)


def test_direction_text():
    assert str(to_edge_direction("2")) == "bidirectional"
    assert str(to_edge_direction(0)) == "nondirectional"


def test_entity_without_name():
    entity = EntityDefinition.from_mapping({"key": ["id"]})
    assert entity.type == ""
    assert entity.key_definition == ["id"]
    assert entity.attributes == {}


def test_attribute_definition_from_type_name():
    assert AttributeDefinition.from_type_name("n", "bool") == AttributeDefinition(
        "n", DataType.BOOLEAN
    )


def test_invalid_json():
    with pytest.raises(ValueError):
        parse_graph_model("m", "{not json")


def test_edge_without_endpoints():
    bad = {"nodes": [], "edges": [{"name": "e", "to": "x"}]}
    with pytest.raises(KeyError):
        parse_graph_model("m", json.dumps(bad))


def test_non_string_key_rejected():
    with pytest.raises(TypeError):
        EntityDefinition.from_mapping({"name": "n", "key": [3]})