"""Graph model definitions: node and edge types with their keys and attributes."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from aircontrib.graph.datatype import DataType, to_type_enum

logger = logging.getLogger(__name__)


def _text(value: Any, what: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{what} must be a string, got {value!r}")
    return value


@dataclass(frozen=True)
class AttributeDefinition:
    """Name and data type of an attribute in a model."""

    name: str
    data_type: DataType = DataType.STRING

    @classmethod
    def from_type_name(cls, name: str, type_name: str) -> AttributeDefinition:
        """Definition whose type is given by name; unknown names mean ``String``."""
        data_type, _ = to_type_enum(type_name)
        return cls(name, data_type)


def _entity_fields(info: Mapping[str, Any]) -> dict[str, Any]:
    keys = info.get("key")
    key_definition = [_text(key, "key") for key in keys] if keys is not None else []

    name = info.get("name")
    if name is None:
        logger.warning("Type name is not defined for edge!")
        entity_type = ""
    else:
        entity_type = _text(name, "name")

    attributes: dict[str, AttributeDefinition] = {}
    for attribute_info in info.get("attributes") or []:
        attribute_name = _text(attribute_info["name"], "attribute name")
        type_name = attribute_info.get("type")
        if type_name is None:
            type_name = "String"
        attributes[attribute_name] = AttributeDefinition.from_type_name(
            attribute_name, _text(type_name, "attribute type")
        )

    return {
        "key_definition": key_definition,
        "type": entity_type,
        "attributes": attributes,
    }


@dataclass
class EntityDefinition:
    """Type name, key attribute names and attribute definitions of an entity."""

    key_definition: list[str] = field(default_factory=list)
    type: str = ""
    attributes: dict[str, AttributeDefinition] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, info: Mapping[str, Any]) -> EntityDefinition:
        """Build a definition from ``name``, ``key`` and ``attributes`` entries."""
        return cls(**_entity_fields(info))


@dataclass
class NodeDefinition(EntityDefinition):
    """Definition of a node type."""


class EdgeDirection(Enum):
    """How an edge relates its two ends."""

    NONDIRECTIONAL = 0
    DIRECTIONAL = 1
    BIDIRECTIONAL = 2

    def __str__(self) -> str:
        return self.name.lower()


_DIRECTION_NAMES = {
    "nondirectional": EdgeDirection.NONDIRECTIONAL,
    "0": EdgeDirection.NONDIRECTIONAL,
    "directional": EdgeDirection.DIRECTIONAL,
    "1": EdgeDirection.DIRECTIONAL,
    "bidirectional": EdgeDirection.BIDIRECTIONAL,
    "2": EdgeDirection.BIDIRECTIONAL,
}


def to_edge_direction(direction: Any) -> EdgeDirection:
    """Parse a direction given as a name, a digit string or a number.

    Raises :class:`ValueError` when the direction is missing or unknown.
    """
    if isinstance(direction, str):
        try:
            return _DIRECTION_NAMES[direction.lower()]
        except KeyError:
            raise ValueError(
                f"Undefined direction ({direction}), use (Directional)"
            ) from None
    if isinstance(direction, (int, float)) and not isinstance(direction, bool):
        try:
            return EdgeDirection(int(direction))
        except (ValueError, OverflowError):
            raise ValueError(
                f"Undefined direction code ({direction}), use (Directional)"
            ) from None
    raise ValueError(f"Direction not set ({direction!r}), use (Directional)")


@dataclass
class EdgeDefinition(EntityDefinition):
    """Definition of an edge type and the node types it connects."""

    direction: EdgeDirection = EdgeDirection.DIRECTIONAL
    from_node_type: str = ""
    to_node_type: str = ""

    @classmethod
    def from_mapping(cls, info: Mapping[str, Any]) -> EdgeDefinition:
        """Build a definition; an unusable direction falls back to directional."""
        try:
            direction = to_edge_direction(info.get("direction"))
        except ValueError as error:
            logger.warning("%s - %s", info.get("name"), error)
            direction = EdgeDirection.DIRECTIONAL
        from_node_type = _text(info["from"], "from")
        to_node_type = _text(info["to"], "to")
        return cls(
            **_entity_fields(info),
            direction=direction,
            from_node_type=from_node_type,
            to_node_type=to_node_type,
        )


@dataclass
class GraphDefinition:
    """All node and edge definitions of a graph model."""

    id: str
    node_definitions: dict[str, NodeDefinition] = field(default_factory=dict)
    edge_definitions: dict[str, EdgeDefinition] = field(default_factory=dict)

    def node_definition(self, node_type: str) -> NodeDefinition | None:
        return self.node_definitions.get(node_type)

    def edge_definition(self, edge_type: str) -> EdgeDefinition | None:
        return self.edge_definitions.get(edge_type)

    def export(self) -> dict[str, Any]:
        """Plain-data summary of the model: types, keys, directions and attribute types."""
        nodes = {
            "types": list(self.node_definitions),
            "keyMap": {
                name: list(definition.key_definition)
                for name, definition in self.node_definitions.items()
            },
            "attrTypeMap": {
                name: {
                    attr: str(attr_def.data_type)
                    for attr, attr_def in definition.attributes.items()
                }
                for name, definition in self.node_definitions.items()
            },
        }
        edges = {
            "types": list(self.edge_definitions),
            "directionMap": {
                name: definition.direction.value
                for name, definition in self.edge_definitions.items()
            },
            "keyMap": {
                name: list(definition.key_definition)
                for name, definition in self.edge_definitions.items()
            },
            "vertexes": {
                name: [definition.from_node_type, definition.to_node_type]
                for name, definition in self.edge_definitions.items()
            },
            "attrTypeMap": {
                name: {
                    attr: str(attr_def.data_type)
                    for attr, attr_def in definition.attributes.items()
                }
                for name, definition in self.edge_definitions.items()
            },
        }
        return {"nodes": nodes, "edges": edges}


def parse_graph_model(model_id: str, text: str) -> GraphDefinition:
    """Parse a JSON model with ``nodes`` and ``edges`` lists."""
    root = json.loads(text)
    if not isinstance(root, dict):
        raise ValueError("graph model must be a JSON object")

    node_definitions: dict[str, NodeDefinition] = {}
    for node_info in root["nodes"]:
        node_type = _text(node_info["name"], "node name")
        node_definitions[node_type] = NodeDefinition.from_mapping(node_info)

    edge_definitions: dict[str, EdgeDefinition] = {}
    for edge_info in root["edges"]:
        edge_type = _text(edge_info["name"], "edge name")
        edge_definitions[edge_type] = EdgeDefinition.from_mapping(edge_info)

    return GraphDefinition(model_id, node_definitions, edge_definitions)