"""Building graphs from attribute maps, and exporting them to plain data."""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from typing import Any

from aircontrib.graph.datatype import to_type_enum
from aircontrib.graph.helper import cast_string, is_integer
from aircontrib.graph.metadata import AttributeDefinition, EdgeDefinition, GraphDefinition
from aircontrib.graph.model import Attribute, Edge, GraphImpl, Node, NodeId

logger = logging.getLogger(__name__)

_SKIP = "_skipCondition"
_VERTICES = "vertices"


def _node_type_of(conf_key: str) -> str:
    """Strip a trailing ``_<integer>`` suffix from a node configuration key."""
    pos = conf_key.rfind("_")
    if pos >= 0 and is_integer(conf_key[pos + 1 :]):
        return conf_key[:pos]
    return conf_key


def _as_attributes(value: Any, what: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise TypeError(f"{what} attributes must be a mapping, got {value!r}")
    return dict(value)


def _first_mapping(value: Any) -> Any:
    """The first element of a wrapper list, or ``None`` when there is none."""
    if isinstance(value, list) and value:
        return value[0]
    return None


def _pop_skip(attributes: dict[str, Any]) -> bool:
    skip = attributes.pop(_SKIP, None)
    if skip is None:
        return False
    if not isinstance(skip, bool):
        raise TypeError(f"{_SKIP} must be a boolean, got {skip!r}")
    return skip


def _as_vertices(value: Any) -> Mapping[str, Any]:
    if value is None:
        return {}
    if isinstance(value, Mapping):
        return value
    if isinstance(value, list):
        first = value[0] if value else None
        if first is None:
            return {}
        if isinstance(first, Mapping):
            return first
    raise TypeError(f"vertices must be a mapping, got {value!r}")


def _make_attribute(
    definitions: Mapping[str, AttributeDefinition], name: str, value: Any, entity: str
) -> Attribute:
    definition = definitions.get(name)
    if definition is None:
        raise ValueError(f"attribute {name!r} is not defined for {entity!r}")
    return Attribute.create(definition.name, definition.data_type, value)


def _attributes_data(attributes: Mapping[str, Attribute]) -> dict[str, Any]:
    return {
        name: {
            "name": attribute.name,
            "value": attribute.value,
            "type": str(attribute.data_type),
        }
        for name, attribute in attributes.items()
    }


def _restore_attributes(data: Any) -> dict[str, Attribute]:
    restored: dict[str, Attribute] = {}
    for name, value in (data or {}).items():
        data_type, _ = to_type_enum(cast_string(value.get("type")))
        restored[name] = Attribute(
            name=cast_string(value.get("name")),
            data_type=data_type,
            value=value.get("value"),
        )
    return restored


class GraphBuilder:
    """Creates graphs and fills them from node and edge attribute maps."""

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def create_graph(self, graph_id: str, definition: GraphDefinition) -> GraphImpl:
        """A new empty graph carrying the exported form of ``definition``."""
        graph = GraphImpl(definition.id, graph_id)
        graph.model = definition.export()
        return graph

    def create_undefined_graph(self, model_id: str, graph_id: str) -> GraphImpl:
        """A new empty graph with no model attached."""
        return GraphImpl(model_id, graph_id)

    def build_graph(
        self,
        graph: GraphImpl,
        definition: GraphDefinition,
        nodes: Any,
        edges: Any,
        allow_null_key: bool,
    ) -> None:
        """Add the nodes and edges described by two maps keyed by configuration key.

        Node keys may carry a ``_<n>`` suffix to give several nodes of one type.
        When ``edges`` is not a mapping, every edge type of the model is built
        with no attributes.
        """
        logger.debug("[GraphBuilder.build_graph] nodes : %s, edges : %s", nodes, edges)
        if not isinstance(nodes, Mapping):
            raise ValueError("Illegal nodes, shall be a mapping of node attributes")

        node_map: dict[str, Node] = {}
        for conf_key, node_info in nodes.items():
            attributes = _as_attributes(node_info, conf_key)
            if _pop_skip(attributes):
                continue
            node = self.build_node(
                graph, definition, _node_type_of(conf_key), attributes, allow_null_key
            )
            if node is not None:
                node_map[conf_key] = node

        if not isinstance(edges, Mapping):
            edges = {edge_type: {} for edge_type in definition.edge_definitions}

        for edge_type, edge_info in edges.items():
            attributes = _as_attributes(edge_info, edge_type)
            if _pop_skip(attributes):
                continue
            if attributes.get(_VERTICES) is None:
                attributes[_VERTICES] = {}
            self.build_edge(
                graph, definition, node_map, edge_type, attributes, allow_null_key
            )

    def build_graph_legacy(
        self,
        graph: GraphImpl,
        definition: GraphDefinition,
        nodes: Any,
        edges: Any,
        allow_null_key: bool,
    ) -> None:
        """Like :meth:`build_graph`, for maps wrapped in single-element lists.

        ``nodes`` and ``edges`` are lists whose first element is the map, and
        each attribute map is itself the first element of a list.
        """
        logger.debug("[GraphBuilder.build_graph_legacy] nodes : %s, edges : %s", nodes, edges)
        node_map: dict[str, Node] = {}
        wrapped_nodes = _first_mapping(nodes)
        if isinstance(wrapped_nodes, Mapping):
            for conf_key, node_info in wrapped_nodes.items():
                attributes = _as_attributes(_first_mapping(node_info), conf_key)
                if _pop_skip(attributes):
                    continue
                node = self.build_node(
                    graph, definition, _node_type_of(conf_key), attributes, allow_null_key
                )
                if node is not None:
                    node_map[conf_key] = node

        wrapped_edges = _first_mapping(edges)
        if isinstance(wrapped_edges, Mapping):
            for edge_type, edge_info in wrapped_edges.items():
                attributes = _as_attributes(_first_mapping(edge_info), edge_type)
                if _pop_skip(attributes):
                    continue
                self.build_edge(
                    graph, definition, node_map, edge_type, attributes, allow_null_key
                )

    def build_node(
        self,
        graph: GraphImpl,
        definition: GraphDefinition,
        node_type: str,
        attributes: Mapping[str, Any],
        allow_null_key: bool,
    ) -> Node | None:
        """Upsert a node of ``node_type`` and set its attributes.

        Returns ``None`` when a key attribute is missing and null keys are not allowed.
        """
        node_definition = definition.node_definition(node_type)
        if node_definition is None:
            raise ValueError(f"node type {node_type!r} is not defined")
        with self._lock:
            key = [attributes.get(name) for name in node_definition.key_definition]
            if not allow_null_key and any(element is None for element in key):
                return None
            new_attributes = [
                _make_attribute(node_definition.attributes, name, value, node_type)
                for name, value in attributes.items()
            ]
            node = graph.upsert_node(node_type, key)
            for attribute in new_attributes:
                node.attributes[attribute.name] = attribute
            return node

    def build_edge(
        self,
        graph: GraphImpl,
        definition: GraphDefinition,
        node_map: Mapping[str, Node],
        edge_type: str,
        attributes: Mapping[str, Any],
        allow_null_key: bool,
    ) -> None:
        """Upsert edges of ``edge_type`` between every pair of end nodes.

        The ``vertices`` entry names which ends come from ``node_map``; an end
        that is not named covers every node of its type in the graph.
        """
        logger.debug("[GraphBuilder.build_edge] edge type : %s", edge_type)
        edge_definition = definition.edge_definition(edge_type)
        if edge_definition is None:
            raise ValueError(f"edge type {edge_type!r} is not defined")
        with self._lock:
            values = dict(attributes)
            vertices = _as_vertices(values.pop(_VERTICES, None))
            from_nodes, to_nodes = self._build_vertexes(
                graph, edge_definition, node_map, vertices
            )
            key = [values.get(name) for name in edge_definition.key_definition]
            for from_node in from_nodes:
                for to_node in to_nodes:
                    edge = graph.upsert_edge(edge_type, key, from_node, to_node)
                    for name, value in values.items():
                        attribute = _make_attribute(
                            edge_definition.attributes, name, value, edge_type
                        )
                        edge.attributes[attribute.name] = attribute

    @staticmethod
    def _build_vertexes(
        graph: GraphImpl,
        edge_definition: EdgeDefinition,
        node_map: Mapping[str, Node],
        vertices: Mapping[str, Any],
    ) -> tuple[list[Node], list[Node]]:
        def ends(conf_key: Any, node_type: str) -> list[Node]:
            if conf_key is None:
                return list(graph.nodes_by_type(node_type).values())
            node = node_map.get(node_type)
            if node is None:
                raise ValueError(f"no node of type {node_type!r} was built for this edge")
            return [node]

        return (
            ends(vertices.get("from"), edge_definition.from_node_type),
            ends(vertices.get("to"), edge_definition.to_node_type),
        )

    def export(self, graph: GraphImpl, definition: GraphDefinition) -> dict[str, Any]:
        """Plain-data form of ``graph`` that :func:`reconstruct_graph` reads back."""
        nodes = {
            str(node_id): {
                "type": node.type,
                "keyAttributeName": list(
                    definition.node_definitions[node.type].key_definition
                ),
                "key": node.key,
                "attributes": _attributes_data(node.attributes),
            }
            for node_id, node in graph.nodes.items()
        }
        edges = {
            str(edge_id): {
                "type": edge.type,
                "from": str(edge.from_node_id),
                "to": str(edge.to_node_id),
                "keyAttributeName": list(
                    definition.edge_definitions[edge.type].key_definition
                ),
                "key": edge.key,
                "attributes": _attributes_data(edge.attributes),
            }
            for edge_id, edge in graph.edges.items()
        }
        return {
            "id": graph.id,
            "modelId": graph.model_id,
            "model": definition.export(),
            "nodes": nodes,
            "edges": edges,
        }


def reconstruct_graph(data: Mapping[str, Any]) -> GraphImpl:
    """Rebuild a graph from the output of :meth:`GraphBuilder.export`."""
    graph = GraphImpl(data["modelId"], data["id"])
    graph.model = dict(data["model"])

    for node_data in (data.get("nodes") or {}).values():
        node = Node(cast_string(node_data.get("type")), list(node_data.get("key") or []))
        node.attributes.update(_restore_attributes(node_data.get("attributes")))
        graph.set_node(node.node_id, node)

    for edge_data in (data.get("edges") or {}).values():
        ends = []
        for end in ("from", "to"):
            node_id = NodeId.from_string(cast_string(edge_data.get(end)))
            node = graph.get_node(node_id)
            if node is None:
                raise ValueError(f"edge refers to unknown node {node_id}")
            ends.append(node)
        edge = Edge(
            cast_string(edge_data.get("type")),
            list(edge_data.get("key") or []),
            ends[0],
            ends[1],
        )
        edge.attributes.update(_restore_attributes(edge_data.get("attributes")))
        graph.set_edge(edge.edge_id, edge)

    return graph