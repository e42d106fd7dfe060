"""Graph entities: attributes, nodes, edges and an in-memory graph."""

from __future__ import annotations

import contextlib
from dataclasses import dataclass
from typing import Any, Iterable

from aircontrib.graph.datatype import DataType
from aircontrib.graph.helper import (
    cast_string,
    convert_to_integer,
    convert_to_long,
    hash_key,
)


@dataclass
class Attribute:
    """A named, typed value on a node or edge."""

    name: str
    data_type: DataType = DataType.STRING
    value: Any = None

    @classmethod
    def create(cls, name: str, data_type: DataType, value: Any) -> Attribute:
        """Make an attribute, converting ``value``; a value that cannot be converted is dropped."""
        attribute = cls(name, data_type)
        with contextlib.suppress(ValueError):
            attribute.set_value(value)
        return attribute

    def set_value(self, value: Any) -> None:
        """Store ``value``, converting it to an integer for integer types."""
        if value is None:
            self.value = None
        elif self.data_type is DataType.INTEGER:
            self.value = convert_to_integer(value)
        elif self.data_type is DataType.LONG:
            self.value = convert_to_long(value)
        else:
            self.value = value


def attribute_text(attribute: Attribute | None) -> str:
    """The trimmed text of an attribute's value; empty for no attribute."""
    if attribute is None:
        return ""
    return cast_string(attribute.value).strip()


@dataclass(frozen=True)
class NodeId:
    """Identity of a node: its type and the hash of its key."""

    type: str
    key_hash: str

    def __str__(self) -> str:
        return f"{self.type}_{self.key_hash}"

    @classmethod
    def from_string(cls, text: str) -> NodeId:
        """Parse the ``type_hash`` form produced by ``str()``."""
        node_type, separator, key_hash = text.rpartition("_")
        if not separator:
            raise ValueError(f"invalid node id: {text!r}")
        return cls(node_type, key_hash)


def new_node_id(node_type: str, key: Iterable[Any]) -> NodeId:
    return NodeId(node_type, hash_key(key))


@dataclass(frozen=True)
class EdgeId:
    """Identity of an edge: its type, key hash and the key hashes of its ends."""

    type: str
    key_hash: str
    from_key_hash: str
    to_key_hash: str

    def __str__(self) -> str:
        return f"{self.type}_{self.key_hash}_{self.from_key_hash}_{self.to_key_hash}"


class Node:
    """A graph node with a key and attributes."""

    def __init__(self, node_type: str, key: Iterable[Any]) -> None:
        self.type = node_type
        self.key = list(key)
        self.key_hash = hash_key(self.key)
        self.attributes: dict[str, Attribute] = {}

    @property
    def node_id(self) -> NodeId:
        return NodeId(self.type, self.key_hash)

    def __repr__(self) -> str:
        return f"Node({self.type!r}, {self.key!r})"


class Edge:
    """A graph edge between two nodes."""

    def __init__(
        self, edge_type: str, key: Iterable[Any], from_node: Node, to_node: Node
    ) -> None:
        self.type = edge_type
        self.key = list(key)
        self.key_hash = hash_key(self.key)
        self.attributes: dict[str, Attribute] = {}
        self.update_from(from_node)
        self.update_to(to_node)

    @property
    def edge_id(self) -> EdgeId:
        return EdgeId(self.type, self.key_hash, self.from_key_hash, self.to_key_hash)

    def update_from(self, node: Node) -> None:
        """Point the edge's source at ``node``."""
        self.from_node_id = node.node_id
        self.from_key = node.key
        self.from_key_hash = node.key_hash

    def update_to(self, node: Node) -> None:
        """Point the edge's target at ``node``."""
        self.to_node_id = node.node_id
        self.to_key = node.key
        self.to_key_hash = node.key_hash

    def __repr__(self) -> str:
        return f"Edge({self.type!r}, {self.key!r}, {self.from_node_id}, {self.to_node_id})"


class GraphImpl:
    """Nodes and edges indexed by id and by type."""

    def __init__(self, model_id: str, graph_id: str) -> None:
        self.id = graph_id
        self.model_id = model_id
        self.model: dict[str, Any] = {}
        self.clear()

    def upsert_node(self, node_type: str, node_key: Iterable[Any]) -> Node:
        """Return the node with this type and key, adding it if new."""
        node = Node(node_type, node_key)
        existing = self.nodes.get(node.node_id)
        if existing is not None:
            return existing
        self.set_node(node.node_id, node)
        return node

    def upsert_edge(
        self, edge_type: str, edge_key: Iterable[Any], from_node: Node, to_node: Node
    ) -> Edge:
        """Return the edge with this type, key and ends, adding it if new."""
        edge = Edge(edge_type, edge_key, from_node, to_node)
        existing = self.edges.get(edge.edge_id)
        if existing is not None:
            return existing
        self.set_edge(edge.edge_id, edge)
        return edge

    @staticmethod
    def _merge_attributes(target: dict[str, Attribute], source: dict[str, Attribute]) -> None:
        for name, attribute in source.items():
            existing = target.get(name)
            if existing is None:
                target[name] = attribute
            else:
                with contextlib.suppress(ValueError):
                    existing.set_value(attribute.value)

    def merge_node(self, node: Node) -> None:
        """Add ``node`` or copy its attributes onto the node already present."""
        existing = self.get_node(node.node_id)
        if existing is not None:
            self._merge_attributes(existing.attributes, node.attributes)
        else:
            self.set_node(node.node_id, node)

    def merge_edge(self, edge: Edge) -> None:
        """Add ``edge`` or copy its attributes onto the edge already present."""
        existing = self.get_edge(edge.edge_id)
        if existing is not None:
            self._merge_attributes(existing.attributes, edge.attributes)
            return
        from_node = self.get_node(edge.from_node_id)
        if from_node is not None:
            edge.update_from(from_node)
        to_node = self.get_node(edge.to_node_id)
        if to_node is not None:
            edge.update_to(to_node)
        self.set_edge(edge.edge_id, edge)

    def merge(self, graph: GraphImpl) -> None:
        """Merge every node, then every edge, of ``graph`` into this graph."""
        for node in list(graph.nodes.values()):
            self.merge_node(node)
        for edge in list(graph.edges.values()):
            self.merge_edge(edge)

    def get_node(self, node_id: NodeId) -> Node | None:
        return self.nodes.get(node_id)

    def set_node(self, node_id: NodeId, node: Node) -> None:
        self.nodes[node_id] = node
        self._nodes_by_type.setdefault(node.type, {})[node_id] = node

    def get_edge(self, edge_id: EdgeId) -> Edge | None:
        return self.edges.get(edge_id)

    def set_edge(self, edge_id: EdgeId, edge: Edge) -> None:
        self.edges[edge_id] = edge
        self._edges_by_type.setdefault(edge.type, {})[edge_id] = edge

    def nodes_by_type(self, node_type: str) -> dict[NodeId, Node]:
        """Nodes of one type, keyed by id."""
        return self._nodes_by_type.get(node_type, {})

    def key_names_for_node(self, node_type: str) -> list[str]:
        """Key attribute names for a node type, from the graph's exported model."""
        return self.model["nodes"]["keyMap"].get(node_type, [])

    def key_names_for_edge(self, edge_type: str) -> list[str]:
        """Key attribute names for an edge type, from the graph's exported model."""
        return self.model["edges"]["keyMap"].get(edge_type, [])

    def clear(self) -> None:
        """Remove all nodes and edges."""
        self.nodes: dict[NodeId, Node] = {}
        self.edges: dict[EdgeId, Edge] = {}
        self._nodes_by_type: dict[str, dict[NodeId, Node]] = {}
        self._edges_by_type: dict[str, dict[EdgeId, Edge]] = {}

    def __repr__(self) -> str:
        return (
            f"GraphImpl(id={self.id!r}, model_id={self.model_id!r}, "
            f"nodes={len(self.nodes)}, edges={len(self.edges)})"
        )