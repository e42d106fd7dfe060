"""A traversable in-memory graph whose nodes know their incident edges."""

from __future__ import annotations

import contextlib
from dataclasses import replace
from typing import Any

from aircontrib.graph.model import Attribute, Edge, EdgeId, GraphImpl, Node, NodeId


def _update_attributes(target: dict[str, Attribute], source: dict[str, Attribute]) -> None:
    for name, attribute in source.items():
        if attribute.value is None:
            continue
        existing = target.get(name)
        if existing is None:
            target[name] = replace(attribute)
        else:
            with contextlib.suppress(ValueError):
                existing.set_value(attribute.value)


class TraversalNode(Node):
    """A node holding its outbound and inbound edges grouped by edge type."""

    def __init__(self, node: Node) -> None:
        self.type = node.type
        self.key = node.key
        self.key_hash = node.key_hash
        self.attributes = node.attributes
        self.out_edges: dict[str, dict[str, TraversalEdge]] = {}
        self.in_edges: dict[str, dict[str, TraversalEdge]] = {}

    def add_edge(self, edge: TraversalEdge, outbound: bool) -> bool:
        """Register ``edge`` as outbound or inbound."""
        group = self.out_edges if outbound else self.in_edges
        group.setdefault(edge.type, {})[str(edge.edge_id)] = edge
        return True

    def edges(self, outbound: bool) -> dict[str, TraversalEdge]:
        """Outbound or inbound edges of every type, keyed by edge id text."""
        group = self.out_edges if outbound else self.in_edges
        return {
            edge_id: edge for typed in group.values() for edge_id, edge in typed.items()
        }

    def all_edges(self) -> dict[str, TraversalEdge]:
        """Every incident edge, keyed by edge id text."""
        return {**self.edges(True), **self.edges(False)}

    def edges_by_type(self, edge_type: str, outbound: bool) -> dict[str, TraversalEdge]:
        group = self.out_edges if outbound else self.in_edges
        return group.get(edge_type, {})

    def update(self, node: Node) -> None:
        """Copy the non-empty attribute values of ``node`` onto this node."""
        _update_attributes(self.attributes, node.attributes)

    def __repr__(self) -> str:
        return f"TraversalNode({self.type!r}, {self.key!r})"


class TraversalEdge(Edge):
    """An edge holding references to its two traversal nodes."""

    def __init__(self, edge: Edge, from_node: TraversalNode, to_node: TraversalNode) -> None:
        self.type = edge.type
        self.key = edge.key
        self.key_hash = edge.key_hash
        self.attributes = edge.attributes
        self.from_node = from_node
        self.to_node = to_node
        self.update_from(from_node)
        self.update_to(to_node)
        from_node.add_edge(self, True)
        to_node.add_edge(self, False)

    def all_nodes(self) -> list[TraversalNode]:
        """The source node followed by the target node."""
        return [self.from_node, self.to_node]

    def update(self, edge: Edge) -> None:
        """Copy the non-empty attribute values of ``edge`` onto this edge."""
        _update_attributes(self.attributes, edge.attributes)

    def __repr__(self) -> str:
        return f"TraversalEdge({self.type!r}, {self.key!r}, {self.from_node_id}, {self.to_node_id})"


class TraversalGraph:
    """Traversal nodes and edges indexed by id and by type."""

    def __init__(self, model_id: str, graph_id: str) -> None:
        self.id = graph_id
        self.model_id = model_id
        self.model: dict[str, Any] = {}
        self.nodes: dict[NodeId, TraversalNode] = {}
        self.edges: dict[EdgeId, TraversalEdge] = {}
        self._nodes_by_type: dict[str, dict[NodeId, TraversalNode]] = {}
        self._edges_by_type: dict[str, dict[EdgeId, TraversalEdge]] = {}

    def upsert_graph(self, graph: GraphImpl) -> None:
        """Add or update every node and edge of ``graph``."""
        for node in list(graph.nodes.values()):
            self.upsert_node(node)
        for edge in list(graph.edges.values()):
            self.upsert_edge(
                edge, graph.nodes[edge.from_node_id], graph.nodes[edge.to_node_id]
            )

    def upsert_node(self, node: Node) -> TraversalNode:
        """Update the node with the same id, or add ``node`` as a new one."""
        existing = self.nodes.get(node.node_id)
        if existing is not None:
            existing.update(node)
            return existing
        traversal_node = TraversalNode(node)
        self.set_node(traversal_node.node_id, traversal_node)
        return traversal_node

    def upsert_edge(self, edge: Edge, from_node: Node, to_node: Node) -> TraversalEdge:
        """Update the edge with the same id, or add it between the upserted ends."""
        existing = self.edges.get(edge.edge_id)
        if existing is not None:
            existing.update(edge)
            return existing
        source = self.upsert_node(from_node)
        target = self.upsert_node(to_node)
        new_edge = TraversalEdge(edge, source, target)
        self.set_edge(new_edge.edge_id, new_edge)
        return new_edge

    def get_node(self, node_id: NodeId) -> TraversalNode | None:
        return self.nodes.get(node_id)

    def set_node(self, node_id: NodeId, node: TraversalNode) -> None:
        self.nodes[node_id] = node
        self._nodes_by_type.setdefault(node.type, {})[node_id] = node

    def get_edge(self, edge_id: EdgeId) -> TraversalEdge | None:
        return self.edges.get(edge_id)

    def set_edge(self, edge_id: EdgeId, edge: TraversalEdge) -> None:
        self.edges[edge_id] = edge
        self._edges_by_type.setdefault(edge.type, {})[edge_id] = edge

    def nodes_by_type(self, node_type: str) -> dict[NodeId, TraversalNode]:
        return self._nodes_by_type.get(node_type, {})

    def key_names_for_node(self, node_type: str) -> list[str]:
        return self.model["nodes"]["keyMap"].get(node_type, [])

    def key_names_for_edge(self, edge_type: str) -> list[str]:
        return self.model["edges"]["keyMap"].get(edge_type, [])

    def __repr__(self) -> str:
        return (
            f"TraversalGraph(id={self.id!r}, model_id={self.model_id!r}, "
            f"nodes={len(self.nodes)}, edges={len(self.edges)})"
        )