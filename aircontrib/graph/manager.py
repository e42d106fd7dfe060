"""A process-wide registry of graphs by id."""

from __future__ import annotations

import threading
from enum import Enum
from typing import Union

from aircontrib.graph.inmemory import TraversalGraph
from aircontrib.graph.model import GraphImpl

ManagedGraph = Union[TraversalGraph, GraphImpl]


class GraphType(Enum):
    """Kind of graph a manager creates."""

    GRAPH = 0
    TGRAPH = 1


def create_graph(graph_type: GraphType, model_id: str, graph_id: str) -> ManagedGraph:
    """A new graph: traversal for ``GRAPH``, plain for ``TGRAPH``."""
    if graph_type is GraphType.GRAPH:
        return TraversalGraph(model_id, graph_id)
    if graph_type is GraphType.TGRAPH:
        return GraphImpl(model_id, graph_id)
    raise ValueError(f"unknown graph type: {graph_type!r}")


class GraphManager:
    """Creates graphs on first request and returns the same graph afterwards."""

    def __init__(self) -> None:
        self._graphs: dict[str, ManagedGraph] = {}
        self._lock = threading.Lock()

    def get_graph(self, graph_type: GraphType, model_id: str, graph_id: str) -> ManagedGraph:
        """The graph with ``graph_id``, created with the given type if absent."""
        graph = self._graphs.get(graph_id)
        if graph is None:
            with self._lock:
                graph = self._graphs.get(graph_id)
                if graph is None:
                    graph = create_graph(graph_type, model_id, graph_id)
                    self._graphs[graph_id] = graph
        return graph


_manager: GraphManager | None = None
_manager_lock = threading.Lock()


def get_graph_manager() -> GraphManager:
    """Return the process-wide graph manager."""
    global _manager
    with _manager_lock:
        if _manager is None:
            _manager = GraphManager()
        return _manager