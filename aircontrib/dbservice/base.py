"""Graph database service interfaces and a registry of service instances."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from aircontrib.graph.model import GraphImpl


class DBType(Enum):
    """Kind of graph database behind a service."""

    TGDB = 0
    DGRAPH = 1
    NEO4J = 2


class UpsertService(ABC):
    """A service that inserts or updates graphs in a database."""

    @abstractmethod
    def upsert_graph(self, graph: GraphImpl, graph_too: dict[str, Any] | None) -> None:
        """Insert or update the nodes and edges of ``graph``."""

    @abstractmethod
    def delete_graph(self, filter_code: int, graph_too: dict[str, Any] | None) -> None:
        """Delete the graph entities selected by ``filter_code``."""


class ImportService(ABC):
    """A service that writes whole graphs for bulk import."""

    @abstractmethod
    def write_graph(self, graph: GraphImpl) -> None:
        """Write every node and edge of ``graph``."""


@dataclass
class BaseDBServiceFactory:
    """Keeps service instances by id."""

    services: dict[str, Any] = field(default_factory=dict)
    initialized: bool = field(default=False, init=False)

    def initialize(self) -> None:
        """Mark the factory ready for use; calling it again is harmless."""
        self.initialized = True

    def _lookup(self, service_id: str, kind: type) -> Any:
        service = self.services.get(service_id)
        if service is None:
            return None
        if not isinstance(service, kind):
            raise TypeError(
                f"service {service_id!r} is not a {kind.__name__}: {type(service).__name__}"
            )
        return service

    def get_upsert_service(self, service_id: str) -> UpsertService | None:
        """The upsert service registered as ``service_id``, or ``None``."""
        return self._lookup(service_id, UpsertService)

    def get_import_service(self, service_id: str) -> ImportService | None:
        """The import service registered as ``service_id``, or ``None``."""
        return self._lookup(service_id, ImportService)