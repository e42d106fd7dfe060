"""Named brokers that forward events to a listener."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class NotificationListener(Protocol):
    """Receives events sent through a broker."""

    def process_event(self, notifier: str, event: dict[str, Any]) -> Any:
        ...


@dataclass
class NotificationBroker:
    """Forwards events to its listener, tagged with the broker's id."""

    id: str
    listener: NotificationListener
    running: bool = field(default=False, compare=False)

    def start(self) -> None:
        logger.debug("(NotificationBroker.start) Start broker : %s", self.id)
        self.running = True

    def stop(self) -> None:
        self.running = False

    def send_event(self, event: dict[str, Any]) -> None:
        logger.debug("(NotificationBroker.send_event) event : %s", event)
        self.listener.process_event(self.id, event)


class NotificationBrokerFactory:
    """Creates and keeps brokers by id."""

    def __init__(self) -> None:
        self._brokers: dict[str, NotificationBroker] = {}
        self._lock = threading.Lock()

    def get_broker(self, broker_id: str) -> NotificationBroker | None:
        return self._brokers.get(broker_id)

    def create_broker(
        self, broker_id: str, listener: NotificationListener
    ) -> NotificationBroker:
        """Return the broker with ``broker_id``, creating it if needed."""
        with self._lock:
            broker = self._brokers.get(broker_id)
            if broker is None:
                broker = NotificationBroker(broker_id, listener)
                self._brokers[broker_id] = broker
            return broker

    def create_brokers(
        self, broker_ids: str, listener: NotificationListener
    ) -> list[NotificationBroker]:
        """Create a broker for every id in a comma separated list."""
        return [self.create_broker(broker_id, listener) for broker_id in broker_ids.split(",")]


_factory: NotificationBrokerFactory | None = None
_factory_lock = threading.Lock()


def get_factory() -> NotificationBrokerFactory:
    """Return the process-wide broker factory."""
    global _factory
    with _factory_lock:
        if _factory is None:
            _factory = NotificationBrokerFactory()
        return _factory