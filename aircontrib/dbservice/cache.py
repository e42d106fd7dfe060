"""A fixed-size ring cache that reuses its slots in order."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


class CacheOverflowError(RuntimeError):
    """Raised when the cache index holds more keys than the cache has slots."""


@dataclass
class _Entry:
    key: str = ""
    data: Any = None

    def clear(self) -> None:
        self.key = ""
        self.data = None


class Cache:
    """Ring of ``size`` slots; each add takes the next slot and evicts its old key.

    A size below one disables the cache: adds are ignored and gets miss.
    A hit moves the entry to the next slot.
    """

    def __init__(self, size: int) -> None:
        self.size = size
        self.disabled = size < 1
        self._ring = [_Entry() for _ in range(max(size, 0))]
        self._current = 0
        self._index: dict[str, _Entry] = {}
        self._lock = threading.RLock()

    def add(self, key: str, data: Any) -> None:
        """Store ``data`` under ``key`` in the next slot."""
        with self._lock:
            if self.disabled:
                return
            entry = self._ring[self._current]
            if entry.data is not None:
                self._index.pop(entry.key, None)
            entry.key = key
            entry.data = data
            self._index[key] = entry
            self._current = (self._current + 1) % self.size
            if len(self._index) > self.size:
                raise CacheOverflowError("Cache repository over size!!")

    def get(self, key: str) -> Any:
        """The data stored under ``key``, or ``None`` on a miss."""
        with self._lock:
            if self.disabled:
                return None
            target = self._index.get(key)
            if target is None:
                logger.debug("Cache MISS ! key = %s", key)
                return None
            logger.debug("Cache HIT ! key = %s", key)
            data = target.data
            target.clear()
            self.add(key, data)
            return data

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, key: object) -> bool:
        return key in self._index