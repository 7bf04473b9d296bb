"""Time-bounded cache for derived statistics."""

import time
import logging
from threading import Lock
from typing import Callable, Dict, Generic, Hashable, Optional, Tuple, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar('K', bound=Hashable)
V = TypeVar('V')


class TTLCache(Generic[K, V]):
    """
    Key/value cache whose entries expire ``ttl`` seconds after they were built.

    Writes elsewhere in the system do not invalidate entries; a value may be
    stale for up to one TTL window unless :meth:`invalidate` is called.
    Rebuilds run under a lock and the new value replaces the old one only
    once it is complete, so readers never see a partial result.
    """

    def __init__(self, ttl: float, clock: Callable[[], float] = time.monotonic):
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[K, Tuple[float, V]] = {}
        self._lock = Lock()

    def _fresh(self, key: K) -> Optional[Tuple[float, V]]:
        item = self._entries.get(key)
        if item is None:
            return None
        built_at, _ = item
        if self._clock() - built_at >= self.ttl:
            return None
        return item

    def get_or_compute(self, key: K, compute: Callable[[], V]) -> V:
        item = self._fresh(key)
        if item is not None:
            return item[1]

        with self._lock:
            # Another thread may have rebuilt while we waited
            item = self._fresh(key)
            if item is not None:
                return item[1]
            logger.info(f"Rebuilding cached value for {key!r}")
            value = compute()
            self._entries[key] = (self._clock(), value)
            return value

    def invalidate(self, key: Optional[K] = None) -> None:
        """Drop one entry, or every entry when ``key`` is None"""
        with self._lock:
            if key is None:
                self._entries.clear()
            else:
                self._entries.pop(key, None)
