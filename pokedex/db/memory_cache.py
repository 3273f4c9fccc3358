"""Volatile, process-wide key/value cache with per-entry expiry.

Entries are checked lazily on read; there is no background eviction.  A
cached value may itself be ``None`` (e.g. a remembered "not found"), so
lookups report misses through :data:`MISSING` rather than ``None``.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

MISSING: Any = object()


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """A cached value together with the moment it was stored and its lifetime."""

    value: T
    inserted_at: float
    ttl: float

    def is_expired(self, now: float) -> bool:
        return now - self.inserted_at > self.ttl


class MemoryCache:
    """String-keyed TTL cache shared by concurrent requests.

    Population is not de-duplicated: two requests missing the same key at the
    same time may both build the value, and the last write wins.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Any:
        """Return the live value for *key*, or :data:`MISSING`."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return MISSING
            if entry.is_expired(self._clock()):
                del self._entries[key]
                logger.debug("Cache entry expired: %s", key)
                return MISSING
            return entry.value

    def set(self, key: str, value: T, ttl: float) -> T:
        """Store *value* under *key*, replacing any previous entry."""
        with self._lock:
            self._entries[key] = CacheEntry(value=value, inserted_at=self._clock(), ttl=ttl)
        return value

    async def get_or_create(
        self,
        key: str,
        factory: Callable[[], Awaitable[T]],
        ttl: float,
    ) -> T:
        """Return the cached value for *key*, building it with *factory* on a miss.

        If *factory* raises, nothing is stored and the exception propagates,
        so the next call tries again.
        """
        cached = self.get(key)
        if cached is not MISSING:
            return cached
        logger.debug("Cache miss: %s", key)
        value = await factory()
        return self.set(key, value, ttl)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
