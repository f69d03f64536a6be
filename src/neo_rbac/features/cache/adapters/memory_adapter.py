"""In-memory cache backend adapter for neo-rbac.

Suitable for single-process deployments and tests. The store is bounded by
``max_size``: a full store first drops expired entries, then the oldest ones.
A bounded log of recently deleted keys lets callers assert exactly which
entries were invalidated.
"""

import time
import logging
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class MemoryCacheEntry:
    """Memory cache entry with absolute expiry."""
    value: str
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class MemoryCacheAdapter:
    """Dict-backed CacheBackend with TTL and a size bound."""

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        max_size: int = 10000,
        deleted_log_size: int = 1000
    ):
        self._store: Dict[str, MemoryCacheEntry] = {}
        self._clock = clock
        self.max_size = max_size
        self.deleted_keys: Deque[str] = deque(maxlen=deleted_log_size)

    @property
    def size(self) -> int:
        return len(self._store)

    async def get(self, key: str) -> Optional[str]:
        entry = self._store.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            del self._store[key]
            return None
        return entry.value

    async def set(self, key: str, value: str, ttl: int) -> None:
        self._store.pop(key, None)
        if len(self._store) >= self.max_size:
            self._make_room()
        self._store[key] = MemoryCacheEntry(value=value, expires_at=self._clock() + ttl)

    async def delete(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            self.deleted_keys.append(key)
            if self._store.pop(key, None) is not None:
                removed += 1
        return removed

    def _cleanup_expired(self) -> int:
        now = self._clock()
        expired = [key for key, entry in self._store.items() if entry.is_expired(now)]
        for key in expired:
            del self._store[key]
        return len(expired)

    def _make_room(self) -> None:
        """Drop expired entries, then the oldest, until one slot is free."""
        expired = self._cleanup_expired()
        evicted = 0
        while len(self._store) >= self.max_size and self._store:
            del self._store[next(iter(self._store))]
            evicted += 1
        if evicted:
            logger.debug(f"Memory cache full: dropped {expired} expired and {evicted} oldest entries")

    def __contains__(self, key: str) -> bool:
        entry = self._store.get(key)
        return entry is not None and not entry.is_expired(self._clock())

    def clear(self) -> None:
        self._store.clear()
        self.deleted_keys.clear()
