# product_catalog/cache.py
"""
Bounded in-memory LRU store.

This is a per-process cache. If you run multiple gunicorn workers, each worker has its own store.
Freshness is not judged here; see loading.CachedAccessor.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")

log = logging.getLogger(__name__)

DEFAULT_CAPACITY = 100


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """A single cached value and the clock reading when it was produced."""
    value: T
    created_at: float


class CacheStore:
    """A capacity-bounded, thread-safe key/value store with least-recently-used eviction."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        """Initialize an empty store holding at most `capacity` entries."""
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._capacity = capacity
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def get(self, key: str) -> Optional[CacheEntry]:
        """Return the entry for key (fresh or not) and mark it most recently used."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                self._entries.move_to_end(key)
            return entry

    def peek(self, key: str) -> Optional[CacheEntry]:
        """Return the entry for key without touching recency."""
        with self._lock:
            return self._entries.get(key)

    def put(self, key: str, entry: CacheEntry) -> None:
        """
        Insert or overwrite an entry and mark it most recently used.

        If the store grows past capacity, least-recently-used keys are evicted.
        The key just written is never the one evicted.
        """
        with self._lock:
            self._entries[key] = entry
            self._entries.move_to_end(key)
            while len(self._entries) > self._capacity:
                evicted, _ = self._entries.popitem(last=False)
                log.debug("cache evict key=%s", evicted)

    def invalidate(self, key: str) -> bool:
        """Remove key unconditionally. Returns True if an entry was removed."""
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        """Clear all cached entries."""
        with self._lock:
            self._entries.clear()

    def keys(self) -> List[str]:
        """Snapshot of keys, least recently used first."""
        with self._lock:
            return list(self._entries.keys())

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries
