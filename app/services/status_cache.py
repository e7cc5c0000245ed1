"""
In-memory subscription status cache with stale reads.
"""
from __future__ import annotations

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Optional


@dataclass(frozen=True)
class CacheEntry:
    key: int
    value: str
    stored_at: float
    ttl: float

    def is_fresh(self, now: float) -> bool:
        return now < self.stored_at + self.ttl

    @property
    def expires_at(self) -> float:
        return self.stored_at + self.ttl


class StatusCache:
    """Time-expiring user id -> status store.

    Expired entries stay readable through ``read_stale`` until they are
    overwritten, invalidated or pushed out by the optional LRU bound.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        max_entries: Optional[int] = None,
    ):
        self._clock = clock
        self._max_entries = max_entries
        self._entries: "OrderedDict[int, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()

    def read(self, key: int) -> Optional[str]:
        """Return the value only while it is fresh."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or not entry.is_fresh(self._clock()):
                return None
            self._touch(key)
            return entry.value

    def read_stale(self, key: int) -> Optional[str]:
        """Return the last stored value regardless of freshness."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            self._touch(key)
            return entry.value

    def write(self, key: int, value: str, ttl: float) -> None:
        entry = CacheEntry(key=key, value=value, stored_at=self._clock(), ttl=ttl)
        with self._lock:
            self._entries[key] = entry
            self._touch(key)
            if self._max_entries is not None:
                while len(self._entries) > self._max_entries:
                    self._entries.popitem(last=False)

    def invalidate(self, key: int) -> bool:
        """Drop the entry; returns whether one existed."""
        with self._lock:
            return self._entries.pop(key, None) is not None

    def entry(self, key: int) -> Optional[CacheEntry]:
        with self._lock:
            return self._entries.get(key)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _touch(self, key: int) -> None:
        # caller holds the lock
        if self._max_entries is not None:
            self._entries.move_to_end(key)
