"""Read-through resource cache with TTL expiry and explicit invalidation."""

from __future__ import annotations

import logging
from collections import OrderedDict
from time import monotonic
from typing import Any, Callable

from hovercard.components.cache_entry import CacheEntry

LOGGER = logging.getLogger("hovercard.cache")


class _Miss:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISS"

    def __bool__(self) -> bool:
        return False


MISS: Any = _Miss()


class ResourceCache:
    """Maps resource keys to previously fetched values.

    ``get`` answers ``MISS`` for absent or expired keys; callers fetch and
    ``put`` on a miss. Concurrent fetches for the same key are not
    deduplicated here. With ``max_entries`` set, the least recently used
    entry is evicted once the bound is exceeded; ``None`` leaves the cache
    unbounded.
    """

    def __init__(
        self,
        *,
        max_entries: int | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        if max_entries is not None and max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._max_entries = max_entries
        self._clock = clock or monotonic
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return self.get(key) is not MISS  # type: ignore[arg-type]

    def get(self, key: str) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return MISS
        if entry.is_expired(self._clock()):
            del self._entries[key]
            LOGGER.debug("Cache entry expired: %s", key)
            return MISS
        self._entries.move_to_end(key)
        return entry.value

    def entry(self, key: str) -> CacheEntry | None:
        entry = self._entries.get(key)
        if entry is None or entry.is_expired(self._clock()):
            return None
        return entry

    def put(self, key: str, value: Any, ttl: float) -> None:
        self._entries.pop(key, None)
        self._entries[key] = CacheEntry(key=key, value=value, fetched_at=self._clock(), ttl=float(ttl))
        if self._max_entries is not None:
            while len(self._entries) > self._max_entries:
                evicted, _ = self._entries.popitem(last=False)
                LOGGER.debug("Cache evicted least recently used entry: %s", evicted)

    def invalidate(self, key: str) -> bool:
        removed = self._entries.pop(key, None) is not None
        if removed:
            LOGGER.debug("Cache entry invalidated: %s", key)
        return removed

    def prune(self) -> int:
        now = self._clock()
        stale = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()
