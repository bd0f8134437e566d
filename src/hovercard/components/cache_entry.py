from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """Fetched payload with its fetch time and time-to-live (seconds)."""

    key: str
    value: Any
    fetched_at: float
    ttl: float

    def is_expired(self, now: float) -> bool:
        return not now < self.fetched_at + self.ttl
