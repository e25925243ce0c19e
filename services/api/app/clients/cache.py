"""In-memory cache with time-based expiry.

No invalidation besides expiry and clear(); concurrent misses for the same
key are not deduplicated.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import time
from typing import Generic, TypeVar

V = TypeVar("V")


@dataclass
class _Entry(Generic[V]):
    value: V
    stored_at: float


class TTLCache(Generic[V]):
    """Key/value cache where entries expire `ttl_seconds` after being set.

    Args:
        ttl_seconds: Entry lifetime.
        clock: Returns the current time in seconds (inject a fake in tests).
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, _Entry[V]] = {}

    def get(self, key: str) -> V | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.stored_at >= self.ttl_seconds:
            del self._entries[key]
            return None
        return entry.value

    def set(self, key: str, value: V) -> None:
        self._entries[key] = _Entry(value=value, stored_at=self._clock())

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
