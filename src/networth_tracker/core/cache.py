"""In-memory cache with entry ages, injected into rate and price providers."""

import time
from typing import Callable, Generic, Optional, TypeVar

V = TypeVar("V")


class MemoryCache(Generic[V]):
    """Key/value store that remembers when each value was written.

    get() returns (value, age_in_seconds) or None on a miss; the caller
    decides whether the age is acceptable. Entries never expire on their
    own so that a stale value remains available as a fallback.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: dict[str, tuple[V, float]] = {}

    @staticmethod
    def _key(key: str) -> str:
        return key.strip().upper()

    def get(self, key: str) -> Optional[tuple[V, float]]:
        entry = self._entries.get(self._key(key))
        if entry is None:
            return None
        value, stored_at = entry
        return value, self._clock() - stored_at

    def get_fresh(self, key: str, ttl: float) -> Optional[V]:
        """Return the value only if it is younger than ttl seconds."""
        hit = self.get(key)
        if hit is None:
            return None
        value, age = hit
        return value if age < ttl else None

    def put(self, key: str, value: V) -> None:
        self._entries[self._key(key)] = (value, self._clock())

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
