"""Simple in-memory TTL cache for upstream responses. No Redis needed.

Keys are full upstream URLs, query string included. Entries are only
evicted lazily, when a lookup finds them expired. There is no size bound
and no locking: concurrent misses on the same key both fetch and the last
writer wins, which is fine because upstream calls are idempotent GETs.
"""

import time
from typing import Any, Callable


class TTLCache:
    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._store: dict[str, tuple[float, Any]] = {}

    def get(self, key: str) -> Any | None:
        if key in self._store:
            expires_at, value = self._store[key]
            if self._clock() <= expires_at:
                return value
            del self._store[key]
        return None

    def set(self, key: str, value: Any, ttl_seconds: float = 300) -> None:
        self._store[key] = (self._clock() + ttl_seconds, value)

    def __len__(self) -> int:
        return len(self._store)
