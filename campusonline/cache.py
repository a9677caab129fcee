"""Short-lived in-memory cache for raw CAMPUSonline responses."""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from threading import Lock
from typing import Callable, Optional, Tuple, Union

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 60.0
DEFAULT_MAX_ENTRIES = 10_000
DEFAULT_MAX_COST = 1 << 30
ENTRY_COST = 1


def cache_key(endpoint: str, param: Union[str, int]) -> str:
    return f"{endpoint}:{param}"


@dataclass(frozen=True)
class _CacheEntry:
    value: bytes
    cost: int
    expires_at: float


class FetchCache:
    """
    TTL cache in front of outbound fetches.

    Entries expire after `ttl` seconds. Beyond that the cache is bounded by
    entry count and total cost; the oldest entries go first. A miss is never
    an error: callers simply fetch again.
    """

    def __init__(
        self,
        ttl: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        max_cost: int = DEFAULT_MAX_COST,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = float(ttl)
        self._max_entries = max(1, int(max_entries))
        self._max_cost = max(1, int(max_cost))
        self._clock = clock
        self._data: "OrderedDict[str, _CacheEntry]" = OrderedDict()
        self._cost = 0
        self._lock = Lock()
        self.hit_count = 0
        self.miss_count = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def get(self, key: str) -> Optional[bytes]:
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            if entry.expires_at <= self._clock():
                self._remove(key)
                return None
            return entry.value

    def set(self, key: str, value: bytes) -> None:
        with self._lock:
            if key in self._data:
                self._remove(key)
            self._data[key] = _CacheEntry(value=value, cost=ENTRY_COST, expires_at=self._clock() + self._ttl)
            self._cost += ENTRY_COST
            while len(self._data) > self._max_entries or self._cost > self._max_cost:
                oldest, _ = next(iter(self._data.items()))
                self._remove(oldest)

    def get_or_fetch(self, key: str, fetch: Callable[[], bytes]) -> bytes:
        """
        Return the cached value for key, or call fetch and cache its result.

        Exceptions from fetch propagate and nothing is cached. Two callers
        missing the same key at once both fetch; the later write wins.
        """
        cached = self.get(key)
        if cached is not None:
            with self._lock:
                self.hit_count += 1
            return cached

        with self._lock:
            self.miss_count += 1
        logger.debug("cache miss: %s", key)

        value = fetch()
        self.set(key, value)
        return value

    def stats(self) -> Tuple[int, int]:
        with self._lock:
            return self.hit_count, self.miss_count

    def clear(self) -> None:
        with self._lock:
            self._data.clear()
            self._cost = 0
            self.hit_count = 0
            self.miss_count = 0

    def _remove(self, key: str) -> None:
        entry = self._data.pop(key)
        self._cost -= entry.cost
