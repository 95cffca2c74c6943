"""Small in-memory TTL cache.

Entries remember when they were inserted; an entry whose age has reached
the TTL is treated as absent on the next lookup. Expiry is only checked
on access. An optional maxsize bounds memory with LRU eviction.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")

Clock = Callable[[], float]


@dataclass(slots=True)
class CacheEntry(Generic[T]):
    value: T
    inserted_at: float  # clock() seconds


class TTLCache(Generic[T]):
    def __init__(
        self,
        *,
        ttl_seconds: float,
        maxsize: Optional[int] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self._ttl = float(ttl_seconds)
        self._maxsize = None if maxsize is None else max(1, int(maxsize))
        # Monotonic by default so wall-clock jumps don't expire entries.
        self._clock: Clock = clock or time.monotonic
        self._store: "OrderedDict[object, CacheEntry[T]]" = OrderedDict()

    def get(self, key: object) -> Optional[T]:
        entry = self._store.get(key)
        if entry is None:
            return None

        if self._clock() - entry.inserted_at >= self._ttl:
            self._store.pop(key, None)
            return None

        self._store.move_to_end(key, last=True)
        return entry.value

    def set(self, key: object, value: T) -> None:
        self._store[key] = CacheEntry(value=value, inserted_at=self._clock())
        self._store.move_to_end(key, last=True)

        if self._maxsize is not None:
            while len(self._store) > self._maxsize:
                self._store.popitem(last=False)

    def clear(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)
