"""
In-Memory Cache
===============
Process-local cache for development and testing.
"""

import asyncio
import math
import time
from typing import Callable, Dict, Optional, Tuple


class InMemoryCache:
    """
    Process-local implementation of the cache contract.

    For development and testing only.
    Use RedisCache when more than one process serves logins.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: Dict[str, Tuple[str, float]] = {}
        self._lock = asyncio.Lock()

    def _live(self, key: str) -> Optional[Tuple[str, float]]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry[1] <= self._clock():
            del self._entries[key]
            return None
        return entry

    async def get(self, key: str) -> Optional[str]:
        async with self._lock:
            entry = self._live(key)
            return entry[0] if entry else None

    async def set(
        self,
        key: str,
        value: str,
        ttl: int,
        *,
        only_if_absent: bool = False,
    ) -> bool:
        async with self._lock:
            if only_if_absent and self._live(key) is not None:
                return False
            self._entries[key] = (value, self._clock() + ttl)
            return True

    async def delete(self, key: str) -> None:
        async with self._lock:
            self._entries.pop(key, None)

    async def ttl(self, key: str) -> Optional[int]:
        async with self._lock:
            entry = self._live(key)
            if entry is None:
                return None
            return math.ceil(entry[1] - self._clock())

    async def compare_and_set(self, key: str, expected: str, value: str) -> bool:
        async with self._lock:
            entry = self._live(key)
            if entry is None or entry[0] != expected:
                return False
            self._entries[key] = (value, entry[1])
            return True

    async def compare_and_delete(self, key: str, expected: str) -> bool:
        async with self._lock:
            entry = self._live(key)
            if entry is None or entry[0] != expected:
                return False
            del self._entries[key]
            return True
