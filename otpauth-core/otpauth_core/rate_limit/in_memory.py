"""
In-Memory Rate Limiter
======================
Fixed-window request limiter for development and testing.
"""

import asyncio
import time
from typing import Callable, Dict

from .models import RateLimitInfo


class InMemoryRateLimiter:
    """
    Simple in-memory fixed-window rate limiter.

    For development and testing only.
    Use RedisRateLimiter when more than one process serves logins.
    """

    def __init__(self, rate: int = 5, window: int = 60, clock: Callable[[], float] = time.time):
        """
        Args:
            rate: Number of requests allowed per window
            window: Window size in seconds
        """
        self.rate = rate
        self.window = window
        self._clock = clock
        self._buckets: Dict[str, dict] = {}
        self._lock = asyncio.Lock()

    async def check(self, key: str) -> RateLimitInfo:
        """
        Count a request against key.

        Args:
            key: Unique identifier (e.g., requester IP)

        Returns:
            RateLimitInfo with decision and quota
        """
        async with self._lock:
            now = self._clock()
            window_start = int(now / self.window) * self.window

            bucket = self._buckets.setdefault(key, {"window": window_start, "count": 0})

            # Reset if new window
            if bucket["window"] < window_start:
                bucket["window"] = window_start
                bucket["count"] = 0

            reset_at = int(window_start + self.window)

            if bucket["count"] >= self.rate:
                return RateLimitInfo(
                    allowed=False,
                    remaining=0,
                    limit=self.rate,
                    reset_at=reset_at,
                    retry_after=max(reset_at - int(now), 1),
                )

            bucket["count"] += 1
            return RateLimitInfo(
                allowed=True,
                remaining=self.rate - bucket["count"],
                limit=self.rate,
                reset_at=reset_at,
            )
