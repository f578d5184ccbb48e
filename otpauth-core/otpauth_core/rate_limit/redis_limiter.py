"""
Redis Rate Limiter
==================
Redis-backed fixed-window limiter using a Lua script for atomic counting.
"""

import asyncio
import time
from typing import Optional

import structlog
from redis.exceptions import NoScriptError, RedisError

from ..exceptions import CacheError, CacheTimeoutError
from .models import RateLimitInfo

logger = structlog.get_logger(__name__)

# Lua script for atomic fixed-window counter in Redis
FIXED_WINDOW_SCRIPT = """
local key = KEYS[1]
local rate = tonumber(ARGV[1])
local window = tonumber(ARGV[2])
local now = tonumber(ARGV[3])

local window_start = math.floor(now / window) * window
local reset_at = window_start + window
local bucket_key = key .. ':' .. window_start

local count = tonumber(redis.call('GET', bucket_key) or '0')
if count >= rate then
    return {0, 0, rate, reset_at, reset_at - now}
end

count = redis.call('INCR', bucket_key)
redis.call('EXPIRE', bucket_key, window * 2)

return {1, rate - count, rate, reset_at, 0}
"""


class RedisRateLimiter:
    """
    Redis-backed fixed-window rate limiter.

    Unlike a best-effort limiter this one fails closed: a Redis error is raised
    as CacheError rather than allowing the request.
    """

    def __init__(self, redis_client, rate: int = 5, window: int = 60, timeout: float = 2.0):
        """
        Args:
            redis_client: Async Redis client
            rate: Requests per window
            window: Window size in seconds
            timeout: Per-call time limit in seconds
        """
        self.redis = redis_client
        self.rate = rate
        self.window = window
        self.timeout = timeout
        self._script_sha: Optional[str] = None

    async def _ensure_script(self) -> str:
        """Load Lua script into Redis if needed."""
        if self._script_sha is None:
            self._script_sha = await self.redis.script_load(FIXED_WINDOW_SCRIPT)
        return self._script_sha

    async def _evaluate(self, key: str, now: int):
        script_sha = await self._ensure_script()
        try:
            return await self.redis.evalsha(script_sha, 1, key, self.rate, self.window, now)
        except NoScriptError:
            # Script cache was flushed (restart or failover)
            self._script_sha = None
            script_sha = await self._ensure_script()
            return await self.redis.evalsha(script_sha, 1, key, self.rate, self.window, now)

    async def check(self, key: str) -> RateLimitInfo:
        """
        Count a request against key using Redis.

        Args:
            key: Rate limit key

        Returns:
            RateLimitInfo with decision
        """
        now = int(time.time())

        try:
            result = await asyncio.wait_for(self._evaluate(key, now), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.error("Rate limit check timed out", key=key)
            raise CacheTimeoutError("Rate limit check timed out", operation="rate_limit")
        except RedisError as e:
            logger.error("Rate limit check failed", key=key, error=str(e))
            # Drop cached SHA so a flushed script cache is reloaded next time
            self._script_sha = None
            raise CacheError(f"Rate limit check failed: {e}", operation="rate_limit") from e

        allowed, remaining, limit, reset_at, retry_after = result

        return RateLimitInfo(
            allowed=bool(allowed),
            remaining=int(remaining),
            limit=int(limit),
            reset_at=int(reset_at),
            retry_after=int(retry_after) if retry_after else None,
        )
