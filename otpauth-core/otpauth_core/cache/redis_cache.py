"""
Redis Cache
===========
Redis-backed cache using Lua scripts for atomic compare operations.
"""

import asyncio
from typing import Any, Awaitable, Dict, Optional

import structlog
from redis.asyncio import Redis
from redis.exceptions import NoScriptError, RedisError

from ..exceptions import CacheError, CacheTimeoutError

logger = structlog.get_logger(__name__)

# KEEPTTL requires Redis >= 6.0
COMPARE_AND_SET_SCRIPT = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    redis.call('SET', KEYS[1], ARGV[2], 'KEEPTTL')
    return 1
end
return 0
"""

COMPARE_AND_DELETE_SCRIPT = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    redis.call('DEL', KEYS[1])
    return 1
end
return 0
"""


class RedisCache:
    """
    Redis implementation of the cache contract.

    Every command is bounded by ``timeout`` seconds; a timeout or driver error
    is raised as a CacheError, never ignored.
    """

    def __init__(self, redis_client: Redis, timeout: float = 2.0):
        """
        Args:
            redis_client: Async Redis client created with decode_responses=True
            timeout: Per-command time limit in seconds
        """
        self.redis = redis_client
        self.timeout = timeout
        self._script_shas: Dict[str, str] = {}

    @classmethod
    def from_url(cls, url: str, timeout: float = 2.0) -> "RedisCache":
        client = Redis.from_url(url, encoding="utf-8", decode_responses=True)
        return cls(client, timeout=timeout)

    async def aclose(self) -> None:
        await self.redis.aclose()

    async def _run(self, operation: str, awaitable: Awaitable[Any]) -> Any:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.error("Cache operation timed out", operation=operation, timeout=self.timeout)
            raise CacheTimeoutError(f"Cache {operation} timed out", operation=operation)
        except NoScriptError:
            raise
        except RedisError as e:
            logger.error("Cache operation failed", operation=operation, error=str(e))
            raise CacheError(f"Cache {operation} failed: {e}", operation=operation) from e

    async def _ensure_script(self, script: str) -> str:
        """Load Lua script into Redis if needed."""
        sha = self._script_shas.get(script)
        if sha is None:
            sha = await self._run("script_load", self.redis.script_load(script))
            self._script_shas[script] = sha
        return sha

    async def _eval(self, operation: str, script: str, key: str, *args: str) -> Any:
        sha = await self._ensure_script(script)
        try:
            return await self._run(operation, self.redis.evalsha(sha, 1, key, *args))
        except NoScriptError:
            # Script cache was flushed (restart or failover)
            self._script_shas.pop(script, None)
            sha = await self._ensure_script(script)
            try:
                return await self._run(operation, self.redis.evalsha(sha, 1, key, *args))
            except NoScriptError as e:
                raise CacheError(f"Cache {operation} failed: {e}", operation=operation) from e

    async def get(self, key: str) -> Optional[str]:
        return await self._run("get", self.redis.get(key))

    async def set(
        self,
        key: str,
        value: str,
        ttl: int,
        *,
        only_if_absent: bool = False,
    ) -> bool:
        result = await self._run(
            "set", self.redis.set(key, value, ex=ttl, nx=only_if_absent)
        )
        return bool(result)

    async def delete(self, key: str) -> None:
        await self._run("delete", self.redis.delete(key))

    async def ttl(self, key: str) -> Optional[int]:
        remaining = await self._run("ttl", self.redis.ttl(key))
        # -2: missing key, -1: no expiry set
        if remaining is None or remaining < 0:
            return None
        return int(remaining)

    async def compare_and_set(self, key: str, expected: str, value: str) -> bool:
        result = await self._eval(
            "compare_and_set", COMPARE_AND_SET_SCRIPT, key, expected, value
        )
        return bool(result)

    async def compare_and_delete(self, key: str, expected: str) -> bool:
        result = await self._eval(
            "compare_and_delete", COMPARE_AND_DELETE_SCRIPT, key, expected
        )
        return bool(result)
