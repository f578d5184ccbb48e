"""
Cache Module
============
TTL-capable key-value cache backing all per-email auth state.
"""

from .base import Cache
from .in_memory import InMemoryCache
from .redis_cache import RedisCache, COMPARE_AND_SET_SCRIPT, COMPARE_AND_DELETE_SCRIPT

__all__ = [
    "Cache",
    "InMemoryCache",
    "RedisCache",
    "COMPARE_AND_SET_SCRIPT",
    "COMPARE_AND_DELETE_SCRIPT",
]
