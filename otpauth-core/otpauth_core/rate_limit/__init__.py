"""
Rate Limiting Module
====================
Per-requester limits on OTP generation requests.
"""

from .models import RateLimitResult, RateLimitInfo
from .base import RequesterLimiter
from .in_memory import InMemoryRateLimiter
from .redis_limiter import RedisRateLimiter, FIXED_WINDOW_SCRIPT

__all__ = [
    # Models
    "RateLimitResult",
    "RateLimitInfo",
    # Contract
    "RequesterLimiter",
    # Limiters
    "InMemoryRateLimiter",
    "RedisRateLimiter",
    # Scripts
    "FIXED_WINDOW_SCRIPT",
]
