"""
Limiter Contract
================
Interface shared by the requester rate limiters.
"""

from typing import Protocol

from .models import RateLimitInfo


class RequesterLimiter(Protocol):
    async def check(self, key: str) -> RateLimitInfo:
        """Count a request against key and report whether it is allowed."""
        ...
