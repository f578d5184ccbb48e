"""
Resend Throttle
===============
Minimum interval between OTP dispatches to the same email.

The cooldown is a cache entry whose TTL is the cooldown itself, so it lapses
passively and independently of the OTP's own expiry.
"""

from datetime import datetime, timezone

from ..cache import Cache


class ResendThrottle:
    """Per-email resend cooldown shared by every service instance."""

    def __init__(self, cache: Cache, cooldown_seconds: int = 20, key_prefix: str = "otpauth"):
        self.cache = cache
        self.cooldown_seconds = cooldown_seconds
        self.key_prefix = key_prefix

    def key(self, email: str) -> str:
        return f"{self.key_prefix}:otp-cooldown:{email}"

    async def can_resend(self, email: str) -> bool:
        return await self.cache.get(self.key(email)) is None

    async def record_resend_issued(self, email: str) -> None:
        await self.cache.set(
            self.key(email),
            datetime.now(timezone.utc).isoformat(),
            self.cooldown_seconds,
        )

    async def try_acquire(self, email: str) -> bool:
        """
        Check and record in one step.

        Returns:
            True if no cooldown was active and one has now started
        """
        return await self.cache.set(
            self.key(email),
            datetime.now(timezone.utc).isoformat(),
            self.cooldown_seconds,
            only_if_absent=True,
        )

    async def retry_after(self, email: str) -> int:
        """Seconds until another OTP may be sent (0 when allowed now)."""
        remaining = await self.cache.ttl(self.key(email))
        return max(remaining or 0, 0)

    async def release(self, email: str) -> None:
        await self.cache.delete(self.key(email))
