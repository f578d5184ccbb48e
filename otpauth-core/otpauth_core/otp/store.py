"""
OTP Store
=========
Per-email OTP records on top of the cache contract.
"""

from datetime import datetime, timezone
from typing import Callable, Optional

import structlog

from ..cache import Cache
from .models import OtpRecord

logger = structlog.get_logger(__name__)


class OtpStore:
    """
    Holds at most one OtpRecord per email.

    Mutations are compare-and-set against the exact stored value, so a record
    is only changed if nobody else changed it since it was read.
    """

    def __init__(
        self,
        cache: Cache,
        ttl_seconds: int,
        key_prefix: str = "otpauth",
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.cache = cache
        self.ttl_seconds = ttl_seconds
        self.key_prefix = key_prefix
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def key(self, email: str) -> str:
        return f"{self.key_prefix}:otp:{email}"

    async def get(self, email: str) -> Optional[OtpRecord]:
        """
        Return the active record, or None if absent, expired or exhausted.
        """
        raw = await self.cache.get(self.key(email))
        if raw is None:
            return None
        try:
            record = OtpRecord.from_json(raw)
        except (ValueError, KeyError, TypeError):
            logger.error("Discarding unreadable OTP record", key=self.key(email))
            await self.cache.compare_and_delete(self.key(email), raw)
            return None
        if record.is_expired(self._clock()) or record.is_exhausted:
            await self.cache.compare_and_delete(self.key(email), raw)
            return None
        return record

    async def replace(self, email: str, record: OtpRecord) -> None:
        """Write record, atomically superseding any previous one."""
        await self.cache.set(self.key(email), record.to_json(), self.ttl_seconds)

    async def invalidate(self, email: str, record: OtpRecord) -> bool:
        """
        Delete record if it is still the stored one.

        Returns:
            False if the record had already changed or disappeared
        """
        return await self.cache.compare_and_delete(self.key(email), record.to_json())

    async def record_failed_attempt(self, email: str, record: OtpRecord) -> Optional[OtpRecord]:
        """
        Decrement retries on record, deleting it when none remain.

        Returns:
            The updated record, or None if record was no longer current
        """
        updated = record.with_failed_attempt()
        if updated.is_exhausted:
            applied = await self.invalidate(email, record)
        else:
            applied = await self.cache.compare_and_set(
                self.key(email), record.to_json(), updated.to_json()
            )
        return updated if applied else None
