"""
OTP Models
==========
Data models for OTP records held in the cache.
"""

import json
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional


@dataclass(frozen=True)
class OtpRecord:
    """The single active OTP for an email."""
    email: str
    hashed_otp: str
    issued_at: datetime
    expires_at: datetime
    retries_remaining: int

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or datetime.now(timezone.utc)) >= self.expires_at

    @property
    def is_exhausted(self) -> bool:
        return self.retries_remaining <= 0

    def with_failed_attempt(self) -> "OtpRecord":
        return replace(self, retries_remaining=max(self.retries_remaining - 1, 0))

    def to_json(self) -> str:
        """Serialize with a fixed field order so equal records encode identically."""
        return json.dumps(
            {
                "email": self.email,
                "hashed_otp": self.hashed_otp,
                "issued_at": self.issued_at.isoformat(),
                "expires_at": self.expires_at.isoformat(),
                "retries_remaining": self.retries_remaining,
            },
            separators=(",", ":"),
        )

    @classmethod
    def from_json(cls, raw: str) -> "OtpRecord":
        data = json.loads(raw)
        return cls(
            email=data["email"],
            hashed_otp=data["hashed_otp"],
            issued_at=datetime.fromisoformat(data["issued_at"]),
            expires_at=datetime.fromisoformat(data["expires_at"]),
            retries_remaining=int(data["retries_remaining"]),
        )
