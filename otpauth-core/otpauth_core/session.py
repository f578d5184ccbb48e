"""
Session Issuance
================
Creates a login session once an email has been verified.
"""

import json
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol

import structlog

from .cache import Cache
from .email_domain import mask_email
from .exceptions import SessionIssueError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class UserIdentity:
    """User as known to the external user directory."""
    id: str
    email: str


@dataclass(frozen=True)
class Session:
    """An authenticated login session."""
    id: str
    user_id: str
    email: str
    created_at: datetime
    expires_at: datetime

    def to_json(self) -> str:
        return json.dumps(
            {
                "id": self.id,
                "user_id": self.user_id,
                "email": self.email,
                "created_at": self.created_at.isoformat(),
                "expires_at": self.expires_at.isoformat(),
            },
            separators=(",", ":"),
        )

    @classmethod
    def from_json(cls, raw: str) -> "Session":
        data = json.loads(raw)
        return cls(
            id=data["id"],
            user_id=data["user_id"],
            email=data["email"],
            created_at=datetime.fromisoformat(data["created_at"]),
            expires_at=datetime.fromisoformat(data["expires_at"]),
        )


class UserDirectory(Protocol):
    async def find_or_create_by_email(self, email: str) -> UserIdentity:
        ...


class SessionStore(Protocol):
    async def save(self, session: Session) -> None:
        ...


class CacheSessionStore:
    """Keeps sessions in the cache until they expire."""

    def __init__(self, cache: Cache, max_age_seconds: int = 1800, key_prefix: str = "otpauth"):
        self.cache = cache
        self.max_age_seconds = max_age_seconds
        self.key_prefix = key_prefix

    def key(self, session_id: str) -> str:
        return f"{self.key_prefix}:session:{session_id}"

    async def save(self, session: Session) -> None:
        await self.cache.set(self.key(session.id), session.to_json(), self.max_age_seconds)

    async def get(self, session_id: str) -> Optional[Session]:
        raw = await self.cache.get(self.key(session_id))
        return Session.from_json(raw) if raw else None

    async def delete(self, session_id: str) -> None:
        await self.cache.delete(self.key(session_id))


class SessionIssuer:
    """Resolves the user for a verified email and mints a session."""

    def __init__(
        self,
        user_directory: UserDirectory,
        session_store: SessionStore,
        max_age_seconds: int = 1800,
    ):
        self.user_directory = user_directory
        self.session_store = session_store
        self.max_age_seconds = max_age_seconds

    async def issue(self, email: str) -> Session:
        """
        Create a session for a verified email.

        Raises:
            SessionIssueError: If user lookup or session persistence fails
        """
        try:
            user = await self.user_directory.find_or_create_by_email(email)
        except Exception as e:
            logger.error("User lookup failed", email=mask_email(email), error=str(e))
            raise SessionIssueError(f"User lookup failed: {e}") from e

        now = datetime.now(timezone.utc)
        session = Session(
            id=secrets.token_urlsafe(32),
            user_id=user.id,
            email=user.email,
            created_at=now,
            expires_at=now + timedelta(seconds=self.max_age_seconds),
        )

        try:
            await self.session_store.save(session)
        except Exception as e:
            logger.error("Session save failed", email=mask_email(email), error=str(e))
            raise SessionIssueError(f"Session save failed: {e}") from e

        return session
