"""
Auth Service
============
OTP login state machine: NoActiveOtp -> OtpPending -> Verified | Expired |
RetriesExhausted.

All per-email state lives in the shared cache, so any instance may serve any
step of a login.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import structlog

from .cache import Cache
from .config import AuthConfig
from .email_domain import EmailDomainValidator, mask_email, normalize_email
from .exceptions import (
    DispatchError,
    InvalidEmailError,
    InvalidOtpError,
    NotFoundError,
    StoreConflictError,
    ThrottledError,
)
from .mailer import Mailer
from .otp import OtpCodec, OtpRecord, OtpStore, ResendThrottle
from .rate_limit import RateLimitResult, RequesterLimiter
from .session import CacheSessionStore, Session, SessionIssuer, SessionStore, UserDirectory

logger = structlog.get_logger(__name__)

# Compare-and-set attempts before giving up on a contended record
MAX_STORE_CONFLICTS = 5


@dataclass(frozen=True)
class OtpIssued:
    """Outcome of a successful generate call. Never carries the code."""
    email: str
    expires_at: datetime
    resend_after: int  # Seconds until another OTP may be requested
    is_resend: bool


class AuthService:
    """Orchestrates OTP issuance and verification."""

    def __init__(
        self,
        config: AuthConfig,
        validator: EmailDomainValidator,
        codec: OtpCodec,
        store: OtpStore,
        throttle: ResendThrottle,
        mailer: Mailer,
        session_issuer: SessionIssuer,
        requester_limiter: Optional[RequesterLimiter] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.config = config
        self.validator = validator
        self.codec = codec
        self.store = store
        self.throttle = throttle
        self.mailer = mailer
        self.session_issuer = session_issuer
        self.requester_limiter = requester_limiter
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @classmethod
    def from_config(
        cls,
        config: AuthConfig,
        *,
        cache: Cache,
        mailer: Mailer,
        user_directory: UserDirectory,
        session_store: Optional[SessionStore] = None,
        requester_limiter: Optional[RequesterLimiter] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> "AuthService":
        """
        Wire the default components around a cache.

        Sessions go to the same cache unless session_store is given.
        """
        if session_store is None:
            session_store = CacheSessionStore(
                cache,
                max_age_seconds=config.session_max_age_seconds,
                key_prefix=config.key_prefix,
            )
        return cls(
            config=config,
            validator=EmailDomainValidator(config.allowed_email_domains),
            codec=OtpCodec(length=config.otp_length, rounds=config.hash_rounds),
            store=OtpStore(
                cache,
                ttl_seconds=config.otp_expiry_seconds,
                key_prefix=config.key_prefix,
                clock=clock,
            ),
            throttle=ResendThrottle(
                cache,
                cooldown_seconds=config.resend_cooldown_seconds,
                key_prefix=config.key_prefix,
            ),
            mailer=mailer,
            session_issuer=SessionIssuer(
                user_directory,
                session_store,
                max_age_seconds=config.session_max_age_seconds,
            ),
            requester_limiter=requester_limiter,
            clock=clock,
        )

    @property
    def login_message(self) -> Optional[str]:
        return self.config.login_message

    @property
    def email_domains(self) -> str:
        return self.validator.pattern

    async def generate_otp(self, email: str, requester_ip: Optional[str] = None) -> OtpIssued:
        """
        Issue a fresh OTP for email and hand it to the mailer.

        A resend is the same call made again after the cooldown.

        Raises:
            InvalidEmailError: Malformed or disallowed email
            ThrottledError: Cooldown or requester limit active; nothing changed
            DispatchError: Mailer failed; the new OTP was withdrawn
            CacheError: Cache failure
        """
        email = normalize_email(email) if isinstance(email, str) else ""
        masked = mask_email(email)

        if not self.validator.is_allowed(email):
            logger.warning("OTP requested for invalid email", email=masked, requester_ip=requester_ip)
            raise InvalidEmailError("Invalid email provided. Email domain is not allowed.")

        if self.requester_limiter is not None and requester_ip:
            info = await self.requester_limiter.check(
                f"{self.config.key_prefix}:ratelimit:otp:{requester_ip}"
            )
            if info.result == RateLimitResult.BLOCKED:
                logger.warning("OTP requests rate limited", requester_ip=requester_ip)
                raise ThrottledError(
                    "Too many OTP requests, please try again later.",
                    retry_after=info.retry_after or self.config.otp_request_window_seconds,
                )

        if not await self.throttle.try_acquire(email):
            retry_after = await self.throttle.retry_after(email)
            logger.warning("OTP resend throttled", email=masked, retry_after=retry_after)
            raise ThrottledError(
                f"Please wait {retry_after} second(s) before requesting another OTP.",
                retry_after=retry_after,
            )

        record: Optional[OtpRecord] = None
        try:
            code, hashed = await self.codec.generate()
            now = self._clock()
            record = OtpRecord(
                email=email,
                hashed_otp=hashed,
                issued_at=now,
                expires_at=now + timedelta(seconds=self.config.otp_expiry_seconds),
                retries_remaining=self.config.max_verify_attempts,
            )
            is_resend = await self.store.get(email) is not None
            await self.store.replace(email, record)
            await self._dispatch(email, code, requester_ip)
        except BaseException:
            # Includes cancellation: never leave a cooldown without a sent code
            await self._withdraw(email, record)
            raise

        logger.info("OTP issued", email=masked, requester_ip=requester_ip, resend=is_resend)
        return OtpIssued(
            email=email,
            expires_at=record.expires_at,
            resend_after=self.config.resend_cooldown_seconds,
            is_resend=is_resend,
        )

    async def _dispatch(self, email: str, code: str, requester_ip: Optional[str]) -> None:
        error: Optional[Exception] = None
        try:
            delivered = await self.mailer.send(email, code)
        except Exception as e:
            delivered = False
            error = e

        if delivered is True:
            return

        logger.error(
            "OTP dispatch failed",
            email=mask_email(email),
            requester_ip=requester_ip,
            error=str(error) if error else f"mailer returned {delivered!r}",
        )
        raise DispatchError("Error sending OTP, please try again.") from error

    async def _withdraw(self, email: str, record: Optional[OtpRecord]) -> None:
        if record is not None:
            # Only our own record; a newer one must survive
            await self.store.invalidate(email, record)
        await self.throttle.release(email)

    async def verify_otp(self, email: str, code: str) -> Session:
        """
        Check a submitted code and start a session on success.

        A wrong code always costs one attempt. A matching code is consumed
        before the session is issued, so it can never be replayed.

        Raises:
            NotFoundError: No active OTP (absent, expired, used or exhausted)
            InvalidOtpError: Wrong code; carries attempts remaining
            SessionIssueError: Verified, but the session could not be created
            CacheError: Cache failure
        """
        email = normalize_email(email) if isinstance(email, str) else ""
        masked = mask_email(email)
        checked_hash: Optional[str] = None
        matched = False

        for _ in range(MAX_STORE_CONFLICTS):
            record = await self.store.get(email)
            if record is None:
                logger.info("OTP verification for missing OTP", email=masked)
                raise NotFoundError()

            if record.hashed_otp != checked_hash:
                matched = await self.codec.verify(code, record.hashed_otp)
                checked_hash = record.hashed_otp

            if matched:
                if not await self.store.invalidate(email, record):
                    continue
                session = await self.session_issuer.issue(email)
                logger.info("Login success", email=masked)
                return session

            updated = await self.store.record_failed_attempt(email, record)
            if updated is None:
                continue
            logger.warning(
                "OTP verification failed",
                email=masked,
                attempts_remaining=updated.retries_remaining,
            )
            raise InvalidOtpError(updated.retries_remaining)

        logger.error("OTP record contended", email=masked)
        raise StoreConflictError("OTP record changed concurrently", operation="verify")

