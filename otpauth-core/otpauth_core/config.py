"""
Auth Configuration
==================
Immutable configuration for the OTP login flow.
"""

import os
from dataclasses import dataclass
from typing import Optional

from .exceptions import ConfigurationError

DEV_ENVIRONMENT = "development"


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}")


@dataclass(frozen=True)
class AuthConfig:
    """Configuration consumed by the auth components at construction time."""
    allowed_email_domains: str
    otp_length: int = 6
    otp_expiry_seconds: int = 300  # 5 minutes
    max_verify_attempts: int = 3
    resend_cooldown_seconds: int = 20
    hash_rounds: int = 10  # bcrypt cost factor
    otp_requests_per_window: int = 5
    otp_request_window_seconds: int = 60
    session_max_age_seconds: int = 1800  # 30 minutes
    cache_timeout_seconds: float = 2.0
    key_prefix: str = "otpauth"
    login_message: Optional[str] = None
    redis_otp_uri: Optional[str] = None
    redis_session_uri: Optional[str] = None

    def __post_init__(self):
        if not self.allowed_email_domains:
            raise ConfigurationError("allowed_email_domains must not be empty")
        if not 4 <= self.otp_length <= 10:
            raise ConfigurationError("otp_length must be between 4 and 10")
        if not 4 <= self.hash_rounds <= 31:
            raise ConfigurationError("hash_rounds must be between 4 and 31")
        for name in (
            "otp_expiry_seconds",
            "max_verify_attempts",
            "resend_cooldown_seconds",
            "otp_requests_per_window",
            "otp_request_window_seconds",
            "session_max_age_seconds",
        ):
            if getattr(self, name) <= 0:
                raise ConfigurationError(f"{name} must be positive")
        if self.cache_timeout_seconds <= 0:
            raise ConfigurationError("cache_timeout_seconds must be positive")

    @classmethod
    def from_env(cls) -> "AuthConfig":
        """
        Build configuration from environment variables.

        Raises:
            ConfigurationError: If VALID_EMAIL_GLOB_EXPRESSION is missing or a
                value cannot be parsed.
        """
        pattern = os.environ.get("VALID_EMAIL_GLOB_EXPRESSION")
        if not pattern:
            raise ConfigurationError(
                "Missing required environment variable: VALID_EMAIL_GLOB_EXPRESSION"
            )

        dev = os.environ.get("ENVIRONMENT", "") == DEV_ENVIRONMENT

        return cls(
            allowed_email_domains=pattern,
            otp_length=_env_int("OTP_LENGTH", 6),
            otp_expiry_seconds=_env_int("OTP_EXPIRY", 300),
            max_verify_attempts=_env_int("OTP_MAX_ATTEMPTS", 3),
            resend_cooldown_seconds=_env_int("OTP_RESEND_COOLDOWN", 20),
            hash_rounds=_env_int("SALT_ROUNDS", 10),
            otp_requests_per_window=_env_int("OTP_RATE_LIMIT", 10 if dev else 5),
            otp_request_window_seconds=_env_int("OTP_RATE_LIMIT_WINDOW", 60),
            session_max_age_seconds=_env_int("SESSION_MAX_AGE", 1800),
            cache_timeout_seconds=_env_float("CACHE_TIMEOUT", 2.0),
            key_prefix=os.environ.get("CACHE_KEY_PREFIX", "otpauth"),
            login_message=os.environ.get("LOGIN_MESSAGE") or None,
            redis_otp_uri=os.environ.get("REDIS_OTP_URI") or None,
            redis_session_uri=os.environ.get("REDIS_SESSION_URI") or None,
        )
