"""
OTP Auth Core Library
=====================
Email one-time-password login: domain allow-listing, OTP issuance with resend
cooldown, bounded verification and session hand-off.
"""

__version__ = "0.1.0"

# Configuration
from otpauth_core.config import AuthConfig

# Errors
from otpauth_core.exceptions import (
    AuthErrorKind,
    AuthError,
    InvalidEmailError,
    ThrottledError,
    DispatchError,
    InvalidOtpError,
    NotFoundError,
    InternalAuthError,
    CacheError,
    CacheTimeoutError,
    StoreConflictError,
    SessionIssueError,
    ConfigurationError,
)

# Cache
from otpauth_core.cache import Cache, InMemoryCache, RedisCache

# Email
from otpauth_core.email_domain import (
    EmailDomainValidator,
    normalize_email,
    mask_email,
)

# OTP
from otpauth_core.otp import OtpCodec, OtpRecord, OtpStore, ResendThrottle

# Rate Limiting
from otpauth_core.rate_limit import (
    InMemoryRateLimiter,
    RedisRateLimiter,
    RateLimitInfo,
    RequesterLimiter,
)

# Sessions
from otpauth_core.session import (
    Session,
    UserIdentity,
    UserDirectory,
    SessionStore,
    CacheSessionStore,
    SessionIssuer,
)

# Service
from otpauth_core.mailer import Mailer
from otpauth_core.service import AuthService, OtpIssued

# Logging
from otpauth_core.log_config import setup_logging

__all__ = [
    "__version__",
    # Configuration
    "AuthConfig",
    # Errors
    "AuthErrorKind",
    "AuthError",
    "InvalidEmailError",
    "ThrottledError",
    "DispatchError",
    "InvalidOtpError",
    "NotFoundError",
    "InternalAuthError",
    "CacheError",
    "CacheTimeoutError",
    "StoreConflictError",
    "SessionIssueError",
    "ConfigurationError",
    # Cache
    "Cache",
    "InMemoryCache",
    "RedisCache",
    # Email
    "EmailDomainValidator",
    "normalize_email",
    "mask_email",
    # OTP
    "OtpCodec",
    "OtpRecord",
    "OtpStore",
    "ResendThrottle",
    # Rate Limiting
    "InMemoryRateLimiter",
    "RedisRateLimiter",
    "RateLimitInfo",
    "RequesterLimiter",
    # Sessions
    "Session",
    "UserIdentity",
    "UserDirectory",
    "SessionStore",
    "CacheSessionStore",
    "SessionIssuer",
    # Service
    "Mailer",
    "AuthService",
    "OtpIssued",
    # Logging
    "setup_logging",
]
