"""
Authentication Errors
=====================
Error taxonomy for the OTP login flow.

Every error carries an ``AuthErrorKind`` so the transport layer can map it to a
response without inspecting exception types.
"""

from enum import Enum
from typing import Optional


class AuthErrorKind(str, Enum):
    """Externally observable failure categories."""
    INVALID_EMAIL = "invalid_email"
    THROTTLED = "throttled"
    DISPATCH_FAILED = "dispatch_failed"
    INVALID_OTP = "invalid_otp"
    NOT_FOUND = "not_found"
    INTERNAL = "internal"


class AuthError(Exception):
    """Base exception for all authentication failures."""

    kind: AuthErrorKind = AuthErrorKind.INTERNAL
    user_correctable: bool = False

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidEmailError(AuthError):
    """Email is malformed or its domain is not allowed."""
    kind = AuthErrorKind.INVALID_EMAIL
    user_correctable = True


class ThrottledError(AuthError):
    """An OTP was requested again before the cooldown elapsed."""
    kind = AuthErrorKind.THROTTLED
    user_correctable = True

    def __init__(self, message: str, retry_after: int):
        super().__init__(message)
        self.retry_after = retry_after


class DispatchError(AuthError):
    """The OTP could not be handed to the mailer. Safe to retry."""
    kind = AuthErrorKind.DISPATCH_FAILED


class InvalidOtpError(AuthError):
    """Wrong code submitted."""
    kind = AuthErrorKind.INVALID_OTP
    user_correctable = True

    def __init__(self, attempts_remaining: int):
        super().__init__(
            f"OTP verification failed, {attempts_remaining} attempt(s) remaining."
        )
        self.attempts_remaining = attempts_remaining


class NotFoundError(AuthError):
    """No active OTP: never requested, expired, used or exhausted."""
    kind = AuthErrorKind.NOT_FOUND
    user_correctable = True

    def __init__(self, message: str = "OTP expired/not found."):
        super().__init__(message)


class InternalAuthError(AuthError):
    """Fault in a collaborator; not caused by user input."""
    kind = AuthErrorKind.INTERNAL


class CacheError(InternalAuthError):
    """Cache backend failed."""

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message)
        self.operation = operation


class CacheTimeoutError(CacheError):
    """Cache operation did not complete in time."""
    pass


class StoreConflictError(CacheError):
    """A record kept changing underneath a compare-and-set update."""
    pass


class SessionIssueError(InternalAuthError):
    """User lookup or session persistence failed after a successful login."""
    pass


class ConfigurationError(ValueError):
    """Invalid or missing configuration."""
    pass
