"""
OTP Module
==========
OTP generation, hashing, storage and resend throttling.
"""

from .models import OtpRecord
from .codec import OtpCodec, generate_code, hash_code, verify_code_hash
from .store import OtpStore
from .throttle import ResendThrottle

__all__ = [
    # Models
    "OtpRecord",
    # Codec
    "OtpCodec",
    "generate_code",
    "hash_code",
    "verify_code_hash",
    # Storage
    "OtpStore",
    "ResendThrottle",
]
