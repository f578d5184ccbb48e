"""
OTP Codec
=========
Secure OTP generation and bcrypt hashing.

Plaintext codes exist only in memory between generation and dispatch; only the
bcrypt hash is stored.
"""

import asyncio
import secrets
from typing import Tuple

import bcrypt


def generate_code(length: int = 6) -> str:
    """
    Generate a numeric OTP from the OS CSPRNG.

    Args:
        length: Number of digits

    Returns:
        Zero-padded OTP string
    """
    return str(secrets.randbelow(10 ** length)).zfill(length)


def hash_code(code: str, rounds: int = 10) -> str:
    """Hash an OTP with a fresh bcrypt salt."""
    return bcrypt.hashpw(code.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_code_hash(candidate: str, stored_hash: str) -> bool:
    """
    Verify a candidate against a bcrypt hash.

    bcrypt.checkpw compares digests in constant time.
    """
    try:
        return bcrypt.checkpw(candidate.encode("utf-8"), stored_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


class OtpCodec:
    """Generates OTPs and checks candidates against stored hashes."""

    def __init__(self, length: int = 6, rounds: int = 10):
        self.length = length
        self.rounds = rounds

    def _is_well_formed(self, candidate: str) -> bool:
        return (
            isinstance(candidate, str)
            and len(candidate) == self.length
            and candidate.isascii()
            and candidate.isdigit()
        )

    async def generate(self) -> Tuple[str, str]:
        """
        Generate a new OTP and its hash.

        Returns:
            Tuple of (plaintext_code, hashed_code)
        """
        code = generate_code(self.length)
        loop = asyncio.get_running_loop()
        # Run in executor to avoid blocking the event loop
        hashed = await loop.run_in_executor(None, hash_code, code, self.rounds)
        return code, hashed

    async def verify(self, candidate: str, stored_hash: str) -> bool:
        if not self._is_well_formed(candidate):
            return False
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, verify_code_hash, candidate, stored_hash)
