"""
Mailer Contract
===============
Delivery of plaintext OTPs to the user's inbox.
"""

from typing import Protocol


class Mailer(Protocol):
    """
    Sends an OTP to an address.

    Return False or raise on failure; both abort the generate call.
    """

    async def send(self, to_address: str, code: str) -> bool:
        ...
