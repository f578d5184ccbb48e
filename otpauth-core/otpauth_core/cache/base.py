"""
Cache Contract
==============
Single-key operations shared by every cache backend.
"""

from typing import Optional, Protocol


class Cache(Protocol):
    """
    Key-value cache with per-key TTL in seconds.

    No operation spans more than one key.
    """

    async def get(self, key: str) -> Optional[str]:
        ...

    async def set(
        self,
        key: str,
        value: str,
        ttl: int,
        *,
        only_if_absent: bool = False,
    ) -> bool:
        """Store value; returns False only when only_if_absent and key exists."""
        ...

    async def delete(self, key: str) -> None:
        ...

    async def ttl(self, key: str) -> Optional[int]:
        """Remaining lifetime in seconds, or None if the key is absent."""
        ...

    async def compare_and_set(self, key: str, expected: str, value: str) -> bool:
        """Replace value if it still equals expected, keeping the remaining TTL."""
        ...

    async def compare_and_delete(self, key: str, expected: str) -> bool:
        ...
