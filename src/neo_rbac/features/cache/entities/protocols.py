"""Protocol interfaces for cache backends.

Backends address entries by exact key only; there is no scan or
pattern-delete operation.
"""

from abc import abstractmethod
from typing import Protocol, runtime_checkable, Optional


@runtime_checkable
class CacheBackend(Protocol):
    """Key-value store with per-entry TTL."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Get a value, or None when missing or expired.

        Raises:
            CacheUnavailableError: when the backend cannot be reached
        """
        ...

    @abstractmethod
    async def set(self, key: str, value: str, ttl: int) -> None:
        """Store a value with a TTL in seconds."""
        ...

    @abstractmethod
    async def delete(self, *keys: str) -> int:
        """Delete the exact keys given; return how many existed."""
        ...
