"""Infrastructure-specific exceptions for neo-rbac.

These distinguish storage and cache connectivity failures from domain
errors. They are safe to retry with backoff at the caller's discretion.
"""

from .base import RbacError


class UnavailableError(RbacError):
    """Base class for transient backend failures."""

    retryable = True


class DatabaseUnavailableError(UnavailableError):
    """Raised when the relational store cannot be reached."""
    pass


class CacheUnavailableError(UnavailableError):
    """Raised by cache adapters when the cache cannot be reached."""
    pass


class DatabaseError(RbacError):
    """Raised when a query fails for a non-connectivity reason."""
    pass
