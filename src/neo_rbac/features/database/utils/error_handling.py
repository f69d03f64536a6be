"""Standardized error handling utilities for database operations."""

import logging
import functools
from typing import Callable, Any

import asyncpg

from ....core.exceptions import RbacError, DatabaseError, DatabaseUnavailableError

logger = logging.getLogger(__name__)


# Failures that mean the store could not be reached, as opposed to a bad query
CONNECTION_ERRORS = (
    asyncpg.exceptions.ConnectionDoesNotExistError,
    asyncpg.exceptions.CannotConnectNowError,
    asyncpg.exceptions.TooManyConnectionsError,
    asyncpg.exceptions.InterfaceError,
    ConnectionError,
    OSError,
    TimeoutError,
)


def is_connection_error(error: BaseException) -> bool:
    """Return True if the error signals an unreachable database."""
    return isinstance(error, CONNECTION_ERRORS)


def database_error_handler(operation_name: str, log_level: int = logging.ERROR):
    """Decorator for standardized database error handling.

    Domain errors raised inside the wrapped coroutine pass through untouched.
    Connectivity failures become DatabaseUnavailableError (retryable), every
    other failure becomes DatabaseError.

    Usage:
        @database_error_handler("get role")
        async def get_by_id(self, role_id, tenant_id):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            try:
                return await func(*args, **kwargs)
            except RbacError:
                raise
            except Exception as e:
                logger.log(log_level, f"Failed to {operation_name}: {e} | function={func.__name__}")
                if is_connection_error(e):
                    raise DatabaseUnavailableError(
                        f"Database unavailable during {operation_name}",
                        details={"operation": operation_name}
                    ) from e
                raise DatabaseError(
                    f"Failed to {operation_name}: {e}",
                    details={"operation": operation_name}
                ) from e

        return wrapper
    return decorator
