"""Base exceptions for neo-rbac.

This module defines the root of the exception hierarchy for the authorization
core. All exceptions inherit from RbacError and carry an error code and a
details mapping suitable for API responses.
"""

from typing import Any, Dict, Optional


class RbacError(Exception):
    """Base exception for all neo-rbac errors.

    Domain errors are terminal and never retried internally. Subclasses that
    represent transient failures set ``retryable`` to True.
    """

    retryable: bool = False

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        *args,
        **kwargs
    ):
        super().__init__(message, *args, **kwargs)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


def get_http_status_code(exception: Exception) -> int:
    """Get HTTP status code for exception.

    Args:
        exception: The exception instance

    Returns:
        HTTP status code
    """
    from .http_mapping import get_http_status_code as get_mapped_status_code
    return get_mapped_status_code(exception)


def create_error_response(exception: RbacError) -> Dict[str, Any]:
    """Create standardized error response from exception.

    Args:
        exception: The neo-rbac exception

    Returns:
        Error response dictionary
    """
    return {
        "error": {
            "code": exception.error_code,
            "message": exception.message,
            "details": exception.details,
            "type": exception.__class__.__name__,
            "retryable": exception.retryable,
        }
    }
