"""HTTP status code mapping for neo-rbac exceptions."""

from typing import Dict, Type

from .base import RbacError
from .domain import (
    ConfigurationError,
    ValidationError,
    NotFoundError,
    ConflictError,
    HierarchyViolationError,
    ProtectedRoleError,
    LastOwnerViolationError,
    LastAdminViolationError,
    InvalidPermissionError,
    RoleInUseError,
    AccessDeniedError,
)
from .infrastructure import UnavailableError, DatabaseError


HTTP_STATUS_MAP: Dict[Type[Exception], int] = {
    # 400 Bad Request
    ValidationError: 400,
    InvalidPermissionError: 400,
    LastOwnerViolationError: 400,
    LastAdminViolationError: 400,

    # 403 Forbidden
    HierarchyViolationError: 403,
    ProtectedRoleError: 403,
    AccessDeniedError: 403,

    # 404 Not Found
    NotFoundError: 404,

    # 409 Conflict
    ConflictError: 409,
    RoleInUseError: 409,

    # 500 Internal Server Error
    ConfigurationError: 500,
    DatabaseError: 500,

    # 503 Service Unavailable
    UnavailableError: 503,

    # Default for RbacError
    RbacError: 500,
}


def get_http_status_code(exception: Exception) -> int:
    """Get HTTP status code for an exception, walking its MRO.

    Subclasses inherit their nearest mapped ancestor's status code.
    """
    for exception_type in type(exception).__mro__:
        if exception_type in HTTP_STATUS_MAP:
            return HTTP_STATUS_MAP[exception_type]
    return 500
