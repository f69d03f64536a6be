"""FastAPI integration: permission dependencies and exception handlers."""

from .dependencies import (
    RbacDependencyError,
    get_authorization_service,
    get_request_identity,
    require_permission,
    require_any_permission,
    require_all_permissions,
    register_exception_handlers,
)

__all__ = [
    "RbacDependencyError",
    "get_authorization_service",
    "get_request_identity",
    "require_permission",
    "require_any_permission",
    "require_all_permissions",
    "register_exception_handlers",
]
