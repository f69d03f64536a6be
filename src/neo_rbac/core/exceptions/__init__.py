"""Exception hierarchy for neo-rbac."""

from .base import RbacError, get_http_status_code, create_error_response
from .domain import (
    ConfigurationError,
    ValidationError,
    NotFoundError,
    RoleNotFoundError,
    AssignmentNotFoundError,
    MembershipNotFoundError,
    NotAMemberError,
    GroupMemberNotFoundError,
    ConflictError,
    DuplicateRoleNameError,
    ReservedRoleNameError,
    AlreadyAssignedError,
    HierarchyViolationError,
    ProtectedRoleError,
    LastOwnerViolationError,
    LastAdminViolationError,
    InvalidPermissionError,
    RoleInUseError,
    AccessDeniedError,
)
from .infrastructure import (
    UnavailableError,
    DatabaseUnavailableError,
    CacheUnavailableError,
    DatabaseError,
)

__all__ = [
    "RbacError",
    "get_http_status_code",
    "create_error_response",
    "ConfigurationError",
    "ValidationError",
    "NotFoundError",
    "RoleNotFoundError",
    "AssignmentNotFoundError",
    "MembershipNotFoundError",
    "NotAMemberError",
    "GroupMemberNotFoundError",
    "ConflictError",
    "DuplicateRoleNameError",
    "ReservedRoleNameError",
    "AlreadyAssignedError",
    "HierarchyViolationError",
    "ProtectedRoleError",
    "LastOwnerViolationError",
    "LastAdminViolationError",
    "InvalidPermissionError",
    "RoleInUseError",
    "AccessDeniedError",
    "UnavailableError",
    "DatabaseUnavailableError",
    "CacheUnavailableError",
    "DatabaseError",
]
