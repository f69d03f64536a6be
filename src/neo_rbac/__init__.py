"""Neo-RBAC - Multi-tenant role-based authorization core.

This library provides permission resolution with caching, role hierarchy
enforcement, primary and time-bound secondary role assignment, and dual
tenant/group authorization for the NeoMultiTenant ecosystem.
"""

# Initialize logging configuration on import
from .config.logging_config import setup_logging
setup_logging()

from .__version__ import __version__

from .config import (
    RbacSettings,
    get_settings,
    HierarchyLevels,
    MembershipStatus,
    AssignmentStatus,
    GroupRole,
    AuditAction,
    GroupPermissions,
)

from .core.exceptions import (
    # Base Exception
    RbacError,

    # Domain Exceptions
    ValidationError,
    NotFoundError,
    RoleNotFoundError,
    AssignmentNotFoundError,
    NotAMemberError,
    ConflictError,
    DuplicateRoleNameError,
    AlreadyAssignedError,
    HierarchyViolationError,
    ProtectedRoleError,
    LastOwnerViolationError,
    LastAdminViolationError,
    InvalidPermissionError,
    RoleInUseError,
    AccessDeniedError,

    # Infrastructure Exceptions
    UnavailableError,
    DatabaseError,

    # Utility Functions
    get_http_status_code,
    create_error_response,
)

from .features.permissions import (
    Permission,
    PERMISSION_CATALOG,
    ALL_PERMISSION_KEYS,
    validate_permission_keys,
)
from .features.roles import Role
from .features.memberships import Membership, SecondaryRoleAssignment
from .features.groups import GroupMember

from .services import AuthorizationService, create_authorization_service

__all__ = [
    "__version__",
    "setup_logging",
    # Configuration
    "RbacSettings",
    "get_settings",
    "HierarchyLevels",
    "MembershipStatus",
    "AssignmentStatus",
    "GroupRole",
    "AuditAction",
    "GroupPermissions",
    # Exceptions
    "RbacError",
    "ValidationError",
    "NotFoundError",
    "RoleNotFoundError",
    "AssignmentNotFoundError",
    "NotAMemberError",
    "ConflictError",
    "DuplicateRoleNameError",
    "AlreadyAssignedError",
    "HierarchyViolationError",
    "ProtectedRoleError",
    "LastOwnerViolationError",
    "LastAdminViolationError",
    "InvalidPermissionError",
    "RoleInUseError",
    "AccessDeniedError",
    "UnavailableError",
    "DatabaseError",
    "get_http_status_code",
    "create_error_response",
    # Entities
    "Permission",
    "PERMISSION_CATALOG",
    "ALL_PERMISSION_KEYS",
    "validate_permission_keys",
    "Role",
    "Membership",
    "SecondaryRoleAssignment",
    "GroupMember",
    # Services
    "AuthorizationService",
    "create_authorization_service",
]
