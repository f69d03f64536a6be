"""Domain-specific exceptions for neo-rbac.

These are the terminal, caller-recoverable conditions raised by role
administration, assignment and the dual-authorization gate.
"""

from typing import Iterable, Optional

from .base import RbacError


# Configuration Errors
class ConfigurationError(RbacError):
    """Raised when there's a configuration issue."""
    pass


class ValidationError(RbacError):
    """Raised when an argument fails validation (e.g. an expiry in the past)."""
    pass


# Not Found Errors
class NotFoundError(RbacError):
    """Base class for missing-entity errors."""
    pass


class RoleNotFoundError(NotFoundError):
    """Raised when a role does not exist in the tenant."""

    def __init__(self, role_id: str, tenant_id: str):
        super().__init__(
            f"Role {role_id} not found in tenant {tenant_id}",
            details={"role_id": role_id, "tenant_id": tenant_id}
        )


class AssignmentNotFoundError(NotFoundError):
    """Raised when no active secondary assignment exists for (user, tenant, role)."""

    def __init__(self, user_id: str, tenant_id: str, role_id: str):
        super().__init__(
            f"No active assignment of role {role_id} for user {user_id}",
            details={"user_id": user_id, "tenant_id": tenant_id, "role_id": role_id}
        )


class MembershipNotFoundError(NotFoundError):
    """Raised when the user has no active membership in the tenant."""

    def __init__(self, user_id: str, tenant_id: str):
        super().__init__(
            f"User {user_id} is not an active member of tenant {tenant_id}",
            error_code="NotAMember",
            details={"user_id": user_id, "tenant_id": tenant_id}
        )


NotAMemberError = MembershipNotFoundError


class GroupMemberNotFoundError(NotFoundError):
    """Raised when the user is not an active member of the group."""

    def __init__(self, user_id: str, group_id: str):
        super().__init__(
            f"User {user_id} is not an active member of group {group_id}",
            details={"user_id": user_id, "group_id": group_id}
        )


# Conflict Errors
class ConflictError(RbacError):
    """Base class for uniqueness conflicts."""
    pass


class DuplicateRoleNameError(ConflictError):
    """Raised when the derived slug already exists in the tenant."""

    def __init__(self, slug: str, tenant_id: str):
        super().__init__(
            f"A role with slug '{slug}' already exists",
            details={"slug": slug, "tenant_id": tenant_id}
        )


class ReservedRoleNameError(ConflictError):
    """Raised when a role name matches a reserved system term."""

    def __init__(self, name: str):
        super().__init__(
            f"'{name}' is a reserved role name",
            details={"name": name}
        )


class AlreadyAssignedError(ConflictError):
    """Raised when an active secondary assignment already exists."""

    def __init__(self, user_id: str, tenant_id: str, role_id: str):
        super().__init__(
            f"Role {role_id} is already assigned to user {user_id}",
            details={"user_id": user_id, "tenant_id": tenant_id, "role_id": role_id}
        )


# Authorization Rule Errors
class HierarchyViolationError(RbacError):
    """Raised when the caller is not strictly more privileged than the target."""

    def __init__(self, message: str, caller_level: Optional[int] = None, target_level: Optional[int] = None):
        super().__init__(
            message,
            details={"caller_level": caller_level, "target_level": target_level}
        )


class ProtectedRoleError(RbacError):
    """Raised on any modification or deletion of a protected role."""

    def __init__(self, role_id: str):
        super().__init__(
            "Protected roles cannot be modified or deleted",
            details={"role_id": role_id}
        )


class LastOwnerViolationError(RbacError):
    """Raised when a change would leave the tenant without an active owner."""

    def __init__(self, user_id: str, tenant_id: str):
        super().__init__(
            "Cannot change the role of the last owner",
            details={"user_id": user_id, "tenant_id": tenant_id}
        )


class LastAdminViolationError(RbacError):
    """Raised when a change would leave a group without an owner or admin."""

    def __init__(self, user_id: str, group_id: str):
        super().__init__(
            "Cannot demote or remove the last group owner/admin",
            details={"user_id": user_id, "group_id": group_id}
        )


class InvalidPermissionError(RbacError):
    """Raised when permission keys are not in the catalog."""

    def __init__(self, invalid_keys: Iterable[str]):
        keys = sorted(set(invalid_keys))
        super().__init__(
            f"Invalid permissions: {', '.join(keys)}",
            details={"invalid_keys": keys}
        )
        self.invalid_keys = keys


class RoleInUseError(RbacError):
    """Raised when deleting a role that is still some membership's primary role."""

    def __init__(self, role_id: str, member_count: int):
        super().__init__(
            f"Cannot delete role assigned to {member_count} member(s) as primary role",
            details={"role_id": role_id, "member_count": member_count}
        )


class AccessDeniedError(RbacError):
    """Raised when the dual-authorization gate refuses the caller."""
    pass
