"""Constants and enums for neo-rbac.

This module defines the constants, enums, and configuration values used
throughout the authorization core. Status enums correspond to the varchar
status columns of the RBAC tables.
"""

from enum import Enum
from typing import Final, FrozenSet


class CacheKeys:
    """Cache key patterns for Redis."""

    USER_PERMISSIONS: Final[str] = "{prefix}:{user_id}:{tenant_id}"


class CacheTTL:
    """Cache TTL values in seconds."""

    PERMISSIONS: Final[int] = 300      # 5 minutes
    PERMISSIONS_MAX: Final[int] = 3600  # 1 hour


class HierarchyLevels:
    """Role hierarchy bounds (1 = highest privilege)."""

    OWNER: Final[int] = 1
    MIN_CUSTOM: Final[int] = 2
    TENANT_ADMIN: Final[int] = 10
    DEFAULT_CUSTOM: Final[int] = 50
    LOWEST: Final[int] = 100


class SystemRoles:
    """Built-in role identity created at tenant bootstrap."""

    OWNER_NAME: Final[str] = "Owner"
    OWNER_SLUG: Final[str] = "owner"
    OWNER_DESCRIPTION: Final[str] = "Full access to all features"


RESERVED_ROLE_NAMES: Final[FrozenSet[str]] = frozenset({"owner", "admin", "system"})


class MembershipStatus(str, Enum):
    """Tenant membership status - corresponds to tenant_members.status."""

    ACTIVE = "active"
    SUSPENDED = "suspended"
    REMOVED = "removed"


class AssignmentStatus(str, Enum):
    """Secondary role assignment status - corresponds to secondary_role_assignments.status."""

    ACTIVE = "active"
    EXPIRED = "expired"
    REVOKED = "revoked"


class GroupRole(str, Enum):
    """Role of a user inside a group - corresponds to group_members.role."""

    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"
    VIEWER = "viewer"

    @property
    def is_elevated(self) -> bool:
        """Owner and admin are the elevated group roles."""
        return self in (GroupRole.OWNER, GroupRole.ADMIN)


class GroupMemberStatus(str, Enum):
    """Group membership status - corresponds to group_members.status."""

    ACTIVE = "active"
    REMOVED = "removed"


class AuditAction(str, Enum):
    """Audit actions emitted by the authorization core."""

    ROLE_CREATED = "role_created"
    ROLE_UPDATED = "role_updated"
    ROLE_DELETED = "role_deleted"
    ROLE_ASSIGNED = "role_assigned"
    SECONDARY_ROLE_ASSIGNED = "secondary_role_assigned"
    SECONDARY_ROLE_REVOKED = "secondary_role_revoked"
    SECONDARY_ROLE_EXPIRED = "secondary_role_expired"
    GROUP_MEMBER_ADDED = "group_member_added"
    GROUP_MEMBER_ROLE_UPDATED = "group_member_role_updated"
    GROUP_MEMBER_REMOVED = "group_member_removed"


class GroupPermissions:
    """Tenant-level permissions that authorize group operations."""

    VIEW: Final[str] = "canViewGroups"
    MANAGE: Final[str] = "canManageGroups"
    DELETE: Final[str] = "canDeleteGroups"
    MANAGE_MEMBERS: Final[str] = "canManageGroupMembers"
    ASSIGN_RESOURCES: Final[str] = "canAssignGroupResources"
    VIEW_RESOURCES: Final[str] = "canViewGroupResources"
