"""Dual-authorization gate for scoped sub-resources (groups).

Access is granted when the caller holds a tenant-wide permission OR holds an
elevated (owner/admin) role inside the specific group. The two predicates
are independent; ``can_access`` combines them with a short-circuit OR,
checking the cached tenant permission first. A group that does not belong to
the caller's tenant is never accessible through either predicate.
"""

import logging

from ....core.exceptions import AccessDeniedError
from ...permissions.services import PermissionService
from ..entities import GroupMemberRepository

logger = logging.getLogger(__name__)


class DualAuthorizationGate:
    """Composes a tenant-level and a group-level predicate."""

    def __init__(self, permissions: PermissionService, group_members: GroupMemberRepository):
        self.permissions = permissions
        self.group_members = group_members

    async def has_tenant_permission(self, user_id: str, tenant_id: str, permission_key: str) -> bool:
        return await self.permissions.has_permission(user_id, tenant_id, permission_key)

    async def has_scoped_elevated_role(self, user_id: str, tenant_id: str, group_id: str) -> bool:
        """True if the user is an active owner or admin of the tenant's group."""
        member = await self.group_members.get_member(group_id, tenant_id, user_id)
        return member is not None and member.is_elevated

    async def can_access(self, user_id: str, tenant_id: str, group_id: str, permission_key: str) -> bool:
        if not await self.group_members.group_exists(group_id, tenant_id):
            logger.warning(f"Group {group_id} is not a group of tenant {tenant_id}")
            return False
        if await self.has_tenant_permission(user_id, tenant_id, permission_key):
            return True
        return await self.has_scoped_elevated_role(user_id, tenant_id, group_id)

    async def ensure_access(self, user_id: str, tenant_id: str, group_id: str, permission_key: str) -> None:
        """Raise AccessDeniedError when neither predicate holds."""
        if not await self.can_access(user_id, tenant_id, group_id, permission_key):
            logger.info(f"Denied {permission_key} on group {group_id} to user {user_id}")
            raise AccessDeniedError(
                f"Missing {permission_key} permission or group owner/admin role",
                details={"permission": permission_key, "group_id": group_id},
            )
