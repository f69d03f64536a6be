"""Hierarchy guard for role administration and assignment.

A caller may only create, modify, assign, revoke or delete roles whose
hierarchy level is numerically greater (less privileged) than the level of
the caller's own primary role. Level 1 belongs to the Owner role alone.
"""

import logging

from ....config.constants import HierarchyLevels
from ....core.exceptions import HierarchyViolationError
from ...memberships.entities import MembershipRepository
from ..entities import RoleRepository

logger = logging.getLogger(__name__)


class HierarchyGuard:
    """Looks up caller levels and enforces the strict hierarchy rule."""

    def __init__(self, memberships: MembershipRepository, roles: RoleRepository):
        self.memberships = memberships
        self.roles = roles

    async def get_caller_level(self, user_id: str, tenant_id: str) -> int:
        """Hierarchy level of the user's primary role; non-members get the lowest level."""
        membership = await self.memberships.get_active(user_id, tenant_id)
        if membership is None:
            return HierarchyLevels.LOWEST

        role = await self.roles.get_by_id(membership.primary_role_id, tenant_id)
        if role is None:
            logger.warning(
                f"Primary role {membership.primary_role_id} of user {user_id} missing in tenant {tenant_id}"
            )
            return HierarchyLevels.LOWEST
        return role.hierarchy_level

    @staticmethod
    def ensure_can_target(caller_level: int, target_level: int) -> None:
        """Raise unless the caller is strictly more privileged than the target."""
        if caller_level >= target_level:
            raise HierarchyViolationError(
                f"Cannot target role at hierarchy level {target_level}. Your level is {caller_level}.",
                caller_level=caller_level,
                target_level=target_level,
            )

    @classmethod
    def ensure_can_reassign(cls, caller_level: int, current_level: int) -> None:
        """Raise unless the caller outranks the member's current role.

        Owners may reassign anyone, other owners included; the last-owner
        rule still applies to them.
        """
        if caller_level == HierarchyLevels.OWNER:
            return
        cls.ensure_can_target(caller_level, current_level)

    @staticmethod
    def ensure_assignable_level(level: int) -> None:
        """Custom roles live in [2, 100]; level 1 is reserved for the Owner role."""
        if level < HierarchyLevels.MIN_CUSTOM or level > HierarchyLevels.LOWEST:
            raise HierarchyViolationError(
                f"Hierarchy level must be between {HierarchyLevels.MIN_CUSTOM} "
                f"and {HierarchyLevels.LOWEST}, got {level}",
                target_level=level,
            )

    async def ensure_caller_can_target(self, caller_id: str, tenant_id: str, target_level: int) -> int:
        """Look up the caller's level, enforce the rule, and return the level."""
        caller_level = await self.get_caller_level(caller_id, tenant_id)
        self.ensure_can_target(caller_level, target_level)
        return caller_level

    async def is_tenant_admin(self, user_id: str, tenant_id: str, admin_level: int = HierarchyLevels.TENANT_ADMIN) -> bool:
        return await self.get_caller_level(user_id, tenant_id) <= admin_level
