"""Group membership management behind the dual-authorization gate.

A group must always keep at least one active owner or admin; the repository
checks that rule in the same transaction as each demotion or removal.
"""

import logging
from typing import List

from ....config.constants import AuditAction, GroupPermissions, GroupRole, HierarchyLevels
from ....core.exceptions import (
    AccessDeniedError,
    ConflictError,
    GroupMemberNotFoundError,
    NotAMemberError,
)
from ...audit.services import AuditService
from ...memberships.entities import MembershipRepository
from ...roles.services import HierarchyGuard
from ..entities import GroupMember, GroupMemberRepository
from .access_gate import DualAuthorizationGate

logger = logging.getLogger(__name__)


class GroupMembershipService:
    """Adds, re-roles and removes group members."""

    def __init__(
        self,
        gate: DualAuthorizationGate,
        group_members: GroupMemberRepository,
        memberships: MembershipRepository,
        guard: HierarchyGuard,
        audit: AuditService,
        tenant_admin_level: int = HierarchyLevels.TENANT_ADMIN
    ):
        self.gate = gate
        self.group_members = group_members
        self.memberships = memberships
        self.guard = guard
        self.audit = audit
        self.tenant_admin_level = tenant_admin_level

    async def _authorize(self, actor_id: str, tenant_id: str, group_id: str) -> None:
        if await self.memberships.get_active(actor_id, tenant_id) is None:
            raise AccessDeniedError("Not a tenant member", details={"tenant_id": tenant_id})
        await self.gate.ensure_access(actor_id, tenant_id, group_id, GroupPermissions.MANAGE_MEMBERS)

    async def _ensure_can_grant_owner(self, actor_id: str, tenant_id: str, group_id: str) -> None:
        """Only group owners or tenant admins may hand out group ownership."""
        actor = await self.group_members.get_member(group_id, tenant_id, actor_id)
        if actor is not None and actor.is_active and actor.role == GroupRole.OWNER:
            return
        if await self.guard.is_tenant_admin(actor_id, tenant_id, self.tenant_admin_level):
            return
        raise AccessDeniedError(
            "Only group owners or tenant admins can transfer ownership",
            details={"group_id": group_id},
        )

    async def _get_active_member(self, group_id: str, tenant_id: str, user_id: str) -> GroupMember:
        member = await self.group_members.get_member(group_id, tenant_id, user_id)
        if member is None or not member.is_active:
            raise GroupMemberNotFoundError(user_id, group_id)
        return member

    async def list_members(self, group_id: str, tenant_id: str) -> List[GroupMember]:
        return await self.group_members.list_members(group_id, tenant_id)

    async def add_member(
        self,
        actor_id: str,
        tenant_id: str,
        group_id: str,
        user_id: str,
        role: GroupRole = GroupRole.MEMBER
    ) -> GroupMember:
        """Add a tenant member to the group; a removed member is reactivated."""
        await self._authorize(actor_id, tenant_id, group_id)
        if role == GroupRole.OWNER:
            await self._ensure_can_grant_owner(actor_id, tenant_id, group_id)

        if await self.memberships.get_active(user_id, tenant_id) is None:
            raise NotAMemberError(user_id, tenant_id)

        existing = await self.group_members.get_member(group_id, tenant_id, user_id)
        if existing is not None and existing.is_active:
            raise ConflictError(
                "User is already a member of this group",
                details={"user_id": user_id, "group_id": group_id},
            )

        if existing is not None:
            member = await self.group_members.reactivate(existing.id, role, actor_id)
        else:
            member = await self.group_members.create(
                GroupMember(
                    id=None,
                    group_id=group_id,
                    tenant_id=tenant_id,
                    user_id=user_id,
                    role=role,
                    added_by=actor_id,
                )
            )
        logger.info(f"Added user {user_id} to group {group_id} as {role.value}")

        await self.audit.record(
            AuditAction.GROUP_MEMBER_ADDED, actor_id, tenant_id, "group_member", member.id,
            {"group_id": group_id, "user_id": user_id, "role": role.value},
        )
        return member

    async def update_member_role(
        self,
        actor_id: str,
        tenant_id: str,
        group_id: str,
        user_id: str,
        role: GroupRole
    ) -> GroupMember:
        await self._authorize(actor_id, tenant_id, group_id)
        if role == GroupRole.OWNER:
            await self._ensure_can_grant_owner(actor_id, tenant_id, group_id)

        member = await self._get_active_member(group_id, tenant_id, user_id)
        if member.role == role:
            return member

        old_role = member.role
        await self.group_members.update_role(group_id, tenant_id, user_id, role)
        member.role = role
        logger.info(f"Changed role of user {user_id} in group {group_id} from {old_role.value} to {role.value}")

        await self.audit.record(
            AuditAction.GROUP_MEMBER_ROLE_UPDATED, actor_id, tenant_id, "group_member", member.id,
            {"group_id": group_id, "user_id": user_id, "old_role": old_role.value, "new_role": role.value},
        )
        return member

    async def remove_member(self, actor_id: str, tenant_id: str, group_id: str, user_id: str) -> None:
        await self._authorize(actor_id, tenant_id, group_id)
        await self._remove(actor_id, tenant_id, group_id, user_id)

    async def leave_group(self, user_id: str, tenant_id: str, group_id: str) -> None:
        """Self-removal; needs tenant membership but no management rights."""
        if await self.memberships.get_active(user_id, tenant_id) is None:
            raise AccessDeniedError("Not a tenant member", details={"tenant_id": tenant_id})
        await self._remove(user_id, tenant_id, group_id, user_id)

    async def _remove(self, actor_id: str, tenant_id: str, group_id: str, user_id: str) -> None:
        member = await self._get_active_member(group_id, tenant_id, user_id)
        await self.group_members.remove(group_id, tenant_id, user_id, actor_id)
        logger.info(f"Removed user {user_id} from group {group_id}")

        await self.audit.record(
            AuditAction.GROUP_MEMBER_REMOVED, actor_id, tenant_id, "group_member", member.id,
            {"group_id": group_id, "user_id": user_id},
        )
