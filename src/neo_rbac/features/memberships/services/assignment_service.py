"""Primary and secondary role assignment.

Every successful mutation invalidates exactly the affected (user, tenant)
cache entry and records an audit event.
"""

import logging
from collections import Counter
from datetime import datetime
from typing import Callable, List, Optional

from ....config.constants import AssignmentStatus, AuditAction, HierarchyLevels
from ....core.exceptions import (
    AlreadyAssignedError,
    AssignmentNotFoundError,
    NotAMemberError,
    RoleNotFoundError,
    ValidationError,
)
from ....utils.datetime import ensure_utc, utc_now
from ...audit.services import AuditService
from ...permissions.services import PermissionService
from ...roles.entities import RoleRepository
from ...roles.services import HierarchyGuard
from ..entities import (
    AssignmentRepository,
    Membership,
    MembershipRepository,
    SecondaryRoleAssignment,
    is_assignment_active,
)

logger = logging.getLogger(__name__)


class AssignmentService:
    """Assigns primary roles and grants or revokes secondary roles."""

    def __init__(
        self,
        roles: RoleRepository,
        memberships: MembershipRepository,
        assignments: AssignmentRepository,
        permissions: PermissionService,
        guard: HierarchyGuard,
        audit: AuditService,
        clock: Callable[[], datetime] = utc_now
    ):
        self.roles = roles
        self.memberships = memberships
        self.assignments = assignments
        self.permissions = permissions
        self.guard = guard
        self.audit = audit
        self.clock = clock

    async def _load_target(self, user_id: str, tenant_id: str, role_id: str, caller_id: str):
        """Fetch role and membership, enforce the hierarchy rule, and return the caller level too."""
        role = await self.roles.get_by_id(role_id, tenant_id)
        if role is None:
            raise RoleNotFoundError(role_id, tenant_id)

        membership = await self.memberships.get_active(user_id, tenant_id)
        if membership is None:
            raise NotAMemberError(user_id, tenant_id)

        caller_level = await self.guard.ensure_caller_can_target(caller_id, tenant_id, role.hierarchy_level)
        return role, membership, caller_level

    async def _current_level(self, membership: Membership) -> int:
        if membership.is_owner:
            return HierarchyLevels.OWNER
        current = await self.roles.get_by_id(membership.primary_role_id, membership.tenant_id)
        return current.hierarchy_level if current else HierarchyLevels.LOWEST

    # Primary role

    async def assign_primary_role(self, user_id: str, tenant_id: str, role_id: str, assigned_by: str) -> Membership:
        """Replace the member's primary role.

        The caller must outrank both the new role and the member's current
        role; only owners may reassign owners. The tenant's last active owner
        cannot be moved off the Owner role, which the repository enforces in
        the same transaction as the write.
        """
        role, membership, caller_level = await self._load_target(user_id, tenant_id, role_id, assigned_by)
        self.guard.ensure_can_reassign(caller_level, await self._current_level(membership))
        becomes_owner = role.is_owner_role

        await self.memberships.update_primary_role(user_id, tenant_id, role_id, becomes_owner)
        await self.permissions.invalidate_user(user_id, tenant_id)
        logger.info(f"Assigned primary role {role.slug} to user {user_id} in tenant {tenant_id}")

        await self.audit.record(
            AuditAction.ROLE_ASSIGNED, assigned_by, tenant_id, "tenant_member", membership.id,
            {
                "user_id": user_id,
                "role_id": role_id,
                "role_name": role.name,
                "previous_role_id": membership.primary_role_id,
            },
        )
        membership.primary_role_id = role_id
        membership.is_owner = becomes_owner
        return membership

    # Secondary roles

    async def assign_secondary_role(
        self,
        user_id: str,
        tenant_id: str,
        role_id: str,
        assigned_by: str,
        expires_at: Optional[datetime] = None,
        reason: Optional[str] = None
    ) -> SecondaryRoleAssignment:
        """Grant an additional, optionally time-bounded role.

        A previously revoked or expired row for the same role is reactivated.
        """
        role, _, _ = await self._load_target(user_id, tenant_id, role_id, assigned_by)

        now = self.clock()
        if expires_at is not None and ensure_utc(expires_at) <= ensure_utc(now):
            raise ValidationError(
                "Expiry must be in the future",
                details={"expires_at": expires_at.isoformat()}
            )

        existing = await self.assignments.get(user_id, tenant_id, role_id)
        if existing is not None and is_assignment_active(existing, now):
            raise AlreadyAssignedError(user_id, tenant_id, role_id)

        if existing is not None:
            assignment = await self.assignments.reactivate(existing.id, assigned_by, expires_at, reason)
        else:
            assignment = await self.assignments.create(
                SecondaryRoleAssignment(
                    id=None,
                    tenant_id=tenant_id,
                    user_id=user_id,
                    role_id=role_id,
                    expires_at=expires_at,
                    reason=reason,
                    assigned_by=assigned_by,
                )
            )

        await self.permissions.invalidate_user(user_id, tenant_id)
        logger.info(
            f"Assigned secondary role {role.slug} to user {user_id} in tenant {tenant_id}"
            + (f" until {expires_at.isoformat()}" if expires_at else "")
        )

        await self.audit.record(
            AuditAction.SECONDARY_ROLE_ASSIGNED, assigned_by, tenant_id, "secondary_role_assignment", assignment.id,
            {
                "user_id": user_id,
                "role_id": role_id,
                "role_name": role.name,
                "expires_at": expires_at.isoformat() if expires_at else None,
                "reason": reason,
            },
        )
        return assignment

    async def revoke_secondary_role(self, user_id: str, tenant_id: str, role_id: str, revoked_by: str) -> None:
        """Revoke an active secondary assignment. Revocation is terminal."""
        role = await self.roles.get_by_id(role_id, tenant_id)
        if role is None:
            raise RoleNotFoundError(role_id, tenant_id)
        await self.guard.ensure_caller_can_target(revoked_by, tenant_id, role.hierarchy_level)

        existing = await self.assignments.get(user_id, tenant_id, role_id)
        if existing is None or existing.status != AssignmentStatus.ACTIVE:
            raise AssignmentNotFoundError(user_id, tenant_id, role_id)

        await self.assignments.revoke(existing.id, revoked_by, self.clock())
        await self.permissions.invalidate_user(user_id, tenant_id)
        logger.info(f"Revoked secondary role {role.slug} from user {user_id} in tenant {tenant_id}")

        await self.audit.record(
            AuditAction.SECONDARY_ROLE_REVOKED, revoked_by, tenant_id, "secondary_role_assignment", existing.id,
            {"user_id": user_id, "role_id": role_id, "role_name": role.name},
        )

    async def list_secondary_roles(
        self,
        user_id: str,
        tenant_id: str,
        include_inactive: bool = False
    ) -> List[SecondaryRoleAssignment]:
        assignments = await self.assignments.list_for_user(user_id, tenant_id)
        if include_inactive:
            return assignments
        now = self.clock()
        return [a for a in assignments if is_assignment_active(a, now)]

    async def expire_secondary_roles(self, now: Optional[datetime] = None) -> int:
        """Mark lapsed assignments expired and invalidate exactly their holders.

        Resolution already ignores lapsed assignments, so this sweep only
        tightens cache freshness. Returns the number of assignments expired.
        """
        pairs = await self.assignments.mark_expired(now or self.clock())
        if not pairs:
            return 0

        await self.permissions.invalidate_pairs(pairs)
        for (user_id, tenant_id), count in Counter(pairs).items():
            await self.audit.record(
                AuditAction.SECONDARY_ROLE_EXPIRED, None, tenant_id, "secondary_role_assignment", None,
                {"user_id": user_id, "expired_count": count},
            )
        logger.info(f"Expired {len(pairs)} secondary role assignment(s)")
        return len(pairs)
