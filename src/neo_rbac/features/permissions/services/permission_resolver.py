"""Permission resolution for a (user, tenant) pair.

The effective set is the union of the primary role's permissions and the
permissions of every secondary assignment that is active at resolution time.
Resolution is read-only and safe under concurrent callers.
"""

import logging
from datetime import datetime
from typing import Callable, FrozenSet, Optional

from ....utils.datetime import utc_now
from ...memberships.entities import (
    AssignmentRepository,
    MembershipRepository,
    is_assignment_active,
)
from ...roles.entities import RoleRepository

logger = logging.getLogger(__name__)


class PermissionResolver:
    """Computes effective permission sets straight from the store."""

    def __init__(
        self,
        memberships: MembershipRepository,
        assignments: AssignmentRepository,
        roles: RoleRepository,
        clock: Callable[[], datetime] = utc_now
    ):
        self.memberships = memberships
        self.assignments = assignments
        self.roles = roles
        self.clock = clock

    async def resolve(
        self,
        user_id: str,
        tenant_id: str,
        now: Optional[datetime] = None
    ) -> FrozenSet[str]:
        """Resolve the user's permission keys in the tenant.

        A user without an active membership resolves to the empty set; this
        is not an error.
        """
        membership = await self.memberships.get_active(user_id, tenant_id)
        if membership is None:
            logger.debug(f"No active membership for user {user_id} in tenant {tenant_id}")
            return frozenset()

        now = now or self.clock()
        assignments = await self.assignments.list_for_user(user_id, tenant_id)
        secondary_role_ids = [a.role_id for a in assignments if is_assignment_active(a, now)]

        role_ids = [membership.primary_role_id, *secondary_role_ids]
        return await self.roles.get_permission_keys(role_ids, tenant_id)
