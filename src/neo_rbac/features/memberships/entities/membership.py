"""Membership domain entities.

A Membership binds a user to a tenant with exactly one primary role. A
SecondaryRoleAssignment grants an additional, optionally time-bounded role.
Maps to ``tenant_members`` and ``secondary_role_assignments``.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ....config.constants import AssignmentStatus, MembershipStatus
from ....utils.datetime import ensure_utc


@dataclass
class Membership:
    """A user's membership in a tenant."""

    id: Optional[str]
    tenant_id: str
    user_id: str
    primary_role_id: str
    is_owner: bool = False
    status: MembershipStatus = MembershipStatus.ACTIVE
    joined_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == MembershipStatus.ACTIVE


@dataclass
class SecondaryRoleAssignment:
    """An additional role granted to a member, with provenance."""

    id: Optional[str]
    tenant_id: str
    user_id: str
    role_id: str
    status: AssignmentStatus = AssignmentStatus.ACTIVE
    expires_at: Optional[datetime] = None
    reason: Optional[str] = None
    assigned_by: Optional[str] = None
    revoked_by: Optional[str] = None
    revoked_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


def is_assignment_active(assignment: SecondaryRoleAssignment, now: datetime) -> bool:
    """Whether the assignment grants its role at ``now``.

    An assignment is active iff its status is active and it has no expiry or
    its expiry lies strictly after ``now``. A stored status of ``active`` with
    a past expiry is not active.
    """
    if assignment.status != AssignmentStatus.ACTIVE:
        return False
    if assignment.expires_at is None:
        return True
    return ensure_utc(assignment.expires_at) > ensure_utc(now)
