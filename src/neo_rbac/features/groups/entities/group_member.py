"""Group member entity. Maps to the ``group_members`` table."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ....config.constants import GroupRole, GroupMemberStatus


@dataclass
class GroupMember:
    """A user's membership in a group (team) within a tenant."""

    id: Optional[str]
    group_id: str
    tenant_id: str
    user_id: str
    role: GroupRole = GroupRole.MEMBER
    status: GroupMemberStatus = GroupMemberStatus.ACTIVE
    added_by: Optional[str] = None
    joined_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == GroupMemberStatus.ACTIVE

    @property
    def is_elevated(self) -> bool:
        """Active owner or admin of the group."""
        return self.is_active and self.role.is_elevated
