"""Protocol interfaces for the groups feature."""

from abc import abstractmethod
from typing import Protocol, runtime_checkable, List, Optional

from ....config.constants import GroupRole
from .group_member import GroupMember


@runtime_checkable
class GroupMemberRepository(Protocol):
    """Protocol for group membership persistence.

    Every lookup and write is scoped to a tenant, so a group id from another
    tenant behaves as if it did not exist.
    """

    @abstractmethod
    async def group_exists(self, group_id: str, tenant_id: str) -> bool:
        """True if the group is an active group of the tenant."""
        ...

    @abstractmethod
    async def get_member(self, group_id: str, tenant_id: str, user_id: str) -> Optional[GroupMember]:
        """The membership row for (group, user) in the tenant, whatever its status."""
        ...

    @abstractmethod
    async def list_members(self, group_id: str, tenant_id: str) -> List[GroupMember]:
        """Active members of the group."""
        ...

    @abstractmethod
    async def create(self, member: GroupMember) -> GroupMember:
        """Insert a new membership row."""
        ...

    @abstractmethod
    async def reactivate(self, member_id: str, role: GroupRole, added_by: str) -> GroupMember:
        """Reactivate a removed membership row with a new role."""
        ...

    @abstractmethod
    async def update_role(self, group_id: str, tenant_id: str, user_id: str, role: GroupRole) -> None:
        """Change the group role of an active member.

        Raises LastAdminViolationError, atomically with the write, when the
        change would leave the group without an active owner or admin.
        """
        ...

    @abstractmethod
    async def remove(self, group_id: str, tenant_id: str, user_id: str, removed_by: str) -> None:
        """Mark the membership removed under the same last-admin rule."""
        ...
