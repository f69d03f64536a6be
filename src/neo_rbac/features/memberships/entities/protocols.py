"""Protocol interfaces for the memberships feature."""

from abc import abstractmethod
from datetime import datetime
from typing import Protocol, runtime_checkable, List, Optional, Tuple

from .membership import Membership, SecondaryRoleAssignment


@runtime_checkable
class MembershipRepository(Protocol):
    """Protocol for tenant membership persistence."""

    @abstractmethod
    async def get_active(self, user_id: str, tenant_id: str) -> Optional[Membership]:
        """Get the user's active membership in the tenant, if any."""
        ...

    @abstractmethod
    async def create(self, membership: Membership) -> Membership:
        """Insert a membership."""
        ...

    @abstractmethod
    async def update_primary_role(self, user_id: str, tenant_id: str, role_id: str, is_owner: bool) -> None:
        """Set the primary role and owner flag of an active membership.

        Runs as one transaction that raises RoleNotFoundError for a role outside
        the tenant and LastOwnerViolationError when it would demote the tenant's
        last active owner.
        """
        ...

    @abstractmethod
    async def count_active_owners(self, tenant_id: str) -> int:
        """Count active memberships flagged as owner."""
        ...

    @abstractmethod
    async def list_primary_holders(self, role_id: str, tenant_id: str) -> List[str]:
        """User ids of active memberships whose primary role is the given role."""
        ...


@runtime_checkable
class AssignmentRepository(Protocol):
    """Protocol for secondary role assignment persistence."""

    @abstractmethod
    async def list_for_user(self, user_id: str, tenant_id: str) -> List[SecondaryRoleAssignment]:
        """All assignment rows for (user, tenant), whatever their status."""
        ...

    @abstractmethod
    async def get(self, user_id: str, tenant_id: str, role_id: str) -> Optional[SecondaryRoleAssignment]:
        """The row for the (user, tenant, role) triple, if any."""
        ...

    @abstractmethod
    async def create(self, assignment: SecondaryRoleAssignment) -> SecondaryRoleAssignment:
        """Insert a new active assignment."""
        ...

    @abstractmethod
    async def reactivate(
        self,
        assignment_id: str,
        assigned_by: str,
        expires_at: Optional[datetime],
        reason: Optional[str]
    ) -> SecondaryRoleAssignment:
        """Turn a revoked or expired row back into an active assignment."""
        ...

    @abstractmethod
    async def revoke(self, assignment_id: str, revoked_by: str, revoked_at: datetime) -> None:
        """Mark an assignment revoked."""
        ...

    @abstractmethod
    async def list_active_holders(self, role_id: str, tenant_id: str) -> List[str]:
        """User ids holding the role through an active-status assignment."""
        ...

    @abstractmethod
    async def mark_expired(self, now: datetime) -> List[Tuple[str, str]]:
        """Mark active assignments past their expiry; return (user_id, tenant_id) pairs."""
        ...
