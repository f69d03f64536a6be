"""Protocol interfaces for the roles feature."""

from abc import abstractmethod
from datetime import datetime
from typing import Protocol, runtime_checkable, FrozenSet, Iterable, List, Optional

from .role import Role


@runtime_checkable
class RoleRepository(Protocol):
    """Protocol for role and role-permission persistence."""

    @abstractmethod
    async def get_by_id(self, role_id: str, tenant_id: str) -> Optional[Role]:
        """Get a role (with its permission keys) scoped to the tenant."""
        ...

    @abstractmethod
    async def get_by_slug(self, slug: str, tenant_id: str) -> Optional[Role]:
        """Get a role by slug within the tenant."""
        ...

    @abstractmethod
    async def list_by_tenant(self, tenant_id: str) -> List[Role]:
        """List the tenant's roles ordered by hierarchy level, then name."""
        ...

    @abstractmethod
    async def get_permission_keys(self, role_ids: Iterable[str], tenant_id: str) -> FrozenSet[str]:
        """Union of the permission keys granted by the given roles."""
        ...

    @abstractmethod
    async def create(self, role: Role, permission_keys: FrozenSet[str]) -> Role:
        """Insert the role and its permission rows atomically."""
        ...

    @abstractmethod
    async def update(
        self,
        role: Role,
        permission_keys: Optional[FrozenSet[str]] = None,
        granted_by: Optional[str] = None
    ) -> Role:
        """Update role attributes; when keys are given, replace all permission rows.

        Both happen in one transaction.
        """
        ...

    @abstractmethod
    async def delete(self, role_id: str, tenant_id: str, revoked_by: str, revoked_at: datetime) -> List[str]:
        """Revoke active secondary assignments of the role and delete it.

        One transaction locks the role, raises RoleInUseError while any active
        membership holds it as primary, and returns the ids of users whose
        secondary assignments were revoked.
        """
        ...
