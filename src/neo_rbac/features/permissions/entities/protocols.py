"""Protocol interfaces for the permissions feature."""

from abc import abstractmethod
from typing import Protocol, runtime_checkable, FrozenSet, List, Optional
from datetime import datetime

from .permission import Permission


@runtime_checkable
class PermissionRepository(Protocol):
    """Protocol for the persisted copy of the permission catalog."""

    @abstractmethod
    async def seed_permissions(self) -> int:
        """Insert the catalog if the table is empty; return rows inserted."""
        ...

    @abstractmethod
    async def list_all(self) -> List[Permission]:
        """List persisted permissions ordered by category and key."""
        ...


@runtime_checkable
class PermissionResolverProtocol(Protocol):
    """Protocol for computing a (user, tenant) effective permission set."""

    @abstractmethod
    async def resolve(
        self,
        user_id: str,
        tenant_id: str,
        now: Optional[datetime] = None
    ) -> FrozenSet[str]:
        """Resolve the effective permission keys at ``now``."""
        ...
