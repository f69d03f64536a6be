"""Permission service: cached resolution, predicates and invalidation.

Sits in front of the PermissionResolver. A cache hit skips resolution
entirely; a miss resolves and populates the cache. Invalidation always
targets exact (user, tenant) keys derived from the store.
"""

import logging
from typing import FrozenSet, Iterable, List, Tuple

from ...cache.services import PermissionCache
from ...memberships.entities import AssignmentRepository, MembershipRepository
from ..entities import MFA_REQUIRED_PERMISSIONS, PermissionResolverProtocol

logger = logging.getLogger(__name__)


class PermissionService:
    """Service orchestrating permission resolution with caching."""

    def __init__(
        self,
        resolver: PermissionResolverProtocol,
        cache: PermissionCache,
        memberships: MembershipRepository,
        assignments: AssignmentRepository
    ):
        self.resolver = resolver
        self.cache = cache
        self.memberships = memberships
        self.assignments = assignments

    # Resolution

    async def resolve(self, user_id: str, tenant_id: str) -> FrozenSet[str]:
        """Get the effective permission set, from cache when possible."""
        cached = await self.cache.get(user_id, tenant_id)
        if cached is not None:
            return cached

        permissions = await self.resolver.resolve(user_id, tenant_id)
        await self.cache.set(user_id, tenant_id, permissions)
        return permissions

    async def has_permission(self, user_id: str, tenant_id: str, permission_key: str) -> bool:
        return permission_key in await self.resolve(user_id, tenant_id)

    async def has_any_permission(self, user_id: str, tenant_id: str, permission_keys: Iterable[str]) -> bool:
        """True if the user holds at least one key. An empty list is False."""
        required = list(permission_keys)
        if not required:
            return False
        permissions = await self.resolve(user_id, tenant_id)
        return any(key in permissions for key in required)

    async def has_all_permissions(self, user_id: str, tenant_id: str, permission_keys: Iterable[str]) -> bool:
        """True if the user holds every key. An empty list is True."""
        required = list(permission_keys)
        if not required:
            return True
        permissions = await self.resolve(user_id, tenant_id)
        return all(key in permissions for key in required)

    async def requires_mfa_for(self, user_id: str, tenant_id: str, permission_key: str) -> bool:
        """True when the user holds the permission and exercising it needs MFA."""
        if permission_key not in MFA_REQUIRED_PERMISSIONS:
            return False
        return await self.has_permission(user_id, tenant_id, permission_key)

    async def cache_permissions(self, user_id: str, tenant_id: str, permission_keys: Iterable[str]) -> None:
        """Warm the cache with a known set (e.g. right after tenant signup)."""
        await self.cache.set(user_id, tenant_id, permission_keys)

    # Invalidation

    async def invalidate_user(self, user_id: str, tenant_id: str) -> None:
        await self.cache.invalidate(user_id, tenant_id)

    async def get_role_holders(self, role_id: str, tenant_id: str) -> List[str]:
        """Users holding the role as primary or through an active secondary assignment."""
        primary = await self.memberships.list_primary_holders(role_id, tenant_id)
        secondary = await self.assignments.list_active_holders(role_id, tenant_id)
        return sorted(set(primary) | set(secondary))

    async def invalidate_role(self, role_id: str, tenant_id: str) -> int:
        """Invalidate every (holder, tenant) pair of the role; return keys deleted."""
        holders = await self.get_role_holders(role_id, tenant_id)
        return await self.invalidate_users(holders, tenant_id)

    async def invalidate_users(self, user_ids: Iterable[str], tenant_id: str) -> int:
        count = await self.invalidate_pairs((user_id, tenant_id) for user_id in user_ids)
        if count:
            logger.info(f"Invalidated permission cache for {count} user(s) in tenant {tenant_id}")
        return count

    async def invalidate_pairs(self, pairs: Iterable[Tuple[str, str]]) -> int:
        """Invalidate arbitrary (user_id, tenant_id) pairs."""
        return await self.cache.invalidate_many(pairs)
