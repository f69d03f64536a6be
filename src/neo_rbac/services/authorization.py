"""Authorization facade.

AuthorizationService is the narrow API consumed by route handlers and other
collaborators: permission predicates, role administration, assignment, cache
invalidation and the group dual-authorization gate.
"""

import logging
from datetime import datetime
from typing import Callable, Iterable, List, Optional

from ..config.constants import GroupRole, MembershipStatus
from ..config.settings import RbacSettings, get_settings
from ..features.audit import AuditService, AuditSink, AsyncPGAuditSink, LoggingAuditSink
from ..features.cache import CacheBackend, PermissionCache, RedisCacheAdapter
from ..features.database import DatabaseService
from ..features.groups import (
    AsyncPGGroupMemberRepository,
    DualAuthorizationGate,
    GroupMember,
    GroupMemberRepository,
    GroupMembershipService,
)
from ..features.memberships import (
    AssignmentRepository,
    AsyncPGAssignmentRepository,
    AsyncPGMembershipRepository,
    Membership,
    MembershipRepository,
    SecondaryRoleAssignment,
)
from ..features.memberships.services import AssignmentService
from ..features.permissions import AsyncPGPermissionRepository, PermissionResolver, PermissionService
from ..features.roles import AsyncPGRoleRepository, Role, RoleRepository
from ..features.roles.services import HierarchyGuard, RoleService
from ..utils.datetime import utc_now

logger = logging.getLogger(__name__)


class AuthorizationService:
    """Facade over the authorization core."""

    def __init__(
        self,
        roles: RoleRepository,
        memberships: MembershipRepository,
        assignments: AssignmentRepository,
        group_members: GroupMemberRepository,
        cache_backend: CacheBackend,
        audit_sink: Optional[AuditSink] = None,
        settings: Optional[RbacSettings] = None,
        clock: Callable[[], datetime] = utc_now
    ):
        self.settings = settings or get_settings()
        self.memberships = memberships
        self.cache_backend = cache_backend
        self.database: Optional[DatabaseService] = None

        cache = PermissionCache(cache_backend, self.settings.cache_key_prefix, self.settings.cache_ttl_seconds)
        audit = AuditService(
            audit_sink,
            self.settings.audit_enabled,
            self.settings.audit_timeout_seconds,
            self.settings.audit_background,
        )
        resolver = PermissionResolver(memberships, assignments, roles, clock)
        guard = HierarchyGuard(memberships, roles)

        self.audit = audit
        self.guard = guard
        self.permissions = PermissionService(resolver, cache, memberships, assignments)
        self.role_service = RoleService(roles, memberships, assignments, self.permissions, guard, audit, clock)
        self.assignment_service = AssignmentService(
            roles, memberships, assignments, self.permissions, guard, audit, clock
        )
        self.gate = DualAuthorizationGate(self.permissions, group_members)
        self.group_service = GroupMembershipService(
            self.gate, group_members, memberships, guard, audit, self.settings.tenant_admin_level
        )

    # Resolution and predicates

    async def resolve(self, user_id: str, tenant_id: str) -> List[str]:
        """Effective permission keys, sorted for stable transport."""
        return sorted(await self.permissions.resolve(user_id, tenant_id))

    async def has_permission(self, user_id: str, tenant_id: str, key: str) -> bool:
        return await self.permissions.has_permission(user_id, tenant_id, key)

    async def has_any(self, user_id: str, tenant_id: str, keys: Iterable[str]) -> bool:
        return await self.permissions.has_any_permission(user_id, tenant_id, keys)

    async def has_all(self, user_id: str, tenant_id: str, keys: Iterable[str]) -> bool:
        return await self.permissions.has_all_permissions(user_id, tenant_id, keys)

    async def requires_mfa(self, user_id: str, tenant_id: str, key: str) -> bool:
        return await self.permissions.requires_mfa_for(user_id, tenant_id, key)

    async def get_hierarchy_level(self, user_id: str, tenant_id: str) -> int:
        return await self.guard.get_caller_level(user_id, tenant_id)

    # Role administration

    async def create_role(
        self,
        tenant_id: str,
        name: str,
        hierarchy_level: int,
        permission_keys: Iterable[str],
        created_by: str,
        description: Optional[str] = None
    ) -> Role:
        return await self.role_service.create_role(
            tenant_id, name, hierarchy_level, permission_keys, created_by, description
        )

    async def update_role(
        self,
        role_id: str,
        tenant_id: str,
        updated_by: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        hierarchy_level: Optional[int] = None,
        permission_keys: Optional[Iterable[str]] = None
    ) -> Role:
        return await self.role_service.update_role(
            role_id, tenant_id, updated_by,
            name=name, description=description,
            hierarchy_level=hierarchy_level, permission_keys=permission_keys,
        )

    async def delete_role(self, role_id: str, tenant_id: str, deleted_by: str) -> None:
        await self.role_service.delete_role(role_id, tenant_id, deleted_by)

    async def get_role(self, role_id: str, tenant_id: str) -> Role:
        return await self.role_service.get_role(role_id, tenant_id)

    async def list_roles(self, tenant_id: str) -> List[Role]:
        return await self.role_service.list_roles(tenant_id)

    # Assignment

    async def assign_primary_role(self, user_id: str, tenant_id: str, role_id: str, assigned_by: str) -> Membership:
        return await self.assignment_service.assign_primary_role(user_id, tenant_id, role_id, assigned_by)

    async def assign_secondary_role(
        self,
        user_id: str,
        tenant_id: str,
        role_id: str,
        assigned_by: str,
        expires_at: Optional[datetime] = None,
        reason: Optional[str] = None
    ) -> SecondaryRoleAssignment:
        return await self.assignment_service.assign_secondary_role(
            user_id, tenant_id, role_id, assigned_by, expires_at, reason
        )

    async def revoke_secondary_role(self, user_id: str, tenant_id: str, role_id: str, revoked_by: str) -> None:
        await self.assignment_service.revoke_secondary_role(user_id, tenant_id, role_id, revoked_by)

    async def expire_secondary_roles(self, now: Optional[datetime] = None) -> int:
        return await self.assignment_service.expire_secondary_roles(now)

    # Invalidation hooks for out-of-band mutations

    async def invalidate_user(self, user_id: str, tenant_id: str) -> None:
        await self.permissions.invalidate_user(user_id, tenant_id)

    async def invalidate_role(self, role_id: str, tenant_id: str) -> int:
        return await self.permissions.invalidate_role(role_id, tenant_id)

    # Groups

    async def can_access_group(self, user_id: str, tenant_id: str, group_id: str, permission_key: str) -> bool:
        return await self.gate.can_access(user_id, tenant_id, group_id, permission_key)

    async def add_group_member(
        self,
        actor_id: str,
        tenant_id: str,
        group_id: str,
        user_id: str,
        role: GroupRole = GroupRole.MEMBER
    ) -> GroupMember:
        return await self.group_service.add_member(actor_id, tenant_id, group_id, user_id, role)

    async def update_group_member_role(
        self,
        actor_id: str,
        tenant_id: str,
        group_id: str,
        user_id: str,
        role: GroupRole
    ) -> GroupMember:
        return await self.group_service.update_member_role(actor_id, tenant_id, group_id, user_id, role)

    async def remove_group_member(self, actor_id: str, tenant_id: str, group_id: str, user_id: str) -> None:
        await self.group_service.remove_member(actor_id, tenant_id, group_id, user_id)

    async def leave_group(self, user_id: str, tenant_id: str, group_id: str) -> None:
        await self.group_service.leave_group(user_id, tenant_id, group_id)

    # Bootstrap

    async def bootstrap_tenant(self, tenant_id: str, owner_user_id: str) -> Role:
        """Create the Owner role and the owner's membership for a new tenant.

        The owner's permission set is warmed into the cache.
        """
        owner_role = await self.role_service.create_owner_role(tenant_id, created_by=owner_user_id)
        await self.memberships.create(
            Membership(
                id=None,
                tenant_id=tenant_id,
                user_id=owner_user_id,
                primary_role_id=owner_role.id,
                is_owner=True,
                status=MembershipStatus.ACTIVE,
            )
        )
        await self.permissions.cache_permissions(owner_user_id, tenant_id, owner_role.permission_keys)
        logger.info(f"Bootstrapped tenant {tenant_id} with owner {owner_user_id}")
        return owner_role

    async def close(self) -> None:
        """Finish pending audit writes, then release the database pool and cache client."""
        await self.audit.flush()
        if self.database is not None:
            await self.database.close()
        close = getattr(self.cache_backend, "close", None)
        if close is not None:
            await close()


async def create_authorization_service(settings: Optional[RbacSettings] = None) -> AuthorizationService:
    """Build an AuthorizationService backed by PostgreSQL and Redis.

    Creates the asyncpg pool and the redis client from settings and seeds the
    permission catalog if the table is empty.
    """
    settings = settings or get_settings()
    database = await DatabaseService.create(settings)
    await AsyncPGPermissionRepository(database).seed_permissions()

    if settings.audit_sink == "database":
        audit_sink: AuditSink = AsyncPGAuditSink(database)
    else:
        audit_sink = LoggingAuditSink()

    service = AuthorizationService(
        roles=AsyncPGRoleRepository(database),
        memberships=AsyncPGMembershipRepository(database),
        assignments=AsyncPGAssignmentRepository(database),
        group_members=AsyncPGGroupMemberRepository(database),
        cache_backend=RedisCacheAdapter.from_url(settings.redis_url),
        audit_sink=audit_sink,
        settings=settings,
    )
    service.database = database
    return service
