"""Role service: role CRUD with hierarchy enforcement and cache invalidation."""

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional

from ....config.constants import AuditAction, HierarchyLevels, SystemRoles
from ....core.exceptions import (
    DuplicateRoleNameError,
    ProtectedRoleError,
    ReservedRoleNameError,
    RoleNotFoundError,
    ValidationError,
)
from ....utils.datetime import utc_now
from ...audit.services import AuditService
from ...memberships.entities import AssignmentRepository, MembershipRepository
from ...permissions.entities import ALL_PERMISSION_KEYS, validate_permission_keys
from ...permissions.services import PermissionService
from ..entities import Role, RoleRepository, slugify, is_reserved_role_name
from .hierarchy_guard import HierarchyGuard

logger = logging.getLogger(__name__)


class RoleService:
    """Creates, updates and deletes tenant roles."""

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

    # Queries

    async def get_role(self, role_id: str, tenant_id: str) -> Role:
        role = await self.roles.get_by_id(role_id, tenant_id)
        if role is None:
            raise RoleNotFoundError(role_id, tenant_id)
        return role

    async def get_role_by_slug(self, slug: str, tenant_id: str) -> Optional[Role]:
        return await self.roles.get_by_slug(slug, tenant_id)

    async def list_roles(self, tenant_id: str) -> List[Role]:
        return await self.roles.list_by_tenant(tenant_id)

    async def get_role_permissions(self, role_id: str, tenant_id: str) -> FrozenSet[str]:
        return (await self.get_role(role_id, tenant_id)).permission_keys

    async def get_role_members(self, role_id: str, tenant_id: str) -> Dict[str, List[str]]:
        """User ids holding the role, split by primary and secondary."""
        await self.get_role(role_id, tenant_id)
        return {
            "primary": sorted(await self.memberships.list_primary_holders(role_id, tenant_id)),
            "secondary": sorted(await self.assignments.list_active_holders(role_id, tenant_id)),
        }

    # Validation helpers

    def _clean_name(self, name: str) -> str:
        name = name.strip()
        if not name:
            raise ValidationError("Role name cannot be empty")
        if is_reserved_role_name(name):
            raise ReservedRoleNameError(name)
        return name

    async def _ensure_slug_available(self, slug: str, tenant_id: str, role_id: Optional[str] = None) -> None:
        if not slug:
            raise ValidationError("Role name must contain at least one letter or digit")
        existing = await self.roles.get_by_slug(slug, tenant_id)
        if existing is not None and existing.id != role_id:
            raise DuplicateRoleNameError(slug, tenant_id)

    # Mutations

    async def create_role(
        self,
        tenant_id: str,
        name: str,
        hierarchy_level: int,
        permission_keys: Iterable[str],
        created_by: str,
        description: Optional[str] = None
    ) -> Role:
        """Create a custom role and its permission set atomically."""
        self.guard.ensure_assignable_level(hierarchy_level)
        await self.guard.ensure_caller_can_target(created_by, tenant_id, hierarchy_level)

        name = self._clean_name(name)
        keys = validate_permission_keys(permission_keys)
        slug = slugify(name)
        await self._ensure_slug_available(slug, tenant_id)

        role = await self.roles.create(
            Role(
                id=None,
                tenant_id=tenant_id,
                name=name,
                slug=slug,
                hierarchy_level=hierarchy_level,
                description=description,
                created_by=created_by,
            ),
            keys,
        )
        logger.info(f"Created role {role.slug} ({role.id}) at level {hierarchy_level} in tenant {tenant_id}")

        await self.audit.record(
            AuditAction.ROLE_CREATED, created_by, tenant_id, "role", role.id,
            {"name": role.name, "hierarchy_level": hierarchy_level, "permission_count": len(keys)},
        )
        return role

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
        """Update a role; a given permission list replaces the whole set.

        Every holder of the role is invalidated after the write.
        """
        role = await self.get_role(role_id, tenant_id)
        if role.is_protected:
            raise ProtectedRoleError(role_id)

        caller_level = await self.guard.ensure_caller_can_target(updated_by, tenant_id, role.hierarchy_level)
        if hierarchy_level is not None:
            self.guard.ensure_assignable_level(hierarchy_level)
            self.guard.ensure_can_target(caller_level, hierarchy_level)

        changes = {}
        updated = role
        if name is not None:
            name = self._clean_name(name)
            slug = slugify(name)
            if slug != role.slug:
                await self._ensure_slug_available(slug, tenant_id, role_id)
            updated = replace(updated, name=name, slug=slug)
            changes["name"] = name
        if description is not None:
            updated = replace(updated, description=description)
            changes["description"] = description
        if hierarchy_level is not None:
            updated = replace(updated, hierarchy_level=hierarchy_level)
            changes["hierarchy_level"] = hierarchy_level

        keys = None
        if permission_keys is not None:
            keys = validate_permission_keys(permission_keys)
            changes["permissions_added"] = sorted(keys - role.permission_keys)
            changes["permissions_removed"] = sorted(role.permission_keys - keys)

        updated = await self.roles.update(updated, keys, granted_by=updated_by)
        invalidated = await self.permissions.invalidate_role(role_id, tenant_id)
        logger.info(f"Updated role {role_id} in tenant {tenant_id}; invalidated {invalidated} cache key(s)")

        await self.audit.record(AuditAction.ROLE_UPDATED, updated_by, tenant_id, "role", role_id, changes)
        return updated

    async def delete_role(self, role_id: str, tenant_id: str, deleted_by: str) -> None:
        """Delete a role no active membership uses as primary.

        The in-use check, the revocation of active secondary assignments and
        the delete share one transaction; revoked holders are invalidated.
        """
        role = await self.get_role(role_id, tenant_id)
        if role.is_protected:
            raise ProtectedRoleError(role_id)
        await self.guard.ensure_caller_can_target(deleted_by, tenant_id, role.hierarchy_level)

        revoked_users = await self.roles.delete(role_id, tenant_id, deleted_by, self.clock())
        await self.permissions.invalidate_users(revoked_users, tenant_id)
        logger.info(
            f"Deleted role {role.slug} ({role_id}) in tenant {tenant_id}; "
            f"revoked {len(revoked_users)} secondary assignment(s)"
        )

        await self.audit.record(
            AuditAction.ROLE_DELETED, deleted_by, tenant_id, "role", role_id,
            {"name": role.name, "revoked_assignments": len(revoked_users)},
        )

    async def create_owner_role(self, tenant_id: str, created_by: Optional[str] = None) -> Role:
        """Create the tenant's built-in Owner role, or return it if present.

        This bootstrap path is the only way a level-1 role comes to exist.
        """
        existing = await self.roles.get_by_slug(SystemRoles.OWNER_SLUG, tenant_id)
        if existing is not None:
            return existing

        role = await self.roles.create(
            Role(
                id=None,
                tenant_id=tenant_id,
                name=SystemRoles.OWNER_NAME,
                slug=SystemRoles.OWNER_SLUG,
                hierarchy_level=HierarchyLevels.OWNER,
                description=SystemRoles.OWNER_DESCRIPTION,
                is_system=True,
                is_protected=True,
                created_by=created_by,
            ),
            ALL_PERMISSION_KEYS,
        )
        logger.info(f"Created owner role {role.id} for tenant {tenant_id}")

        await self.audit.record(
            AuditAction.ROLE_CREATED, created_by, tenant_id, "role", role.id,
            {"name": role.name, "hierarchy_level": HierarchyLevels.OWNER, "system": True},
        )
        return role
