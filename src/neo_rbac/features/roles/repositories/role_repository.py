"""AsyncPG-based role repository implementation.

Concrete implementation of the RoleRepository protocol. Role rows and their
permission rows are always written inside one transaction.
"""

import logging
from collections import defaultdict
from datetime import datetime
from typing import Dict, FrozenSet, Iterable, List, Optional, Set

import asyncpg

from ....core.exceptions import DuplicateRoleNameError, RoleInUseError, RoleNotFoundError
from ....utils.records import str_or_none
from ...database import DatabaseService, database_error_handler
from ..entities import Role
from ..utils.queries import (
    GET_ROLE_BY_ID,
    GET_ROLE_BY_SLUG,
    LIST_ROLES_BY_TENANT,
    GET_PERMISSION_KEYS_FOR_ROLES,
    INSERT_ROLE,
    UPDATE_ROLE,
    INSERT_ROLE_PERMISSIONS,
    DELETE_ROLE_PERMISSIONS,
    REVOKE_ROLE_ASSIGNMENTS,
    LOCK_ROLE_FOR_DELETE,
    COUNT_ROLE_PRIMARY_HOLDERS,
    DELETE_ROLE,
)

logger = logging.getLogger(__name__)


class AsyncPGRoleRepository:
    """AsyncPG implementation of RoleRepository protocol."""

    def __init__(self, database: DatabaseService):
        self.database = database

    def _build_role_from_row(self, row: asyncpg.Record, keys: Iterable[str] = ()) -> Role:
        """Build Role entity from database row."""
        return Role(
            id=str(row["id"]),
            tenant_id=str(row["tenant_id"]),
            name=row["name"],
            slug=row["slug"],
            description=row["description"],
            hierarchy_level=row["hierarchy_level"],
            is_system=row["is_system"],
            is_protected=row["is_protected"],
            created_by=str_or_none(row["created_by"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            permission_keys=frozenset(keys),
        )

    async def _fetch_keys_by_role(self, conn, role_ids: List[str], tenant_id: str) -> Dict[str, Set[str]]:
        keys_by_role: Dict[str, Set[str]] = defaultdict(set)
        if not role_ids:
            return keys_by_role
        rows = await conn.fetch(GET_PERMISSION_KEYS_FOR_ROLES, role_ids, tenant_id)
        for row in rows:
            keys_by_role[str(row["role_id"])].add(row["key"])
        return keys_by_role

    async def _get_one(self, query: str, value: str, tenant_id: str) -> Optional[Role]:
        async with self.database.connection() as conn:
            row = await conn.fetchrow(query, value, tenant_id)
            if not row:
                return None
            role_id = str(row["id"])
            keys = await self._fetch_keys_by_role(conn, [role_id], tenant_id)
        return self._build_role_from_row(row, keys.get(role_id, ()))

    @database_error_handler("get role by id")
    async def get_by_id(self, role_id: str, tenant_id: str) -> Optional[Role]:
        return await self._get_one(GET_ROLE_BY_ID, role_id, tenant_id)

    @database_error_handler("get role by slug")
    async def get_by_slug(self, slug: str, tenant_id: str) -> Optional[Role]:
        return await self._get_one(GET_ROLE_BY_SLUG, slug, tenant_id)

    @database_error_handler("list roles")
    async def list_by_tenant(self, tenant_id: str) -> List[Role]:
        async with self.database.connection() as conn:
            rows = await conn.fetch(LIST_ROLES_BY_TENANT, tenant_id)
            keys = await self._fetch_keys_by_role(conn, [str(r["id"]) for r in rows], tenant_id)
        return [self._build_role_from_row(row, keys.get(str(row["id"]), ())) for row in rows]

    @database_error_handler("get role permission keys")
    async def get_permission_keys(self, role_ids: Iterable[str], tenant_id: str) -> FrozenSet[str]:
        ids = list(dict.fromkeys(role_ids))
        if not ids:
            return frozenset()
        async with self.database.connection() as conn:
            keys = await self._fetch_keys_by_role(conn, ids, tenant_id)
        return frozenset().union(*keys.values())

    @database_error_handler("create role")
    async def create(self, role: Role, permission_keys: FrozenSet[str]) -> Role:
        try:
            async with self.database.transaction() as conn:
                row = await conn.fetchrow(
                    INSERT_ROLE,
                    role.tenant_id,
                    role.name,
                    role.slug,
                    role.description,
                    role.hierarchy_level,
                    role.is_system,
                    role.is_protected,
                    role.created_by,
                )
                if permission_keys:
                    await conn.execute(
                        INSERT_ROLE_PERMISSIONS, row["id"], role.tenant_id, role.created_by, sorted(permission_keys)
                    )
        except asyncpg.UniqueViolationError as e:
            raise DuplicateRoleNameError(role.slug, role.tenant_id) from e
        return self._build_role_from_row(row, permission_keys)

    @database_error_handler("update role")
    async def update(
        self,
        role: Role,
        permission_keys: Optional[FrozenSet[str]] = None,
        granted_by: Optional[str] = None
    ) -> Role:
        try:
            async with self.database.transaction() as conn:
                row = await conn.fetchrow(
                    UPDATE_ROLE,
                    role.id,
                    role.tenant_id,
                    role.name,
                    role.slug,
                    role.description,
                    role.hierarchy_level,
                )
                if row is None:
                    raise RoleNotFoundError(role.id, role.tenant_id)
                if permission_keys is not None:
                    # Replace-all: the stored set becomes exactly the submitted set
                    await conn.execute(DELETE_ROLE_PERMISSIONS, role.id, role.tenant_id)
                    if permission_keys:
                        await conn.execute(
                            INSERT_ROLE_PERMISSIONS, role.id, role.tenant_id, granted_by, sorted(permission_keys)
                        )
        except asyncpg.UniqueViolationError as e:
            raise DuplicateRoleNameError(role.slug, role.tenant_id) from e

        keys = role.permission_keys if permission_keys is None else permission_keys
        return self._build_role_from_row(row, keys)

    @database_error_handler("delete role")
    async def delete(self, role_id: str, tenant_id: str, revoked_by: str, revoked_at: datetime) -> List[str]:
        async with self.database.transaction() as conn:
            if await conn.fetchrow(LOCK_ROLE_FOR_DELETE, role_id, tenant_id) is None:
                raise RoleNotFoundError(role_id, tenant_id)

            member_count = await conn.fetchval(COUNT_ROLE_PRIMARY_HOLDERS, role_id, tenant_id)
            if member_count:
                raise RoleInUseError(role_id, member_count)

            rows = await conn.fetch(REVOKE_ROLE_ASSIGNMENTS, role_id, tenant_id, revoked_by, revoked_at)
            await conn.execute(DELETE_ROLE_PERMISSIONS, role_id, tenant_id)
            await conn.execute(DELETE_ROLE, role_id, tenant_id)
        return sorted({str(row["user_id"]) for row in rows})
