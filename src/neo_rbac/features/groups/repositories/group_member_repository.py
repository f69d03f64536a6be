"""AsyncPG-based group member repository."""

import logging
from typing import List, Optional

import asyncpg

from ....config.constants import GroupRole, GroupMemberStatus
from ....core.exceptions import GroupMemberNotFoundError, LastAdminViolationError
from ....utils.records import str_or_none
from ...database import DatabaseService, database_error_handler
from ..entities import GroupMember
from ..utils.queries import (
    GROUP_EXISTS_IN_TENANT,
    GET_GROUP_MEMBER,
    LIST_GROUP_MEMBERS,
    LOCK_ELEVATED_MEMBERS,
    INSERT_GROUP_MEMBER,
    REACTIVATE_GROUP_MEMBER,
    UPDATE_GROUP_MEMBER_ROLE,
    REMOVE_GROUP_MEMBER,
)

logger = logging.getLogger(__name__)


class AsyncPGGroupMemberRepository:
    """AsyncPG implementation of GroupMemberRepository protocol."""

    def __init__(self, database: DatabaseService):
        self.database = database

    def _build_member_from_row(self, row: asyncpg.Record) -> GroupMember:
        return GroupMember(
            id=str(row["id"]),
            group_id=str(row["group_id"]),
            tenant_id=str(row["tenant_id"]),
            user_id=str(row["user_id"]),
            role=GroupRole(row["role"]),
            status=GroupMemberStatus(row["status"]),
            added_by=str_or_none(row["added_by"]),
            joined_at=row["created_at"],
        )

    async def _ensure_not_last_elevated(
        self,
        conn: asyncpg.Connection,
        group_id: str,
        tenant_id: str,
        user_id: str
    ) -> None:
        """Lock the group's owners and admins; refuse to drop the last one."""
        elevated = {str(row["user_id"]) for row in await conn.fetch(LOCK_ELEVATED_MEMBERS, group_id, tenant_id)}
        if user_id in elevated and len(elevated) <= 1:
            raise LastAdminViolationError(user_id, group_id)

    @database_error_handler("check group tenant")
    async def group_exists(self, group_id: str, tenant_id: str) -> bool:
        async with self.database.connection() as conn:
            return await conn.fetchval(GROUP_EXISTS_IN_TENANT, group_id, tenant_id)

    @database_error_handler("get group member")
    async def get_member(self, group_id: str, tenant_id: str, user_id: str) -> Optional[GroupMember]:
        async with self.database.connection() as conn:
            row = await conn.fetchrow(GET_GROUP_MEMBER, group_id, tenant_id, user_id)
        return self._build_member_from_row(row) if row else None

    @database_error_handler("list group members")
    async def list_members(self, group_id: str, tenant_id: str) -> List[GroupMember]:
        async with self.database.connection() as conn:
            rows = await conn.fetch(LIST_GROUP_MEMBERS, group_id, tenant_id)
        return [self._build_member_from_row(row) for row in rows]

    @database_error_handler("add group member")
    async def create(self, member: GroupMember) -> GroupMember:
        async with self.database.connection() as conn:
            row = await conn.fetchrow(
                INSERT_GROUP_MEMBER,
                member.group_id,
                member.tenant_id,
                member.user_id,
                member.role.value,
                member.added_by,
            )
        return self._build_member_from_row(row)

    @database_error_handler("reactivate group member")
    async def reactivate(self, member_id: str, role: GroupRole, added_by: str) -> GroupMember:
        async with self.database.connection() as conn:
            row = await conn.fetchrow(REACTIVATE_GROUP_MEMBER, member_id, role.value, added_by)
        return self._build_member_from_row(row)

    @database_error_handler("update group member role")
    async def update_role(self, group_id: str, tenant_id: str, user_id: str, role: GroupRole) -> None:
        async with self.database.transaction() as conn:
            if not role.is_elevated:
                await self._ensure_not_last_elevated(conn, group_id, tenant_id, user_id)
            row = await conn.fetchrow(UPDATE_GROUP_MEMBER_ROLE, group_id, tenant_id, user_id, role.value)
            if row is None:
                raise GroupMemberNotFoundError(user_id, group_id)

    @database_error_handler("remove group member")
    async def remove(self, group_id: str, tenant_id: str, user_id: str, removed_by: str) -> None:
        async with self.database.transaction() as conn:
            await self._ensure_not_last_elevated(conn, group_id, tenant_id, user_id)
            row = await conn.fetchrow(REMOVE_GROUP_MEMBER, group_id, tenant_id, user_id, removed_by)
            if row is None:
                raise GroupMemberNotFoundError(user_id, group_id)
