"""AsyncPG-based tenant membership repository."""

import logging
from typing import List, Optional

import asyncpg

from ....config.constants import MembershipStatus
from ....core.exceptions import LastOwnerViolationError, NotAMemberError, RoleNotFoundError
from ...database import DatabaseService, database_error_handler
from ..entities import Membership
from ..utils.queries import (
    GET_ACTIVE_MEMBERSHIP,
    UPSERT_MEMBERSHIP,
    LOCK_ROLE_FOR_ASSIGNMENT,
    LOCK_ACTIVE_OWNERS,
    UPDATE_PRIMARY_ROLE,
    COUNT_ACTIVE_OWNERS,
    LIST_PRIMARY_HOLDERS,
)

logger = logging.getLogger(__name__)


class AsyncPGMembershipRepository:
    """AsyncPG implementation of MembershipRepository protocol."""

    def __init__(self, database: DatabaseService):
        self.database = database

    def _build_membership_from_row(self, row: asyncpg.Record) -> Membership:
        return Membership(
            id=str(row["id"]),
            tenant_id=str(row["tenant_id"]),
            user_id=str(row["user_id"]),
            primary_role_id=str(row["primary_role_id"]),
            is_owner=row["is_owner"],
            status=MembershipStatus(row["status"]),
            joined_at=row["joined_at"],
        )

    @database_error_handler("get active membership")
    async def get_active(self, user_id: str, tenant_id: str) -> Optional[Membership]:
        async with self.database.connection() as conn:
            row = await conn.fetchrow(GET_ACTIVE_MEMBERSHIP, user_id, tenant_id)
        return self._build_membership_from_row(row) if row else None

    @database_error_handler("create membership")
    async def create(self, membership: Membership) -> Membership:
        async with self.database.connection() as conn:
            row = await conn.fetchrow(
                UPSERT_MEMBERSHIP,
                membership.tenant_id,
                membership.user_id,
                membership.primary_role_id,
                membership.is_owner,
                membership.status.value,
            )
        return self._build_membership_from_row(row)

    @database_error_handler("update primary role")
    async def update_primary_role(self, user_id: str, tenant_id: str, role_id: str, is_owner: bool) -> None:
        async with self.database.transaction() as conn:
            if await conn.fetchrow(LOCK_ROLE_FOR_ASSIGNMENT, role_id, tenant_id) is None:
                raise RoleNotFoundError(role_id, tenant_id)

            if not is_owner:
                owners = {str(row["user_id"]) for row in await conn.fetch(LOCK_ACTIVE_OWNERS, tenant_id)}
                if user_id in owners and len(owners) <= 1:
                    raise LastOwnerViolationError(user_id, tenant_id)

            row = await conn.fetchrow(UPDATE_PRIMARY_ROLE, user_id, tenant_id, role_id, is_owner)
            if row is None:
                raise NotAMemberError(user_id, tenant_id)

    @database_error_handler("count active owners")
    async def count_active_owners(self, tenant_id: str) -> int:
        async with self.database.connection() as conn:
            return await conn.fetchval(COUNT_ACTIVE_OWNERS, tenant_id)

    @database_error_handler("list primary role holders")
    async def list_primary_holders(self, role_id: str, tenant_id: str) -> List[str]:
        async with self.database.connection() as conn:
            rows = await conn.fetch(LIST_PRIMARY_HOLDERS, role_id, tenant_id)
        return [str(row["user_id"]) for row in rows]
