"""AsyncPG-based secondary role assignment repository."""

import logging
from datetime import datetime
from typing import List, Optional, Tuple

import asyncpg

from ....config.constants import AssignmentStatus
from ....utils.records import str_or_none
from ...database import DatabaseService, database_error_handler
from ..entities import SecondaryRoleAssignment
from ..utils.queries import (
    LIST_USER_ASSIGNMENTS,
    GET_ASSIGNMENT,
    INSERT_ASSIGNMENT,
    REACTIVATE_ASSIGNMENT,
    REVOKE_ASSIGNMENT,
    LIST_ACTIVE_ROLE_HOLDERS,
    MARK_EXPIRED_ASSIGNMENTS,
)

logger = logging.getLogger(__name__)


class AsyncPGAssignmentRepository:
    """AsyncPG implementation of AssignmentRepository protocol."""

    def __init__(self, database: DatabaseService):
        self.database = database

    def _build_assignment_from_row(self, row: asyncpg.Record) -> SecondaryRoleAssignment:
        return SecondaryRoleAssignment(
            id=str(row["id"]),
            tenant_id=str(row["tenant_id"]),
            user_id=str(row["user_id"]),
            role_id=str(row["role_id"]),
            status=AssignmentStatus(row["status"]),
            expires_at=row["expires_at"],
            reason=row["reason"],
            assigned_by=str_or_none(row["assigned_by"]),
            revoked_by=str_or_none(row["revoked_by"]),
            revoked_at=row["revoked_at"],
            created_at=row["created_at"],
        )

    @database_error_handler("list secondary assignments")
    async def list_for_user(self, user_id: str, tenant_id: str) -> List[SecondaryRoleAssignment]:
        async with self.database.connection() as conn:
            rows = await conn.fetch(LIST_USER_ASSIGNMENTS, user_id, tenant_id)
        return [self._build_assignment_from_row(row) for row in rows]

    @database_error_handler("get secondary assignment")
    async def get(self, user_id: str, tenant_id: str, role_id: str) -> Optional[SecondaryRoleAssignment]:
        async with self.database.connection() as conn:
            row = await conn.fetchrow(GET_ASSIGNMENT, user_id, tenant_id, role_id)
        return self._build_assignment_from_row(row) if row else None

    @database_error_handler("create secondary assignment")
    async def create(self, assignment: SecondaryRoleAssignment) -> SecondaryRoleAssignment:
        async with self.database.connection() as conn:
            row = await conn.fetchrow(
                INSERT_ASSIGNMENT,
                assignment.tenant_id,
                assignment.user_id,
                assignment.role_id,
                assignment.expires_at,
                assignment.reason,
                assignment.assigned_by,
            )
        return self._build_assignment_from_row(row)

    @database_error_handler("reactivate secondary assignment")
    async def reactivate(
        self,
        assignment_id: str,
        assigned_by: str,
        expires_at: Optional[datetime],
        reason: Optional[str]
    ) -> SecondaryRoleAssignment:
        async with self.database.connection() as conn:
            row = await conn.fetchrow(REACTIVATE_ASSIGNMENT, assignment_id, assigned_by, expires_at, reason)
        return self._build_assignment_from_row(row)

    @database_error_handler("revoke secondary assignment")
    async def revoke(self, assignment_id: str, revoked_by: str, revoked_at: datetime) -> None:
        async with self.database.connection() as conn:
            await conn.execute(REVOKE_ASSIGNMENT, assignment_id, revoked_by, revoked_at)

    @database_error_handler("list secondary role holders")
    async def list_active_holders(self, role_id: str, tenant_id: str) -> List[str]:
        async with self.database.connection() as conn:
            rows = await conn.fetch(LIST_ACTIVE_ROLE_HOLDERS, role_id, tenant_id)
        return [str(row["user_id"]) for row in rows]

    @database_error_handler("mark expired assignments")
    async def mark_expired(self, now: datetime) -> List[Tuple[str, str]]:
        async with self.database.connection() as conn:
            rows = await conn.fetch(MARK_EXPIRED_ASSIGNMENTS, now)
        return [(str(row["user_id"]), str(row["tenant_id"])) for row in rows]
