"""AsyncPG-based audit sink writing to the ``audit_logs`` table."""

import json
import logging

from ...database import DatabaseService, database_error_handler
from ..entities import AuditEvent

logger = logging.getLogger(__name__)


# audit_logs has no tenant column; the tenant travels inside details
INSERT_AUDIT_LOG = """
    INSERT INTO audit_logs (user_id, action, resource_type, resource_id, details, status, created_at)
    VALUES ($1, $2, $3, $4, $5::jsonb, $6, $7)
"""


class AsyncPGAuditSink:
    """AsyncPG implementation of the AuditSink protocol."""

    def __init__(self, database: DatabaseService):
        self.database = database

    @database_error_handler("write audit log", log_level=logging.WARNING)
    async def write(self, event: AuditEvent) -> None:
        details = {"tenant_id": event.tenant_id, **event.details}
        async with self.database.connection() as conn:
            await conn.execute(
                INSERT_AUDIT_LOG,
                event.actor_id,
                event.action.value,
                event.resource_type,
                event.resource_id,
                json.dumps(details, default=str),
                event.status,
                event.occurred_at,
            )
