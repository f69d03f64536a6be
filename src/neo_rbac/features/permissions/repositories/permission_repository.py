"""AsyncPG-based permission repository.

Keeps the ``permissions`` table in step with the static catalog.
"""

import logging
from typing import List

from ...database import DatabaseService, database_error_handler
from ..entities import Permission, PERMISSION_CATALOG
from ..utils.queries import COUNT_PERMISSIONS, INSERT_PERMISSION, LIST_PERMISSIONS

logger = logging.getLogger(__name__)


class AsyncPGPermissionRepository:
    """AsyncPG implementation of PermissionRepository protocol."""

    def __init__(self, database: DatabaseService):
        self.database = database

    @database_error_handler("seed permissions")
    async def seed_permissions(self) -> int:
        """Insert the catalog once; a populated table is left untouched."""
        async with self.database.transaction() as conn:
            existing = await conn.fetchval(COUNT_PERMISSIONS)
            if existing:
                logger.debug(f"Permissions already seeded ({existing} rows)")
                return 0

            await conn.executemany(
                INSERT_PERMISSION,
                [
                    (p.key, p.name, p.description, p.category, p.requires_mfa, p.is_critical)
                    for p in PERMISSION_CATALOG
                ],
            )
        logger.info(f"Seeded {len(PERMISSION_CATALOG)} permissions")
        return len(PERMISSION_CATALOG)

    @database_error_handler("list permissions")
    async def list_all(self) -> List[Permission]:
        async with self.database.connection() as conn:
            rows = await conn.fetch(LIST_PERMISSIONS)
        return [
            Permission(
                key=row["key"],
                name=row["name"],
                category=row["category"],
                description=row["description"] or "",
                requires_mfa=row["requires_mfa"],
                is_critical=row["is_critical"],
            )
            for row in rows
        ]
