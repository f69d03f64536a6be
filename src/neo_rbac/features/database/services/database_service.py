"""Database service wrapping an asyncpg connection pool.

Repositories receive this service and borrow connections from it, either
for a single statement or for a unit of work inside a transaction.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import asyncpg

from ....config.settings import RbacSettings
from ....core.exceptions import DatabaseUnavailableError
from ..utils.error_handling import is_connection_error

logger = logging.getLogger(__name__)


class DatabaseService:
    """High-level access to the relational store."""

    def __init__(self, pool: Optional[asyncpg.Pool] = None):
        self._pool = pool

    @classmethod
    async def create(cls, settings: RbacSettings) -> "DatabaseService":
        """Create a pool from settings and return a ready service."""
        try:
            pool = await asyncpg.create_pool(
                dsn=settings.get_database_url(),
                min_size=settings.db_pool_min_size,
                max_size=settings.db_pool_max_size,
                command_timeout=settings.db_command_timeout,
            )
        except Exception as e:
            if is_connection_error(e):
                raise DatabaseUnavailableError(f"Could not create database pool: {e}") from e
            raise
        logger.info(
            f"Database pool created (min={settings.db_pool_min_size}, max={settings.db_pool_max_size})"
        )
        return cls(pool)

    @property
    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise DatabaseUnavailableError("Database pool is not initialized")
        return self._pool

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[asyncpg.Connection]:
        """Borrow a connection from the pool."""
        async with self.pool.acquire() as conn:
            yield conn

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[asyncpg.Connection]:
        """Borrow a connection and run the block inside one transaction."""
        async with self.pool.acquire() as conn:
            async with conn.transaction():
                yield conn

    async def close(self) -> None:
        """Close the underlying pool."""
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            logger.info("Database pool closed")
