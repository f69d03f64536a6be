"""Database feature: asyncpg pool wrapper and error handling."""

from .services.database_service import DatabaseService
from .utils.error_handling import database_error_handler

__all__ = ["DatabaseService", "database_error_handler"]
