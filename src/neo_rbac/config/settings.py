"""
Settings for the neo-rbac authorization core.

Environment-driven configuration using pydantic-settings. Every field can be
overridden with an ``RBAC_`` prefixed environment variable or a ``.env`` file.
"""
from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import CacheTTL, HierarchyLevels


class RbacSettings(BaseSettings):
    """Authorization core settings."""

    model_config = SettingsConfigDict(
        env_prefix="RBAC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Database Configuration
    database_url: Optional[str] = Field(default=None)
    db_pool_min_size: int = Field(default=1, ge=1)
    db_pool_max_size: int = Field(default=10, ge=1)
    db_command_timeout: float = Field(default=10.0, gt=0)

    # Redis Cache Configuration
    redis_url: str = Field(default="redis://localhost:6379/0")
    cache_key_prefix: str = Field(default="rbac")
    cache_ttl_seconds: int = Field(default=CacheTTL.PERMISSIONS, gt=0, le=CacheTTL.PERMISSIONS_MAX)

    # Hierarchy Configuration
    tenant_admin_level: int = Field(default=HierarchyLevels.TENANT_ADMIN, ge=HierarchyLevels.OWNER)

    # Audit Configuration
    audit_enabled: bool = Field(default=True)
    audit_sink: Literal["database", "log"] = Field(default="database")
    audit_timeout_seconds: float = Field(default=2.0, gt=0)
    audit_background: bool = Field(default=True)

    def get_database_url(self) -> str:
        """Get database URL, failing loudly when it is not configured."""
        if not self.database_url:
            from ..core.exceptions import ConfigurationError
            raise ConfigurationError(
                "RBAC_DATABASE_URL is not configured",
                details={"setting": "database_url"}
            )
        return self.database_url


@lru_cache()
def get_settings() -> RbacSettings:
    """Get cached settings instance."""
    return RbacSettings()
