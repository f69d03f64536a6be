"""Permission entities: catalog entries, the static catalog and protocols."""

from .permission import Permission
from .catalog import (
    PERMISSION_CATALOG,
    ALL_PERMISSION_KEYS,
    MFA_REQUIRED_PERMISSIONS,
    CRITICAL_PERMISSIONS,
    get_permission,
    get_permissions_by_category,
    validate_permission_keys,
    requires_mfa,
    critical_permissions,
)
from .protocols import PermissionRepository, PermissionResolverProtocol

__all__ = [
    "Permission",
    "PERMISSION_CATALOG",
    "ALL_PERMISSION_KEYS",
    "MFA_REQUIRED_PERMISSIONS",
    "CRITICAL_PERMISSIONS",
    "get_permission",
    "get_permissions_by_category",
    "validate_permission_keys",
    "requires_mfa",
    "critical_permissions",
    "PermissionRepository",
    "PermissionResolverProtocol",
]
