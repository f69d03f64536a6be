"""Permissions feature: static catalog, resolver and cached permission service."""

from .entities import (
    Permission,
    PERMISSION_CATALOG,
    ALL_PERMISSION_KEYS,
    MFA_REQUIRED_PERMISSIONS,
    CRITICAL_PERMISSIONS,
    get_permission,
    get_permissions_by_category,
    validate_permission_keys,
    PermissionRepository,
)
from .services import PermissionResolver, PermissionService
from .repositories import AsyncPGPermissionRepository

__all__ = [
    "Permission",
    "PERMISSION_CATALOG",
    "ALL_PERMISSION_KEYS",
    "MFA_REQUIRED_PERMISSIONS",
    "CRITICAL_PERMISSIONS",
    "get_permission",
    "get_permissions_by_category",
    "validate_permission_keys",
    "PermissionRepository",
    "PermissionResolver",
    "PermissionService",
    "AsyncPGPermissionRepository",
]
