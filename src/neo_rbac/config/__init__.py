"""Configuration package for neo-rbac."""

from .constants import (
    CacheKeys,
    CacheTTL,
    HierarchyLevels,
    SystemRoles,
    RESERVED_ROLE_NAMES,
    MembershipStatus,
    AssignmentStatus,
    GroupRole,
    GroupMemberStatus,
    AuditAction,
    GroupPermissions,
)
from .settings import RbacSettings, get_settings
from .logging_config import LoggingConfig, setup_logging

__all__ = [
    "CacheKeys",
    "CacheTTL",
    "HierarchyLevels",
    "SystemRoles",
    "RESERVED_ROLE_NAMES",
    "MembershipStatus",
    "AssignmentStatus",
    "GroupRole",
    "GroupMemberStatus",
    "AuditAction",
    "GroupPermissions",
    "RbacSettings",
    "get_settings",
    "LoggingConfig",
    "setup_logging",
]
