from .permission_resolver import PermissionResolver
from .permission_service import PermissionService

__all__ = ["PermissionResolver", "PermissionService"]
