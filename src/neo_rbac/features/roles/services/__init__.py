from .hierarchy_guard import HierarchyGuard
from .role_service import RoleService

__all__ = ["HierarchyGuard", "RoleService"]
