"""Role entities and protocols."""

from .role import Role, slugify, is_reserved_role_name
from .protocols import RoleRepository

__all__ = ["Role", "slugify", "is_reserved_role_name", "RoleRepository"]
