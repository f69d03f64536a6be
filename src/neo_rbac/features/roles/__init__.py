"""Roles feature: Role entity, repository, hierarchy guard and role service.

Services live in ``neo_rbac.features.roles.services``.
"""

from .entities import Role, RoleRepository, slugify, is_reserved_role_name
from .repositories import AsyncPGRoleRepository

__all__ = ["Role", "RoleRepository", "slugify", "is_reserved_role_name", "AsyncPGRoleRepository"]
