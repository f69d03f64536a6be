"""Role domain entity for the neo-rbac roles feature.

Represents a tenant-scoped role with a hierarchy level and the set of
permission keys granted through it. Maps to the ``roles`` and
``role_permissions`` tables.
"""

import re
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import FrozenSet, Optional

from ....config.constants import HierarchyLevels, RESERVED_ROLE_NAMES, SystemRoles


_NON_WORD = re.compile(r"[^\w\s-]")
_SEPARATORS = re.compile(r"[\s_-]+")


def slugify(name: str) -> str:
    """Derive a URL-safe slug from a role name.

    >>> slugify("  Support Engineer (L2) ")
    'support-engineer-l2'
    """
    slug = _NON_WORD.sub("", name.lower().strip())
    slug = _SEPARATORS.sub("-", slug)
    return slug.strip("-")


def is_reserved_role_name(name: str) -> bool:
    """Check a name against the reserved system terms (case-insensitive)."""
    return name.lower().strip() in RESERVED_ROLE_NAMES


@dataclass
class Role:
    """Domain entity representing a tenant role and its permission set."""

    id: Optional[str]
    tenant_id: str
    name: str
    slug: str
    hierarchy_level: int = HierarchyLevels.DEFAULT_CUSTOM
    description: Optional[str] = None
    is_system: bool = False
    is_protected: bool = False
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Runtime permission set (loaded from role_permissions)
    permission_keys: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def is_owner_role(self) -> bool:
        """True for the built-in level-1 Owner role."""
        return self.slug == SystemRoles.OWNER_SLUG and self.hierarchy_level == HierarchyLevels.OWNER

    def with_permissions(self, keys: FrozenSet[str]) -> "Role":
        """Return a copy carrying the given permission keys."""
        return replace(self, permission_keys=frozenset(keys))
