"""Permission domain entity for the neo-rbac permissions feature.

Represents an immutable catalog entry. Maps to the ``permissions`` table,
which is seeded from the static catalog and never mutated at runtime.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Permission:
    """Immutable catalog entry identified by its key (e.g. ``canViewUsers``)."""

    key: str
    name: str
    category: str
    description: str
    requires_mfa: bool = False
    is_critical: bool = False

    def __str__(self) -> str:
        return self.key
