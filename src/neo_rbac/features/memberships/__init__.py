"""Memberships feature: memberships, secondary role assignments and their repositories.

The assignment service lives in ``neo_rbac.features.memberships.services``.
"""

from .entities import (
    Membership,
    SecondaryRoleAssignment,
    is_assignment_active,
    MembershipRepository,
    AssignmentRepository,
)
from .repositories import AsyncPGMembershipRepository, AsyncPGAssignmentRepository

__all__ = [
    "Membership",
    "SecondaryRoleAssignment",
    "is_assignment_active",
    "MembershipRepository",
    "AssignmentRepository",
    "AsyncPGMembershipRepository",
    "AsyncPGAssignmentRepository",
]
