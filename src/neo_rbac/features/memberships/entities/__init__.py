"""Membership entities and protocols."""

from .membership import Membership, SecondaryRoleAssignment, is_assignment_active
from .protocols import MembershipRepository, AssignmentRepository

__all__ = [
    "Membership",
    "SecondaryRoleAssignment",
    "is_assignment_active",
    "MembershipRepository",
    "AssignmentRepository",
]
