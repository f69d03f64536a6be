"""Groups feature: group members, dual-authorization gate and membership service."""

from .entities import GroupMember, GroupMemberRepository
from .repositories import AsyncPGGroupMemberRepository
from .services import DualAuthorizationGate, GroupMembershipService

__all__ = [
    "GroupMember",
    "GroupMemberRepository",
    "AsyncPGGroupMemberRepository",
    "DualAuthorizationGate",
    "GroupMembershipService",
]
