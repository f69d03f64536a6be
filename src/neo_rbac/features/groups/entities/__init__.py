"""Group entities and protocols."""

from .group_member import GroupMember
from .protocols import GroupMemberRepository

__all__ = ["GroupMember", "GroupMemberRepository"]
