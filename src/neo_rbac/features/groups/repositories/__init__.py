from .group_member_repository import AsyncPGGroupMemberRepository

__all__ = ["AsyncPGGroupMemberRepository"]
