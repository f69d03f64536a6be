from .membership_repository import AsyncPGMembershipRepository
from .assignment_repository import AsyncPGAssignmentRepository

__all__ = ["AsyncPGMembershipRepository", "AsyncPGAssignmentRepository"]
