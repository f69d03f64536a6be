from .access_gate import DualAuthorizationGate
from .group_membership_service import GroupMembershipService

__all__ = ["DualAuthorizationGate", "GroupMembershipService"]
