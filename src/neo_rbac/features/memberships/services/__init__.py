from .assignment_service import AssignmentService

__all__ = ["AssignmentService"]
