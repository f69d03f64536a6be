"""Application-level services composed from the features."""

from .authorization import AuthorizationService, create_authorization_service

__all__ = ["AuthorizationService", "create_authorization_service"]
