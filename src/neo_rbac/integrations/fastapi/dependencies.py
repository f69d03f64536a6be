"""
FastAPI dependencies for permission checks.

The authentication layer of the embedding service is expected to place the
caller identity on ``request.state.user_id`` and ``request.state.tenant_id``
and the shared AuthorizationService on ``app.state.authorization``.
"""
import logging
from typing import Tuple

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from ...core.exceptions import RbacError, create_error_response, get_http_status_code
from ...services.authorization import AuthorizationService

logger = logging.getLogger(__name__)


class RbacDependencyError(HTTPException):
    """Authorization dependency error."""

    def __init__(self, detail: str, status_code: int = status.HTTP_403_FORBIDDEN):
        super().__init__(status_code=status_code, detail=detail)


def get_authorization_service(request: Request) -> AuthorizationService:
    """Get the AuthorizationService registered on the application."""
    service = getattr(request.app.state, "authorization", None)
    if service is None:
        logger.error("AuthorizationService is not registered on app.state.authorization")
        raise RbacDependencyError(
            "Authorization service unavailable",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE
        )
    return service


def get_request_identity(request: Request) -> Tuple[str, str]:
    """Get (user_id, tenant_id) placed on the request by authentication."""
    user_id = getattr(request.state, "user_id", None)
    tenant_id = getattr(request.state, "tenant_id", None)
    if not user_id or not tenant_id:
        raise RbacDependencyError(
            "Authentication required",
            status_code=status.HTTP_401_UNAUTHORIZED
        )
    return str(user_id), str(tenant_id)


def require_permission(permission: str):
    """Require a specific permission in the caller's tenant."""

    async def dependency(
        identity: Tuple[str, str] = Depends(get_request_identity),
        service: AuthorizationService = Depends(get_authorization_service),
    ) -> Tuple[str, str]:
        user_id, tenant_id = identity
        if not await service.has_permission(user_id, tenant_id, permission):
            logger.warning(f"User {user_id} lacks permission {permission} in tenant {tenant_id}")
            raise RbacDependencyError(f"Permission required: {permission}")
        return identity

    return dependency


def require_any_permission(*permissions: str):
    """Require any of the specified permissions."""

    async def dependency(
        identity: Tuple[str, str] = Depends(get_request_identity),
        service: AuthorizationService = Depends(get_authorization_service),
    ) -> Tuple[str, str]:
        user_id, tenant_id = identity
        if not await service.has_any(user_id, tenant_id, permissions):
            logger.warning(f"User {user_id} lacks any permission from: {list(permissions)}")
            raise RbacDependencyError(
                f"One of these permissions required: {', '.join(permissions)}"
            )
        return identity

    return dependency


def require_all_permissions(*permissions: str):
    """Require all of the specified permissions."""

    async def dependency(
        identity: Tuple[str, str] = Depends(get_request_identity),
        service: AuthorizationService = Depends(get_authorization_service),
    ) -> Tuple[str, str]:
        user_id, tenant_id = identity
        if not await service.has_all(user_id, tenant_id, permissions):
            logger.warning(f"User {user_id} lacks required permissions: {list(permissions)}")
            raise RbacDependencyError(
                f"All permissions required: {', '.join(permissions)}"
            )
        return identity

    return dependency


def register_exception_handlers(app: FastAPI) -> None:
    """Translate RbacError subclasses into JSON error responses.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(RbacError)
    async def rbac_exception_handler(request: Request, exc: RbacError):
        status_code = get_http_status_code(exc)
        if status_code >= 500:
            logger.error(f"Authorization error on {request.url.path}: {exc.message}")
        return JSONResponse(status_code=status_code, content=create_error_response(exc))
