"""
identity_gate.auth.deps

FastAPI dependency functions for authentication and authorization.

Responsibilities:
- Attach a per-request `AuthContext` built from the Authorization header.
- Expose authentication, profile and RBAC checks as reusable dependency factories.
- Translate classified auth errors into HTTP responses (401/403/400).
"""

from __future__ import annotations

from typing import Any

from fastapi import Depends, HTTPException, Request

from identity_gate.auth.models import AuthContext, AuthResult, Identity
from identity_gate.auth.service import AuthService
from identity_gate.errors import AuthError


def get_auth_service(request: Request) -> AuthService:
    # The service is created once in `identity_gate.api.app.create_app`.
    return request.app.state.auth_service  # type: ignore[attr-defined]


def get_auth_context(request: Request) -> AuthContext:
    # One context per request, shared by every auth dependency on the route.
    ctx = getattr(request.state, "auth", None)
    if ctx is None:
        ctx = AuthContext(authorization=request.headers.get("authorization"))
        request.state.auth = ctx
    return ctx


def _http_error(error: AuthError) -> HTTPException:
    headers = {"WWW-Authenticate": "Bearer"} if error.status == 401 else None
    return HTTPException(status_code=error.status, detail=error.message, headers=headers)


def _unwrap(result: AuthResult[Any]) -> Any:
    if result.error is not None:
        raise _http_error(result.error) from result.error
    return result.value


async def require_authenticated(
    ctx: AuthContext = Depends(get_auth_context),
    service: AuthService = Depends(get_auth_service),
) -> dict[str, Any]:
    return _unwrap(await service.evaluate(ctx, require_profile=False))


async def require_user_info(
    ctx: AuthContext = Depends(get_auth_context),
    service: AuthService = Depends(get_auth_service),
) -> Identity:
    return _unwrap(await service.evaluate(ctx))


async def optional_user_info(
    ctx: AuthContext = Depends(get_auth_context),
    service: AuthService = Depends(get_auth_service),
) -> Identity | None:
    return await service.try_get_user_info(ctx)


def require_roles(*required: str):
    async def _dep(
        ctx: AuthContext = Depends(get_auth_context),
        service: AuthService = Depends(get_auth_service),
    ) -> Identity:
        return await _check(service, ctx, roles=required)

    return _dep


def require_permissions(*required: str):
    async def _dep(
        ctx: AuthContext = Depends(get_auth_context),
        service: AuthService = Depends(get_auth_service),
    ) -> Identity:
        return await _check(service, ctx, permissions=required)

    return _dep


async def _check(service: AuthService, ctx: AuthContext, **checks: Any) -> Identity:
    return _unwrap(await service.evaluate(ctx, **checks))


# --- Module Notes -----------------------------------------------------------
# Any one of the required roles/permissions is enough (OR semantics); chain two
# dependencies on a route when all of them are needed.
