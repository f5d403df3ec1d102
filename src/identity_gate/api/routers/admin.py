"""
identity_gate.api.routers.admin

Identity cache administration.

Responsibilities:
- Evict one subject (`DELETE /v1/admin/cache/{subject}`).
- Flush every cached identity (`DELETE /v1/admin/cache`).

Both operations are idempotent. The admin role check is attached in `create_app`.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from starlette.status import HTTP_204_NO_CONTENT

from identity_gate.auth.deps import get_auth_service
from identity_gate.auth.service import AuthService

router = APIRouter(prefix="/v1/admin", tags=["admin"])


@router.delete("/cache/{subject}", status_code=HTTP_204_NO_CONTENT)
async def remove_user_from_cache(
    subject: str,
    service: AuthService = Depends(get_auth_service),
) -> Response:
    service.remove_user_from_cache(subject)
    return Response(status_code=HTTP_204_NO_CONTENT)


@router.delete("/cache", status_code=HTTP_204_NO_CONTENT)
async def clear_user_cache(service: AuthService = Depends(get_auth_service)) -> Response:
    service.clear_user_cache()
    return Response(status_code=HTTP_204_NO_CONTENT)
