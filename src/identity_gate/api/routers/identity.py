"""
identity_gate.api.routers.identity

Identity endpoints for authenticated callers.

Responsibilities:
- Return the decoded token claims (`/claims`).
- Return the normalized, profile-enriched identity (`/me`).
- Return the identity when present without requiring one (`/optional`).
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from identity_gate.auth.deps import optional_user_info, require_authenticated, require_user_info
from identity_gate.auth.models import Identity

router = APIRouter(prefix="/v1/identity", tags=["identity"])


@router.get("/claims")
async def get_claims(claims: dict[str, Any] = Depends(require_authenticated)) -> dict[str, Any]:
    return claims


@router.get("/me")
async def get_me(identity: Identity = Depends(require_user_info)) -> dict[str, Any]:
    return identity.to_dict()


@router.get("/optional")
async def get_optional(
    identity: Identity | None = Depends(optional_user_info),
) -> dict[str, Any]:
    return {
        "authenticated": identity is not None,
        "identity": identity.to_dict() if identity is not None else None,
    }
