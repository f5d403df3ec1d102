"""
identity_gate.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness check (`/healthz`).
- Provide readiness check (`/readyz`) reporting the configured identity provider.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from identity_gate.auth.deps import get_auth_service
from identity_gate.auth.service import AuthService

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(service: AuthService = Depends(get_auth_service)) -> dict[str, Any]:
    # Readiness: configuration was validated at startup; report what the cache holds.
    return {
        "status": "ready",
        "domain": service.config.domain,
        "cached_identities": len(service.cache),
    }


# --- Module Notes -----------------------------------------------------------
# Readiness does not call the identity provider; an outage there surfaces as 401s on
# cache misses, not as a failing readiness check.
