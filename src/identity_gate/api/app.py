"""
identity_gate.api.app

FastAPI app factory for the identity gate service.

Responsibilities:
- Validate auth configuration and build the single `AuthService` for the process.
- Register routers/middleware.
- Own the lifetime of the shared `httpx.AsyncClient` used for profile fetches.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import Depends, FastAPI

from identity_gate import __version__
from identity_gate.api.routers.admin import router as admin_router
from identity_gate.api.routers.health import router as health_router
from identity_gate.api.routers.identity import router as identity_router
from identity_gate.auth.deps import require_roles
from identity_gate.auth.profile import ProfileFetcher
from identity_gate.auth.resolver import HttpIdentityResolver, IdentityResolver
from identity_gate.auth.service import AuthService
from identity_gate.auth.verifier import JwksTokenVerifier
from identity_gate.observability.logging import configure_logging, get_logger
from identity_gate.observability.middleware import RequestContextMiddleware
from identity_gate.settings import AuthConfig, Settings

log = get_logger(__name__)


def build_resolver(config: AuthConfig, *, http: httpx.AsyncClient) -> HttpIdentityResolver:
    verifier = JwksTokenVerifier(config=config) if config.verify_signature else None
    return HttpIdentityResolver(
        config=config,
        fetcher=ProfileFetcher(http=http, timeout=config.profile_timeout_seconds),
        verifier=verifier,
    )


def create_app(
    *,
    settings: Settings,
    resolver: IdentityResolver | None = None,
    http: httpx.AsyncClient | None = None,
) -> FastAPI:
    configure_logging(
        service_name=settings.service_name,
        level=settings.log_level,
        json_logs=settings.log_json,
    )

    # Fails fast (ConfigurationError) before any route is registered.
    config = AuthConfig.from_settings(settings)
    owns_http = False
    if resolver is None:
        owns_http = http is None
        http = http or httpx.AsyncClient(timeout=config.profile_timeout_seconds)
        resolver = build_resolver(config, http=http)
    auth_service = AuthService(config=config, resolver=resolver)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env, domain=config.domain)
        try:
            yield
        finally:
            if owns_http and http is not None:
                await http.aclose()
            log.info("shutdown")

    app = FastAPI(
        title="Identity Gate",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.auth_service = auth_service

    app.add_middleware(RequestContextMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(identity_router)
    app.include_router(
        admin_router,
        dependencies=[Depends(require_roles(settings.admin_role))],
    )
    return app


# --- Module Notes -----------------------------------------------------------
# Tests inject `resolver=StaticIdentityResolver(...)` or an `http` client backed by
# `httpx.MockTransport`; production builds both from settings.
