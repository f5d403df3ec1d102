"""
identity_gate.auth.service

Authorization decision layer.

Responsibilities:
- Drive a request through claims extraction, identity resolution and role/permission checks.
- Own the identity cache and apply the profile/claims merge + normalization pipeline.
- Expose cache administration and a result-type boundary (`evaluate`).
"""

from __future__ import annotations

from collections.abc import Iterable

import httpx

from identity_gate.auth.cache import IdentityCache
from identity_gate.auth.claims import RawClaims, require_subject
from identity_gate.auth.models import AuthContext, AuthResult, AuthState, Identity
from identity_gate.auth.normalizer import merge_profile_claims, normalize_claims
from identity_gate.auth.resolver import IdentityResolver
from identity_gate.errors import AuthError, Forbidden, Unauthorized
from identity_gate.observability.logging import bind_subject, get_logger
from identity_gate.settings import AuthConfig

log = get_logger(__name__)


def _required(values: str | Iterable[str]) -> list[str]:
    if isinstance(values, str):
        return [values]
    return list(values)


class AuthService:
    """
    One instance per process, built at startup and injected into request handlers.

    Every step auto-runs the steps before it, so `has_roles` can be used standalone.
    """

    def __init__(
        self,
        *,
        config: AuthConfig,
        resolver: IdentityResolver,
        cache: IdentityCache | None = None,
    ) -> None:
        self.config = config
        self.cache = cache if cache is not None else IdentityCache(ttl_seconds=config.ttl_seconds)
        self._resolver = resolver

    async def is_authorized(self, ctx: AuthContext) -> RawClaims:
        if ctx.state >= AuthState.claims_extracted:
            return ctx.claims

        ctx.claims = await self._resolver.claims_for(ctx.authorization)
        ctx.advance(AuthState.claims_extracted)
        return ctx.claims

    async def get_authorized_user_info(self, ctx: AuthContext) -> Identity:
        if ctx.state >= AuthState.identity_resolved and ctx.identity is not None:
            return ctx.identity

        claims = await self.is_authorized(ctx)
        subject = require_subject(claims)
        bind_subject(subject)

        cached = self.cache.get(subject)
        if cached is not None:
            log.debug("identity.cache_hit", subject=subject)
            ctx.identity = cached.cached()
            ctx.advance(AuthState.identity_resolved)
            return ctx.identity

        log.debug("identity.cache_miss", subject=subject)
        try:
            profile = await self._resolver.profile_for(ctx.authorization, claims)
        except httpx.HTTPError as e:
            log.warning("identity.profile_failed", subject=subject, error=str(e))
            raise Unauthorized(f"[unable to validate bearer token] {e}") from e

        identity = self._build_identity(profile, claims)
        self.cache.set(subject, identity)
        log.info("identity.resolved", subject=subject, dont_strip=self.config.dont_strip)

        ctx.identity = identity
        ctx.advance(AuthState.identity_resolved)
        return identity

    def _build_identity(self, profile: RawClaims, claims: RawClaims) -> Identity:
        if self.config.dont_strip:
            # Pass-through: raw profile, only the subject is guaranteed.
            return Identity.from_claims({**profile, "sub": claims["sub"]})

        merged = merge_profile_claims(profile, claims, policy=self.config.claim_merge)
        normalized = normalize_claims(merged, plain_id_precedence=self.config.plain_id_precedence)
        # The subject is the token's; a profile for another subject must not rekey the entry.
        normalized["sub"] = claims["sub"]
        return Identity.from_claims(normalized)

    async def has_roles(self, ctx: AuthContext, required: str | Iterable[str]) -> Identity:
        identity = await self.get_authorized_user_info(ctx)
        if not set(_required(required)) & set(identity.roles):
            log.info("authz.denied", subject=identity.subject, check="roles")
            raise Forbidden("You don't have the required roles")
        ctx.advance(AuthState.decided)
        return identity

    async def has_permissions(self, ctx: AuthContext, required: str | Iterable[str]) -> Identity:
        identity = await self.get_authorized_user_info(ctx)
        if not set(_required(required)) & set(identity.permissions):
            log.info("authz.denied", subject=identity.subject, check="permissions")
            raise Forbidden("You don't have the required permissions")
        ctx.advance(AuthState.decided)
        return identity

    async def evaluate(
        self,
        ctx: AuthContext,
        *,
        roles: str | Iterable[str] | None = None,
        permissions: str | Iterable[str] | None = None,
        require_profile: bool = True,
    ) -> AuthResult[Identity | RawClaims]:
        """
        Run the checks for one request and return the outcome instead of raising.

        With neither `roles` nor `permissions` this stops at the identity (or at the
        claims when `require_profile` is false).
        """

        try:
            if roles is None and permissions is None:
                if require_profile:
                    return AuthResult.success(await self.get_authorized_user_info(ctx))
                return AuthResult.success(await self.is_authorized(ctx))

            identity = await self.get_authorized_user_info(ctx)
            if roles is not None:
                identity = await self.has_roles(ctx, roles)
            if permissions is not None:
                identity = await self.has_permissions(ctx, permissions)
            return AuthResult.success(identity)
        except AuthError as e:
            return AuthResult.failure(e)

    async def try_get_user_info(self, ctx: AuthContext) -> Identity | None:
        # Soft authentication: anonymous callers are allowed through without an identity.
        try:
            return await self.get_authorized_user_info(ctx)
        except AuthError as e:
            log.info("identity.soft_auth_skipped", reason=e.message)
            ctx.identity = None
            return None

    async def get_identity(self, bearer_token: str) -> RawClaims:
        return await self.is_authorized(AuthContext(authorization=bearer_token))

    async def get_user_info_from_bearer_token(self, bearer_token: str) -> Identity:
        return await self.get_authorized_user_info(AuthContext(authorization=bearer_token))

    def get_user_from_cache(self, subject: str) -> Identity | None:
        return self.cache.get(subject)

    def remove_user_from_cache(self, subject: str) -> None:
        self.cache.remove(subject)
        log.info("identity.cache_evicted", subject=subject)

    def clear_user_cache(self) -> None:
        self.cache.flush()
        log.info("identity.cache_flushed")


# --- Module Notes -----------------------------------------------------------
# Ordering per request: profile fetch completes before the cache store, which completes
# before any role/permission decision.
