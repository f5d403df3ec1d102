"""
identity_gate.auth.resolver

Identity resolver capability: where claims and profiles come from.

Responsibilities:
- Define the `IdentityResolver` interface consumed by `AuthService`.
- Provide the network-backed implementation (verifier + `/userinfo`).
- Provide a static test double preloaded with a fixed user.
"""

from __future__ import annotations

from typing import Any, Protocol

from identity_gate.auth.claims import RawClaims, extract_claims
from identity_gate.auth.profile import ProfileFetcher
from identity_gate.auth.verifier import TokenVerifier
from identity_gate.errors import Unauthorized
from identity_gate.settings import AuthConfig


class IdentityResolver(Protocol):
    async def claims_for(self, bearer_token: str | None) -> RawClaims: ...

    async def profile_for(self, bearer_token: str | None, claims: RawClaims) -> RawClaims: ...


class HttpIdentityResolver:
    def __init__(
        self,
        *,
        config: AuthConfig,
        fetcher: ProfileFetcher,
        verifier: TokenVerifier | None = None,
    ) -> None:
        self._config = config
        self._fetcher = fetcher
        self._verifier = verifier

    async def claims_for(self, bearer_token: str | None) -> RawClaims:
        # Structural decode first: malformed input fails before any JWKS round trip.
        claims = extract_claims(bearer_token)
        if self._verifier is not None:
            claims = await self._verifier.verify(bearer_token or "")
        return claims

    async def profile_for(self, bearer_token: str | None, claims: RawClaims) -> RawClaims:
        return await self._fetcher.fetch_profile(self._config.domain, bearer_token or "")


class StaticIdentityResolver:
    """
    Test double that ignores the bearer token and serves a preloaded user.

    `user` stands in for the token claims; `user_info` for the `/userinfo` profile and
    defaults to `user`. Both start with empty `roles` and `permissions` lists.
    """

    def __init__(
        self,
        user: dict[str, Any] | None = None,
        user_info: dict[str, Any] | None = None,
    ) -> None:
        self.user = user
        self.user_info = user_info
        self.profile_calls = 0

    def set_user(self, user: dict[str, Any] | None) -> None:
        self.user = user

    def set_user_info(self, user_info: dict[str, Any] | None) -> None:
        self.user = user_info
        self.user_info = user_info

    async def claims_for(self, bearer_token: str | None) -> RawClaims:
        if not self.user:
            raise Unauthorized("[Invalid Auth] Mock User was not set")
        return dict(self.user)

    async def profile_for(self, bearer_token: str | None, claims: RawClaims) -> RawClaims:
        self.profile_calls += 1
        base: dict[str, Any] = {"roles": [], "permissions": []}
        return {**base, **(self.user_info or self.user or {})}


# --- Module Notes -----------------------------------------------------------
# Select the double by passing it to `AuthService` / `create_app(resolver=...)`; nothing in
# the service is patched at runtime.
