"""
identity_gate.auth.profile

HTTP client boundary for the identity provider's profile (`/userinfo`) endpoint.

Responsibilities:
- Forward the caller's bearer token to `https://{domain}/userinfo`.
- Return the profile as a raw claims mapping or fail with a classified error.
"""

from __future__ import annotations

import httpx

from identity_gate.auth.claims import RawClaims, extract_token
from identity_gate.errors import BadRequest, Unauthorized
from identity_gate.observability.logging import get_logger

log = get_logger(__name__)


class ProfileFetcher:
    """
    One round trip per call, no retries.

    Transport errors and unexpected statuses propagate as `httpx` exceptions; the
    decision layer classifies them. Caching is not this class's concern.
    """

    def __init__(self, *, http: httpx.AsyncClient, timeout: float = 10.0) -> None:
        self._http = http
        self._timeout = timeout

    async def fetch_profile(self, domain: str, bearer_token: str) -> RawClaims:
        token = extract_token(bearer_token)
        r = await self._http.get(
            f"https://{domain}/userinfo",
            headers={"Authorization": f"Bearer {token}"},
            timeout=self._timeout,
        )
        if r.status_code in (401, 403):
            log.info("profile.rejected", status=r.status_code, domain=domain)
            raise Unauthorized(f"[unable to validate bearer token] status {r.status_code}")
        r.raise_for_status()

        if not r.content.strip():
            raise BadRequest("Malformed or Expired Token")
        try:
            profile = r.json()
        except ValueError as e:
            raise BadRequest("Malformed or Expired Token") from e
        if not isinstance(profile, dict):
            raise BadRequest("Malformed or Expired Token")
        return profile


# --- Module Notes -----------------------------------------------------------
# The timeout is explicit so a slow provider cannot hold a request open indefinitely.
