"""
identity_gate.settings

Central configuration (Pydantic Settings) and the immutable auth configuration value.

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Validate identity-provider settings once via `configure` (fail fast at startup).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from identity_gate.errors import ConfigurationError

ClaimMergePolicy = Literal["union", "profile", "claims"]

DEFAULT_TTL_SECONDS = 60


class Settings(BaseSettings):
    """
    Env-driven process settings (prefix `IDGATE_`).

    The `auth_*` fields have no usable defaults; `AuthConfig.from_settings` rejects
    empty values so a misconfigured process never serves a request.
    """

    model_config = SettingsConfigDict(env_prefix="IDGATE_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "identity-gate"
    log_level: str = "INFO"
    # Console rendering is easier to read locally; aggregators expect JSON.
    log_json: bool = True

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Identity provider
    auth_domain: str = ""
    auth_client_id: str = ""
    auth_audience: str = ""
    verify_signature: bool = True

    # Profile enrichment
    dont_strip: bool = False
    cache_ttl_seconds: int = Field(default=DEFAULT_TTL_SECONDS, ge=1)
    profile_timeout_seconds: float = Field(default=10.0, gt=0)
    claim_merge: ClaimMergePolicy = "union"
    plain_id_precedence: bool = True

    # Role allowed to call the cache administration endpoints.
    admin_role: str = "admin"


@dataclass(frozen=True, slots=True)
class AuthConfig:
    domain: str
    client_id: str
    audience: str
    dont_strip: bool = False
    ttl_seconds: int = DEFAULT_TTL_SECONDS
    verify_signature: bool = True
    profile_timeout_seconds: float = 10.0
    claim_merge: ClaimMergePolicy = "union"
    plain_id_precedence: bool = True

    @property
    def issuer(self) -> str:
        return f"https://{self.domain}/"

    @property
    def userinfo_url(self) -> str:
        return f"https://{self.domain}/userinfo"

    @property
    def jwks_url(self) -> str:
        return f"https://{self.domain}/.well-known/jwks.json"

    @classmethod
    def from_settings(cls, settings: Settings) -> AuthConfig:
        return configure(
            domain=settings.auth_domain,
            client_id=settings.auth_client_id,
            audience=settings.auth_audience,
            dont_strip=settings.dont_strip,
            ttl_seconds=settings.cache_ttl_seconds,
            verify_signature=settings.verify_signature,
            profile_timeout_seconds=settings.profile_timeout_seconds,
            claim_merge=settings.claim_merge,
            plain_id_precedence=settings.plain_id_precedence,
        )


def configure(
    domain: str,
    client_id: str,
    audience: str,
    *,
    dont_strip: bool = False,
    ttl_seconds: int = DEFAULT_TTL_SECONDS,
    verify_signature: bool = True,
    profile_timeout_seconds: float = 10.0,
    claim_merge: ClaimMergePolicy = "union",
    plain_id_precedence: bool = True,
) -> AuthConfig:
    """
    Build the process-wide auth configuration.

    Raises ConfigurationError when domain, client id or audience is missing; this is
    fatal and is expected to stop the process before it serves traffic.
    """

    missing = [
        name
        for name, value in (("domain", domain), ("client_id", client_id), ("audience", audience))
        if not value
    ]
    if missing:
        raise ConfigurationError(f"[INVALID AUTH CONFIG] missing: {', '.join(missing)}")
    if ttl_seconds <= 0:
        raise ConfigurationError("[INVALID AUTH CONFIG] ttl_seconds must be positive")
    if claim_merge not in ("union", "profile", "claims"):
        raise ConfigurationError(f"[INVALID AUTH CONFIG] unknown claim_merge: {claim_merge}")

    return AuthConfig(
        domain=domain.strip().rstrip("/"),
        client_id=client_id,
        audience=audience,
        dont_strip=dont_strip,
        ttl_seconds=ttl_seconds,
        verify_signature=verify_signature,
        profile_timeout_seconds=profile_timeout_seconds,
        claim_merge=claim_merge,
        plain_id_precedence=plain_id_precedence,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# AuthConfig is frozen and built once at startup; re-configuring under live traffic is
# not supported. Build a new AuthService (and app) instead.
