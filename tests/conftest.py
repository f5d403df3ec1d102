"""
tests.conftest

Shared fixtures: auth configuration and unsigned-for-our-purposes test tokens.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import jwt
import pytest

from identity_gate.settings import AuthConfig, Settings, configure

# HS256 tokens are only decoded structurally in tests; the key just has to be long enough.
TEST_SIGNING_KEY = "identity-gate-test-signing-key-0123456789"
DOMAIN = "tenant.example.com"


@pytest.fixture
def auth_config() -> AuthConfig:
    return configure(DOMAIN, "client-123", "https://api.example.com", verify_signature=False)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        env="test",
        auth_domain=DOMAIN,
        auth_client_id="client-123",
        auth_audience="https://api.example.com",
        verify_signature=False,
    )


@pytest.fixture
def make_token() -> Callable[[dict[str, Any]], str]:
    def _make(payload: dict[str, Any]) -> str:
        return jwt.encode(payload, TEST_SIGNING_KEY, algorithm="HS256")

    return _make
