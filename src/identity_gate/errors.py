"""
identity_gate.errors

Error taxonomy shared by every auth component.

Responsibilities:
- Classify failures as Unauthorized (401), Forbidden (403) or BadRequest (400).
- Separate fatal startup configuration errors from per-request auth errors.
"""

from __future__ import annotations

from enum import Enum


class AuthErrorKind(Enum):
    unauthorized = 401
    forbidden = 403
    bad_request = 400

    @property
    def status(self) -> int:
        return self.value


class AuthError(Exception):
    """
    Classified per-request failure.

    The HTTP boundary maps `status` to the response code and `message` to the body.
    """

    kind: AuthErrorKind = AuthErrorKind.unauthorized
    default_message: str = "Unauthorized"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def status(self) -> int:
        return self.kind.status

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class Unauthorized(AuthError):
    kind = AuthErrorKind.unauthorized
    default_message = "Unauthorized"


class Forbidden(AuthError):
    kind = AuthErrorKind.forbidden
    default_message = "Forbidden"


class BadRequest(AuthError):
    kind = AuthErrorKind.bad_request
    default_message = "Bad Request"


class ConfigurationError(Exception):
    """Raised at startup when required identity-provider settings are missing."""


# --- Module Notes -----------------------------------------------------------
# ConfigurationError is not an AuthError: it aborts startup and is never translated
# into a per-request HTTP status.
