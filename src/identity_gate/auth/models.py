"""
identity_gate.auth.models

Auth domain models.

Responsibilities:
- Define the resolved identity type (`Identity`) injected into endpoints.
- Track per-request authorization progress (`AuthContext`, `AuthState`).
- Carry decision outcomes across the HTTP boundary (`AuthResult`).
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Any, Generic, TypeVar

from identity_gate.errors import AuthError, BadRequest

T = TypeVar("T")


def _as_tuple(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, (list, tuple, set, frozenset)):
        return tuple(str(v) for v in value)
    return (str(value),)


@dataclass(frozen=True, slots=True)
class Identity:
    """
    Normalized identity of an authenticated caller.

    `data` is the normalized record (or the raw profile in pass-through mode); its
    attributes may be scalars or lists, so use `roles`/`permissions` for membership checks.
    """

    data: dict[str, Any]
    from_cache: bool = False

    @classmethod
    def from_claims(cls, data: dict[str, Any], *, from_cache: bool = False) -> Identity:
        subject = data.get("sub")
        if not subject or not isinstance(subject, str):
            raise BadRequest("Invalid identity: no subject found")
        return cls(data=dict(data), from_cache=from_cache)

    @property
    def subject(self) -> str:
        return self.data["sub"]

    @property
    def id(self) -> Any:
        return self.data.get("id")

    @property
    def ids(self) -> tuple[Any, ...]:
        if "ids" in self.data:
            return tuple(self.data["ids"])
        return (self.data["id"],) if "id" in self.data else ()

    @property
    def roles(self) -> tuple[str, ...]:
        return _as_tuple(self.data.get("roles"))

    @property
    def permissions(self) -> tuple[str, ...]:
        return _as_tuple(self.data.get("permissions"))

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def cached(self) -> Identity:
        return replace(self, from_cache=True)

    def to_dict(self) -> dict[str, Any]:
        return {**self.data, "from_cache": self.from_cache}


class AuthState(IntEnum):
    unauthenticated = 0
    claims_extracted = 1
    identity_resolved = 2
    decided = 3


@dataclass(slots=True)
class AuthContext:
    """
    Per-request authorization state.

    Each step of `AuthService` advances `state`; later steps re-run earlier ones when
    they have not happened yet.
    """

    authorization: str | None
    state: AuthState = AuthState.unauthenticated
    claims: dict[str, Any] = field(default_factory=dict)
    identity: Identity | None = None

    def advance(self, state: AuthState) -> None:
        if state > self.state:
            self.state = state


@dataclass(frozen=True, slots=True)
class AuthResult(Generic[T]):
    value: T | None = None
    error: AuthError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> AuthResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: AuthError) -> AuthResult[T]:
        return cls(error=error)

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


# --- Module Notes -----------------------------------------------------------
# Keep these models free of I/O; they are shared by the service, the FastAPI
# dependencies and the test doubles in `auth.resolver`.
