"""
identity_gate.auth.claims

Bearer token claim extraction (structural decode only).

Responsibilities:
- Strip the `Bearer` scheme from an Authorization header value.
- Decode a JWT payload into a raw claims mapping without checking the signature.
- Enforce the presence of a subject at the boundaries that need one.

Note:
- Signature checks belong to `auth.verifier`; claims returned here are untrusted.
"""

from __future__ import annotations

from typing import Any

import jwt
from jwt import InvalidTokenError

from identity_gate.errors import BadRequest, Unauthorized

RawClaims = dict[str, Any]

_SCHEME = "bearer "


def extract_token(authorization: Any) -> str:
    if not authorization or not isinstance(authorization, str):
        raise Unauthorized("Invalid or missing token")

    token = authorization.strip()
    if token[: len(_SCHEME)].lower() == _SCHEME:
        token = token[len(_SCHEME) :].strip()
    if not token:
        raise Unauthorized("Invalid or missing token")
    return token


def extract_claims(bearer_token: Any) -> RawClaims:
    token = extract_token(bearer_token)
    if token.count(".") != 2:
        raise Unauthorized("Invalid token format")

    try:
        # Structural decode: PyJWT still rejects bad base64, non-JSON and non-object payloads.
        claims = jwt.decode(token, options={"verify_signature": False})
    except InvalidTokenError as e:
        raise Unauthorized(f"Invalid token format: {e}") from e

    return dict(claims)


def require_subject(claims: RawClaims) -> str:
    subject = claims.get("sub")
    if not subject or not isinstance(subject, str):
        raise BadRequest("Invalid token: no subject found in claims, please check your token")
    return subject


# --- Module Notes -----------------------------------------------------------
# `require_subject` is applied by callers that key on the subject (cache, profile lookup);
# display-only callers can use `extract_claims` alone.
