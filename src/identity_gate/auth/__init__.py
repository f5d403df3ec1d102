"""
identity_gate.auth

Authentication/authorization package.

Responsibilities:
- Token claim extraction, signature verification and `/userinfo` profile fetching.
- Claim normalization, identity caching and role/permission decisions.
- FastAPI auth dependencies (Identity + RBAC).
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Only `auth.deps` imports FastAPI; the rest of the package works without a web framework.
