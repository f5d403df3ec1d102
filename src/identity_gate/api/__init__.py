"""
identity_gate.api

API package for the identity gate service.

Responsibilities:
- FastAPI app factory and router modules.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The API layer stays thin: routers declare auth dependencies and delegate to AuthService.
