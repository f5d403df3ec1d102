"""
identity_gate.api.routers

HTTP routers: health checks, identity views and cache administration.
"""

# Package marker.
