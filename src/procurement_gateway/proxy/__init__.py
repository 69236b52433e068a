"""
procurement_gateway.proxy

Forwarding proxy package.

Responsibilities:
- Stateless request/response translation (`handler`).
- ASGI host and process entrypoint for running the proxy in front of the backend.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Nothing here imports from `client` or `api`; the proxy deploys on its own.
