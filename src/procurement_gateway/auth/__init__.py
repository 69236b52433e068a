"""
procurement_gateway.auth

Backend authentication/authorization package.

Responsibilities:
- JWT helpers, password hashing.
- FastAPI auth dependencies (Principal + role checks).
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The client session layer never imports from here; it only sees the HTTP contract.
