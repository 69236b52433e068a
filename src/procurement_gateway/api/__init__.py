"""
procurement_gateway.api

Backend API package.

Responsibilities:
- FastAPI app factory, route readiness checks and router modules.
- API-layer dependency wiring and request/response models.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Route groups are imported by name through `api.readiness`, never statically,
# so a broken group cannot stop the app from importing.
