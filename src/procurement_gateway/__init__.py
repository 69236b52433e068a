"""
procurement_gateway

Top-level package for the procurement admin session layer and request gateway.

Responsibilities:
- Expose package version metadata.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"


# --- Module Notes -----------------------------------------------------------
# Subpackages: `client` (session + HTTP client), `proxy` (forwarding proxy),
# `api` (backend app + route readiness). Keep this file free of imports.
