"""
procurement_gateway.auth.models

Auth domain models.

Responsibilities:
- Define the authenticated identity type (`Principal`) injected into endpoints.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated caller identity, resolved from a bearer token.
    """

    user_id: int
    email: str
    role: str


# --- Module Notes -----------------------------------------------------------
# Built from token claims only; no DB round trip per request.
