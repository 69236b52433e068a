"""
procurement_gateway.client.models

Wire models shared by the client session layer.

Responsibilities:
- Define the `User` record as returned by `/auth/login` and `/auth/me`.
- Keep role handling opaque (no client-side validation of role values).
"""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class UserRole(enum.StrEnum):
    # Known roles. `User.role` is a plain string so unknown values still round-trip.
    admin = "admin"
    purchasing_officer = "purchasingOfficer"
    viewer = "viewer"


class User(BaseModel):
    """
    Authenticated user as seen by the UI. Only `id` is required; a payload
    without it is treated as malformed by the session manager.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: int
    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")
    email: str = ""
    role: str = UserRole.viewer.value

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


# --- Module Notes -----------------------------------------------------------
# The cached copy in the credential store uses `to_wire()`; the authoritative
# copy is always re-fetched from `/auth/me` on bootstrap.
