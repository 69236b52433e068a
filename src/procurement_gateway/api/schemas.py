"""
procurement_gateway.api.schemas

Response models shared by the auth and users route groups.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class UserOut(BaseModel):
    # camelCase on the wire; the admin UI reads `firstName`/`lastName`.
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    email: str
    role: str


class LoginResponse(BaseModel):
    token: str
    user: UserOut
