"""
procurement_gateway.db.models

Persistence schema for the identity side of the backend.

Responsibilities:
- Define the `User` ORM model backing `/auth/login`, `/auth/me` and `/users`.
"""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from procurement_gateway.db.base import Base


def _utcnow() -> datetime:
    # Persist naive UTC timestamps for simplicity; production systems may use tz-aware types.
    return datetime.utcnow()


class UserRole(enum.StrEnum):
    # Stored as plain strings; values are part of the wire contract with the UI.
    admin = "admin"
    purchasing_officer = "purchasingOfficer"
    viewer = "viewer"


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(32), nullable=False, default=UserRole.viewer.value)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)


# --- Module Notes -----------------------------------------------------------
# Business entities (items, purchase orders, branches...) live in other services
# and are not modelled here.
