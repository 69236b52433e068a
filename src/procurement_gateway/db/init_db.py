"""
procurement_gateway.db.init_db

DB initialization helpers (dev/test convenience).

Responsibilities:
- Create tables for local development and tests.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from procurement_gateway.db import models  # noqa: F401  # registers tables on Base.metadata
from procurement_gateway.db.base import Base


async def init_db(engine: AsyncEngine) -> None:
    """
    Create tables if they don't exist. Production databases are provisioned
    out of band.
    """

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
