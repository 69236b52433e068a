"""
procurement_gateway.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness probe (`/api/health`), the one the forwarding proxy is checked with.
- Provide readiness probe (`/api/ready`) with DB connectivity validation.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from procurement_gateway.api.deps import db_session

router = APIRouter(prefix="/api")


@router.get("/health")
async def health() -> dict[str, str]:
    # Liveness: process is up and serving HTTP. No auth.
    return {"status": "ok", "message": "Server is running"}


@router.get("/ready")
async def ready(session: AsyncSession = Depends(db_session)) -> dict[str, str]:
    # Readiness: verify critical dependency (DB) is reachable.
    await session.execute(text("SELECT 1"))
    return {"status": "ready"}
