"""
procurement_gateway.api.routers.auth

Login and identity endpoints consumed by the client session layer.

Responsibilities:
- `POST /api/auth/login`: verify credentials and issue a session token.
- `GET /api/auth/me`: return the authoritative user record for a bearer token.
"""

from __future__ import annotations

from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_401_UNAUTHORIZED, HTTP_404_NOT_FOUND

from procurement_gateway.api.deps import db_session
from procurement_gateway.api.schemas import LoginResponse, UserOut
from procurement_gateway.auth.deps import get_principal
from procurement_gateway.auth.jwt import JwtConfig, issue_token
from procurement_gateway.auth.models import Principal
from procurement_gateway.auth.passwords import verify_password
from procurement_gateway.db.repositories.users import UserRepo
from procurement_gateway.observability.logging import get_logger
from procurement_gateway.settings import Settings, get_settings

log = get_logger(__name__)

router = APIRouter(tags=["auth"])


class LoginRequest(BaseModel):
    # Defaults let us answer a missing field with the 400 body the UI displays.
    email: str = ""
    password: str = ""


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(get_settings),
) -> LoginResponse:
    if not body.email or not body.password:
        raise HTTPException(status_code=HTTP_400_BAD_REQUEST, detail="Email and password required")

    user = await UserRepo(session).get_by_email(body.email)
    # Same answer for unknown email and wrong password.
    if user is None or not verify_password(body.password, user.password_hash):
        log.info("login_invalid_credentials", known_email=user is not None)
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    token = issue_token(
        cfg=JwtConfig.from_settings(settings),
        user_id=user.id,
        email=user.email,
        role=user.role,
        ttl=timedelta(hours=settings.jwt_ttl_hours),
    )
    log.info("login_issued_token", user_id=user.id, role=user.role)
    return LoginResponse(token=token, user=UserOut.model_validate(user))


@router.get("/me", response_model=UserOut)
async def me(
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(db_session),
) -> UserOut:
    user = await UserRepo(session).get(principal.user_id)
    if user is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="User not found")
    return UserOut.model_validate(user)


# --- Module Notes -----------------------------------------------------------
# Mounted under `/api/auth` by `api.readiness`; the prefix is not set here so
# the readiness table stays the single source of mount points.
