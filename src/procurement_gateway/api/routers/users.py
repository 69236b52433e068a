"""
procurement_gateway.api.routers.users

Admin-only user management.

Responsibilities:
- List users (newest first).
- Create a user with a hashed password.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED, HTTP_400_BAD_REQUEST

from procurement_gateway.api.deps import db_session
from procurement_gateway.api.schemas import UserOut
from procurement_gateway.auth.deps import require_roles
from procurement_gateway.auth.models import Principal
from procurement_gateway.auth.passwords import hash_password
from procurement_gateway.db.models import UserRole
from procurement_gateway.db.repositories.users import UserRepo
from procurement_gateway.observability.logging import get_logger

log = get_logger(__name__)

router = APIRouter(tags=["users"], dependencies=[Depends(require_roles(UserRole.admin.value))])


class UserCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    first_name: str = Field(default="", alias="firstName", max_length=100)
    last_name: str = Field(default="", alias="lastName", max_length=100)
    email: str = Field(default="", max_length=255)
    password: str = ""
    # Role values are the backend's to validate; unknown ones fall back to viewer.
    role: str | None = None


@router.get("", response_model=list[UserOut])
async def list_users(session: AsyncSession = Depends(db_session)) -> list[UserOut]:
    users = await UserRepo(session).list_all()
    return [UserOut.model_validate(u) for u in users]


@router.post("", response_model=UserOut, status_code=HTTP_201_CREATED)
async def create_user(
    body: UserCreateRequest,
    session: AsyncSession = Depends(db_session),
    principal: Principal = Depends(require_roles(UserRole.admin.value)),
) -> UserOut:
    if not (body.first_name and body.last_name and body.email and body.password):
        raise HTTPException(status_code=HTTP_400_BAD_REQUEST, detail="All fields required")

    role = body.role if body.role in {r.value for r in UserRole} else UserRole.viewer.value
    try:
        user = await UserRepo(session).create(
            first_name=body.first_name,
            last_name=body.last_name,
            email=body.email,
            password_hash=hash_password(body.password),
            role=role,
        )
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        raise HTTPException(status_code=HTTP_400_BAD_REQUEST, detail="Email already exists") from e

    log.info("user_created", user_id=user.id, role=user.role, created_by=principal.user_id)
    return UserOut.model_validate(user)
