"""
procurement_gateway.db.seed

First-admin provisioning.

Responsibilities:
- Create an admin account from settings when none with that email exists, so a
  fresh deployment can log in at all.
- Stand down (with a warning) when the schema has not been provisioned yet.
"""

from __future__ import annotations

from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from procurement_gateway.auth.passwords import hash_password
from procurement_gateway.db.models import User, UserRole
from procurement_gateway.db.repositories.users import UserRepo
from procurement_gateway.observability.logging import get_logger
from procurement_gateway.settings import Settings

log = get_logger(__name__)


async def ensure_bootstrap_admin(
    session_factory: async_sessionmaker[AsyncSession], settings: Settings
) -> bool:
    email = settings.bootstrap_admin_email
    password = settings.bootstrap_admin_password
    if not email or not password:
        return False

    async with session_factory() as session:
        conn = await session.connection()
        has_table = await conn.run_sync(
            lambda sync_conn: inspect(sync_conn).has_table(User.__tablename__)
        )
        if not has_table:
            # Outside dev/test the schema comes from `alembic upgrade head`.
            log.warning("bootstrap_admin_skipped", reason="users table missing", env=settings.env)
            return False

        repo = UserRepo(session)
        if await repo.get_by_email(email) is not None:
            return False
        user = await repo.create(
            first_name="Admin",
            last_name="User",
            email=email,
            password_hash=hash_password(password),
            role=UserRole.admin.value,
        )
        await session.commit()

    log.info("bootstrap_admin_created", user_id=user.id, email=email)
    return True
