"""
One-time provisioning of the first admin account.

Runs from the app lifespan when ``FIRST_ADMIN_PASSWORD`` is set, or by hand:

    python -m adminauth.seed
"""

from __future__ import annotations

import asyncio
import logging
import sys

from starlette.concurrency import run_in_threadpool

from adminauth.core.config import settings
from adminauth.core.security import PASSWORD_MAX_LENGTH, PasswordHasher
from adminauth.db.base import Base
from adminauth.db.session import async_session_factory, engine
from adminauth.models.user import Role, User
from adminauth.services.users import UserStore

logger = logging.getLogger(__name__)


async def seed_admin_user(
    store: UserStore,
    hasher: PasswordHasher,
    email: str,
    password: str,
    name: str = "Admin User",
) -> User | None:
    """Create an active admin unless *email* already exists. Returns the new user."""
    if not 1 <= len(password) <= PASSWORD_MAX_LENGTH:
        raise ValueError(f"Admin password must be 1 to {PASSWORD_MAX_LENGTH} characters")

    if await store.find_by_email(email) is not None:
        logger.info("Admin user already exists: %s", email)
        return None

    user = await store.create_user(
        email=email,
        password_hash=await run_in_threadpool(hasher.hash, password),
        name=name,
        role=Role.ADMIN,
        is_active=True,
    )
    logger.info("Admin user created: %s (password: <redacted>)", user.email)
    return user


async def _main() -> int:
    if settings.FIRST_ADMIN_PASSWORD is None:
        logger.error("FIRST_ADMIN_PASSWORD is not set; nothing to seed")
        return 1

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        await seed_admin_user(
            UserStore(async_session_factory),
            PasswordHasher(settings.PASSWORD_HASH_ROUNDS),
            settings.FIRST_ADMIN_EMAIL,
            settings.FIRST_ADMIN_PASSWORD.get_secret_value(),
            settings.FIRST_ADMIN_NAME,
        )
    finally:
        await engine.dispose()
    return 0


if __name__ == "__main__":
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )
    sys.exit(asyncio.run(_main()))
