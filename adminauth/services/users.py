"""
Credential store — the only code that reads or writes ``users`` rows.

Every call opens its own session and commits on its own, so a refresh
hash update is one UPDATE statement in one transaction.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from adminauth.models.user import Role, User


def normalise_email(email: str) -> str:
    return email.strip().lower()


class UserStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def find_by_email(self, email: str) -> User | None:
        async with self._session_factory() as session:
            result = await session.execute(
                select(User).where(User.email == normalise_email(email))
            )
            return result.scalar_one_or_none()

    async def find_by_id(self, user_id: str) -> User | None:
        async with self._session_factory() as session:
            return await session.get(User, user_id)

    async def update_refresh_token_hash(self, user_id: str, token_hash: str | None) -> bool:
        """Overwrite (or clear) the stored refresh hash. False if no such user."""
        async with self._session_factory() as session:
            result = await session.execute(
                update(User)
                .where(User.id == user_id)
                .values(refresh_token_hash=token_hash, updated_at=datetime.now(timezone.utc))
            )
            await session.commit()
            return result.rowcount > 0

    async def create_user(
        self,
        email: str,
        password_hash: str,
        name: str,
        role: Role = Role.USER,
        is_active: bool = True,
    ) -> User:
        """Insert a user; raises ``IntegrityError`` if the email is taken."""
        user = User(
            email=normalise_email(email),
            password_hash=password_hash,
            name=name,
            role=role,
            is_active=is_active,
        )
        async with self._session_factory() as session:
            session.add(user)
            await session.commit()
            await session.refresh(user)
        return user
