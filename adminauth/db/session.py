"""
Async SQLAlchemy engine & session factory (asyncpg driver in production,
aiosqlite in tests).
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import (AsyncEngine, AsyncSession, async_sessionmaker,
                                    create_async_engine)

from adminauth.core.config import settings


def build_engine(database_url: str) -> AsyncEngine:
    engine_args = {
        "echo": False,
        "pool_pre_ping": True,
    }

    if "postgresql" in database_url:
        engine_args.update(
            {
                "pool_size": 20,
                "max_overflow": 10,
                "pool_recycle": 300,
            }
        )

    return create_async_engine(database_url, **engine_args)


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
    )


engine = build_engine(settings.DATABASE_URL)

async_session_factory = build_session_factory(engine)
