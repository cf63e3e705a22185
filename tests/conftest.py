"""
Shared test fixtures for the admin auth service.

Every test gets a fresh in-memory SQLite database (aiosqlite + StaticPool)
and an app built around it, so no state leaks between tests.
"""

import os
import sys
from collections.abc import AsyncGenerator, Awaitable, Callable

import pytest

# Ensure project root is importable
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Override environment BEFORE importing application modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_ACCESS_SECRET"] = "test-access-secret-0123456789abcdef0123456789abcdef"
os.environ["JWT_REFRESH_SECRET"] = "test-refresh-secret-fedcba9876543210fedcba9876543210"
os.environ["JWT_ACCESS_EXPIRATION"] = "15m"
os.environ["JWT_REFRESH_EXPIRATION"] = "7d"
os.environ["PASSWORD_HASH_ROUNDS"] = "1000"
os.environ["CORS_ORIGINS"] = "*"
os.environ.pop("FIRST_ADMIN_PASSWORD", None)

from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from adminauth.db.base import Base
from adminauth.main import create_app
from adminauth.models.user import Role, User
from adminauth.services.auth import AuthService
from adminauth.services.users import UserStore

ADMIN_EMAIL = "admin@x.com"
ADMIN_PASSWORD = "Admin@123"
ADMIN_NAME = "Admin User"


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database with all tables created."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture
def app(engine: AsyncEngine) -> FastAPI:
    return create_app(engine)


@pytest.fixture
def service(app: FastAPI) -> AuthService:
    return app.state.auth_service


@pytest.fixture
def store(service: AuthService) -> UserStore:
    return service.store


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def make_user(service: AuthService) -> Callable[..., Awaitable[User]]:
    """Factory that provisions a user straight through the store."""

    async def _make_user(
        email: str,
        password: str,
        role: Role = Role.ADMIN,
        is_active: bool = True,
        name: str = "Test User",
    ) -> User:
        return await service.store.create_user(
            email=email,
            password_hash=service.hasher.hash(password),
            name=name,
            role=role,
            is_active=is_active,
        )

    return _make_user


@pytest.fixture
async def admin_user(make_user) -> User:
    return await make_user(ADMIN_EMAIL, ADMIN_PASSWORD, role=Role.ADMIN, name=ADMIN_NAME)
