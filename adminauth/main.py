"""
Admin auth service — application entry point.

This is the **only** file that assembles the app.  Business logic lives in
``services/``; ``api/`` only maps HTTP onto it.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncEngine

from adminauth.api.v1.api import api_router
from adminauth.core.config import settings
from adminauth.core.exceptions import register_exception_handlers
from adminauth.core.security import PasswordHasher, TokenIssuer
from adminauth.db.base import Base
from adminauth.db.session import build_session_factory, engine as default_engine
from adminauth.seed import seed_admin_user
from adminauth.services.auth import AuthService
from adminauth.services.users import UserStore

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


def build_auth_service(store: UserStore) -> AuthService:
    issuer = TokenIssuer(
        access_secret=settings.JWT_ACCESS_SECRET.get_secret_value(),
        refresh_secret=settings.JWT_REFRESH_SECRET.get_secret_value(),
        access_ttl=settings.JWT_ACCESS_EXPIRATION,
        refresh_ttl=settings.JWT_REFRESH_EXPIRATION,
        algorithm=settings.JWT_ALGORITHM,
    )
    return AuthService(store, PasswordHasher(settings.PASSWORD_HASH_ROUNDS), issuer)


# ── App factory ─────────────────────────────────────────────────────
def create_app(engine: AsyncEngine | None = None) -> FastAPI:
    db_engine = engine or default_engine
    session_factory = build_session_factory(db_engine)
    auth_service = build_auth_service(UserStore(session_factory))

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        logger.info("Connecting to %s", db_engine.url.render_as_string(hide_password=True))
        async with db_engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables initialised")

        if settings.FIRST_ADMIN_PASSWORD is not None:
            await seed_admin_user(
                auth_service.store,
                auth_service.hasher,
                settings.FIRST_ADMIN_EMAIL,
                settings.FIRST_ADMIN_PASSWORD.get_secret_value(),
                settings.FIRST_ADMIN_NAME,
            )

        logger.info("%s v%s started", settings.PROJECT_NAME, settings.VERSION)
        for route in ("/auth/admin/login", "/auth/refresh", "/auth/logout"):
            logger.info("   POST   %s", route)
        yield
        await db_engine.dispose()
        logger.info("Shutdown complete")

    application = FastAPI(
        title=settings.PROJECT_NAME,
        description="Admin login, refresh-token rotation and logout",
        version=settings.VERSION,
        lifespan=lifespan,
    )
    application.state.session_factory = session_factory
    application.state.auth_service = auth_service

    # CORS
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Global exception handlers (prevent stack-trace leakage)
    register_exception_handlers(application)

    application.include_router(api_router)

    return application


app = create_app()


def run() -> None:
    """Console entry point: serve the app on HOST:PORT."""
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
