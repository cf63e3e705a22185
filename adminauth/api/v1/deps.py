"""
FastAPI dependencies — the auth service, DB session and request guards.

Both guards read the token from ``Authorization: Bearer <token>`` only.
The refresh endpoint ignores request bodies.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from adminauth.core.exceptions import Unauthenticated
from adminauth.services.auth import ACCESS_DENIED, AuthService

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AccessPrincipal:
    user_id: str
    email: str
    role: str
    name: str


@dataclass(frozen=True)
class RefreshPrincipal:
    user_id: str
    email: str
    refresh_token: str


# ── Wiring ──────────────────────────────────────────────────────────
def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    async with request.app.state.session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


# ── Guards ──────────────────────────────────────────────────────────
async def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> AccessPrincipal:
    """Verify a bearer *access* token; no store lookup."""
    if credentials is None:
        raise Unauthenticated("Not authenticated")

    payload = service.issuer.decode_access(credentials.credentials)
    return AccessPrincipal(
        user_id=payload["sub"],
        email=payload.get("email", ""),
        role=payload.get("role", ""),
        name=payload.get("name", ""),
    )


async def require_refresh_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> RefreshPrincipal:
    """Verify a bearer *refresh* token against the hash stored for its user."""
    if credentials is None:
        raise Unauthenticated("Refresh token not found")

    token = credentials.credentials.strip()
    payload = service.issuer.decode_refresh(token)

    user = await service.store.find_by_id(payload["sub"])
    if user is None or not user.refresh_token_hash:
        logger.info("Refresh rejected: no active session for %s", payload["sub"])
        raise Unauthenticated(ACCESS_DENIED)

    if not await run_in_threadpool(service.hasher.verify, token, user.refresh_token_hash):
        logger.warning("Refresh rejected: stale or reused token for %s", user.id)
        raise Unauthenticated(ACCESS_DENIED)

    return RefreshPrincipal(
        user_id=user.id,
        email=payload.get("email", user.email),
        refresh_token=token,
    )
