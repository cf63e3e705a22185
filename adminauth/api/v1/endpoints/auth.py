"""
Auth endpoints — admin login, refresh-token rotation & logout.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from adminauth.api.v1.deps import (AccessPrincipal, RefreshPrincipal, get_auth_service,
                                   get_current_principal, require_refresh_token)
from adminauth.schemas.auth import LoginRequest, LoginResponse, LogoutResponse, Tokens
from adminauth.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/admin/login", response_model=LoginResponse)
async def admin_login(
    body: LoginRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> LoginResponse:
    """Authenticate an admin with email/password and start a session."""
    return await service.admin_login(body.email, body.password)


@router.post("/refresh", response_model=Tokens)
async def refresh_tokens(
    principal: Annotated[RefreshPrincipal, Depends(require_refresh_token)],
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> Tokens:
    """Rotate the refresh token sent as ``Authorization: Bearer``."""
    return await service.refresh_tokens(principal.user_id, principal.refresh_token)


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    principal: Annotated[AccessPrincipal, Depends(get_current_principal)],
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> LogoutResponse:
    """Drop the stored refresh hash. Safe to repeat."""
    return await service.logout(principal.user_id)
