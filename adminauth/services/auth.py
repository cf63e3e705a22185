"""
Auth orchestration — admin login, refresh-token rotation and logout.

Each operation is a short state transition over one ``User`` row: look
it up, check the credential, mint a fresh pair and persist the hash of
the new refresh token (which retires the previous one).
"""

from __future__ import annotations

import logging

from starlette.concurrency import run_in_threadpool

from adminauth.core.exceptions import Forbidden, Unauthenticated
from adminauth.core.security import PasswordHasher, TokenIssuer, TokenPair
from adminauth.models.user import User
from adminauth.schemas.auth import LoginResponse, LogoutResponse, Tokens
from adminauth.schemas.user import UserSummary
from adminauth.services.users import UserStore

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"
ACCESS_DENIED = "Access denied"
ADMIN_REQUIRED = "Access denied. Admin privileges required"
ACCOUNT_INACTIVE = "Account is inactive"
LOGGED_OUT = "Logged out successfully"


class AuthService:
    def __init__(self, store: UserStore, hasher: PasswordHasher, issuer: TokenIssuer) -> None:
        self.store = store
        self.hasher = hasher
        self.issuer = issuer

    async def admin_login(self, email: str, password: str) -> LoginResponse:
        user = await self.store.find_by_email(email)

        if user is None:
            # Same cost and message as a wrong password
            await run_in_threadpool(self.hasher.dummy_verify, password)
            logger.info("Admin login rejected for %s: unknown account", email)
            raise Unauthenticated(INVALID_CREDENTIALS)

        if not user.is_admin:
            logger.info("Admin login rejected for %s: role %s", email, user.role.value)
            raise Forbidden(ADMIN_REQUIRED)

        if not user.is_active:
            logger.info("Admin login rejected for %s: inactive", email)
            raise Unauthenticated(ACCOUNT_INACTIVE)

        if not await run_in_threadpool(self.hasher.verify, password, user.password_hash):
            logger.info("Admin login rejected for %s: bad password", email)
            raise Unauthenticated(INVALID_CREDENTIALS)

        pair = await self._rotate(user)
        logger.info("Admin login succeeded for %s", user.email)
        return LoginResponse(
            user=UserSummary.model_validate(user),
            tokens=_tokens(pair),
        )

    async def refresh_tokens(self, user_id: str, refresh_token: str) -> Tokens:
        """Swap a still-valid refresh token for a new pair.

        The request guard has already matched the token, but the check is
        repeated here so the service stands on its own.
        """
        user = await self.store.find_by_id(user_id)
        if user is None or not user.refresh_token_hash:
            raise Unauthenticated(ACCESS_DENIED)

        if not await run_in_threadpool(self.hasher.verify, refresh_token, user.refresh_token_hash):
            logger.warning("Refresh token mismatch for user %s", user_id)
            raise Unauthenticated(ACCESS_DENIED)

        return _tokens(await self._rotate(user))

    async def logout(self, user_id: str) -> LogoutResponse:
        await self.store.update_refresh_token_hash(user_id, None)
        logger.info("User %s logged out", user_id)
        return LogoutResponse(message=LOGGED_OUT)

    async def _rotate(self, user: User) -> TokenPair:
        pair = self.issuer.issue(
            subject_id=user.id,
            email=user.email,
            role=user.role.value,
            name=user.name,
        )
        token_hash = await run_in_threadpool(self.hasher.hash, pair.refresh_token)
        await self.store.update_refresh_token_hash(user.id, token_hash)
        return pair


def _tokens(pair: TokenPair) -> Tokens:
    return Tokens(access_token=pair.access_token, refresh_token=pair.refresh_token)
