"""
Password / refresh-token hashing (passlib) and JWT issuing / verification.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from adminauth.core.exceptions import Unauthenticated

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

# Upper bound on account passwords; login, seeding and settings all enforce it.
PASSWORD_MAX_LENGTH = 128


# ── Hashing ─────────────────────────────────────────────────────────
class PasswordHasher:
    """Salted one-way hashing with a tunable cost.

    pbkdf2_sha256 has no input length limit, so a full refresh JWT is
    hashed end to end (bcrypt would only see its first 72 bytes).
    """

    def __init__(self, rounds: int = 29000) -> None:
        self._context = CryptContext(
            schemes=["pbkdf2_sha256"],
            deprecated="auto",
            pbkdf2_sha256__default_rounds=rounds,
        )
        self._dummy_hash: str | None = None

    def hash(self, secret: str) -> str:
        return self._context.hash(secret)

    def verify(self, secret: str, hashed: str | None) -> bool:
        if not hashed:
            return False
        try:
            return self._context.verify(secret, hashed)
        except (ValueError, TypeError):
            return False

    def dummy_verify(self, secret: str) -> None:
        """Burn one verification so unknown accounts cost as much as known ones."""
        if self._dummy_hash is None:
            self._dummy_hash = self._context.hash(uuid.uuid4().hex)
        self._context.verify(secret, self._dummy_hash)


# ── JWT tokens ──────────────────────────────────────────────────────
@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenIssuer:
    """Signs access/refresh pairs with two independent secrets and lifetimes."""

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        access_ttl: timedelta,
        refresh_ttl: timedelta,
        algorithm: str = "HS256",
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        if access_ttl >= refresh_ttl:
            raise ValueError("access token lifetime must be shorter than refresh token lifetime")
        self._access_secret = access_secret
        self._refresh_secret = refresh_secret
        self._access_ttl = access_ttl
        self._refresh_ttl = refresh_ttl
        self._algorithm = algorithm
        self._now = now

    def issue(self, subject_id: str, email: str, role: str, name: str) -> TokenPair:
        issued_at = self._now()
        access_claims = {
            "sub": subject_id,
            "email": email,
            "role": role,
            "name": name,
            "type": ACCESS_TOKEN_TYPE,
        }
        refresh_claims = {
            "sub": subject_id,
            "email": email,
            "type": REFRESH_TOKEN_TYPE,
        }
        return TokenPair(
            access_token=self._sign(access_claims, self._access_secret, issued_at + self._access_ttl, issued_at),
            refresh_token=self._sign(refresh_claims, self._refresh_secret, issued_at + self._refresh_ttl, issued_at),
        )

    def _sign(self, claims: dict[str, Any], secret: str, expire: datetime, issued_at: datetime) -> str:
        # jti keeps two pairs minted in the same second distinct
        payload = {**claims, "iat": issued_at, "exp": expire, "jti": uuid.uuid4().hex}
        return jwt.encode(payload, secret, algorithm=self._algorithm)

    def decode_access(self, token: str) -> dict[str, Any]:
        """Return the payload of a valid *access* token or raise :class:`Unauthenticated`."""
        return self._decode(token, self._access_secret, ACCESS_TOKEN_TYPE)

    def decode_refresh(self, token: str) -> dict[str, Any]:
        """Return the payload of a valid *refresh* token or raise :class:`Unauthenticated`."""
        return self._decode(token, self._refresh_secret, REFRESH_TOKEN_TYPE)

    def _decode(self, token: str, secret: str, expected_type: str) -> dict[str, Any]:
        try:
            payload = jwt.decode(token, secret, algorithms=[self._algorithm])
        except JWTError as exc:
            raise Unauthenticated("Invalid or expired token") from exc
        if payload.get("type") != expected_type or not payload.get("sub"):
            raise Unauthenticated("Invalid token payload")
        return payload
