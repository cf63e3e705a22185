"""Pydantic schemas for the auth endpoints (camelCase on the wire)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from adminauth.core.security import PASSWORD_MAX_LENGTH
from adminauth.schemas.user import UserSummary


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LENGTH)

    model_config = ConfigDict(extra="forbid")

    @field_validator("email")
    @classmethod
    def _normalise_email(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("Invalid email address")
        return v


class Tokens(BaseModel):
    access_token: str
    refresh_token: str

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LoginResponse(BaseModel):
    user: UserSummary
    tokens: Tokens


class LogoutResponse(BaseModel):
    message: str
