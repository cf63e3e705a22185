"""Outward view of a User — never carries password or refresh hashes."""

from __future__ import annotations

from pydantic import BaseModel

from adminauth.models.user import Role


class UserSummary(BaseModel):
    id: str
    email: str
    name: str
    role: Role

    model_config = {"from_attributes": True}
