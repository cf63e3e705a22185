"""Startup creates tables and seeds the first admin when configured."""

from fastapi.testclient import TestClient
from pydantic import SecretStr
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from adminauth.core.config import settings
from adminauth.main import create_app


def test_startup_seeds_first_admin(monkeypatch):
    monkeypatch.setattr(settings, "FIRST_ADMIN_EMAIL", "boot@x.com")
    monkeypatch.setattr(settings, "FIRST_ADMIN_PASSWORD", SecretStr("Boot@123"))

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    app = create_app(engine)

    with TestClient(app) as client:
        resp = client.post("/auth/admin/login", json={"email": "boot@x.com", "password": "Boot@123"})
        assert resp.status_code == 200
        assert resp.json()["user"]["role"] == "admin"

        health = client.get("/health")
        assert health.json()["db"] is True
