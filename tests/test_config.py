"""Startup configuration must fail fast on bad secrets or lifetimes."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from adminauth.core.config import Settings, parse_duration
from adminauth.core.security import PASSWORD_MAX_LENGTH

GOOD = {
    "JWT_ACCESS_SECRET": "a" * 32,
    "JWT_REFRESH_SECRET": "b" * 32,
}


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **{**GOOD, **overrides})


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("30s", timedelta(seconds=30)),
        ("15m", timedelta(minutes=15)),
        ("1h", timedelta(hours=1)),
        ("7d", timedelta(days=7)),
        ("3600", timedelta(seconds=3600)),
    ],
)
def test_parse_duration(raw: str, expected: timedelta):
    assert parse_duration(raw) == expected


def test_parse_duration_rejects_garbage():
    with pytest.raises(ValueError):
        parse_duration("soon")


def test_expirations_accept_short_forms():
    s = _settings(JWT_ACCESS_EXPIRATION="10m", JWT_REFRESH_EXPIRATION="2d")
    assert s.JWT_ACCESS_EXPIRATION == timedelta(minutes=10)
    assert s.JWT_REFRESH_EXPIRATION == timedelta(days=2)


def test_missing_secret_fails(monkeypatch):
    monkeypatch.delenv("JWT_REFRESH_SECRET", raising=False)
    with pytest.raises(ValidationError):
        Settings(_env_file=None, JWT_ACCESS_SECRET="a" * 32)


def test_short_secret_fails():
    with pytest.raises(ValidationError):
        _settings(JWT_ACCESS_SECRET="too-short")


def test_identical_secrets_fail():
    with pytest.raises(ValidationError):
        _settings(JWT_REFRESH_SECRET="a" * 32)


def test_access_must_expire_before_refresh():
    with pytest.raises(ValidationError):
        _settings(JWT_ACCESS_EXPIRATION="7d", JWT_REFRESH_EXPIRATION="1h")


def test_sync_database_url_rejected():
    with pytest.raises(ValidationError):
        _settings(DATABASE_URL="postgresql://u:p@localhost/db")


def test_cors_origins_comma_separated():
    s = _settings(CORS_ORIGINS="http://a.test, http://b.test")
    assert s.CORS_ORIGINS == ["http://a.test", "http://b.test"]


def test_first_admin_password_within_login_limit():
    s = _settings(FIRST_ADMIN_PASSWORD="P" * PASSWORD_MAX_LENGTH)
    assert len(s.FIRST_ADMIN_PASSWORD.get_secret_value()) == PASSWORD_MAX_LENGTH


def test_first_admin_password_over_login_limit_fails():
    with pytest.raises(ValidationError):
        _settings(FIRST_ADMIN_PASSWORD="P" * (PASSWORD_MAX_LENGTH + 1))
