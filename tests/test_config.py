"""Tests for settings parsing and the database handle lifecycle."""

import pytest
from pydantic import ValidationError
from sqlalchemy.exc import OperationalError

from catalog.core.config import Settings
from catalog.database import Database, _with_sslmode


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


def test_defaults():
    s = _settings()
    assert s.API_PREFIX == "/api"
    assert s.ACCESS_TOKEN_EXPIRE_MINUTES == 15
    assert s.REFRESH_TOKEN_EXPIRE_DAYS == 7


def test_cors_origins_comma_separated():
    s = _settings(CORS_ORIGINS="https://a.com, http://localhost:3000")
    assert s.cors_origin_list == ["https://a.com", "http://localhost:3000"]


def test_cors_origins_json_array():
    s = _settings(CORS_ORIGINS='["https://a.com","https://b.com"]')
    assert s.cors_origin_list == ["https://a.com", "https://b.com"]


def test_identical_jwt_secrets_rejected():
    with pytest.raises(ValidationError):
        _settings(JWT_SECRET="same", JWT_REFRESH_SECRET="same")


def test_sslmode_appended_once():
    assert _with_sslmode("postgresql://u:p@h/db") == "postgresql://u:p@h/db?sslmode=require"
    assert _with_sslmode("postgresql://h/db?x=1") == "postgresql://h/db?x=1&sslmode=require"
    assert _with_sslmode("postgresql://h/db?sslmode=disable") == "postgresql://h/db?sslmode=disable"


def test_engine_requires_connect():
    db = Database("sqlite://")
    with pytest.raises(RuntimeError):
        db.engine


def test_connect_and_disconnect():
    db = Database("sqlite://")
    db.connect()
    with db.session() as session:
        assert session.bind is db.engine
    db.disconnect()
    with pytest.raises(RuntimeError):
        db.engine


def test_connect_gives_up_after_retries(tmp_path):
    missing = tmp_path / "no-such-dir" / "catalog.db"
    db = Database(f"sqlite:///{missing}", connect_retries=2, retry_delay=0)

    with pytest.raises(OperationalError):
        db.connect()
