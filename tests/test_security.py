"""Tests for access/refresh token issuing and verification."""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from catalog.core.security import (
    ExpiredTokenError,
    InvalidTokenError,
    TokenService,
)

ACCESS_SECRET = "access-secret"
REFRESH_SECRET = "refresh-secret"


def _service(clock=None) -> TokenService:
    kwargs = {"clock": clock} if clock else {}
    return TokenService(ACCESS_SECRET, REFRESH_SECRET, **kwargs)


def test_issue_and_verify_round_trip():
    tokens = _service()
    pair = tokens.issue("admin_user", "admin")

    access = tokens.verify_access(pair.access_token)
    refresh = tokens.verify_refresh(pair.refresh_token)

    assert access.subject == "admin_user"
    assert access.role == "admin"
    assert access.kind == "access"
    assert access.is_admin
    assert refresh.subject == "admin_user"
    assert refresh.kind == "refresh"


def test_token_lifetimes():
    now = datetime.now(timezone.utc).replace(microsecond=0)
    tokens = _service(clock=lambda: now)
    pair = tokens.issue("admin_user", "admin")

    access = tokens.verify_access(pair.access_token)
    refresh = tokens.verify_refresh(pair.refresh_token)

    assert access.issued_at == now
    assert access.expires_at - access.issued_at == timedelta(minutes=15)
    assert refresh.expires_at - refresh.issued_at == timedelta(days=7)


def test_access_token_rejected_as_refresh_and_vice_versa():
    tokens = _service()
    pair = tokens.issue("admin_user", "admin")

    with pytest.raises(InvalidTokenError):
        tokens.verify_refresh(pair.access_token)
    with pytest.raises(InvalidTokenError):
        tokens.verify_access(pair.refresh_token)


def test_expired_access_token():
    issued = datetime.now(timezone.utc) - timedelta(hours=1)
    pair = _service(clock=lambda: issued).issue("admin_user", "admin")

    with pytest.raises(ExpiredTokenError):
        _service().verify_access(pair.access_token)


def test_expired_by_verifier_clock_skew():
    """A verifier whose clock is past `exp` rejects the token."""
    pair = _service().issue("admin_user", "admin")
    future = datetime.now(timezone.utc) + timedelta(minutes=16)

    with pytest.raises(ExpiredTokenError):
        _service(clock=lambda: future).verify_access(pair.access_token)

    # refresh token is still inside its 7-day window
    assert _service(clock=lambda: future).verify_refresh(pair.refresh_token).subject == "admin_user"


def test_tampered_payload_is_invalid():
    tokens = _service()
    pair = tokens.issue("customer-1", "user")
    header, payload, signature = pair.access_token.split(".")

    forged = jwt.encode(
        {"sub": "customer-1", "role": "admin", "type": "access", "exp": 9999999999},
        "attacker-secret",
    )
    forged_payload = forged.split(".")[1]

    with pytest.raises(InvalidTokenError):
        tokens.verify_access(f"{header}.{forged_payload}.{signature}")


def test_garbage_token_is_invalid():
    with pytest.raises(InvalidTokenError):
        _service().verify_access("not-a-jwt")


def test_missing_role_claim_is_invalid():
    token = jwt.encode(
        {"sub": "x", "type": "access", "exp": int(datetime.now(timezone.utc).timestamp()) + 60},
        ACCESS_SECRET,
    )
    with pytest.raises(InvalidTokenError):
        _service().verify_access(token)


def test_identical_secrets_rejected():
    with pytest.raises(ValueError):
        TokenService("same", "same")
