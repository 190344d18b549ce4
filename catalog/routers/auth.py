# catalog/routers/auth.py
import logging

from fastapi import APIRouter, Depends, Request

from catalog.core.auth import require_admin, require_auth
from catalog.core.security import TokenClaims
from catalog.schemas.auth import (
    AuthUser,
    AuthUserResponse,
    LoginRequest,
    RefreshRequest,
    TokenResponse,
)
from catalog.schemas.common import MessageResponse
from catalog.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])

logger = logging.getLogger(__name__)


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth


def _user_from_claims(claims: TokenClaims) -> AuthUser:
    return AuthUser(id=claims.subject, role=claims.role)


@router.post("/login", response_model=TokenResponse)
def login(
    payload: LoginRequest,
    auth: AuthService = Depends(get_auth_service),
):
    """
    Admin login.

    Wrong username and wrong password produce the same 401 response.
    """
    pair = auth.login(payload.username, payload.password)
    return TokenResponse(
        message="Login successful",
        access_token=pair.access_token,
        refresh_token=pair.refresh_token,
        user=AuthUser(id=auth.admin_subject_id, username=payload.username, role="admin"),
    )


@router.post("/refresh", response_model=TokenResponse)
def refresh(
    payload: RefreshRequest,
    auth: AuthService = Depends(get_auth_service),
):
    """
    Exchange a valid refresh token for a new access + refresh pair.
    """
    pair, claims = auth.refresh(payload.refresh_token)
    return TokenResponse(
        access_token=pair.access_token,
        refresh_token=pair.refresh_token,
        user=_user_from_claims(claims),
    )


@router.post("/logout", response_model=MessageResponse)
def logout(claims: TokenClaims = Depends(require_auth)):
    """
    Stateless logout: tokens are discarded client-side and expire on their own.
    """
    logger.info("User %s logged out", claims.subject)
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=AuthUserResponse)
def read_me(claims: TokenClaims = Depends(require_auth)):
    """Return the identity carried by the access token."""
    return AuthUserResponse(user=_user_from_claims(claims))


@router.get("/verify", response_model=AuthUserResponse)
def verify(claims: TokenClaims = Depends(require_auth)):
    """Confirm the access token is valid."""
    return AuthUserResponse(message="Token is valid", user=_user_from_claims(claims))


@router.get("/admin/check", response_model=AuthUserResponse)
def admin_check(claims: TokenClaims = Depends(require_admin)):
    """Confirm the caller has admin privileges."""
    return AuthUserResponse(message="Admin access confirmed", user=_user_from_claims(claims))
