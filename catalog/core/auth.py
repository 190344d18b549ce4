# catalog/core/auth.py
import logging

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from catalog.core.errors import Forbidden, MissingToken, Unauthorized
from catalog.core.security import TokenClaims, TokenError, TokenService

logger = logging.getLogger(__name__)

# HTTP Bearer scheme:
# - auto_error=False => a missing Authorization header does NOT raise the
#   framework's own 403, so we can answer with our 401 envelope instead.
bearer_scheme = HTTPBearer(auto_error=False)


def get_token_service(request: Request) -> TokenService:
    """FastAPI dependency returning the app's TokenService."""
    return request.app.state.tokens


def require_auth(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
) -> TokenClaims:
    """
    Enforce authentication.

    Flow:
      1. No bearer token => 401 (MissingToken).
      2. Verify signature + expiry with the access secret.
      3. Invalid or expired => 403 (Unauthorized).

    Returns:
        The verified access-token claims.
    """
    if credentials is None or not credentials.credentials:
        raise MissingToken()

    try:
        return tokens.verify_access(credentials.credentials)
    except TokenError as exc:
        logger.warning("Token verification failed: %s", exc)
        raise Unauthorized()


def require_admin(claims: TokenClaims = Depends(require_auth)) -> TokenClaims:
    """
    Enforce admin role on top of require_auth.

    Raises:
        Forbidden (403): if the token's role is not "admin".
    """
    if not claims.is_admin:
        raise Forbidden()
    return claims
