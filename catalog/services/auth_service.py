# catalog/services/auth_service.py
import hmac
import logging

from catalog.core.config import Settings
from catalog.core.errors import InvalidCredentials, MissingToken, Unauthorized
from catalog.core.security import TokenClaims, TokenError, TokenPair, TokenService

logger = logging.getLogger(__name__)


class AuthService:
    """
    Admin login and token rotation.

    Responsibilities:
      - check the configured admin credential pair
      - mint token pairs via TokenService
      - rotate a pair from a valid refresh token
    """

    def __init__(self, tokens: TokenService, settings: Settings):
        self.tokens = tokens
        self.admin_username = settings.ADMIN_USERNAME
        self.admin_password = settings.ADMIN_PASSWORD
        self.admin_subject_id = settings.ADMIN_SUBJECT_ID

    def _credentials_match(self, username: str, password: str) -> bool:
        # Compare both fields every time so timing does not reveal which one failed.
        user_ok = hmac.compare_digest(username.encode(), self.admin_username.encode())
        pass_ok = hmac.compare_digest(password.encode(), self.admin_password.encode())
        return user_ok and pass_ok

    def login(self, username: str, password: str) -> TokenPair:
        """
        Issue an admin token pair.

        Raises:
            InvalidCredentials (401): same error whether the username or
            the password was wrong.
        """
        if not self._credentials_match(username, password):
            logger.warning("Failed admin login attempt for username: %s", username)
            raise InvalidCredentials()

        logger.info("Admin login successful")
        return self.tokens.issue(self.admin_subject_id, "admin")

    def refresh(self, refresh_token: str | None) -> tuple[TokenPair, TokenClaims]:
        """
        Verify a refresh token and mint a new pair for the same subject/role.

        The old tokens stay valid until they expire.
        """
        if not refresh_token:
            raise MissingToken("Refresh token required")

        try:
            claims = self.tokens.verify_refresh(refresh_token)
        except TokenError as exc:
            logger.warning("Refresh token verification failed: %s", exc)
            raise Unauthorized("Invalid refresh token")

        return self.tokens.issue(claims.subject, claims.role), claims
