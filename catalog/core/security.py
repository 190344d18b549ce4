# catalog/core/security.py
"""
Signed access/refresh tokens (JWT, HS256 by default).

Each token carries:
  - sub:  subject identifier (e.g. "admin_user")
  - role: "admin" | "user"
  - type: "access" | "refresh"
  - iat / exp: issue and expiry time (unix seconds)

Access and refresh tokens are signed with different secrets, so a token
of one kind never verifies as the other. There is no revocation list;
expiry is the only bound on a token's lifetime.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Literal

from jose import ExpiredSignatureError, JWTError, jwt

from catalog.core.config import Settings

TokenKind = Literal["access", "refresh"]


class TokenError(Exception):
    """Base class for token verification failures."""


class InvalidTokenError(TokenError):
    """Bad signature, malformed token, wrong token kind or missing claims."""


class ExpiredTokenError(TokenError):
    """Signature is valid but `exp` is in the past."""


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class TokenClaims:
    subject: str
    role: str
    kind: TokenKind
    issued_at: datetime
    expires_at: datetime

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """
    Issues and verifies access/refresh tokens.

    `clock` is injectable so callers (tests) can mint tokens as of an
    arbitrary instant, e.g. to produce already-expired tokens.
    """

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        algorithm: str = "HS256",
        access_ttl: timedelta = timedelta(minutes=15),
        refresh_ttl: timedelta = timedelta(days=7),
        clock: Callable[[], datetime] = _utcnow,
    ):
        if access_secret == refresh_secret:
            raise ValueError("access and refresh secrets must differ")
        self._secrets: dict[str, str] = {
            "access": access_secret,
            "refresh": refresh_secret,
        }
        self._ttls: dict[str, timedelta] = {
            "access": access_ttl,
            "refresh": refresh_ttl,
        }
        self.algorithm = algorithm
        self.clock = clock

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            access_secret=settings.JWT_SECRET,
            refresh_secret=settings.JWT_REFRESH_SECRET,
            algorithm=settings.JWT_ALG,
            access_ttl=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
            refresh_ttl=timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        )

    # ----- Issuing -----

    def _encode(self, subject_id: str, role: str, kind: TokenKind) -> str:
        now = self.clock()
        claims: dict[str, Any] = {
            "sub": subject_id,
            "role": role,
            "type": kind,
            "iat": int(now.timestamp()),
            "exp": int((now + self._ttls[kind]).timestamp()),
        }
        return jwt.encode(claims, self._secrets[kind], algorithm=self.algorithm)

    def issue(self, subject_id: str, role: str) -> TokenPair:
        """Mint a fresh access + refresh pair for the given subject."""
        return TokenPair(
            access_token=self._encode(subject_id, role, "access"),
            refresh_token=self._encode(subject_id, role, "refresh"),
        )

    # ----- Verification -----

    def _decode(self, token: str, kind: TokenKind) -> TokenClaims:
        try:
            payload = jwt.decode(
                token,
                self._secrets[kind],
                algorithms=[self.algorithm],
                options={"verify_aud": False},
            )
        except ExpiredSignatureError as exc:
            raise ExpiredTokenError("Token has expired") from exc
        except JWTError as exc:
            raise InvalidTokenError(str(exc)) from exc

        # jose compares `exp` against the wall clock; re-check against ours.
        expires_at = datetime.fromtimestamp(int(payload.get("exp", 0)), timezone.utc)
        if expires_at <= self.clock():
            raise ExpiredTokenError("Token has expired")

        if payload.get("type") != kind:
            raise InvalidTokenError(f"Expected a {kind} token")

        sub = payload.get("sub")
        role = payload.get("role")
        if not sub or not role:
            raise InvalidTokenError("Token missing sub/role")

        return TokenClaims(
            subject=str(sub),
            role=str(role),
            kind=kind,
            issued_at=datetime.fromtimestamp(int(payload.get("iat", 0)), timezone.utc),
            expires_at=expires_at,
        )

    def verify_access(self, token: str) -> TokenClaims:
        return self._decode(token, "access")

    def verify_refresh(self, token: str) -> TokenClaims:
        return self._decode(token, "refresh")
