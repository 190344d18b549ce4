# catalog/core/config.py
import json
from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Env vars (.env):
      - DATABASE_URL (defaults to a local SQLite file)
      - JWT_SECRET / JWT_REFRESH_SECRET (must differ)
      - ADMIN_USERNAME / ADMIN_PASSWORD (admin login credential pair)

    Optional:
      - CORS_ORIGINS (JSON array or comma-separated list)
      - DB_CONNECT_RETRIES / DB_CONNECT_RETRY_DELAY (startup retries)
    """

    PROJECT_NAME: str = "JB's Tire & Auto Catalog API"
    API_PREFIX: str = "/api"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./catalog.db"
    DB_REQUIRE_SSL: bool = False
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_CONNECT_RETRIES: int = 5
    DB_CONNECT_RETRY_DELAY: float = 2.0

    # JWT signing
    JWT_SECRET: str = "change-me-access-secret"
    JWT_REFRESH_SECRET: str = "change-me-refresh-secret"
    JWT_ALG: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    # Admin credential pair (single admin account)
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = "change-me-admin"
    ADMIN_SUBJECT_ID: str = "admin_user"

    # JSON array or comma-separated list
    CORS_ORIGINS: str = "http://localhost:3000"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def cors_origin_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS, which may be either a JSON array string
        ('["https://a.com","http://localhost:3000"]') or a comma-separated
        string ("https://a.com,http://localhost:3000").
        """
        s = self.CORS_ORIGINS.strip()
        if not s:
            return []
        if s.startswith("["):
            try:
                parsed = json.loads(s)
            except json.JSONDecodeError:
                # Fall back to comma split if env var isn't valid JSON.
                parsed = s.strip("[]").split(",")
            if isinstance(parsed, list):
                return [str(x).strip() for x in parsed if str(x).strip()]
            return [str(parsed).strip()]
        return [part.strip() for part in s.split(",") if part.strip()]

    @model_validator(mode="after")
    def secrets_must_differ(self) -> "Settings":
        # Shared secrets would let a refresh token pass as an access token.
        if self.JWT_SECRET == self.JWT_REFRESH_SECRET:
            raise ValueError("JWT_SECRET and JWT_REFRESH_SECRET must differ")
        return self


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
