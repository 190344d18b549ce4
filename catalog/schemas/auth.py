# catalog/schemas/auth.py
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

# App-level roles carried in token claims.
Role = Literal["user", "admin"]


class LoginRequest(BaseModel):
    """
    Admin login payload.

    Both fields are required strings with no length rules, so a short or
    malformed credential is answered with the same 401 as a wrong one.
    """

    username: str
    password: str


class RefreshRequest(BaseModel):
    """
    Refresh payload. The token is optional at the schema level so a
    missing token yields 401 rather than a validation error.
    """

    model_config = ConfigDict(populate_by_name=True)

    refresh_token: str | None = Field(default=None, alias="refreshToken")


class AuthUser(BaseModel):
    id: str
    role: Role
    username: str | None = None


class TokenResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str | None = None
    access_token: str = Field(alias="accessToken")
    refresh_token: str = Field(alias="refreshToken")
    user: AuthUser | None = None


class AuthUserResponse(BaseModel):
    success: bool = True
    message: str | None = None
    user: AuthUser
