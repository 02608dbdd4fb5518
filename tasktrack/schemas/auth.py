"""Request/response schemas and normalized inputs for auth endpoints."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

Role = Literal["user", "admin"]

ROLE_VALUES: frozenset[str] = frozenset({"user", "admin"})
ROLE_USER: Role = "user"
ROLE_ADMIN: Role = "admin"


class RegisterRequest(BaseModel):
    """Registration body. Constraints are enforced by the validation pipeline, not here."""

    model_config = {"extra": "ignore"}

    username: str | None = Field(default=None, description="Username (3-50 characters)")
    email: str | None = Field(default=None, description="Email address")
    password: str | None = Field(
        default=None,
        description="Password: 8+ characters with upper, lower, digit and symbol",
    )


class LoginRequest(BaseModel):
    """Credentials for login."""

    model_config = {"extra": "ignore"}

    email: str | None = Field(default=None, description="Email address")
    password: str | None = Field(default=None, description="Password")


class RegistrationInput(BaseModel):
    """Registration data after sanitizing and validation (email lowercased)."""

    username: str
    email: str
    password: str


class LoginInput(BaseModel):
    """Login data after sanitizing and validation (email lowercased)."""

    email: str
    password: str


class TokenClaims(BaseModel):
    """Decoded bearer token claim set."""

    subject: str
    role: str
    issued_at: datetime
    expires_at: datetime


class CurrentUser(BaseModel):
    """Authenticated user (id, username, email, role) for dependency injection."""

    id: int
    username: str
    email: str
    role: Role

    model_config = {"from_attributes": True}


class UserOut(BaseModel):
    """Public user representation (no password hash)."""

    id: int
    username: str
    email: str
    role: Role
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class AuthData(BaseModel):
    user: UserOut
    token: str = Field(..., description="JWT bearer token")


class AuthResponse(BaseModel):
    """Response for register and login: the user plus a bearer token."""

    status: Literal["success"] = "success"
    message: str
    data: AuthData


class ProfileData(BaseModel):
    user: UserOut


class ProfileResponse(BaseModel):
    """Response for GET /auth/profile."""

    status: Literal["success"] = "success"
    data: ProfileData
