"""Registration, login and profile endpoints, plus the get_current_user dependency."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Header, status

from tasktrack.api.deps import get_store, unwrap
from tasktrack.core.config import Settings, get_settings
from tasktrack.schemas.auth import (
    AuthData,
    AuthResponse,
    CurrentUser,
    LoginRequest,
    ProfileData,
    ProfileResponse,
    RegisterRequest,
)
from tasktrack.services import accounts
from tasktrack.services.authentication import authenticate
from tasktrack.services.store import TaskStore

logger = logging.getLogger(__name__)
router = APIRouter()


def get_current_user(
    store: Annotated[TaskStore, Depends(get_store)],
    settings: Annotated[Settings, Depends(get_settings)],
    authorization: Annotated[str | None, Header()] = None,
) -> CurrentUser:
    """Dependency: require a valid Bearer JWT whose subject still exists. Raises 401 otherwise."""
    return unwrap(authenticate(authorization, store, settings=settings))


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    store: Annotated[TaskStore, Depends(get_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthResponse:
    """
    Create a user account (role 'user') and return it with a bearer token.

    Password must be at least 8 characters and contain uppercase, lowercase,
    a digit and a symbol. Returns 409 if the email or username is taken.
    """
    result = unwrap(accounts.register(store, body.model_dump(), settings=settings))
    logger.info("User registered: %s", result.user.email)
    return AuthResponse(
        message="User registered successfully",
        data=AuthData(user=result.user, token=result.token),
    )


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    store: Annotated[TaskStore, Depends(get_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthResponse:
    """
    Authenticate with email and password; returns the user and a JWT.
    Include the token in the Authorization header as: Bearer <token>
    """
    result = unwrap(accounts.login(store, body.model_dump(), settings=settings))
    logger.info("User logged in: %s", result.user.email)
    return AuthResponse(
        message="Login successful",
        data=AuthData(user=result.user, token=result.token),
    )


@router.get("/profile", response_model=ProfileResponse)
def profile(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    store: Annotated[TaskStore, Depends(get_store)],
) -> ProfileResponse:
    """Return the authenticated user's profile."""
    user = unwrap(accounts.get_profile(store, current_user))
    return ProfileResponse(data=ProfileData(user=user))
