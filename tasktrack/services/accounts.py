"""Account operations: registration and password login, each returning the user plus a bearer token."""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from tasktrack.core.config import Settings, get_settings
from tasktrack.core.results import CONFLICT, UNAUTHENTICATED, Failure, Ok, Result, fail
from tasktrack.core.security import dummy_verify, hash_password, issue_token, verify_password
from tasktrack.schemas.auth import ROLE_USER, CurrentUser, UserOut
from tasktrack.services.authentication import SUBJECT_GONE
from tasktrack.services.store import StoreConflictError, TaskStore, store_failures
from tasktrack.services.validation import validate_login, validate_registration

CONFLICT_MESSAGE = "User with this email or username already exists"
INVALID_CREDENTIALS = "Invalid email or password"


class AuthResult(BaseModel):
    """A user record and a freshly issued token for it."""

    user: UserOut
    token: str


@store_failures
def register(
    store: TaskStore,
    raw: Mapping[str, Any],
    settings: Settings | None = None,
) -> Result[AuthResult]:
    """
    Validate, reject duplicates, hash the password, insert, and issue a token.

    New accounts always get the 'user' role; admins are created out of band
    (see tasktrack.scripts.create_user).
    """
    settings = settings or get_settings()
    validated = validate_registration(raw)
    if isinstance(validated, Failure):
        return validated
    data = validated.value

    if store.find_user_by_email_or_username(email=data.email, username=data.username):
        return fail(CONFLICT, CONFLICT_MESSAGE)

    password_hash = hash_password(data.password, rounds=settings.BCRYPT_ROUNDS)
    try:
        user = store.insert_user(
            username=data.username,
            email=data.email,
            password_hash=password_hash,
            role=ROLE_USER,
        )
    except StoreConflictError:
        return fail(CONFLICT, CONFLICT_MESSAGE)

    token = issue_token(user.id, user.role, settings=settings)
    return Ok(AuthResult(user=UserOut.model_validate(user), token=token))


@store_failures
def login(
    store: TaskStore,
    raw: Mapping[str, Any],
    settings: Settings | None = None,
) -> Result[AuthResult]:
    """Check email and password; unknown email and wrong password fail identically."""
    settings = settings or get_settings()
    validated = validate_login(raw)
    if isinstance(validated, Failure):
        return validated
    data = validated.value

    user = store.find_user_by_email_or_username(email=data.email)
    if user is None:
        dummy_verify(data.password)
        return fail(UNAUTHENTICATED, INVALID_CREDENTIALS)
    if not verify_password(data.password, user.password_hash):
        return fail(UNAUTHENTICATED, INVALID_CREDENTIALS)

    token = issue_token(user.id, user.role, settings=settings)
    return Ok(AuthResult(user=UserOut.model_validate(user), token=token))


@store_failures
def get_profile(store: TaskStore, identity: CurrentUser) -> Result[UserOut]:
    """Current stored record for an authenticated identity."""
    user = store.find_user_by_id(identity.id)
    if user is None:
        return fail(UNAUTHENTICATED, "User no longer exists", reason=SUBJECT_GONE)
    return Ok(UserOut.model_validate(user))
