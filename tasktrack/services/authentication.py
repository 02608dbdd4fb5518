"""Authentication guard: resolve an Authorization header to a live user record."""

from datetime import datetime

from tasktrack.core.config import Settings
from tasktrack.core.results import STORE_FAILURE, UNAUTHENTICATED, Failure, Ok, Result, fail
from tasktrack.core.security import TOKEN_MALFORMED, verify_token
from tasktrack.schemas.auth import CurrentUser
from tasktrack.services.store import StoreError, TaskStore

BEARER_SCHEME = "bearer"

MISSING_TOKEN = "MissingToken"
SUBJECT_GONE = "SubjectGone"


def _extract_bearer(raw_header: str | None) -> str | None:
    """Return the token from 'Bearer <token>', or None if absent or another scheme."""
    if not raw_header:
        return None
    scheme, _, token = raw_header.strip().partition(" ")
    if scheme.lower() != BEARER_SCHEME:
        return None
    token = token.strip()
    return token or None


def authenticate(
    raw_header: str | None,
    store: TaskStore,
    settings: Settings | None = None,
    now: datetime | None = None,
) -> Result[CurrentUser]:
    """
    Verify the bearer token, then confirm its subject still exists.

    Failure reasons: MissingToken, Malformed, Expired, SubjectGone. The user
    record is read from the store on every call so role changes apply on the
    next request.
    """
    token = _extract_bearer(raw_header)
    if token is None:
        return fail(
            UNAUTHENTICATED,
            "No token provided. Please authenticate.",
            reason=MISSING_TOKEN,
        )

    verified = verify_token(token, settings=settings, now=now)
    if isinstance(verified, Failure):
        return verified
    claims = verified.value

    try:
        user_id = int(claims.subject)
    except ValueError:
        return fail(UNAUTHENTICATED, "Invalid token", reason=TOKEN_MALFORMED)

    try:
        user = store.find_user_by_id(user_id)
    except StoreError as e:
        return fail(STORE_FAILURE, e.message)
    if user is None:
        return fail(UNAUTHENTICATED, "User no longer exists", reason=SUBJECT_GONE)

    return Ok(CurrentUser.model_validate(user))
