"""Password hashing and JWT issuance/verification for bearer authentication."""

from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any

import bcrypt
import jwt

from tasktrack.core.config import Settings, get_settings
from tasktrack.core.results import UNAUTHENTICATED, Failure, Ok, Result, fail
from tasktrack.schemas.auth import TokenClaims

# bcrypt only reads the first 72 bytes of its input.
BCRYPT_MAX_BYTES = 72

TOKEN_MALFORMED = "Malformed"
TOKEN_EXPIRED = "Expired"

_REQUIRED_CLAIMS = ["sub", "role", "exp", "iat"]


class CredentialInputError(TypeError):
    """Raised when a password or digest is not a string."""


def _password_bytes(plain_password: Any) -> bytes:
    if not isinstance(plain_password, str):
        raise CredentialInputError("password must be a string")
    return plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    if rounds is None:
        rounds = get_settings().BCRYPT_ROUNDS
    pw_bytes = _password_bytes(plain_password)
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash (constant-time compare in bcrypt)."""
    pw_bytes = _password_bytes(plain_password)
    if not isinstance(hashed, str):
        raise CredentialInputError("password hash must be a string")
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


@lru_cache
def _dummy_hash() -> str:
    return hash_password("tasktrack-timing-dummy")


def dummy_verify(plain_password: str) -> bool:
    """
    Run a full bcrypt check against a throwaway hash and return False.

    Called when a login names an unknown account so the response takes as long
    as a wrong-password response.
    """
    verify_password(plain_password, _dummy_hash())
    return False


def issue_token(
    subject: str | int,
    role: str,
    settings: Settings | None = None,
    now: datetime | None = None,
) -> str:
    """Create a signed JWT carrying sub (user id), role, iat and exp."""
    settings = settings or get_settings()
    issued_at = now or datetime.now(UTC)
    expires_at = issued_at + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "sub": str(subject),
        "role": role,
        "iat": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    return jwt.encode(
        payload,
        settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )


def verify_token(
    token: str,
    settings: Settings | None = None,
    now: datetime | None = None,
) -> Result[TokenClaims]:
    """
    Verify signature and structure, then expiry, without touching the database.

    Returns Ok(TokenClaims) or Failure(unauthenticated) with reason "Malformed"
    (cannot be parsed or verified) or "Expired" (now is past exp).
    """
    settings = settings or get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET.get_secret_value(),
            algorithms=[settings.JWT_ALGORITHM],
            # Expiry is compared against `now` below so callers can pin the clock.
            options={"require": _REQUIRED_CLAIMS, "verify_exp": False, "verify_iat": False},
        )
    except jwt.PyJWTError:
        return _malformed()

    sub = payload.get("sub")
    role = payload.get("role")
    exp = payload.get("exp")
    iat = payload.get("iat")
    if not isinstance(sub, str) or not sub or not isinstance(role, str) or not role:
        return _malformed()
    if not isinstance(exp, (int, float)) or not isinstance(iat, (int, float)):
        return _malformed()

    current = now or datetime.now(UTC)
    if current.timestamp() > exp:
        return fail(UNAUTHENTICATED, "Token expired. Please login again.", reason=TOKEN_EXPIRED)

    return Ok(
        TokenClaims(
            subject=sub,
            role=role,
            issued_at=datetime.fromtimestamp(iat, UTC),
            expires_at=datetime.fromtimestamp(exp, UTC),
        )
    )


def _malformed() -> Failure:
    return fail(UNAUTHENTICATED, "Invalid token", reason=TOKEN_MALFORMED)
