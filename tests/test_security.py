"""Unit tests for tasktrack.core.security: bcrypt hashing and JWT issue/verify."""

import unittest
from datetime import UTC, datetime, timedelta

import jwt
from jwt.utils import base64url_decode, base64url_encode
from pydantic import SecretStr

from tasktrack.core.config import Settings
from tasktrack.core.results import Failure, Ok
from tasktrack.core.security import (
    TOKEN_EXPIRED,
    TOKEN_MALFORMED,
    CredentialInputError,
    dummy_verify,
    hash_password,
    issue_token,
    verify_password,
    verify_token,
)


def _settings(**overrides: object) -> Settings:
    values = {
        "DATABASE_URL": "sqlite://",
        "JWT_SECRET": SecretStr("unit-test-secret-0123456789abcdef0123"),
        "JWT_EXPIRE_MINUTES": 60,
    }
    values.update(overrides)
    return Settings(**values)


def _flip_signature_byte(token: str, index: int) -> str:
    header, payload, signature = token.split(".")
    raw = bytearray(base64url_decode(signature.encode("ascii")))
    raw[index] ^= 0x01
    return ".".join([header, payload, base64url_encode(bytes(raw)).decode("ascii")])


class TestPasswordHashing(unittest.TestCase):
    """hash_password never stores plaintext; verify_password accepts only the original."""

    def test_hash_differs_from_plaintext(self) -> None:
        digest = hash_password("Str0ng!Pass", rounds=4)
        self.assertNotEqual(digest, "Str0ng!Pass")
        self.assertTrue(digest.startswith("$2"))

    def test_verify_accepts_original(self) -> None:
        digest = hash_password("Str0ng!Pass", rounds=4)
        self.assertTrue(verify_password("Str0ng!Pass", digest))

    def test_verify_rejects_other_strings(self) -> None:
        digest = hash_password("Str0ng!Pass", rounds=4)
        for other in ("", "str0ng!pass", "Str0ng!Pass ", "Str0ng!Pas", "x" * 80):
            self.assertFalse(verify_password(other, digest), other)

    def test_salted(self) -> None:
        self.assertNotEqual(hash_password("Str0ng!Pass", rounds=4), hash_password("Str0ng!Pass", rounds=4))

    def test_malformed_digest_returns_false(self) -> None:
        self.assertFalse(verify_password("Str0ng!Pass", "not-a-bcrypt-hash"))

    def test_non_string_input_raises(self) -> None:
        with self.assertRaises(CredentialInputError):
            hash_password(12345678)  # type: ignore[arg-type]
        digest = hash_password("Str0ng!Pass", rounds=4)
        with self.assertRaises(CredentialInputError):
            verify_password(None, digest)  # type: ignore[arg-type]

    def test_dummy_verify_is_false(self) -> None:
        self.assertFalse(dummy_verify("anything"))


class TestTokenRoundTrip(unittest.TestCase):
    """verify_token(issue_token(s, r)) returns {s, r} within the lifetime."""

    def test_claims_round_trip(self) -> None:
        settings = _settings()
        token = issue_token(42, "admin", settings=settings)
        result = verify_token(token, settings=settings)
        self.assertIsInstance(result, Ok)
        self.assertEqual(result.value.subject, "42")
        self.assertEqual(result.value.role, "admin")

    def test_expiry_uses_configured_lifetime(self) -> None:
        settings = _settings(JWT_EXPIRE_MINUTES=90)
        issued = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
        token = issue_token(1, "user", settings=settings, now=issued)
        result = verify_token(token, settings=settings, now=issued + timedelta(minutes=89))
        self.assertIsInstance(result, Ok)
        self.assertEqual(result.value.issued_at, issued)
        self.assertEqual(result.value.expires_at, issued + timedelta(minutes=90))

    def test_default_lifetime_is_seven_days(self) -> None:
        settings = Settings(DATABASE_URL="sqlite://")
        self.assertEqual(settings.JWT_EXPIRE_MINUTES, 7 * 24 * 60)

    def test_payload_carries_sub_role_iat_exp(self) -> None:
        settings = _settings()
        token = issue_token(7, "user", settings=settings)
        payload = jwt.decode(token, options={"verify_signature": False})
        self.assertEqual(set(payload), {"sub", "role", "iat", "exp"})
        self.assertEqual(payload["sub"], "7")


class TestTokenFailures(unittest.TestCase):
    """Expired tokens and tampered or foreign tokens fail with distinct reasons."""

    def test_expired_after_lifetime(self) -> None:
        settings = _settings(JWT_EXPIRE_MINUTES=60)
        issued = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
        token = issue_token(1, "user", settings=settings, now=issued)
        result = verify_token(token, settings=settings, now=issued + timedelta(minutes=61))
        self.assertIsInstance(result, Failure)
        self.assertEqual(result.kind, "unauthenticated")
        self.assertEqual(result.reason, TOKEN_EXPIRED)

    def test_altered_signature_byte_is_malformed(self) -> None:
        settings = _settings()
        token = issue_token(1, "user", settings=settings)
        for index in (0, 7, 15, 31):
            result = verify_token(_flip_signature_byte(token, index), settings=settings)
            self.assertIsInstance(result, Failure, index)
            self.assertEqual(result.reason, TOKEN_MALFORMED)

    def test_wrong_secret_is_malformed(self) -> None:
        token = issue_token(1, "user", settings=_settings())
        other = _settings(JWT_SECRET=SecretStr("another-secret-0123456789abcdef0123"))
        result = verify_token(token, settings=other)
        self.assertEqual(result.reason, TOKEN_MALFORMED)

    def test_garbage_is_malformed(self) -> None:
        settings = _settings()
        for token in ("", "abc", "a.b.c", "Bearer x.y.z"):
            result = verify_token(token, settings=settings)
            self.assertIsInstance(result, Failure)
            self.assertEqual(result.reason, TOKEN_MALFORMED)

    def test_missing_role_claim_is_malformed(self) -> None:
        settings = _settings()
        now = int(datetime.now(UTC).timestamp())
        token = jwt.encode(
            {"sub": "1", "iat": now, "exp": now + 60},
            settings.JWT_SECRET.get_secret_value(),
            algorithm="HS256",
        )
        self.assertEqual(verify_token(token, settings=settings).reason, TOKEN_MALFORMED)

    def test_unsigned_token_is_malformed(self) -> None:
        settings = _settings()
        now = int(datetime.now(UTC).timestamp())
        token = jwt.encode(
            {"sub": "1", "role": "admin", "iat": now, "exp": now + 60},
            None,
            algorithm="none",
        )
        self.assertEqual(verify_token(token, settings=settings).reason, TOKEN_MALFORMED)


class TestSettingsValidation(unittest.TestCase):
    def test_rejects_asymmetric_algorithm(self) -> None:
        with self.assertRaises(ValueError):
            _settings(JWT_ALGORITHM="RS256")

    def test_prod_requires_non_default_secret(self) -> None:
        with self.assertRaises(ValueError):
            Settings(DATABASE_URL="sqlite://", APP_ENV="prod", JWT_SECRET=SecretStr("change-me-in-production"))


if __name__ == "__main__":
    unittest.main()
