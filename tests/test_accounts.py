"""Tests for tasktrack.services.accounts: registration, login, and profile lookup."""

from unittest.mock import MagicMock, patch

from tasktrack.core.results import Failure, Ok
from tasktrack.core.security import verify_password, verify_token
from tasktrack.models import User
from tasktrack.services import accounts
from tasktrack.services.store import StoreConflictError
from tests.support import STRONG_PASSWORD, StoreTestCase

ALICE = {"username": "alice", "email": "a@b.com", "password": STRONG_PASSWORD}


class TestRegister(StoreTestCase):
    def test_creates_user_and_token(self) -> None:
        result = accounts.register(self.store, ALICE)
        self.assertIsInstance(result, Ok)
        user = result.value.user
        self.assertEqual((user.username, user.email, user.role), ("alice", "a@b.com", "user"))
        claims = verify_token(result.value.token).value
        self.assertEqual(claims.subject, str(user.id))

    def test_stores_hash_not_plaintext(self) -> None:
        accounts.register(self.store, ALICE)
        stored = self.session.query(User).filter_by(username="alice").one()
        self.assertNotEqual(stored.password_hash, STRONG_PASSWORD)
        self.assertTrue(verify_password(STRONG_PASSWORD, stored.password_hash))

    def test_role_in_input_is_ignored(self) -> None:
        result = accounts.register(self.store, {**ALICE, "role": "admin"})
        self.assertEqual(result.value.user.role, "user")

    def test_duplicate_email_or_username_conflicts(self) -> None:
        accounts.register(self.store, ALICE)
        same_email = accounts.register(self.store, {**ALICE, "username": "alice2", "email": "A@B.com"})
        same_username = accounts.register(self.store, {**ALICE, "email": "other@b.com"})
        for result in (same_email, same_username):
            self.assertIsInstance(result, Failure)
            self.assertEqual(result.kind, "conflict")

    def test_insert_race_maps_to_conflict(self) -> None:
        store = MagicMock()
        store.find_user_by_email_or_username.return_value = None
        store.insert_user.side_effect = StoreConflictError("Failed to insert user")
        result = accounts.register(store, ALICE)
        self.assertEqual(result.kind, "conflict")

    def test_invalid_input_never_reaches_store(self) -> None:
        store = MagicMock()
        result = accounts.register(store, {**ALICE, "password": "weak"})
        self.assertEqual(result.kind, "validation")
        store.find_user_by_email_or_username.assert_not_called()
        store.insert_user.assert_not_called()


class TestLogin(StoreTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.user = accounts.register(self.store, ALICE).value.user

    def test_valid_credentials(self) -> None:
        result = accounts.login(self.store, {"email": " A@B.COM ", "password": STRONG_PASSWORD})
        self.assertIsInstance(result, Ok)
        self.assertEqual(result.value.user.id, self.user.id)
        self.assertEqual(verify_token(result.value.token).value.subject, str(self.user.id))

    def test_wrong_password(self) -> None:
        result = accounts.login(self.store, {"email": "a@b.com", "password": "Wr0ng!Pass"})
        self.assertEqual(result.kind, "unauthenticated")
        self.assertEqual(result.message, accounts.INVALID_CREDENTIALS)

    def test_unknown_email_runs_dummy_verify(self) -> None:
        with patch("tasktrack.services.accounts.dummy_verify") as dummy:
            result = accounts.login(self.store, {"email": "nobody@b.com", "password": STRONG_PASSWORD})
        dummy.assert_called_once_with(STRONG_PASSWORD)
        self.assertEqual(result.kind, "unauthenticated")
        self.assertEqual(result.message, accounts.INVALID_CREDENTIALS)

    def test_missing_fields(self) -> None:
        result = accounts.login(self.store, {})
        self.assertEqual(result.kind, "validation")
        self.assertEqual(len(result.messages), 2)


class TestProfile(StoreTestCase):
    def test_returns_stored_record(self) -> None:
        user = self.make_user("carol")
        result = accounts.get_profile(self.store, self.identity(user))
        self.assertEqual(result.value.username, "carol")
        self.assertIsNotNone(result.value.created_at)
