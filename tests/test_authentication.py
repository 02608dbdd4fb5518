"""Unit tests for tasktrack.services.authentication: header parsing, token failures, and subject lookup."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

from tasktrack.core.security import TOKEN_EXPIRED, TOKEN_MALFORMED, issue_token
from tasktrack.core.results import Failure, Ok
from tasktrack.services.authentication import MISSING_TOKEN, SUBJECT_GONE, authenticate
from tasktrack.services.store import StoreError
from tests.support import StoreTestCase


class TestHeaderParsing(unittest.TestCase):
    """Absent or non-Bearer headers fail before the store is consulted."""

    def test_missing_header(self) -> None:
        store = MagicMock()
        for header in (None, "", "   "):
            result = authenticate(header, store)
            self.assertIsInstance(result, Failure)
            self.assertEqual(result.kind, "unauthenticated")
            self.assertEqual(result.reason, MISSING_TOKEN)
        store.find_user_by_id.assert_not_called()

    def test_other_scheme(self) -> None:
        store = MagicMock()
        token = issue_token(1, "user")
        self.assertEqual(authenticate(f"Basic {token}", store).reason, MISSING_TOKEN)
        self.assertEqual(authenticate("Bearer", store).reason, MISSING_TOKEN)
        store.find_user_by_id.assert_not_called()

    def test_malformed_token_skips_store(self) -> None:
        store = MagicMock()
        result = authenticate("Bearer not.a.token", store)
        self.assertEqual(result.reason, TOKEN_MALFORMED)
        store.find_user_by_id.assert_not_called()

    def test_expired_token_is_distinct_from_malformed(self) -> None:
        store = MagicMock()
        token = issue_token(1, "user", now=datetime.now(UTC) - timedelta(days=8))
        result = authenticate(f"Bearer {token}", store)
        self.assertEqual(result.kind, "unauthenticated")
        self.assertEqual(result.reason, TOKEN_EXPIRED)
        store.find_user_by_id.assert_not_called()

    def test_non_integer_subject_is_malformed(self) -> None:
        store = MagicMock()
        token = issue_token("alice", "user")
        self.assertEqual(authenticate(f"Bearer {token}", store).reason, TOKEN_MALFORMED)

    def test_store_error_is_store_failure(self) -> None:
        store = MagicMock()
        store.find_user_by_id.side_effect = StoreError("Failed to look up user")
        result = authenticate(f"Bearer {issue_token(1, 'user')}", store)
        self.assertEqual(result.kind, "store_failure")


class TestSubjectResolution(StoreTestCase):
    """A valid token resolves to the current user record, read fresh from the store."""

    def test_resolves_current_user(self) -> None:
        user = self.make_user("alice")
        result = authenticate(f"Bearer {issue_token(user.id, user.role)}", self.store)
        self.assertIsInstance(result, Ok)
        self.assertEqual(result.value.id, user.id)
        self.assertEqual(result.value.email, "alice@example.com")
        self.assertEqual(result.value.role, "user")

    def test_scheme_is_case_insensitive(self) -> None:
        user = self.make_user("alice")
        result = authenticate(f"bearer {issue_token(user.id, user.role)}", self.store)
        self.assertIsInstance(result, Ok)

    def test_deleted_user_is_subject_gone(self) -> None:
        user = self.make_user("alice")
        token = issue_token(user.id, user.role)
        self.session.delete(user)
        self.session.commit()
        result = authenticate(f"Bearer {token}", self.store)
        self.assertEqual(result.kind, "unauthenticated")
        self.assertEqual(result.reason, SUBJECT_GONE)

    def test_role_change_applies_without_new_token(self) -> None:
        user = self.make_user("alice")
        token = issue_token(user.id, "user")
        user.role = "admin"
        self.session.commit()
        result = authenticate(f"Bearer {token}", self.store)
        self.assertEqual(result.value.role, "admin")


if __name__ == "__main__":
    unittest.main()
