"""Shared test bases: an in-memory SQLite store per test and a TestClient wired to it."""

import unittest

from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from tasktrack.core.config import get_settings
from tasktrack.core.database import build_engine, get_db
from tasktrack.core.security import hash_password, issue_token
from tasktrack.main import app
from tasktrack.models import Base, User
from tasktrack.schemas.auth import CurrentUser
from tasktrack.services.store import TaskStore

STRONG_PASSWORD = "Str0ng!Pass"
API = get_settings().API_V1_PREFIX


class StoreTestCase(unittest.TestCase):
    """Fresh in-memory database and TaskStore for every test."""

    def setUp(self) -> None:
        self.engine = build_engine("sqlite://")
        Base.metadata.create_all(bind=self.engine)
        self.Session = sessionmaker(bind=self.engine, autoflush=False)
        self.session = self.Session()
        self.store = TaskStore(self.session)

    def tearDown(self) -> None:
        self.session.close()
        Base.metadata.drop_all(bind=self.engine)
        self.engine.dispose()

    def make_user(
        self,
        username: str,
        role: str = "user",
        password: str = STRONG_PASSWORD,
        email: str | None = None,
    ) -> User:
        return self.store.insert_user(
            username=username,
            email=email or f"{username}@example.com",
            password_hash=hash_password(password),
            role=role,
        )

    def identity(self, user: User) -> CurrentUser:
        return CurrentUser.model_validate(user)


class ApiTestCase(StoreTestCase):
    """StoreTestCase plus a TestClient whose get_db yields sessions on the test database."""

    def setUp(self) -> None:
        super().setUp()

        def override_get_db():
            db = self.Session()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        self.client.close()
        super().tearDown()

    def auth_headers(self, user: User | None = None, token: str | None = None) -> dict[str, str]:
        if token is None:
            token = issue_token(user.id, user.role)
        return {"Authorization": f"Bearer {token}"}

    def register(self, username: str, email: str | None = None, password: str = STRONG_PASSWORD):
        return self.client.post(
            f"{API}/auth/register",
            json={
                "username": username,
                "email": email or f"{username}@example.com",
                "password": password,
            },
        )

    def create_task(self, user: User, title: str = "Write docs", **fields):
        return self.client.post(
            f"{API}/tasks",
            json={"title": title, **fields},
            headers=self.auth_headers(user),
        )
