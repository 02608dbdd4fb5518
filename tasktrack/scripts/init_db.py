"""
Create tables (for SQLite or a fresh dev database) and optionally seed demo data.

  python -m tasktrack.scripts.init_db          # create tables only
  python -m tasktrack.scripts.init_db --seed   # plus admin, sample user and tasks

Use Alembic (alembic upgrade head) for PostgreSQL deployments. Seeding is
idempotent: existing users are left untouched and tasks are only added for a
newly created admin.
"""

import argparse
import logging
import sys

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from tasktrack.core.database import SessionLocal, engine
from tasktrack.core.security import hash_password
from tasktrack.models import Base
from tasktrack.services.store import TaskStore

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

DEMO_ADMIN = {"username": "admin", "email": "admin@example.com", "password": "Admin@123456", "role": "admin"}
DEMO_USER = {"username": "testuser", "email": "user@example.com", "password": "User@123456", "role": "user"}

SAMPLE_TASKS = [
    {
        "title": "Complete project documentation",
        "description": "Write comprehensive documentation for the API",
        "priority": "high",
        "status": "in_progress",
    },
    {
        "title": "Review pull requests",
        "description": "Review and merge pending pull requests",
        "priority": "medium",
        "status": "pending",
    },
    {
        "title": "Setup CI/CD pipeline",
        "description": "Configure automated testing",
        "priority": "high",
        "status": "completed",
    },
]


def create_tables(bind: Engine) -> None:
    Base.metadata.create_all(bind=bind)


def seed(session: Session) -> dict[str, int]:
    """Insert demo accounts and sample tasks. Returns counts of rows created."""
    store = TaskStore(session)
    created = {"users": 0, "tasks": 0}
    for account in (DEMO_ADMIN, DEMO_USER):
        existing = store.find_user_by_email_or_username(email=account["email"])
        if existing is not None:
            logger.info("User %s already exists; skipping.", account["email"])
            continue
        user = store.insert_user(
            username=account["username"],
            email=account["email"],
            password_hash=hash_password(account["password"]),
            role=account["role"],
        )
        created["users"] += 1
        if account["role"] == "admin":
            for task in SAMPLE_TASKS:
                store.insert_task(owner_id=user.id, **task)
                created["tasks"] += 1
    return created


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create tables and optionally seed demo data.")
    parser.add_argument("--seed", action="store_true", help="Insert demo admin, user and tasks")
    args = parser.parse_args(argv)

    create_tables(engine)
    logger.info("Database schema created")
    if not args.seed:
        return 0

    db = SessionLocal()
    try:
        created = seed(db)
        logger.info("Seed completed: users=%s tasks=%s", created["users"], created["tasks"])
        logger.warning("Demo credentials are public; change them outside local development.")
        return 0
    except Exception as e:
        logger.exception("Seeding failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
