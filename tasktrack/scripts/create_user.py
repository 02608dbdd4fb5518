"""
Create a user (the only way to create an admin). Run from project root:
  python -m tasktrack.scripts.create_user USERNAME EMAIL PASSWORD [role]
Example:
  python -m tasktrack.scripts.create_user admin admin@example.com 'Str0ng!Pass' admin
"""
import argparse
import sys

from tasktrack.core.database import SessionLocal
from tasktrack.core.results import Failure
from tasktrack.core.security import hash_password
from tasktrack.schemas.auth import ROLE_VALUES
from tasktrack.services.store import StoreConflictError, TaskStore
from tasktrack.services.validation import validate_registration


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a task-tracking user.")
    parser.add_argument("username", help="Username (3-50 chars)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help="Password (8+ chars, upper, lower, digit, symbol)")
    parser.add_argument("role", nargs="?", default="user", choices=sorted(ROLE_VALUES))
    args = parser.parse_args(argv)

    validated = validate_registration(
        {"username": args.username, "email": args.email, "password": args.password}
    )
    if isinstance(validated, Failure):
        for message in validated.messages:
            print(message, file=sys.stderr)
        return 1
    data = validated.value

    db = SessionLocal()
    try:
        store = TaskStore(db)
        if store.find_user_by_email_or_username(email=data.email, username=data.username):
            print(f"User '{data.username}' or '{data.email}' already exists.", file=sys.stderr)
            return 1
        try:
            store.insert_user(
                username=data.username,
                email=data.email,
                password_hash=hash_password(data.password),
                role=args.role,
            )
        except StoreConflictError:
            print(f"User '{data.username}' or '{data.email}' already exists.", file=sys.stderr)
            return 1
        print(f"Created user '{data.username}' with role '{args.role}'.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
