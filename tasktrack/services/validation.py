"""
Input validation pipeline: pure functions that sanitize, check, and normalize raw input.

Every validator collects all violations before failing, so one response lists
every problem. Sanitizing only strips angle brackets and surrounding
whitespace; it is not an HTML sanitizer.
"""

import re
from collections.abc import Mapping
from typing import Any

from tasktrack.core.results import VALIDATION, Ok, Result, fail
from tasktrack.schemas.auth import LoginInput, RegistrationInput
from tasktrack.schemas.task import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    DEFAULT_PRIORITY,
    DESCRIPTION_MAX_LEN,
    MAX_LIMIT,
    PRIORITY_VALUES,
    STATUS_VALUES,
    TITLE_MAX_LEN,
    TaskCreate,
    TaskQuery,
    TaskUpdate,
)

USERNAME_MIN_LEN = 3
USERNAME_MAX_LEN = 50
PASSWORD_MIN_LEN = 8

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PASSWORD_SYMBOLS = frozenset('!@#$%^&*(),.?":{}|<>')

_ANGLE_BRACKETS = re.compile(r"[<>]")
_UPPER = re.compile(r"[A-Z]")
_LOWER = re.compile(r"[a-z]")
_DIGIT = re.compile(r"[0-9]")

STATUS_MESSAGE = f"Status must be one of: {', '.join(STATUS_VALUES)}"
PRIORITY_MESSAGE = f"Priority must be one of: {', '.join(PRIORITY_VALUES)}"


def sanitize_string(value: Any) -> Any:
    """Strip '<' and '>' and surrounding whitespace from strings; pass anything else through."""
    if not isinstance(value, str):
        return value
    return _ANGLE_BRACKETS.sub("", value).strip()


def _is_blank(value: Any) -> bool:
    return value is None or value == ""


def _password_violations(password: Any) -> list[str]:
    if _is_blank(password):
        return ["Password is required"]
    if not isinstance(password, str):
        return ["Password must be a string"]
    errors: list[str] = []
    if len(password) < PASSWORD_MIN_LEN:
        errors.append(f"Password must be at least {PASSWORD_MIN_LEN} characters long")
    # Complexity is checked regardless of length.
    has_upper = _UPPER.search(password) is not None
    has_lower = _LOWER.search(password) is not None
    has_digit = _DIGIT.search(password) is not None
    has_symbol = any(c in PASSWORD_SYMBOLS for c in password)
    if not (has_upper and has_lower and has_digit and has_symbol):
        errors.append("Password must contain uppercase, lowercase, number, and special character")
    return errors


def validate_registration(raw: Mapping[str, Any]) -> Result[RegistrationInput]:
    """Validate username, email and password; lowercases the email."""
    username = sanitize_string(raw.get("username"))
    email = sanitize_string(raw.get("email"))
    password = raw.get("password")
    errors: list[str] = []

    if username is not None and not isinstance(username, str):
        errors.append("Username must be a string")
    elif not username or len(username) < USERNAME_MIN_LEN:
        errors.append(f"Username must be at least {USERNAME_MIN_LEN} characters long")
    elif len(username) > USERNAME_MAX_LEN:
        errors.append(f"Username must not exceed {USERNAME_MAX_LEN} characters")

    if _is_blank(email):
        errors.append("Email is required")
    elif not isinstance(email, str) or not EMAIL_PATTERN.match(email):
        errors.append("Please provide a valid email address")

    errors.extend(_password_violations(password))

    if errors:
        return fail(VALIDATION, *errors)
    return Ok(RegistrationInput(username=username, email=email.lower(), password=password))


def validate_login(raw: Mapping[str, Any]) -> Result[LoginInput]:
    """Require a non-empty email and password; lowercases the email."""
    email = sanitize_string(raw.get("email"))
    password = raw.get("password")
    errors: list[str] = []

    if _is_blank(email):
        errors.append("Email is required")
    elif not isinstance(email, str):
        errors.append("Email must be a string")

    if _is_blank(password):
        errors.append("Password is required")
    elif not isinstance(password, str):
        errors.append("Password must be a string")

    if errors:
        return fail(VALIDATION, *errors)
    return Ok(LoginInput(email=email.lower(), password=password))


def _title_violations(title: Any) -> list[str]:
    if not isinstance(title, str):
        return ["Title must be a string"]
    if not title:
        return ["Task title is required"]
    if len(title) > TITLE_MAX_LEN:
        return [f"Title must not exceed {TITLE_MAX_LEN} characters"]
    return []


def _description_violations(description: Any) -> list[str]:
    if description is None:
        return []
    if not isinstance(description, str):
        return ["Description must be a string"]
    if len(description) > DESCRIPTION_MAX_LEN:
        return [f"Description must not exceed {DESCRIPTION_MAX_LEN} characters"]
    return []


def validate_task_create(raw: Mapping[str, Any]) -> Result[TaskCreate]:
    """Title is required; description and priority are optional (priority defaults to medium)."""
    title = sanitize_string(raw.get("title"))
    description = sanitize_string(raw.get("description"))
    priority = raw.get("priority")
    errors: list[str] = []

    if _is_blank(title):
        errors.append("Task title is required")
    else:
        errors.extend(_title_violations(title))
    errors.extend(_description_violations(description))
    if not _is_blank(priority) and priority not in PRIORITY_VALUES:
        errors.append(PRIORITY_MESSAGE)

    if errors:
        return fail(VALIDATION, *errors)
    return Ok(
        TaskCreate(
            title=title,
            description=description or None,
            priority=priority or DEFAULT_PRIORITY,
        )
    )


def validate_task_update(raw: Mapping[str, Any]) -> Result[TaskUpdate]:
    """
    Validate a partial update. Only keys present in `raw` are checked and
    returned; a present title must be 1-200 characters after sanitizing.
    """
    fields: dict[str, Any] = {}
    errors: list[str] = []

    if "title" in raw:
        title = sanitize_string(raw["title"])
        if title is None:
            errors.append("Task title cannot be empty")
        else:
            errors.extend(_title_violations(title))
        fields["title"] = title

    if "description" in raw:
        description = sanitize_string(raw["description"])
        errors.extend(_description_violations(description))
        fields["description"] = description or None

    if "status" in raw:
        status = raw["status"]
        if status not in STATUS_VALUES:
            errors.append(STATUS_MESSAGE)
        fields["status"] = status

    if "priority" in raw:
        priority = raw["priority"]
        if priority not in PRIORITY_VALUES:
            errors.append(PRIORITY_MESSAGE)
        fields["priority"] = priority

    if errors:
        return fail(VALIDATION, *errors)
    return Ok(TaskUpdate(**fields))


def _parse_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def validate_task_query(raw: Mapping[str, Any]) -> Result[TaskQuery]:
    """Parse page (>= 1), limit (1-100) and exact-match status/priority filters."""
    errors: list[str] = []
    page = DEFAULT_PAGE
    limit = DEFAULT_LIMIT

    raw_page = raw.get("page")
    if not _is_blank(raw_page):
        parsed = _parse_int(raw_page)
        if parsed is None or parsed < 1:
            errors.append("Page must be a positive number")
        else:
            page = parsed

    raw_limit = raw.get("limit")
    if not _is_blank(raw_limit):
        parsed = _parse_int(raw_limit)
        if parsed is None or parsed < 1 or parsed > MAX_LIMIT:
            errors.append(f"Limit must be between 1 and {MAX_LIMIT}")
        else:
            limit = parsed

    status = raw.get("status")
    if not _is_blank(status) and status not in STATUS_VALUES:
        errors.append(STATUS_MESSAGE)

    priority = raw.get("priority")
    if not _is_blank(priority) and priority not in PRIORITY_VALUES:
        errors.append(PRIORITY_MESSAGE)

    if errors:
        return fail(VALIDATION, *errors)
    return Ok(
        TaskQuery(
            status=status or None,
            priority=priority or None,
            page=page,
            limit=limit,
        )
    )
