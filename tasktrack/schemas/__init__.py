"""Pydantic request/response schemas."""

from tasktrack.schemas.auth import (
    ROLE_ADMIN,
    ROLE_USER,
    ROLE_VALUES,
    CurrentUser,
    LoginInput,
    RegistrationInput,
    Role,
    TokenClaims,
    UserOut,
)
from tasktrack.schemas.health import HealthResponse
from tasktrack.schemas.task import (
    PRIORITY_VALUES,
    STATUS_VALUES,
    TaskCreate,
    TaskFilter,
    TaskOut,
    TaskPage,
    TaskPriority,
    TaskQuery,
    TaskStats,
    TaskStatus,
    TaskUpdate,
)

__all__ = [
    "CurrentUser",
    "HealthResponse",
    "LoginInput",
    "PRIORITY_VALUES",
    "ROLE_ADMIN",
    "ROLE_USER",
    "ROLE_VALUES",
    "RegistrationInput",
    "Role",
    "STATUS_VALUES",
    "TaskCreate",
    "TaskFilter",
    "TaskOut",
    "TaskPage",
    "TaskPriority",
    "TaskQuery",
    "TaskStats",
    "TaskStatus",
    "TaskUpdate",
    "TokenClaims",
    "UserOut",
]
