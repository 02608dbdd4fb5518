"""
Explicit outcome types for core operations.

Core functions return ``Ok(value)`` or ``Failure(kind, messages, reason)``
instead of raising; the HTTP layer maps each kind to a status code.
"""

from dataclasses import dataclass
from typing import Generic, Literal, TypeVar, Union

T = TypeVar("T")

FailureKind = Literal[
    "validation",
    "conflict",
    "unauthenticated",
    "forbidden",
    "not_found",
    "store_failure",
]

VALIDATION: FailureKind = "validation"
CONFLICT: FailureKind = "conflict"
UNAUTHENTICATED: FailureKind = "unauthenticated"
FORBIDDEN: FailureKind = "forbidden"
NOT_FOUND: FailureKind = "not_found"
STORE_FAILURE: FailureKind = "store_failure"


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying a value."""

    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """
    Failed outcome: a kind, one or more human-readable messages, and an
    optional machine-readable reason (e.g. "Expired", "NotOwner").
    """

    kind: FailureKind
    messages: tuple[str, ...]
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return ", ".join(self.messages)


Result = Union[Ok[T], Failure]


def fail(kind: FailureKind, *messages: str, reason: str | None = None) -> Failure:
    """Build a Failure from one or more messages."""
    return Failure(kind=kind, messages=tuple(messages), reason=reason)
