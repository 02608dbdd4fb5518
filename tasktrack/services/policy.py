"""
Authorization policy: a role gate and an ownership gate over an identity.

Both gates are pure predicates; they take no store and no request, so they can
be checked in isolation. Denials carry distinct reasons even though the HTTP
layer reports both as 403.
"""

from dataclasses import dataclass
from typing import Literal, Union

from tasktrack.core.results import FORBIDDEN, Failure, fail
from tasktrack.schemas.auth import ROLE_ADMIN, CurrentUser

Action = Literal["create", "read", "update", "delete", "list", "stats"]

DenyReason = Literal["InsufficientRole", "NotOwner"]

INSUFFICIENT_ROLE: DenyReason = "InsufficientRole"
NOT_OWNER: DenyReason = "NotOwner"

_DENY_MESSAGES: dict[str, str] = {
    INSUFFICIENT_ROLE: "You do not have permission to perform this action",
    NOT_OWNER: "You are not authorized to access this task",
}


@dataclass(frozen=True)
class Allow:
    allowed: Literal[True] = True


@dataclass(frozen=True)
class Deny:
    reason: DenyReason
    allowed: Literal[False] = False


Decision = Union[Allow, Deny]

ALLOW = Allow()


def role_gate(identity: CurrentUser, required_role: str) -> Decision:
    """Allow only when the identity holds exactly the required role."""
    if identity.role == required_role:
        return ALLOW
    return Deny(INSUFFICIENT_ROLE)


def ownership_gate(identity: CurrentUser, owner_id: int) -> Decision:
    """Admins may act on any resource; everyone else only on resources they own."""
    if identity.role == ROLE_ADMIN:
        return ALLOW
    if identity.id == owner_id:
        return ALLOW
    return Deny(NOT_OWNER)


def authorize(
    identity: CurrentUser,
    action: Action,
    resource_owner_id: int | None = None,
    required_role: str | None = None,
) -> Decision:
    """
    Apply whichever gates the operation declares; both must pass.

    The role gate runs when `required_role` is given, the ownership gate when
    `resource_owner_id` is given. `action` does not change the outcome; it
    names the operation being decided.
    """
    if required_role is not None:
        decision = role_gate(identity, required_role)
        if isinstance(decision, Deny):
            return decision
    if resource_owner_id is not None:
        decision = ownership_gate(identity, resource_owner_id)
        if isinstance(decision, Deny):
            return decision
    return ALLOW


def to_failure(decision: Deny, action: Action | None = None) -> Failure:
    """Convert a denial into a forbidden Failure carrying the deny reason."""
    message = _DENY_MESSAGES[decision.reason]
    if decision.reason == NOT_OWNER and action in ("update", "delete"):
        message = f"You are not authorized to {action} this task"
    return fail(FORBIDDEN, message, reason=decision.reason)
