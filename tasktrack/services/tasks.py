"""
Task access service: CRUD, listing and stats with the authorization policy applied.

Every function takes the store handle and the resolved identity explicitly and
returns Ok(...) or a Failure; nothing here raises for expected outcomes.
"""

import math

from tasktrack.core.results import NOT_FOUND, Ok, Result, fail
from tasktrack.models import Task
from tasktrack.schemas.auth import ROLE_ADMIN, CurrentUser
from tasktrack.schemas.task import (
    DEFAULT_STATUS,
    Pagination,
    TaskCreate,
    TaskFilter,
    TaskOut,
    TaskPage,
    TaskQuery,
    TaskStats,
    TaskUpdate,
)
from tasktrack.services.policy import Action, Deny, authorize, to_failure
from tasktrack.services.store import TaskStore, store_failures

TASK_NOT_FOUND = "Task not found"


def _load_owned(
    store: TaskStore,
    identity: CurrentUser,
    task_id: int,
    action: Action,
) -> Result[Task]:
    """Load a task and apply the ownership gate; missing → not_found, denied → forbidden."""
    task = store.find_task_by_id(task_id)
    if task is None:
        return fail(NOT_FOUND, TASK_NOT_FOUND)
    decision = authorize(identity, action, resource_owner_id=task.user_id)
    if isinstance(decision, Deny):
        return to_failure(decision, action)
    return Ok(task)


@store_failures
def create_task(store: TaskStore, identity: CurrentUser, data: TaskCreate) -> Result[TaskOut]:
    """Create a task owned by the acting identity; new tasks start as pending."""
    task = store.insert_task(
        title=data.title,
        description=data.description,
        priority=data.priority,
        status=DEFAULT_STATUS,
        owner_id=identity.id,
    )
    return Ok(TaskOut.model_validate(task))


@store_failures
def get_task(store: TaskStore, identity: CurrentUser, task_id: int) -> Result[TaskOut]:
    loaded = _load_owned(store, identity, task_id, "read")
    if not loaded.ok:
        return loaded
    return Ok(TaskOut.model_validate(loaded.value))


@store_failures
def update_task(
    store: TaskStore,
    identity: CurrentUser,
    task_id: int,
    data: TaskUpdate,
) -> Result[TaskOut]:
    loaded = _load_owned(store, identity, task_id, "update")
    if not loaded.ok:
        return loaded
    task = store.update_task(loaded.value, data.changes())
    return Ok(TaskOut.model_validate(task))


@store_failures
def delete_task(store: TaskStore, identity: CurrentUser, task_id: int) -> Result[int]:
    """Delete a task; returns the deleted id."""
    loaded = _load_owned(store, identity, task_id, "delete")
    if not loaded.ok:
        return loaded
    store.delete_task(loaded.value)
    return Ok(task_id)


def build_filter(identity: CurrentUser, query: TaskQuery) -> TaskFilter:
    """
    Row predicates for a listing. Non-admins are scoped to their own tasks by
    the filter itself; admins get no owner predicate.
    """
    owner_id = None if identity.role == ROLE_ADMIN else identity.id
    return TaskFilter(owner_id=owner_id, status=query.status, priority=query.priority)


@store_failures
def list_tasks(store: TaskStore, identity: CurrentUser, query: TaskQuery) -> Result[TaskPage]:
    """One page of visible tasks (newest first) plus totals over the same filter."""
    task_filter = build_filter(identity, query)
    rows = store.list_tasks(task_filter, limit=query.limit, offset=query.offset)
    total = store.count_tasks(task_filter)
    return Ok(
        TaskPage(
            tasks=[TaskOut.model_validate(row) for row in rows],
            pagination=Pagination(
                current_page=query.page,
                total_pages=math.ceil(total / query.limit),
                total_tasks=total,
                limit=query.limit,
            ),
        )
    )


@store_failures
def task_stats(store: TaskStore, identity: CurrentUser) -> Result[TaskStats]:
    """Counts by status and distinct owners; admin only."""
    decision = authorize(identity, "stats", required_role=ROLE_ADMIN)
    if isinstance(decision, Deny):
        return to_failure(decision, "stats")
    return Ok(store.aggregate_task_stats())
