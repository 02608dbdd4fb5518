"""Task endpoints: create, list, stats, read, update and delete with ownership checks."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from tasktrack.api.deps import get_store, unwrap
from tasktrack.api.v1.auth import get_current_user
from tasktrack.schemas.auth import CurrentUser
from tasktrack.schemas.task import (
    MessageResponse,
    StatsData,
    StatsResponse,
    TaskCreateRequest,
    TaskData,
    TaskListResponse,
    TaskResponse,
    TaskUpdateRequest,
)
from tasktrack.services import tasks as task_service
from tasktrack.services.store import TaskStore
from tasktrack.services.validation import (
    validate_task_create,
    validate_task_query,
    validate_task_update,
)

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("", response_model=TaskResponse, status_code=201)
def create_task(
    body: TaskCreateRequest,
    store: Annotated[TaskStore, Depends(get_store)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> TaskResponse:
    """Create a task owned by the caller. Status starts as pending; priority defaults to medium."""
    data = unwrap(validate_task_create(body.model_dump()))
    task = unwrap(task_service.create_task(store, current_user, data))
    logger.info("Task created: %s by user %s", task.id, current_user.id)
    return TaskResponse(message="Task created successfully", data=TaskData(task=task))


@router.get("", response_model=TaskListResponse)
def list_tasks(
    store: Annotated[TaskStore, Depends(get_store)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    task_status: Annotated[str | None, Query(alias="status")] = None,
    priority: Annotated[str | None, Query()] = None,
    page: Annotated[str | None, Query()] = None,
    limit: Annotated[str | None, Query()] = None,
) -> TaskListResponse:
    """
    List tasks newest first. Admins see every task; other users see only their own.

    Optional exact-match filters: status, priority. Pagination: page (>= 1,
    default 1) and limit (1-100, default 10).
    """
    query = unwrap(
        validate_task_query(
            {"status": task_status, "priority": priority, "page": page, "limit": limit}
        )
    )
    result = unwrap(task_service.list_tasks(store, current_user, query))
    return TaskListResponse(data=result)


@router.get("/stats", response_model=StatsResponse)
def get_stats(
    store: Annotated[TaskStore, Depends(get_store)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> StatsResponse:
    """Task counts by status and number of distinct owners (admin only)."""
    stats = unwrap(task_service.task_stats(store, current_user))
    return StatsResponse(data=StatsData(stats=stats))


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(
    task_id: int,
    store: Annotated[TaskStore, Depends(get_store)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> TaskResponse:
    task = unwrap(task_service.get_task(store, current_user, task_id))
    return TaskResponse(data=TaskData(task=task))


@router.api_route("/{task_id}", methods=["PUT", "PATCH"], response_model=TaskResponse)
def update_task(
    task_id: int,
    body: TaskUpdateRequest,
    store: Annotated[TaskStore, Depends(get_store)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> TaskResponse:
    """Update any of title, description, status, priority. Only supplied fields change."""
    data = unwrap(validate_task_update(body.model_dump(exclude_unset=True)))
    task = unwrap(task_service.update_task(store, current_user, task_id, data))
    logger.info("Task updated: %s by user %s", task_id, current_user.id)
    return TaskResponse(message="Task updated successfully", data=TaskData(task=task))


@router.delete("/{task_id}", response_model=MessageResponse)
def delete_task(
    task_id: int,
    store: Annotated[TaskStore, Depends(get_store)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> MessageResponse:
    unwrap(task_service.delete_task(store, current_user, task_id))
    logger.info("Task deleted: %s by user %s", task_id, current_user.id)
    return MessageResponse(message="Task deleted successfully")
