"""Pydantic schemas for tasks: request bodies, normalized inputs, filters, and responses."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

TaskStatus = Literal["pending", "in_progress", "completed"]
TaskPriority = Literal["low", "medium", "high"]

# Ordered tuples so error messages list values in a stable order.
STATUS_VALUES: tuple[str, ...] = ("pending", "in_progress", "completed")
PRIORITY_VALUES: tuple[str, ...] = ("low", "medium", "high")

DEFAULT_STATUS: TaskStatus = "pending"
DEFAULT_PRIORITY: TaskPriority = "medium"

TITLE_MAX_LEN = 200
DESCRIPTION_MAX_LEN = 2000

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


class TaskCreateRequest(BaseModel):
    """Body for POST /tasks. Constraints are enforced by the validation pipeline."""

    model_config = {"extra": "ignore"}

    title: str | None = Field(default=None, description="Task title (1-200 characters)")
    description: str | None = Field(default=None, description="Optional description (up to 2000 characters)")
    priority: str | None = Field(default=None, description="low, medium or high (default medium)")


class TaskUpdateRequest(BaseModel):
    """Body for PUT/PATCH /tasks/{id}; every field optional."""

    model_config = {"extra": "ignore"}

    title: str | None = Field(default=None, description="Task title (1-200 characters)")
    description: str | None = Field(default=None, description="Description (up to 2000 characters)")
    status: str | None = Field(default=None, description="pending, in_progress or completed")
    priority: str | None = Field(default=None, description="low, medium or high")


class TaskCreate(BaseModel):
    """Validated task creation data."""

    title: str
    description: str | None = None
    priority: TaskPriority = DEFAULT_PRIORITY


class TaskUpdate(BaseModel):
    """Validated partial update; only fields that were supplied are set."""

    title: str | None = None
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None

    def changes(self) -> dict[str, object]:
        """Fields explicitly supplied by the caller."""
        return self.model_dump(exclude_unset=True)


class TaskQuery(BaseModel):
    """Validated list query: filters plus pagination."""

    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class TaskFilter(BaseModel):
    """Row predicates shared by the page query and the count query (no pagination)."""

    owner_id: int | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None


class TaskOut(BaseModel):
    """Task as returned by the API."""

    id: int
    title: str
    description: str | None = None
    status: TaskStatus
    priority: TaskPriority
    user_id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class Pagination(BaseModel):
    current_page: int
    total_pages: int
    total_tasks: int
    limit: int


class TaskPage(BaseModel):
    """One page of tasks plus pagination totals computed over the same filter."""

    tasks: list[TaskOut]
    pagination: Pagination


class TaskStats(BaseModel):
    """Aggregate counts across all tasks."""

    total_tasks: int
    pending_tasks: int
    in_progress_tasks: int
    completed_tasks: int
    total_users: int = Field(..., description="Number of distinct task owners")


class TaskData(BaseModel):
    task: TaskOut


class TaskResponse(BaseModel):
    status: Literal["success"] = "success"
    message: str | None = None
    data: TaskData


class TaskListResponse(BaseModel):
    status: Literal["success"] = "success"
    data: TaskPage


class StatsData(BaseModel):
    stats: TaskStats


class StatsResponse(BaseModel):
    status: Literal["success"] = "success"
    data: StatsData


class MessageResponse(BaseModel):
    status: Literal["success"] = "success"
    message: str
