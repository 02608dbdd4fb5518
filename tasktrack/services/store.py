"""User and task store: the only module that issues queries for the core services."""

import functools
from collections.abc import Callable
from typing import ParamSpec, TypeVar

from sqlalchemy import case, func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session

from tasktrack.core.results import STORE_FAILURE, Failure, fail
from tasktrack.models import Task, User
from tasktrack.schemas.task import TaskFilter, TaskStats

P = ParamSpec("P")
R = TypeVar("R")

# Primary keys are INTEGER columns; an id outside this range matches no row.
MAX_ROW_ID = 2**31 - 1
# OFFSET is a signed 64-bit value on both SQLite and PostgreSQL.
MAX_OFFSET = 2**63 - 1


class StoreError(Exception):
    """Raised when the underlying database cannot complete an operation."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class StoreConflictError(StoreError):
    """Raised when an insert or update violates a uniqueness or foreign-key constraint."""


def store_failures(func: Callable[P, R]) -> Callable[P, R | Failure]:
    """Turn a StoreError escaping a core operation into Failure(store_failure)."""

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R | Failure:
        try:
            return func(*args, **kwargs)
        except StoreError as e:
            return fail(STORE_FAILURE, e.message)

    return wrapper


class TaskStore:
    """
    Store handle bound to one request-scoped Session.

    Mutating methods commit before returning; any SQLAlchemy error rolls the
    session back and is re-raised as StoreError (or StoreConflictError for
    integrity violations). Nothing is retried here.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    # Users

    def find_user_by_email_or_username(
        self,
        email: str | None = None,
        username: str | None = None,
    ) -> User | None:
        clauses = []
        if email is not None:
            clauses.append(User.email == email)
        if username is not None:
            clauses.append(User.username == username)
        if not clauses:
            return None
        try:
            return self.session.query(User).filter(or_(*clauses)).first()
        except SQLAlchemyError as e:
            raise StoreError("Failed to look up user", e) from e

    def find_user_by_id(self, user_id: int) -> User | None:
        if not 1 <= user_id <= MAX_ROW_ID:
            return None
        try:
            return self.session.get(User, user_id, populate_existing=True)
        except SQLAlchemyError as e:
            raise StoreError("Failed to look up user", e) from e

    def insert_user(self, username: str, email: str, password_hash: str, role: str = "user") -> User:
        user = User(username=username, email=email, password_hash=password_hash, role=role)
        self.session.add(user)
        self._commit("Failed to insert user")
        self.session.refresh(user)
        return user

    # Tasks

    def find_task_by_id(self, task_id: int) -> Task | None:
        if not 1 <= task_id <= MAX_ROW_ID:
            return None
        try:
            return self.session.get(Task, task_id)
        except SQLAlchemyError as e:
            raise StoreError("Failed to look up task", e) from e

    def insert_task(
        self,
        title: str,
        owner_id: int,
        description: str | None = None,
        priority: str = "medium",
        status: str = "pending",
    ) -> Task:
        task = Task(
            title=title,
            description=description,
            priority=priority,
            status=status,
            user_id=owner_id,
        )
        self.session.add(task)
        self._commit("Failed to insert task")
        self.session.refresh(task)
        return task

    def update_task(self, task: Task, changes: dict[str, object]) -> Task:
        for field, value in changes.items():
            setattr(task, field, value)
        # Always bump updated_at, even for an update with no field changes.
        task.updated_at = func.now()
        self._commit("Failed to update task")
        self.session.refresh(task)
        return task

    def delete_task(self, task: Task) -> None:
        self.session.delete(task)
        self._commit("Failed to delete task")

    def list_tasks(self, task_filter: TaskFilter, limit: int, offset: int) -> list[Task]:
        if offset > MAX_OFFSET:
            return []
        try:
            return (
                self._filtered(task_filter)
                .order_by(Task.created_at.desc(), Task.id.desc())
                .limit(limit)
                .offset(offset)
                .all()
            )
        except SQLAlchemyError as e:
            raise StoreError("Failed to list tasks", e) from e

    def count_tasks(self, task_filter: TaskFilter) -> int:
        try:
            return self._filtered(task_filter).count()
        except SQLAlchemyError as e:
            raise StoreError("Failed to count tasks", e) from e

    def aggregate_task_stats(self) -> TaskStats:
        try:
            row = self.session.query(
                func.count(Task.id),
                func.count(case((Task.status == "pending", 1))),
                func.count(case((Task.status == "in_progress", 1))),
                func.count(case((Task.status == "completed", 1))),
                func.count(func.distinct(Task.user_id)),
            ).one()
        except SQLAlchemyError as e:
            raise StoreError("Failed to aggregate task stats", e) from e
        total, pending, in_progress, completed, owners = row
        return TaskStats(
            total_tasks=total,
            pending_tasks=pending,
            in_progress_tasks=in_progress,
            completed_tasks=completed,
            total_users=owners,
        )

    def _filtered(self, task_filter: TaskFilter) -> Query:
        query = self.session.query(Task)
        if task_filter.owner_id is not None:
            query = query.filter(Task.user_id == task_filter.owner_id)
        if task_filter.status is not None:
            query = query.filter(Task.status == task_filter.status)
        if task_filter.priority is not None:
            query = query.filter(Task.priority == task_filter.priority)
        return query

    def _commit(self, message: str) -> None:
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise StoreConflictError(message, e) from e
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StoreError(message, e) from e
