"""Shared route dependencies: the per-request store handle and Failure → HTTPException mapping."""

import logging
from typing import Annotated, TypeVar

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from tasktrack.core.database import get_db
from tasktrack.core.results import (
    CONFLICT,
    FORBIDDEN,
    NOT_FOUND,
    STORE_FAILURE,
    UNAUTHENTICATED,
    VALIDATION,
    Failure,
    Result,
)
from tasktrack.services.store import TaskStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

STATUS_BY_KIND: dict[str, int] = {
    VALIDATION: status.HTTP_400_BAD_REQUEST,
    CONFLICT: status.HTTP_409_CONFLICT,
    UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    FORBIDDEN: status.HTTP_403_FORBIDDEN,
    NOT_FOUND: status.HTTP_404_NOT_FOUND,
    STORE_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

AUTH_FAILURE_HEADER = "X-Auth-Failure"


def get_store(db: Annotated[Session, Depends(get_db)]) -> TaskStore:
    """Dependency: wrap the request's DB session in a store handle."""
    return TaskStore(db)


def http_exception(failure: Failure) -> HTTPException:
    """Translate a core Failure into the HTTPException the route should raise."""
    status_code = STATUS_BY_KIND[failure.kind]
    if failure.kind == VALIDATION:
        return HTTPException(status_code=status_code, detail=list(failure.messages))
    if failure.kind == UNAUTHENTICATED:
        headers = {"WWW-Authenticate": "Bearer"}
        if failure.reason:
            headers[AUTH_FAILURE_HEADER] = failure.reason
        return HTTPException(status_code=status_code, detail=failure.message, headers=headers)
    if failure.kind == STORE_FAILURE:
        logger.error("Store failure: %s", failure.message)
        return HTTPException(status_code=status_code, detail="Internal server error")
    return HTTPException(status_code=status_code, detail=failure.message)


def unwrap(result: Result[T]) -> T:
    """Return the value of an Ok result or raise the mapped HTTPException."""
    if isinstance(result, Failure):
        raise http_exception(result)
    return result.value
