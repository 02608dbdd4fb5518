"""Health check endpoint with database connectivity check."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tasktrack.core.config import settings
from tasktrack.core.database import check_db_connected, get_db
from tasktrack.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(db: Session = Depends(get_db)) -> HealthResponse:
    """
    Return service health status and database connectivity.
    Used by load balancers and monitoring; no authentication.
    """
    db_status = "connected" if check_db_connected(db) else "disconnected"

    return HealthResponse(
        environment=settings.APP_ENV,
        database=db_status,
        timestamp=datetime.now(UTC),
    )
