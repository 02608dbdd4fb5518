"""Pydantic schemas for health check responses."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response body for the health check endpoint."""

    status: Literal["success"] = Field(default="success", description="Service status")
    message: str = Field(default="Server is running")
    environment: str = Field(description="Current app environment (dev or prod)")
    database: Literal["connected", "disconnected"] = Field(
        description="Result of a trivial query against the task store",
    )
    timestamp: datetime = Field(description="Server time (UTC) when the check ran")
