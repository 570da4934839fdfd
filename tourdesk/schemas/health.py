"""Health-related Pydantic schemas."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class HealthStatus(str, Enum):
    HEALTHY = "healthy"


class HealthResponse(BaseModel):
    """RPC ping response with the size of the in-memory mirrors."""

    status: HealthStatus
    timestamp: datetime = Field(..., description="Current server time (ISO 8601)")
    version: str
    bookings_mirrored: int = Field(..., ge=0)
    overrides_mirrored: int = Field(..., ge=0)
