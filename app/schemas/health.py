"""Health check Pydantic schemas."""

from datetime import datetime

from app.schemas.base import CamelModel


class DatabaseCounts(CamelModel):
    """Row counts of the main tables."""

    communities: int
    units: int
    readings: int


class HealthResponse(CamelModel):
    """Schema for health check response."""

    status: str
    service: str
    version: str
    timestamp: datetime
    database: DatabaseCounts
