"""Community Pydantic schemas."""

from decimal import Decimal

from app.schemas.base import CamelModel


class CommunityResponse(CamelModel):
    """Schema for community response."""

    id: int
    name: str


class CommunitySummary(CommunityResponse):
    """Community with its unit count and recent average water usage."""

    unit_count: int
    avg_consumption: Decimal
