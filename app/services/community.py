"""Community service for read-only listing and health counts."""

from datetime import date

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.models.community import Community
from app.models.consumption_reading import ConsumptionReading
from app.models.enums import UsageMetric
from app.models.unit import Unit
from app.schemas.community import CommunitySummary
from app.schemas.health import DatabaseCounts
from app.services.aggregator import average_usage, usage_or_zero
from app.services.reading_store import SqlReadingStore, UsageScope


def get_community(db: Session, community_id: int) -> Community:
    """Get a community by ID."""
    community = db.query(Community).filter(Community.id == community_id).first()
    if not community:
        raise NotFoundError("Community not found")
    return community


def list_community_summaries(db: Session, today: date | None = None) -> list[CommunitySummary]:
    """All communities by name, with unit count and 30-day average water usage."""
    unit_counts = dict(
        db.query(Unit.community_id, func.count(Unit.id)).group_by(Unit.community_id).all()
    )
    store = SqlReadingStore(db)

    summaries: list[CommunitySummary] = []
    for community in db.query(Community).order_by(Community.name).all():
        average = average_usage(
            store,
            UsageMetric.WATER,
            UsageScope.for_community(community.id),
            today=today,
        )
        summaries.append(
            CommunitySummary(
                id=community.id,
                name=community.name,
                unit_count=unit_counts.get(community.id, 0),
                avg_consumption=usage_or_zero(average),
            )
        )
    return summaries


def get_database_counts(db: Session) -> DatabaseCounts:
    """Row counts used by the health check."""
    return DatabaseCounts(
        communities=db.query(func.count(Community.id)).scalar() or 0,
        units=db.query(func.count(Unit.id)).scalar() or 0,
        readings=db.query(func.count(ConsumptionReading.id)).scalar() or 0,
    )

