"""Community routes."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.dependencies import get_reading_store
from app.core.database import get_db
from app.schemas.community import CommunityResponse, CommunitySummary
from app.schemas.consumption import MonthlyUsage
from app.services import community as community_service
from app.services.aggregator import monthly_trend
from app.services.reading_store import SqlReadingStore

router = APIRouter(prefix="/communities", tags=["communities"])


@router.get("", response_model=list[CommunitySummary])
def list_communities(db: Session = Depends(get_db)):
    """List communities with unit counts and 30-day average water usage."""
    return community_service.list_community_summaries(db)


@router.get("/{community_id}", response_model=CommunityResponse)
def get_community(community_id: int, db: Session = Depends(get_db)):
    """Get a community by ID."""
    return community_service.get_community(db, community_id)


@router.get("/{community_id}/consumption", response_model=list[MonthlyUsage])
def get_community_consumption(
    community_id: int,
    db: Session = Depends(get_db),
    store: SqlReadingStore = Depends(get_reading_store),
):
    """Monthly average usage over the last 12 months, ordered by month number."""
    community_service.get_community(db, community_id)
    return monthly_trend(store, community_id)
