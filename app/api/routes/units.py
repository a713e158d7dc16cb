"""Unit report route."""

from fastapi import APIRouter, Depends

from app.api.dependencies import get_reading_store
from app.schemas.consumption import UnitReport
from app.services.reading_store import SqlReadingStore
from app.services.report import build_unit_report

router = APIRouter(prefix="/units", tags=["units"])


@router.get("/{unit_id}/report", response_model=UnitReport)
def get_unit_report(
    unit_id: int,
    store: SqlReadingStore = Depends(get_reading_store),
):
    """Get a unit's recent usage, community comparison, history and tips."""
    return build_unit_report(store, unit_id)
