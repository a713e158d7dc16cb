"""CSV export route."""

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from app.api.dependencies import get_reading_store
from app.services.export import export_community_csv
from app.services.reading_store import SqlReadingStore

router = APIRouter(prefix="/export", tags=["export"])


@router.get("/csv/{community_id}", response_class=Response)
def export_community_readings(
    community_id: int,
    store: SqlReadingStore = Depends(get_reading_store),
) -> Response:
    """Download every reading of a community as CSV."""
    content = export_community_csv(store, community_id)
    return Response(
        content=content,
        media_type="text/csv",
        headers={
            "Content-Disposition": f'attachment; filename="community_{community_id}_consumption.csv"'
        },
    )
