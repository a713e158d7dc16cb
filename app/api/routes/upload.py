"""CSV upload route for bulk reading import."""

from fastapi import APIRouter, Depends, File, Form, UploadFile

from app.api.dependencies import get_reading_store
from app.core.config import settings
from app.core.exceptions import StructuralInputError
from app.schemas.consumption import ImportOutcome
from app.services.ingestion import import_readings
from app.services.reading_store import SqlReadingStore

router = APIRouter(prefix="/upload", tags=["upload"])


@router.post("", response_model=ImportOutcome)
def upload_readings(
    file: UploadFile = File(..., description="CSV with unit_number, reading_date, water_usage"),
    community_id: int | None = Form(None, description="Community for unit numbers not seen before"),
    store: SqlReadingStore = Depends(get_reading_store),
):
    """
    Import consumption readings from a CSV file.

    Rows are upserted per unit and date. Invalid rows are skipped and reported;
    unknown unit numbers are created under the given (or default) community.
    """
    contents = file.file.read()
    try:
        text = contents.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise StructuralInputError("File must be UTF-8 encoded text") from exc

    target_community = community_id if community_id is not None else settings.DEFAULT_COMMUNITY_ID
    return import_readings(store, text, default_community_id=target_community)
