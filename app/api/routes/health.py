"""Health check route."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.schemas.health import HealthResponse
from app.services.community import get_database_counts

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health_check(db: Session = Depends(get_db)):
    """Report service status along with table row counts."""
    return HealthResponse(
        status="healthy",
        service="usage-benchmark",
        version=settings.VERSION,
        timestamp=datetime.now(UTC),
        database=get_database_counts(db),
    )
