"""Shared API dependencies."""

from fastapi import Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.services.reading_store import SqlReadingStore


def get_reading_store(db: Session = Depends(get_db)) -> SqlReadingStore:
    """Reading store bound to the request's database session."""
    return SqlReadingStore(db)
