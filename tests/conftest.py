"""Shared fixtures: in-memory SQLite with a fresh schema for every test."""

import os

# Must be set before app.core.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DEFAULT_COMMUNITY_ID"] = "1"

from collections.abc import Callable, Iterator  # noqa: E402
from datetime import date  # noqa: E402
from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from app.core.database import Base, SessionLocal, engine  # noqa: E402
from app.main import app  # noqa: E402
from app.models.community import Community  # noqa: E402
from app.models.unit import Unit  # noqa: E402
from app.services.reading_store import SqlReadingStore  # noqa: E402


@pytest.fixture(autouse=True)
def reset_database() -> Iterator[None]:
    """Recreate all tables so every test starts empty."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db() -> Iterator[Session]:
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db: Session) -> SqlReadingStore:
    return SqlReadingStore(db)


@pytest.fixture
def client() -> Iterator[TestClient]:
    """Create a test client with proper lifespan handling."""
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_community(db: Session) -> Callable[[str], Community]:
    def _make(name: str) -> Community:
        community = Community(name=name)
        db.add(community)
        db.commit()
        db.refresh(community)
        return community

    return _make


@pytest.fixture
def make_unit(db: Session) -> Callable[[Community, str], Unit]:
    def _make(community: Community, unit_number: str) -> Unit:
        unit = Unit(community_id=community.id, unit_number=unit_number)
        db.add(unit)
        db.commit()
        db.refresh(unit)
        return unit

    return _make


@pytest.fixture
def add_reading(store: SqlReadingStore) -> Callable[..., None]:
    """Store a reading; usages accept anything Decimal() accepts."""

    def _add(unit: Unit, reading_date: date, water: str | int, electricity: str | int = 0) -> None:
        store.upsert_reading(unit.id, reading_date, Decimal(str(water)), Decimal(str(electricity)))

    return _add
