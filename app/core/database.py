"""Database configuration and session management."""

from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import settings

_IN_MEMORY_SQLITE_URLS = ("sqlite://", "sqlite:///:memory:")


def _engine_options(database_url: str) -> dict[str, Any]:
    """Build create_engine keyword arguments for the configured backend."""
    if not database_url.startswith("sqlite"):
        return {}

    options: dict[str, Any] = {
        "connect_args": {"check_same_thread": False},  # Needed for SQLite
    }
    if database_url in _IN_MEMORY_SQLITE_URLS:
        # One shared connection, otherwise every thread sees an empty database
        options["poolclass"] = StaticPool
    return options


# Create SQLAlchemy engine
engine = create_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# Base class for models
class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


def get_db():
    """Dependency for getting database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
