"""Unit database model."""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

if TYPE_CHECKING:
    from app.models.community import Community
    from app.models.consumption_reading import ConsumptionReading


class Unit(Base):
    """Residential unit whose consumption is tracked."""

    __tablename__ = "units"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    # Unique across all communities, not per community
    unit_number: Mapped[str] = mapped_column(String(50), unique=True, index=True)

    # Foreign keys
    community_id: Mapped[int] = mapped_column(ForeignKey("communities.id"), index=True)

    # Metadata
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))

    # Relationships
    community: Mapped["Community"] = relationship(back_populates="units")
    readings: Mapped[list["ConsumptionReading"]] = relationship(back_populates="unit")
