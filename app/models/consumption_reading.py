"""ConsumptionReading database model - one reading per unit per date."""

from datetime import UTC, date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Numeric, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

if TYPE_CHECKING:
    from app.models.unit import Unit


class ConsumptionReading(Base):
    """Water and electricity usage of a unit on a given date."""

    __tablename__ = "consumption_readings"
    __table_args__ = (
        UniqueConstraint("unit_id", "reading_date", name="uq_consumption_readings_unit_date"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    reading_date: Mapped[date] = mapped_column(index=True)

    # Usage values (using Decimal for precision)
    water_usage: Mapped[Decimal] = mapped_column(Numeric(precision=12, scale=3))  # Gallons
    electricity_usage: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=3),
        default=Decimal("0"),
    )  # kWh

    # Foreign keys
    unit_id: Mapped[int] = mapped_column(ForeignKey("units.id"), index=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    # Relationships
    unit: Mapped["Unit"] = relationship(back_populates="readings")
