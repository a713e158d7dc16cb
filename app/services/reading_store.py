"""Reading store adapter - units and per-unit-per-date readings over SQLAlchemy."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, date, datetime
from decimal import Decimal
from functools import wraps
from typing import Any, Protocol, TypeVar

from sqlalchemy import extract, func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import StoreError
from app.models.community import Community
from app.models.consumption_reading import ConsumptionReading
from app.models.enums import UsageMetric
from app.models.unit import Unit

_METRIC_COLUMNS = {
    UsageMetric.WATER: ConsumptionReading.water_usage,
    UsageMetric.ELECTRICITY: ConsumptionReading.electricity_usage,
}

# Dialects with native INSERT ... ON CONFLICT DO UPDATE
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


@dataclass(frozen=True)
class UsageScope:
    """Either a single unit or every unit of a community."""

    unit_id: int | None = None
    community_id: int | None = None

    def __post_init__(self) -> None:
        if (self.unit_id is None) == (self.community_id is None):
            raise ValueError("UsageScope needs exactly one of unit_id or community_id")

    @classmethod
    def for_unit(cls, unit_id: int) -> "UsageScope":
        return cls(unit_id=unit_id)

    @classmethod
    def for_community(cls, community_id: int) -> "UsageScope":
        return cls(community_id=community_id)


@dataclass(frozen=True)
class UnitAverage:
    """Average of one metric for one unit."""

    unit_id: int
    unit_number: str
    average: Decimal


@dataclass(frozen=True)
class MonthlyAverage:
    """Average water and electricity usage for one calendar month."""

    month_number: int
    water: Decimal | None
    electricity: Decimal | None


@dataclass(frozen=True)
class ExportRow:
    """Flattened reading joined with its unit and community."""

    unit_number: str
    reading_date: date
    water_usage: Decimal
    electricity_usage: Decimal
    community_name: str


class ReadingStore(Protocol):
    """Operations the ingestion and benchmarking code needs from storage."""

    def get_community(self, community_id: int) -> Community | None: ...

    def get_unit(self, unit_id: int) -> Unit | None: ...

    def find_unit_by_number(self, unit_number: str) -> Unit | None: ...

    def create_unit(self, community_id: int, unit_number: str) -> Unit: ...

    def upsert_reading(
        self,
        unit_id: int,
        reading_date: date,
        water_usage: Decimal,
        electricity_usage: Decimal,
    ) -> None: ...

    def average_metric(
        self, metric: UsageMetric, scope: UsageScope, since: date
    ) -> Decimal | None: ...

    def unit_averages(
        self, metric: UsageMetric, community_id: int, since: date
    ) -> list[UnitAverage]: ...

    def monthly_averages(self, community_id: int, since: date) -> list[MonthlyAverage]: ...

    def list_readings(
        self, unit_id: int, limit: int, newest_first: bool = True
    ) -> list[ConsumptionReading]: ...

    def export_rows(self, community_id: int) -> list[ExportRow]: ...


T = TypeVar("T")


def _store_operation(method: Callable[..., T]) -> Callable[..., T]:
    """Roll back and re-raise database failures as StoreError."""

    @wraps(method)
    def wrapper(self: "SqlReadingStore", *args: Any, **kwargs: Any) -> T:
        try:
            return method(self, *args, **kwargs)
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StoreError(f"Store operation '{method.__name__}' failed") from exc

    return wrapper


def _to_decimal(value: Any) -> Decimal | None:
    """Normalize aggregate results, which SQLite returns as floats."""
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class SqlReadingStore:
    """ReadingStore backed by a SQLAlchemy session."""

    def __init__(self, db: Session) -> None:
        self.db = db

    @_store_operation
    def get_community(self, community_id: int) -> Community | None:
        return self.db.query(Community).filter(Community.id == community_id).first()

    @_store_operation
    def get_unit(self, unit_id: int) -> Unit | None:
        return self.db.query(Unit).filter(Unit.id == unit_id).first()

    @_store_operation
    def find_unit_by_number(self, unit_number: str) -> Unit | None:
        return self.db.query(Unit).filter(Unit.unit_number == unit_number).first()

    @_store_operation
    def create_unit(self, community_id: int, unit_number: str) -> Unit:
        db_unit = Unit(community_id=community_id, unit_number=unit_number)
        self.db.add(db_unit)
        self.db.commit()
        self.db.refresh(db_unit)
        return db_unit

    @_store_operation
    def upsert_reading(
        self,
        unit_id: int,
        reading_date: date,
        water_usage: Decimal,
        electricity_usage: Decimal,
    ) -> None:
        """Insert the reading, or overwrite both usages if one exists for that date."""
        now = datetime.now(UTC)
        insert = _UPSERT_INSERTS.get(self.db.get_bind().dialect.name)

        if insert is None:
            self._upsert_by_lookup(unit_id, reading_date, water_usage, electricity_usage)
        else:
            stmt = insert(ConsumptionReading).values(
                unit_id=unit_id,
                reading_date=reading_date,
                water_usage=water_usage,
                electricity_usage=electricity_usage,
                created_at=now,
                updated_at=now,
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=["unit_id", "reading_date"],
                set_={
                    "water_usage": stmt.excluded.water_usage,
                    "electricity_usage": stmt.excluded.electricity_usage,
                    "updated_at": now,
                },
            )
            self.db.execute(stmt)

        self.db.commit()

    def _upsert_by_lookup(
        self,
        unit_id: int,
        reading_date: date,
        water_usage: Decimal,
        electricity_usage: Decimal,
    ) -> None:
        existing = (
            self.db.query(ConsumptionReading)
            .filter(
                ConsumptionReading.unit_id == unit_id,
                ConsumptionReading.reading_date == reading_date,
            )
            .first()
        )
        if existing:
            existing.water_usage = water_usage
            existing.electricity_usage = electricity_usage
        else:
            self.db.add(
                ConsumptionReading(
                    unit_id=unit_id,
                    reading_date=reading_date,
                    water_usage=water_usage,
                    electricity_usage=electricity_usage,
                )
            )

    @_store_operation
    def average_metric(
        self, metric: UsageMetric, scope: UsageScope, since: date
    ) -> Decimal | None:
        """Mean of a metric over readings on or after ``since``; None if there are none."""
        query = self.db.query(func.avg(_METRIC_COLUMNS[metric])).filter(
            ConsumptionReading.reading_date >= since
        )
        if scope.unit_id is not None:
            query = query.filter(ConsumptionReading.unit_id == scope.unit_id)
        else:
            query = query.join(Unit, ConsumptionReading.unit_id == Unit.id).filter(
                Unit.community_id == scope.community_id
            )
        return _to_decimal(query.scalar())

    @_store_operation
    def unit_averages(
        self, metric: UsageMetric, community_id: int, since: date
    ) -> list[UnitAverage]:
        """Per-unit means for units of a community with readings since ``since``."""
        rows = (
            self.db.query(Unit.id, Unit.unit_number, func.avg(_METRIC_COLUMNS[metric]))
            .join(ConsumptionReading, ConsumptionReading.unit_id == Unit.id)
            .filter(
                Unit.community_id == community_id,
                ConsumptionReading.reading_date >= since,
            )
            .group_by(Unit.id, Unit.unit_number)
            .order_by(Unit.unit_number)
            .all()
        )
        return [
            UnitAverage(unit_id=unit_id, unit_number=unit_number, average=_to_decimal(avg))
            for unit_id, unit_number, avg in rows
        ]

    @_store_operation
    def monthly_averages(self, community_id: int, since: date) -> list[MonthlyAverage]:
        """Community means grouped by calendar month number, ascending."""
        month = extract("month", ConsumptionReading.reading_date)
        rows = (
            self.db.query(
                month,
                func.avg(ConsumptionReading.water_usage),
                func.avg(ConsumptionReading.electricity_usage),
            )
            .join(Unit, ConsumptionReading.unit_id == Unit.id)
            .filter(
                Unit.community_id == community_id,
                ConsumptionReading.reading_date >= since,
            )
            .group_by(month)
            .order_by(month)
            .all()
        )
        return [
            MonthlyAverage(
                month_number=int(month_number),
                water=_to_decimal(water),
                electricity=_to_decimal(electricity),
            )
            for month_number, water, electricity in rows
        ]

    @_store_operation
    def list_readings(
        self, unit_id: int, limit: int, newest_first: bool = True
    ) -> list[ConsumptionReading]:
        order = (
            ConsumptionReading.reading_date.desc()
            if newest_first
            else ConsumptionReading.reading_date.asc()
        )
        return (
            self.db.query(ConsumptionReading)
            .filter(ConsumptionReading.unit_id == unit_id)
            .order_by(order)
            .limit(limit)
            .all()
        )

    @_store_operation
    def export_rows(self, community_id: int) -> list[ExportRow]:
        rows = (
            self.db.query(
                Unit.unit_number,
                ConsumptionReading.reading_date,
                ConsumptionReading.water_usage,
                ConsumptionReading.electricity_usage,
                Community.name,
            )
            .join(Unit, ConsumptionReading.unit_id == Unit.id)
            .join(Community, Unit.community_id == Community.id)
            .filter(Unit.community_id == community_id)
            .order_by(Unit.unit_number, ConsumptionReading.reading_date.desc())
            .all()
        )
        return [
            ExportRow(
                unit_number=unit_number,
                reading_date=reading_date,
                water_usage=water_usage,
                electricity_usage=electricity_usage if electricity_usage is not None else Decimal("0"),
                community_name=community_name,
            )
            for unit_number, reading_date, water_usage, electricity_usage, community_name in rows
        ]
