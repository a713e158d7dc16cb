"""Consumption Pydantic schemas for import, benchmark and report responses."""

from datetime import date
from decimal import Decimal

from pydantic import Field

from app.models.enums import UsageStatus
from app.schemas.base import CamelModel


class ImportOutcome(CamelModel):
    """Summary of one CSV import."""

    imported_count: int
    total_rows: int
    errors: list[str]  # First rows that failed, capped


class UnitComparison(CamelModel):
    """A unit's usage compared against its community average."""

    unit_id: int
    unit_number: str
    current_usage: Decimal
    diff_percent: Decimal
    status: UsageStatus
    message: str


class BenchmarkResult(CamelModel):
    """Community-wide reference average plus per-unit comparisons."""

    community_average: Decimal
    unit_comparisons: list[UnitComparison]


class UsagePair(CamelModel):
    """Water (gallons) and electricity (kWh) values side by side."""

    water: Decimal
    electricity: Decimal


class UnitInfo(CamelModel):
    """Identity of the unit a report is about."""

    id: int
    unit_number: str
    community_name: str


class HistoricalReading(CamelModel):
    """One past reading in a unit report."""

    reading_date: date = Field(alias="date")
    water: Decimal
    electricity: Decimal


class UnitReport(CamelModel):
    """Usage report for a single unit."""

    unit: UnitInfo
    current_usage: UsagePair
    community_average: UsagePair
    historical_data: list[HistoricalReading]  # Newest first
    tips: list[str]


class MonthlyUsage(CamelModel):
    """Community average usage for one calendar month."""

    month: str  # "Jan", "Feb", ...
    water: Decimal
    electricity: Decimal
