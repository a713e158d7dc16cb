"""Windowed usage averages over stored readings."""

import calendar
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal

from app.models.enums import UsageMetric
from app.schemas.consumption import MonthlyUsage
from app.services.reading_store import ReadingStore, UnitAverage, UsageScope

CURRENT_WINDOW_DAYS = 30
TREND_WINDOW_MONTHS = 12

_AVERAGE_PLACES = Decimal("0.01")
_TREND_PLACES = Decimal("0.1")


def round_to(value: Decimal, places: Decimal) -> Decimal:
    """Round half away from zero, as SQL ROUND does."""
    return value.quantize(places, rounding=ROUND_HALF_UP)


def usage_or_zero(value: Decimal | None) -> Decimal:
    """Report an absent average as zero usage."""
    return value if value is not None else Decimal("0")


def window_start(days: int, today: date | None = None) -> date:
    """First date inside a trailing window of ``days`` days."""
    return (today or date.today()) - timedelta(days=days)


def months_back(months: int, today: date | None = None) -> date:
    """The same day ``months`` calendar months earlier, clamped to month end."""
    today = today or date.today()
    month_index = today.year * 12 + (today.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(today.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def average_usage(
    store: ReadingStore,
    metric: UsageMetric,
    scope: UsageScope,
    days: int = CURRENT_WINDOW_DAYS,
    today: date | None = None,
) -> Decimal | None:
    """Mean of ``metric`` over the trailing window, to 2 places; None when no readings."""
    average = store.average_metric(metric, scope, window_start(days, today))
    if average is None:
        return None
    return round_to(average, _AVERAGE_PLACES)


def unit_usage_averages(
    store: ReadingStore,
    metric: UsageMetric,
    community_id: int,
    days: int = CURRENT_WINDOW_DAYS,
    today: date | None = None,
) -> list[UnitAverage]:
    """Per-unit means for a community's units that reported within the window."""
    return [
        UnitAverage(
            unit_id=row.unit_id,
            unit_number=row.unit_number,
            average=round_to(row.average, _AVERAGE_PLACES),
        )
        for row in store.unit_averages(metric, community_id, window_start(days, today))
    ]


def monthly_trend(
    store: ReadingStore,
    community_id: int,
    months: int = TREND_WINDOW_MONTHS,
    today: date | None = None,
) -> list[MonthlyUsage]:
    """
    Community averages per calendar month over the trailing window.

    Points are ordered by month number, so a window crossing New Year lists
    January before December.
    """
    since = months_back(months, today)
    return [
        MonthlyUsage(
            month=calendar.month_abbr[row.month_number],
            water=round_to(usage_or_zero(row.water), _TREND_PLACES),
            electricity=round_to(usage_or_zero(row.electricity), _TREND_PLACES),
        )
        for row in store.monthly_averages(community_id, since)
    ]
