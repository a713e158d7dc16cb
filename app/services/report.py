"""Per-unit usage report with community comparison and efficiency tips."""

from datetime import date
from decimal import Decimal

from app.core.exceptions import NotFoundError
from app.models.enums import UsageMetric
from app.schemas.consumption import HistoricalReading, UnitInfo, UnitReport, UsagePair
from app.services.aggregator import average_usage, usage_or_zero
from app.services.reading_store import ReadingStore, UsageScope

HISTORY_LIMIT = 12

# Absolute difference from the community average, in gallons or kWh
TIP_THRESHOLD = Decimal("20")

WATER_TIPS = (
    "Consider installing low-flow fixtures to reduce water usage",
    "Check for leaks in faucets and toilets",
)
ELECTRICITY_TIPS = (
    "Switch to LED bulbs to reduce electricity consumption",
    "Unplug electronics when not in use",
)
BELOW_AVERAGE_TIP = "Great job! Your usage is below community average"


def generate_tips(water_diff: Decimal, electricity_diff: Decimal) -> list[str]:
    """Efficiency tips for a unit, given its usage minus the community average."""
    tips: list[str] = []
    if water_diff > TIP_THRESHOLD:
        tips.extend(WATER_TIPS)
    if electricity_diff > TIP_THRESHOLD:
        tips.extend(ELECTRICITY_TIPS)
    if water_diff <= 0 and electricity_diff <= 0:
        tips.append(BELOW_AVERAGE_TIP)
    return tips


def _window_usage(store: ReadingStore, scope: UsageScope, today: date | None) -> UsagePair | None:
    water = average_usage(store, UsageMetric.WATER, scope, today=today)
    electricity = average_usage(store, UsageMetric.ELECTRICITY, scope, today=today)
    if water is None and electricity is None:
        return None
    return UsagePair(water=usage_or_zero(water), electricity=usage_or_zero(electricity))


def build_unit_report(
    store: ReadingStore,
    unit_id: int,
    today: date | None = None,
) -> UnitReport:
    """
    Build the usage report of one unit.

    Current and community usage are 30-day averages, reported as zero when
    there is no data. Tips are only produced when the unit itself reported in
    the window.
    """
    unit = store.get_unit(unit_id)
    if unit is None:
        raise NotFoundError("Unit not found")

    zero = UsagePair(water=Decimal("0"), electricity=Decimal("0"))
    unit_usage = _window_usage(store, UsageScope.for_unit(unit.id), today)
    community_usage = _window_usage(store, UsageScope.for_community(unit.community_id), today) or zero

    tips: list[str] = []
    if unit_usage is not None:
        tips = generate_tips(
            water_diff=unit_usage.water - community_usage.water,
            electricity_diff=unit_usage.electricity - community_usage.electricity,
        )

    history = [
        HistoricalReading(
            reading_date=reading.reading_date,
            water=reading.water_usage,
            electricity=usage_or_zero(reading.electricity_usage),
        )
        for reading in store.list_readings(unit.id, limit=HISTORY_LIMIT, newest_first=True)
    ]

    return UnitReport(
        unit=UnitInfo(
            id=unit.id,
            unit_number=unit.unit_number,
            community_name=unit.community.name,
        ),
        current_usage=unit_usage or zero,
        community_average=community_usage,
        historical_data=history,
        tips=tips,
    )
