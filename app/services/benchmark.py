"""Benchmark classification of unit usage against the community average."""

import logging
from datetime import date
from decimal import Decimal
from typing import NamedTuple

from app.core.exceptions import NotFoundError
from app.models.enums import UsageMetric, UsageStatus
from app.schemas.consumption import BenchmarkResult, UnitComparison
from app.services.aggregator import (
    CURRENT_WINDOW_DAYS,
    average_usage,
    round_to,
    unit_usage_averages,
    usage_or_zero,
)
from app.services.reading_store import ReadingStore, UsageScope

logger = logging.getLogger(__name__)

GOOD_THRESHOLD = Decimal("-10")
WARNING_THRESHOLD = Decimal("5")
DANGER_THRESHOLD = Decimal("20")

_DIFF_PLACES = Decimal("0.1")


class Classification(NamedTuple):
    """Status band and the guidance shown with it."""

    status: UsageStatus
    message: str


GOOD = Classification(UsageStatus.GOOD, "Great job! Below average usage.")
NORMAL = Classification(UsageStatus.NORMAL, "Usage within normal range.")
WARNING = Classification(UsageStatus.WARNING, "Usage above average. Consider conservation.")
DANGER = Classification(UsageStatus.DANGER, "High usage detected. Immediate action recommended.")


def compute_diff_percent(current_usage: Decimal, reference_usage: Decimal) -> Decimal:
    """Percentage deviation from the reference, to 1 place; 0.0 without a reference."""
    if reference_usage <= 0:
        return Decimal("0.0")
    diff = (current_usage - reference_usage) / reference_usage * 100
    return round_to(diff, _DIFF_PLACES)


def classify_deviation(diff_percent: Decimal) -> Classification:
    """
    Map a percentage deviation to a status band.

    Bands are checked in priority order: <= -10 is good, (5, 20] is warning,
    > 20 is danger, anything else is normal.
    """
    if diff_percent <= GOOD_THRESHOLD:
        return GOOD
    if WARNING_THRESHOLD < diff_percent <= DANGER_THRESHOLD:
        return WARNING
    if diff_percent > DANGER_THRESHOLD:
        return DANGER
    return NORMAL


def benchmark_community(
    store: ReadingStore,
    community_id: int,
    metric: UsageMetric = UsageMetric.WATER,
    today: date | None = None,
) -> BenchmarkResult:
    """Compare each reporting unit of a community against the community average."""
    if store.get_community(community_id) is None:
        raise NotFoundError(f"Community {community_id} not found")

    community_average = usage_or_zero(
        average_usage(
            store,
            metric,
            UsageScope.for_community(community_id),
            days=CURRENT_WINDOW_DAYS,
            today=today,
        )
    )

    comparisons: list[UnitComparison] = []
    for unit in unit_usage_averages(store, metric, community_id, today=today):
        current_usage = usage_or_zero(unit.average)
        diff_percent = compute_diff_percent(current_usage, community_average)
        classification = classify_deviation(diff_percent)
        comparisons.append(
            UnitComparison(
                unit_id=unit.unit_id,
                unit_number=unit.unit_number,
                current_usage=current_usage,
                diff_percent=diff_percent,
                status=classification.status,
                message=classification.message,
            )
        )

    logger.debug(
        "Benchmark computed",
        extra={"community_id": community_id, "metric": metric.value},
    )
    return BenchmarkResult(community_average=community_average, unit_comparisons=comparisons)
