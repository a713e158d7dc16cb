"""Tests for benchmark classification."""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from app.core.exceptions import NotFoundError
from app.models.enums import UsageMetric, UsageStatus
from app.services.benchmark import (
    benchmark_community,
    classify_deviation,
    compute_diff_percent,
)

TODAY = date(2024, 6, 15)


class TestComputeDiffPercent:
    """Percentage deviation from the reference."""

    def test_basic(self) -> None:
        assert compute_diff_percent(Decimal("120"), Decimal("100")) == Decimal("20.0")

    def test_rounds_to_one_place(self) -> None:
        assert compute_diff_percent(Decimal("100"), Decimal("30")) == Decimal("233.3")
        assert compute_diff_percent(Decimal("10.05"), Decimal("10")) == Decimal("0.5")

    @pytest.mark.parametrize("current", ["0", "55.5", "10000"])
    def test_zero_reference_is_zero(self, current: str) -> None:
        diff = compute_diff_percent(Decimal(current), Decimal("0"))
        assert diff == Decimal("0.0")
        assert classify_deviation(diff).status == UsageStatus.NORMAL


class TestClassifyDeviation:
    """Status bands evaluated in priority order."""

    @pytest.mark.parametrize(
        ("diff", "status"),
        [
            ("-50", UsageStatus.GOOD),
            ("-10.0", UsageStatus.GOOD),
            ("-9.9", UsageStatus.NORMAL),
            ("0", UsageStatus.NORMAL),
            ("5.0", UsageStatus.NORMAL),
            ("5.1", UsageStatus.WARNING),
            ("20.0", UsageStatus.WARNING),
            ("20.01", UsageStatus.DANGER),
            ("300", UsageStatus.DANGER),
        ],
    )
    def test_bands(self, diff: str, status: UsageStatus) -> None:
        assert classify_deviation(Decimal(diff)).status == status

    def test_messages(self) -> None:
        assert classify_deviation(Decimal("-10")).message == "Great job! Below average usage."
        assert classify_deviation(Decimal("0")).message == "Usage within normal range."
        assert (
            classify_deviation(Decimal("10")).message
            == "Usage above average. Consider conservation."
        )
        assert (
            classify_deviation(Decimal("25")).message
            == "High usage detected. Immediate action recommended."
        )


class TestBenchmarkCommunity:
    """End-to-end benchmark over stored readings."""

    def test_unknown_community(self, store) -> None:
        with pytest.raises(NotFoundError):
            benchmark_community(store, 42, today=TODAY)

    def test_no_readings_gives_zero_average(self, store, make_community, make_unit) -> None:
        maple = make_community("Maple Grove")
        make_unit(maple, "A1")

        result = benchmark_community(store, maple.id, today=TODAY)

        assert result.community_average == Decimal("0")
        assert result.unit_comparisons == []

    def test_units_are_classified(self, store, make_community, make_unit, add_reading) -> None:
        maple = make_community("Maple Grove")
        readings = {"A1": 80, "A2": 100, "A3": 110, "A4": 150}
        for number, water in readings.items():
            add_reading(make_unit(maple, number), TODAY - timedelta(days=2), water, 5)
        add_reading(
            make_unit(make_community("Elsewhere"), "Z9"), TODAY - timedelta(days=2), 5000
        )

        result = benchmark_community(store, maple.id, today=TODAY)

        # Community average: (80 + 100 + 110 + 150) / 4 = 110
        assert result.community_average == Decimal("110")
        summary = [
            (c.unit_number, c.current_usage, c.diff_percent, c.status)
            for c in result.unit_comparisons
        ]
        assert summary == [
            ("A1", Decimal("80"), Decimal("-27.3"), UsageStatus.GOOD),
            ("A2", Decimal("100"), Decimal("-9.1"), UsageStatus.NORMAL),
            ("A3", Decimal("110"), Decimal("0.0"), UsageStatus.NORMAL),
            ("A4", Decimal("150"), Decimal("36.4"), UsageStatus.DANGER),
        ]

    def test_electricity_metric(self, store, make_community, make_unit, add_reading) -> None:
        maple = make_community("Maple Grove")
        add_reading(make_unit(maple, "A1"), TODAY, 100, 10)
        add_reading(make_unit(maple, "A2"), TODAY, 100, 30)

        result = benchmark_community(
            store, maple.id, metric=UsageMetric.ELECTRICITY, today=TODAY
        )

        assert result.community_average == Decimal("20")
        assert [c.status for c in result.unit_comparisons] == [
            UsageStatus.GOOD,
            UsageStatus.DANGER,
        ]
