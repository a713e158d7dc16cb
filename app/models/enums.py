"""Enum definitions for usage metrics and benchmark status."""

from enum import Enum


class UsageMetric(str, Enum):
    """Metric a reading carries."""

    WATER = "water"  # Gallons
    ELECTRICITY = "electricity"  # kWh


class UsageStatus(str, Enum):
    """Benchmark band a unit falls into relative to its community."""

    GOOD = "good"
    NORMAL = "normal"
    WARNING = "warning"
    DANGER = "danger"
