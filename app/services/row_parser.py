"""Parsing and validation of delimited consumption rows."""

import csv
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from app.core.exceptions import InvalidValueError, MissingFieldError

REQUIRED_FIELDS = ("unit_number", "reading_date", "water_usage")
OPTIONAL_FIELDS = ("electricity_usage",)

# Usages are stored as NUMERIC(12, 3)
USAGE_PLACES = Decimal("0.001")
USAGE_LIMIT = Decimal("1e9")


@dataclass(slots=True)
class ParsedReading:
    """A validated row, ready to be stored."""

    unit_number: str
    reading_date: date
    water_usage: Decimal
    electricity_usage: Decimal


def split_fields(line: str) -> list[str]:
    """Split one delimited line into trimmed raw fields, honoring CSV quoting."""
    fields = next(csv.reader([line]), [])
    return [field.strip() for field in fields]


def parse_header(line: str) -> dict[str, int]:
    """Map lower-cased header names to their column index (last duplicate wins)."""
    return {name.lower(): index for index, name in enumerate(split_fields(line))}


def _parse_number(raw: str) -> Decimal | None:
    try:
        value = Decimal(raw)
    except InvalidOperation:
        return None
    if not value.is_finite() or abs(value) >= USAGE_LIMIT:
        return None
    value = value.quantize(USAGE_PLACES, rounding=ROUND_HALF_UP)
    return value if abs(value) < USAGE_LIMIT else None


def parse_row(line: str, header_index: dict[str, int]) -> ParsedReading:
    """
    Parse one data line into a ParsedReading.

    Raises MissingFieldError when unit_number, reading_date or water_usage is
    empty, and InvalidValueError when a value cannot be used or does not fit the
    usage column. Usages are rounded to 3 places. An empty or absent
    electricity_usage reads as 0.
    """
    values = split_fields(line)
    row = {
        name: values[index] if index < len(values) else ""
        for name, index in header_index.items()
    }

    if any(not row.get(name) for name in REQUIRED_FIELDS):
        raise MissingFieldError()

    water_usage = _parse_number(row["water_usage"])
    if water_usage is None or water_usage < 0:
        raise InvalidValueError("Invalid water usage value")

    electricity_raw = row.get("electricity_usage") or "0"
    electricity_usage = _parse_number(electricity_raw)
    if electricity_usage is None:
        raise InvalidValueError("Invalid electricity usage value")

    try:
        reading_date = date.fromisoformat(row["reading_date"])
    except ValueError as exc:
        raise InvalidValueError("Invalid reading date") from exc

    return ParsedReading(
        unit_number=row["unit_number"],
        reading_date=reading_date,
        water_usage=water_usage,
        electricity_usage=electricity_usage,
    )
