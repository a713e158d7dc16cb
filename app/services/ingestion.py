"""Bulk CSV import of consumption readings."""

import logging

from app.core.exceptions import (
    EmptyInputError,
    MissingHeadersError,
    NotFoundError,
    RowError,
)
from app.schemas.consumption import ImportOutcome
from app.services.reading_store import ReadingStore
from app.services.row_parser import REQUIRED_FIELDS, ParsedReading, parse_header, parse_row

logger = logging.getLogger(__name__)

MAX_REPORTED_ERRORS = 10


def _resolve_unit_id(store: ReadingStore, unit_number: str, default_community_id: int) -> int:
    """Find a unit by number, creating it under the default community if unknown."""
    unit = store.find_unit_by_number(unit_number)
    if unit is None:
        unit = store.create_unit(default_community_id, unit_number)
        logger.info(
            "Created unit during import",
            extra={"unit_number": unit_number, "community_id": default_community_id},
        )
    return unit.id


def _store_reading(store: ReadingStore, reading: ParsedReading, default_community_id: int) -> None:
    unit_id = _resolve_unit_id(store, reading.unit_number, default_community_id)
    store.upsert_reading(
        unit_id,
        reading.reading_date,
        reading.water_usage,
        reading.electricity_usage,
    )


def import_readings(
    store: ReadingStore,
    text: str,
    default_community_id: int,
) -> ImportOutcome:
    """
    Import delimited readings and upsert them per (unit, date).

    The first non-blank line is the header. A bad row is recorded as
    "Row {n}: {reason}" and skipped; rows are numbered over non-blank lines so
    the first data row is Row 2. Only the first MAX_REPORTED_ERRORS messages are
    returned, while imported_count and total_rows still cover every row.

    Raises EmptyInputError, MissingHeadersError, NotFoundError for an unknown
    default community, and StoreError if the store fails mid-batch. Rows stored
    before a StoreError stay stored.
    """
    lines = [line.rstrip("\r") for line in text.split("\n") if line.strip()]
    if len(lines) < 2:
        raise EmptyInputError()

    header_index = parse_header(lines[0])
    missing = [name for name in REQUIRED_FIELDS if name not in header_index]
    if missing:
        raise MissingHeadersError(missing)

    if store.get_community(default_community_id) is None:
        raise NotFoundError(f"Community {default_community_id} not found")

    imported_count = 0
    errors: list[str] = []

    for row_number, line in enumerate(lines[1:], start=2):
        try:
            reading = parse_row(line, header_index)
        except RowError as exc:
            errors.append(f"Row {row_number}: {exc.reason}")
            logger.debug(
                "Skipped invalid row",
                extra={"row_number": row_number, "reason": exc.reason},
            )
            continue

        _store_reading(store, reading, default_community_id)
        imported_count += 1

    total_rows = len(lines) - 1
    logger.info(
        "Import finished",
        extra={
            "community_id": default_community_id,
            "imported_count": imported_count,
            "total_rows": total_rows,
            "error_count": len(errors),
        },
    )

    return ImportOutcome(
        imported_count=imported_count,
        total_rows=total_rows,
        errors=errors[:MAX_REPORTED_ERRORS],
    )
