"""CSV export of a community's readings."""

import csv
import io

from app.core.exceptions import NotFoundError
from app.services.reading_store import ReadingStore

EXPORT_COLUMNS = (
    "unit_number",
    "reading_date",
    "water_usage",
    "electricity_usage",
    "community_name",
)


def export_community_csv(store: ReadingStore, community_id: int) -> str:
    """
    Render every reading of a community as CSV, one row per reading.

    The header reuses the import field names so an export can be uploaded again.
    Raises NotFoundError when the community has no readings.
    """
    rows = store.export_rows(community_id)
    if not rows:
        raise NotFoundError("No data found for this community")

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(EXPORT_COLUMNS)
    for row in rows:
        writer.writerow(
            [
                row.unit_number,
                row.reading_date.isoformat(),
                row.water_usage,
                row.electricity_usage,
                row.community_name,
            ]
        )
    return buffer.getvalue()
