"""Date helpers shared by models and the reporting endpoints.

All timestamps are stored as naive UTC values; month buckets are therefore
UTC calendar months.
"""

from __future__ import annotations

from datetime import MAXYEAR, UTC, datetime
from typing import Iterable


def utcnow() -> datetime:
    """Return the current UTC time as a naive datetime."""

    return datetime.now(UTC).replace(tzinfo=None)


def parse_datetime(value: object) -> datetime | None:
    """Parse an ISO 8601 date or datetime string into a naive UTC datetime.

    Returns None when the value is missing or cannot be parsed.
    """

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(UTC).replace(tzinfo=None)
    return parsed


def year_bounds(year: int) -> tuple[datetime, datetime]:
    """Return the half-open ``[start, end)`` range covering ``year``.

    The last representable year ends at ``datetime.max``.
    """

    start = datetime(year, 1, 1)
    if year == MAXYEAR:
        return start, datetime.max
    return start, datetime(year + 1, 1, 1)


def count_by_month(timestamps: Iterable[datetime]) -> list[int]:
    """Bucket timestamps by calendar month into a 12-element list."""

    counts = [0] * 12
    for stamp in timestamps:
        counts[stamp.month - 1] += 1
    return counts
