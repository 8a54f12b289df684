"""Monthly aggregation shared by the user, property and booking reports."""

from __future__ import annotations

from sqlalchemy.orm import Query
from werkzeug.exceptions import BadRequest

from utils.dates import count_by_month, year_bounds


def monthly_counts(query: Query, column, year: int) -> list[int]:
    """Count rows of ``query`` created in ``year``, bucketed by UTC month."""

    try:
        start, end = year_bounds(year)
    except ValueError as error:
        raise BadRequest("year is out of range.") from error

    rows = query.with_entities(column).filter(column >= start, column < end).all()
    return count_by_month(row[0] for row in rows)
