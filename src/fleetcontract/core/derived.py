"""Derived contract values: contracted distance and contract end date."""

import calendar
from datetime import date
from typing import Optional

ANNUAL_DISTANCE_KM = 80000


def parse_int(value: str) -> Optional[int]:
    """Parse an integer typed by the operator, None if it isn't one."""
    try:
        return int(value.strip())
    except (AttributeError, ValueError):
        return None


def total_distance_for(duration_months: str) -> str:
    """Contracted distance for a term, at the standard annual mileage.

    Returns an empty string when the duration is blank, non-numeric or not
    positive, so the total field is cleared rather than left stale.
    """
    months = parse_int(duration_months)
    if months is None or months <= 0:
        return ""
    return str(round(months / 12 * ANNUAL_DISTANCE_KM))


def add_months(start: date, months: int) -> date:
    """Advance a date by calendar months.

    The day is clamped to the end of the target month, so 31 January plus one
    month is the last day of February.
    """
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)
