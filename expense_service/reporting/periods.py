"""
Date windows used by the search and report endpoints.

All datetimes are naive and expressed in UTC, matching what is stored in
the transactions table.
"""
import calendar
from datetime import date, datetime, time, timezone


def utcnow() -> datetime:
    """Current UTC time as a naive datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def parse_day(value: str) -> date:
    """
    Parse a calendar day from a query string.

    Accepts ``YYYY-MM-DD`` or a full ISO datetime, in which case only the
    date part is kept.

    Raises:
        ValueError: If the value is not an ISO date or datetime
    """
    value = value.strip()
    if len(value) == 10:
        return date.fromisoformat(value)
    return datetime.fromisoformat(value).date()


def day_window(day: date) -> tuple[datetime, datetime]:
    """
    Bounds for a same-day search.

    Returns:
        (start, end) where start is 00:00:00 and is inclusive, and end is
        23:59:59 and is exclusive. Entries stamped within the final second
        of the day therefore fall outside the window.
    """
    start = datetime.combine(day, time(0, 0, 0))
    end = datetime.combine(day, time(23, 59, 59))
    return start, end


def month_window(year: int, month: int) -> tuple[datetime, datetime]:
    """
    Bounds for a monthly report, both inclusive.

    The upper bound is midnight at the start of the month's last day, so
    entries later on that final day are not counted.

    Raises:
        ValueError: If month is outside 1-12
    """
    last_day = calendar.monthrange(year, month)[1]
    return datetime(year, month, 1), datetime(year, month, last_day)
