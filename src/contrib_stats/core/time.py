"""Time utilities for contrib-stats.

UTC discipline: every datetime that leaves this module is timezone-aware UTC.
Calendar dates typed by the user are interpreted as midnight in a configurable
timezone (default UTC) and converted to UTC.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytz

__all__ = [
    "DATE_FORMAT",
    "UNSET_DATE",
    "format_utc_iso8601",
    "from_epoch_seconds",
    "get_current_utc",
    "parse_calendar_date",
    "shift_back",
]

DATE_FORMAT = "%Y-%m-%d"

# Earliest representable date; typing it means "no bound".
UNSET_DATE = date(1, 1, 1)


def get_current_utc() -> datetime:
    """Get current time in UTC.

    Returns
    -------
    datetime
        Current time in UTC with timezone info
    """
    return datetime.now(timezone.utc)


def format_utc_iso8601(dt: datetime) -> str:
    """Format datetime as ISO-8601 UTC string.

    Naive datetimes are assumed to already be UTC.

    Example
    -------
    >>> format_utc_iso8601(datetime(2018, 6, 18, tzinfo=timezone.utc))
    '2018-06-18T00:00:00+00:00'
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)

    return dt.isoformat()


def from_epoch_seconds(seconds: int) -> datetime:
    """Convert a Unix timestamp (as reported by the GitHub API) to UTC datetime."""
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def parse_calendar_date(date_str: str, timezone_str: str = "UTC") -> datetime | None:
    """Parse a ``YYYY-MM-DD`` date as midnight in ``timezone_str``, returned in UTC.

    Parameters
    ----------
    date_str
        Date typed by the user, e.g. ``"2018-06-18"``
    timezone_str
        IANA timezone the date is expressed in

    Returns
    -------
    datetime | None
        Midnight of that day converted to UTC, or ``None`` for ``0001-01-01``

    Raises
    ------
    ValueError
        If the string is not a valid ``YYYY-MM-DD`` date
    pytz.UnknownTimeZoneError
        If the timezone name is unknown
    """
    parsed = datetime.strptime(date_str, DATE_FORMAT).date()
    if parsed <= UNSET_DATE:
        return None

    tz = pytz.timezone(timezone_str)
    local_midnight = tz.localize(datetime(parsed.year, parsed.month, parsed.day, 0, 0, 0))
    return local_midnight.astimezone(timezone.utc)


def shift_back(dt: datetime, *, years: int = 0, months: int = 0, days: int = 0) -> datetime:
    """Move ``dt`` back by whole calendar years, months and days.

    Day overflow is carried into the following month rather than clamped:
    March 31 minus one month is "February 31", i.e. March 3 (or March 2 in a
    leap year).

    Example
    -------
    >>> shift_back(datetime(2018, 3, 31), months=1)
    datetime.datetime(2018, 3, 3, 0, 0)
    """
    month_index = dt.year * 12 + (dt.month - 1) - (years * 12 + months)
    year, month = divmod(month_index, 12)
    first_of_month = dt.replace(year=year, month=month + 1, day=1)
    return first_of_month + timedelta(days=dt.day - 1 - days)
