"""
Hotel Audit Analytics - Timezone Utilities
Provides hotel-local calendar handling for audit timestamps.

Calendar buckets (month, quarter, year) are hotel-local: an audit submitted
at 23:30 on March 31st in Madrid belongs to March even though it is already
April 1st in UTC. Every instant entering the engine is therefore converted
to one zone before it is bucketed:

- Aware datetimes are converted with astimezone()
- Naive datetimes are assumed to already be hotel-local
"""

from datetime import date, datetime, timedelta, tzinfo
from typing import Any, Optional, Tuple
from zoneinfo import ZoneInfo

from .config import HOTEL_TIMEZONE

UTC_TZ = ZoneInfo('UTC')


def get_hotel_timezone(name: Optional[str] = None) -> ZoneInfo:
    """
    Get a ZoneInfo for an IANA timezone name.

    Args:
        name: IANA timezone (e.g. 'Europe/Madrid'), defaults to HOTEL_TIMEZONE

    Returns:
        ZoneInfo instance

    Raises:
        zoneinfo.ZoneInfoNotFoundError: If the name is not a known timezone
    """
    return ZoneInfo(name or HOTEL_TIMEZONE)


def get_now(tz: Optional[tzinfo] = None) -> datetime:
    """
    Get current datetime in the hotel timezone.

    Returns:
        datetime: Current aware datetime
    """
    return datetime.now(tz or get_hotel_timezone())


def localize(instant: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """
    Express an instant in the hotel timezone.

    Args:
        instant: Aware or naive datetime (naive is taken as hotel-local)
        tz: Target zone, defaults to HOTEL_TIMEZONE

    Returns:
        Aware datetime in tz
    """
    tz = tz or get_hotel_timezone()
    if instant.tzinfo is None:
        return instant.replace(tzinfo=tz)
    return instant.astimezone(tz)


def parse_timestamp(value: Any, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """
    Parse a stored timestamp leniently.

    Accepts datetimes, dates (midnight) and ISO-8601 strings including the
    trailing 'Z' the hosted backend emits. Anything unparseable returns None
    so that one bad row never aborts a dashboard.

    Args:
        value: Raw timestamp value
        tz: Zone used for naive values, defaults to HOTEL_TIMEZONE

    Returns:
        Aware datetime, or None if the value cannot be read
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return localize(value, tz)
    if isinstance(value, date):
        return localize(datetime(value.year, value.month, value.day), tz)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        try:
            return localize(datetime.fromisoformat(text), tz)
        except ValueError:
            return None
    return None


# =============================================================================
# Calendar arithmetic (0-based month indices, January = 0)
# =============================================================================

def shift_month(year: int, month_index: int, delta: int) -> Tuple[int, int]:
    """
    Move a (year, month_index) pair by delta months.

    Example:
        shift_month(2024, 0, -2) -> (2023, 10)   # Jan 2024 - 2 = Nov 2023
    """
    absolute = year * 12 + month_index + delta
    return absolute // 12, absolute % 12


def start_of_month(year: int, month_index: int, tz: tzinfo) -> datetime:
    """First instant of a calendar month in tz."""
    return datetime(year, month_index + 1, 1, tzinfo=tz)


def start_of_next_month(year: int, month_index: int, tz: tzinfo) -> datetime:
    """First instant of the month after (year, month_index) in tz."""
    next_year, next_month = shift_month(year, month_index, 1)
    return start_of_month(next_year, next_month, tz)


def start_of_year(year: int, tz: tzinfo) -> datetime:
    """Jan 1 00:00 of year in tz."""
    return datetime(year, 1, 1, tzinfo=tz)


def start_of_day(day: date, tz: tzinfo) -> datetime:
    """00:00:00 of a calendar day in tz."""
    return datetime(day.year, day.month, day.day, tzinfo=tz)


def end_of_day(day: date, tz: tzinfo) -> datetime:
    """23:59:59 of a calendar day in tz (inclusive end for custom ranges)."""
    return start_of_day(day, tz) + timedelta(days=1) - timedelta(seconds=1)
