"""
Hotel Audit Analytics - Time Window Resolver
Turns a period selector into a concrete instant range.

All boundaries are hotel-local (see utils.timezone). Month indices are
0-based (January = 0) everywhere in the engine.

Period keys
-----------
THIS_MONTH      first instant of the current month -> now
THIS_QUARTER    first instant of the current quarter -> now
LAST_3_MONTHS   first instant of (current month - 2) -> now
THIS_YEAR       Jan 1 00:00 -> now
ROLLING_12M     first instant of (current month - 11) -> now; the heat
                matrix uses rolling_month_windows() for the 12 buckets
30/60/90/365    now - N days -> now
CUSTOM          from 00:00:00 -> to 23:59:59
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from typing import Any, List, Optional, Tuple

from utils.timezone import (
    end_of_day, get_hotel_timezone, get_now, localize, parse_timestamp,
    shift_month, start_of_day, start_of_month, start_of_next_month, start_of_year,
)

from analytics.errors import invalid_argument

THIS_MONTH = 'THIS_MONTH'
THIS_QUARTER = 'THIS_QUARTER'
LAST_3_MONTHS = 'LAST_3_MONTHS'
THIS_YEAR = 'THIS_YEAR'
ROLLING_12M = 'ROLLING_12M'
DAYS_30 = '30'
DAYS_60 = '60'
DAYS_90 = '90'
DAYS_365 = '365'
CUSTOM = 'CUSTOM'

FIXED_DAY_PERIODS = {DAYS_30: 30, DAYS_60: 60, DAYS_90: 90, DAYS_365: 365}

PERIODS = (
    THIS_MONTH, THIS_QUARTER, LAST_3_MONTHS, THIS_YEAR, ROLLING_12M,
    DAYS_30, DAYS_60, DAYS_90, DAYS_365, CUSTOM,
)

# Documented fallbacks for selectors coming from UI state
AREA_DASHBOARD_DEFAULT_PERIOD = THIS_MONTH
PEOPLE_DEFAULT_PERIOD = DAYS_30

# CUSTOM without a `from` date starts this many days before now
CUSTOM_DEFAULT_DAYS = 30

ROLLING_MONTHS = 12

MONTH_ABBR = ('Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
              'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec')

_PERIOD_LABELS = {
    THIS_MONTH: 'This month',
    THIS_QUARTER: 'This quarter',
    LAST_3_MONTHS: 'Last 3 months',
    THIS_YEAR: 'This year',
    ROLLING_12M: 'Last 12 months',
    DAYS_30: 'Last 30 days',
    DAYS_60: 'Last 60 days',
    DAYS_90: 'Last 90 days',
    DAYS_365: 'Last 365 days',
    CUSTOM: 'Custom range',
}


@dataclass(frozen=True)
class TimeWindow:
    """
    A concrete [start, end] or [start, end) instant range.

    Windows that end at "now" and CUSTOM ranges are end-inclusive;
    single-month lookups are half-open.
    """
    start: datetime
    end: datetime
    end_inclusive: bool = True

    def contains(self, instant: Optional[datetime]) -> bool:
        if instant is None or instant < self.start:
            return False
        if self.end_inclusive:
            return instant <= self.end
        return instant < self.end

    def to_dict(self) -> dict:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "end_inclusive": self.end_inclusive,
        }


@dataclass(frozen=True)
class MonthWindow:
    """One calendar month bucket, half-open [first of month, first of next)."""
    year: int
    month_index: int
    window: TimeWindow

    @property
    def key(self) -> str:
        return f"{self.year}-{self.month_index + 1:02d}"

    @property
    def label(self) -> str:
        return f"{MONTH_ABBR[self.month_index]} {self.year}"

    def contains(self, instant: Optional[datetime]) -> bool:
        return self.window.contains(instant)


def _normalize_period(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        value = str(value)
    if not isinstance(value, str):
        return None
    key = value.strip().upper()
    return key if key in PERIODS else None


def safe_period(value: Any, default: str) -> str:
    """
    Read a period selector, falling back to default when it is unknown.

    UI state always yields *some* plausible window: THIS_MONTH on area
    dashboards, 30 days on people analytics.

    Raises:
        InvalidArgumentError: If the default itself is not a period key
    """
    fallback = _normalize_period(default)
    if fallback is None:
        raise invalid_argument('default', default, "not a known period")
    return _normalize_period(value) or fallback


def reference_instant(reference: Any, tz: tzinfo) -> datetime:
    """
    "Now" of a computation: the current time, or a datetime/ISO string.

    Raises:
        InvalidArgumentError: If reference cannot be read as an instant
    """
    if reference is None:
        return get_now(tz)
    if isinstance(reference, (datetime, str)):
        instant = parse_timestamp(reference, tz)
        if instant is not None:
            return instant
    raise invalid_argument('reference', reference, "not a datetime or ISO-8601 instant")


def _custom_day(argument: str, value: Any, tz: tzinfo) -> date:
    """Calendar day of a CUSTOM bound (date, datetime or 'YYYY-MM-DD')."""
    if isinstance(value, datetime):
        return localize(value, tz).date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            pass
    raise invalid_argument(argument, value, "not a date or YYYY-MM-DD string")


def resolve(
    period: Any,
    reference: Any = None,
    custom_from: Any = None,
    custom_to: Any = None,
    default: Optional[str] = None,
    tz: Optional[tzinfo] = None,
) -> TimeWindow:
    """
    Resolve a period selector relative to a reference instant.

    Args:
        period: One of PERIODS (fixed-day periods may be given as ints)
        reference: "Now" for the computation, defaults to the current time
        custom_from: First day of a CUSTOM range
        custom_to: Last day of a CUSTOM range
        default: Fallback for unknown selectors; without one they raise
        tz: Zone for calendar boundaries, defaults to HOTEL_TIMEZONE

    Returns:
        End-inclusive TimeWindow with start <= end

    Raises:
        InvalidArgumentError: Unknown period (no default), malformed
            reference or custom bound, or custom from after to

    Example:
        resolve('LAST_3_MONTHS', datetime(2024, 3, 15, 9, 30))
        -> 2024-01-01 00:00:00 .. 2024-03-15 09:30:00
    """
    tz = tz or get_hotel_timezone()
    now = reference_instant(reference, tz)

    if default is not None:
        key = safe_period(period, default)
    else:
        key = _normalize_period(period)
        if key is None:
            raise invalid_argument('period', period, f"must be one of {', '.join(PERIODS)}")

    if key == THIS_MONTH:
        return TimeWindow(start_of_month(now.year, now.month - 1, now.tzinfo), now)

    if key == THIS_QUARTER:
        first_month, _ = quarter_month_range(quarter_of(now.month - 1))
        return TimeWindow(start_of_month(now.year, first_month, now.tzinfo), now)

    if key == LAST_3_MONTHS:
        year, month_index = shift_month(now.year, now.month - 1, -2)
        return TimeWindow(start_of_month(year, month_index, now.tzinfo), now)

    if key == THIS_YEAR:
        return TimeWindow(start_of_year(now.year, now.tzinfo), now)

    if key == ROLLING_12M:
        year, month_index = shift_month(now.year, now.month - 1, -(ROLLING_MONTHS - 1))
        return TimeWindow(start_of_month(year, month_index, now.tzinfo), now)

    if key in FIXED_DAY_PERIODS:
        return TimeWindow(now - timedelta(days=FIXED_DAY_PERIODS[key]), now)

    # CUSTOM
    if custom_from is None:
        start = now - timedelta(days=CUSTOM_DEFAULT_DAYS)
    else:
        start = start_of_day(_custom_day('custom_from', custom_from, now.tzinfo), now.tzinfo)
    if custom_to is None:
        end = now
    else:
        end = end_of_day(_custom_day('custom_to', custom_to, now.tzinfo), now.tzinfo)
    if start > end:
        raise invalid_argument('custom_from', custom_from, "must not be after custom_to")
    return TimeWindow(start, end)


def _require_month_index(month_index: Any) -> int:
    if isinstance(month_index, bool) or not isinstance(month_index, int) or not 0 <= month_index <= 11:
        raise invalid_argument('month_index', month_index, "must be an integer in 0..11")
    return month_index


def quarter_of(month_index: int) -> int:
    """Quarter (1-4) of a 0-based month index."""
    return _require_month_index(month_index) // 3 + 1


def quarter_month_range(quarter: int) -> Tuple[int, int]:
    """First and last 0-based month index of a quarter, e.g. 2 -> (3, 5)."""
    if isinstance(quarter, bool) or not isinstance(quarter, int) or not 1 <= quarter <= 4:
        raise invalid_argument('quarter', quarter, "must be an integer in 1..4")
    return quarter * 3 - 3, quarter * 3 - 1


def month_range(year: int, month_index: int, tz: Optional[tzinfo] = None) -> TimeWindow:
    """Exact single-month lookup: [first of month, first of next month)."""
    tz = tz or get_hotel_timezone()
    month_index = _require_month_index(month_index)
    return TimeWindow(
        start_of_month(year, month_index, tz),
        start_of_next_month(year, month_index, tz),
        end_inclusive=False,
    )


def quarter_range(year: int, quarter: int, tz: Optional[tzinfo] = None) -> TimeWindow:
    """[first of quarter, first of next quarter)."""
    tz = tz or get_hotel_timezone()
    first_month, last_month = quarter_month_range(quarter)
    return TimeWindow(
        start_of_month(year, first_month, tz),
        start_of_next_month(year, last_month, tz),
        end_inclusive=False,
    )


def year_range(year: int, tz: Optional[tzinfo] = None) -> TimeWindow:
    """[Jan 1 of year, Jan 1 of next year)."""
    tz = tz or get_hotel_timezone()
    return TimeWindow(start_of_year(year, tz), start_of_year(year + 1, tz), end_inclusive=False)


def month_window(year: int, month_index: int, tz: Optional[tzinfo] = None) -> MonthWindow:
    return MonthWindow(year, month_index, month_range(year, month_index, tz))


def rolling_month_windows(
    reference: Any = None,
    months: int = ROLLING_MONTHS,
    tz: Optional[tzinfo] = None,
) -> List[MonthWindow]:
    """
    The `months` calendar months ending at the reference month, oldest first.

    Example:
        rolling_month_windows(datetime(2024, 3, 15), 3)
        -> [Jan 2024, Feb 2024, Mar 2024]
    """
    tz = tz or get_hotel_timezone()
    now = reference_instant(reference, tz)
    if isinstance(months, bool) or not isinstance(months, int) or months < 1:
        raise invalid_argument('months', months, "must be a positive integer")
    windows = []
    for offset in range(months - 1, -1, -1):
        year, month_index = shift_month(now.year, now.month - 1, -offset)
        windows.append(month_window(year, month_index, now.tzinfo))
    return windows


def year_month_windows(year: int, tz: Optional[tzinfo] = None) -> List[MonthWindow]:
    """The 12 fixed calendar months of one year."""
    return [month_window(year, month_index, tz) for month_index in range(12)]


def period_label(period: Any) -> str:
    """Human-readable label of a period key."""
    key = _normalize_period(period)
    if key is None:
        raise invalid_argument('period', period, "not a known period")
    return _PERIOD_LABELS[key]
