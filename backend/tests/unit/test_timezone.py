"""
Hotel Audit Analytics - Timezone Utility Unit Tests

Tests hotel-local conversion, lenient timestamp parsing and month
arithmetic.
"""

from datetime import date, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import pytest
from freezegun import freeze_time

from utils.timezone import (
    UTC_TZ, end_of_day, get_hotel_timezone, get_now, localize, parse_timestamp,
    shift_month, start_of_month, start_of_next_month,
)

MADRID = ZoneInfo('Europe/Madrid')


class TestLocalize:
    """Test localize() and get_hotel_timezone()."""

    def test_naive_is_taken_as_hotel_local(self):
        result = localize(datetime(2024, 3, 31, 23, 30), MADRID)
        assert result.tzinfo == MADRID
        assert (result.month, result.day, result.hour) == (3, 31, 23)

    def test_aware_is_converted(self):
        """23:30 UTC on March 31st is already April 1st in Madrid."""
        result = localize(datetime(2024, 3, 31, 23, 30, tzinfo=UTC_TZ), MADRID)
        assert (result.month, result.day) == (4, 1)

    def test_default_zone(self):
        assert get_hotel_timezone() == ZoneInfo('UTC')
        assert get_hotel_timezone('Europe/Madrid') is get_hotel_timezone('Europe/Madrid')

    def test_unknown_zone_raises_every_time(self):
        for _ in range(2):
            with pytest.raises(ZoneInfoNotFoundError):
                get_hotel_timezone('Mars/Olympus_Mons')

    @freeze_time("2024-03-15 10:30:00")
    def test_get_now(self):
        assert get_now(UTC_TZ) == datetime(2024, 3, 15, 10, 30, tzinfo=UTC_TZ)


class TestParseTimestamp:
    """Test parse_timestamp() leniency."""

    def test_iso_with_trailing_z(self):
        assert parse_timestamp('2024-03-10T09:00:00Z') == datetime(2024, 3, 10, 9, 0, tzinfo=UTC_TZ)

    def test_iso_with_offset_converted_to_hotel_zone(self):
        result = parse_timestamp('2024-03-10T09:00:00+00:00', MADRID)
        assert result.hour == 10

    def test_date_is_midnight(self):
        assert parse_timestamp(date(2024, 3, 10), UTC_TZ) == datetime(2024, 3, 10, tzinfo=UTC_TZ)

    @pytest.mark.parametrize("value", [None, '', '   ', 'not a date', 12345, '2024-13-45'])
    def test_unreadable_values_become_none(self, value):
        assert parse_timestamp(value) is None


class TestMonthArithmetic:
    """Test 0-based month helpers."""

    @pytest.mark.parametrize("year,month,delta,expected", [
        (2024, 0, -2, (2023, 10)),
        (2024, 11, 1, (2025, 0)),
        (2024, 2, -14, (2023, 0)),
        (2024, 5, 0, (2024, 5)),
    ])
    def test_shift_month(self, year, month, delta, expected):
        assert shift_month(year, month, delta) == expected

    def test_month_boundaries(self):
        assert start_of_month(2024, 1, UTC_TZ) == datetime(2024, 2, 1, tzinfo=UTC_TZ)
        assert start_of_next_month(2024, 11, UTC_TZ) == datetime(2025, 1, 1, tzinfo=UTC_TZ)

    def test_end_of_day(self):
        assert end_of_day(date(2024, 2, 29), UTC_TZ) == datetime(2024, 2, 29, 23, 59, 59, tzinfo=UTC_TZ)
