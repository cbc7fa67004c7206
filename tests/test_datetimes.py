"""
Tests for qrpayload.datetimes: iCalendar timestamp formatting and parsing.
"""

import logging
from datetime import date, datetime, timedelta, timezone

from qrpayload.datetimes import format_date_from_ical, format_ical_datetime, utcnow


# ===================================================================
# format_ical_datetime
# ===================================================================

class TestFormatICalDateTime:

    def test_utc_string(self):
        assert format_ical_datetime("2024-01-15T10:00:00Z") == "20240115T100000Z"

    def test_offset_string_converted_to_utc(self):
        assert format_ical_datetime("2024-01-15T12:00:00+02:00") == "20240115T100000Z"

    def test_space_separated_string(self):
        assert format_ical_datetime("2024-07-01 14:00:00") == "20240701T140000Z"

    def test_naive_datetime_taken_as_utc(self):
        assert format_ical_datetime(datetime(2024, 7, 1, 14, 0, 0)) == "20240701T140000Z"

    def test_aware_datetime_converted_to_utc(self):
        tz = timezone(timedelta(hours=-5))
        value = datetime(2024, 1, 15, 5, 30, 15, tzinfo=tz)
        assert format_ical_datetime(value) == "20240115T103015Z"

    def test_date_is_midnight(self):
        assert format_ical_datetime(date(2024, 3, 9)) == "20240309T000000Z"

    def test_none_returns_empty(self):
        assert format_ical_datetime(None) == ""

    def test_unparseable_returns_empty(self):
        assert format_ical_datetime("next tuesday") == ""

    def test_unparseable_is_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="qrpayload.datetimes"):
            format_ical_datetime("not a date")
        assert "Error formatting iCal date" in caplog.text

    def test_utcnow_is_aware(self):
        assert utcnow().tzinfo is not None


# ===================================================================
# format_date_from_ical
# ===================================================================

class TestFormatDateFromICal:

    def test_utc_timestamp(self):
        assert format_date_from_ical("20240115T100000Z") == "2024-01-15T10:00:00Z"

    def test_floating_timestamp_has_no_suffix(self):
        assert format_date_from_ical("20240115T100000") == "2024-01-15T10:00:00"

    def test_all_day_date_unchanged(self):
        assert format_date_from_ical("20240115") == "20240115"

    def test_garbage_unchanged(self):
        assert format_date_from_ical("tomorrow") == "tomorrow"

    def test_inverse_of_format(self):
        stamp = format_ical_datetime("2024-12-31T23:59:59Z")
        assert format_date_from_ical(stamp) == "2024-12-31T23:59:59Z"
