"""
Unit tests for datetime utilities.
"""

import pytest
from datetime import datetime, timezone, timedelta

from utils.datetime_utils import now_iso, now_ms, parse_datetime_string_to_utc, parse_timestamp_ms


class TestParseDatetimeStringToUtc:
    """Test cases for parse_datetime_string_to_utc."""

    def test_with_offset(self):
        """Test conversion of offset timestamps to UTC."""
        result = parse_datetime_string_to_utc("2024-01-01T09:00:00+08:00")
        assert result == datetime(2024, 1, 1, 1, 0, tzinfo=timezone.utc)

    def test_z_suffix_and_naive(self):
        """Test Z suffix and naive strings (assumed UTC)."""
        expected = datetime(2024, 1, 1, 1, 0, tzinfo=timezone.utc)
        assert parse_datetime_string_to_utc("2024-01-01T01:00:00Z") == expected
        assert parse_datetime_string_to_utc("2024-01-01T01:00:00") == expected

    def test_invalid(self):
        """Test that garbage raises ValueError."""
        with pytest.raises(ValueError, match="Invalid datetime string format"):
            parse_datetime_string_to_utc("yesterday")


class TestParseTimestampMs:
    """Test cases for parse_timestamp_ms."""

    def test_numbers(self):
        """Test that numbers are taken as milliseconds."""
        assert parse_timestamp_ms(1704067200000) == 1704067200000
        assert parse_timestamp_ms(1.9) == 1
        assert parse_timestamp_ms(10**400) == 10**400

    def test_strings_and_datetimes(self):
        """Test ISO strings and datetime objects."""
        assert parse_timestamp_ms("2024-01-01T00:00:00Z") == 1704067200000
        assert parse_timestamp_ms(datetime(2024, 1, 1, 8, tzinfo=timezone(timedelta(hours=8)))) == 1704067200000
        assert parse_timestamp_ms(datetime(2024, 1, 1)) == 1704067200000

    @pytest.mark.parametrize("value", [None, True, "", "  ", "soon", float("nan"), float("inf"), [1]])
    def test_unparseable(self, value):
        """Test values that are not points in time."""
        assert parse_timestamp_ms(value) is None


def test_now_helpers():
    """Test current-time helpers agree on the clock."""
    before = now_ms()
    iso = now_iso()
    after = now_ms()

    assert iso.endswith("Z")
    parsed = parse_timestamp_ms(iso)
    assert before - 1 <= parsed <= after
