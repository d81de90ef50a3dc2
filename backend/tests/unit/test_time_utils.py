"""Tests for time helpers"""

from datetime import datetime, timedelta, timezone

import pytest

from hrms.utils.time import clock_time, days_until, ensure_utc, month_name, parse_iso
from tests.fakes import NOW


class TestParseIso:

    def test_date_only(self):
        assert parse_iso("2024-07-01") == datetime(2024, 7, 1, tzinfo=timezone.utc)

    def test_offset_normalized_to_utc(self):
        parsed = parse_iso("2024-07-01T05:00:00+05:00")
        assert parsed == datetime(2024, 7, 1, 0, 0, tzinfo=timezone.utc)
        assert parsed.utcoffset() == timedelta(0)

    def test_naive_datetime_passthrough(self):
        assert parse_iso(datetime(2024, 1, 1)).tzinfo is timezone.utc

    def test_rejects_free_text(self):
        with pytest.raises(ValueError):
            parse_iso("tomorrow")


@pytest.mark.parametrize("value, expected", [
    ("2024-06-25", 10),
    ("2024-06-15T23:59:00Z", 0),
    ("2024-06-14", -1),
])
def test_days_until(value, expected):
    assert days_until(value, now=NOW) == expected


def test_ensure_utc_keeps_none():
    assert ensure_utc(None) is None


def test_payroll_formatting():
    paid_at = datetime(2024, 6, 3, 15, 7, 45, tzinfo=timezone.utc)
    assert month_name(paid_at) == "June"
    assert clock_time(paid_at) == "3:07:45 PM"
