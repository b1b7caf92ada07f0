"""Tests for date and id helpers."""

from datetime import date, datetime, timezone

import pytest

from taskcadence.utils import slugify, to_datetime, to_day


class TestToDay:
    """Tests for calendar-day truncation."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (date(2024, 3, 4), date(2024, 3, 4)),
            (datetime(2024, 3, 4, 23, 59), date(2024, 3, 4)),
            ("2024-03-04", date(2024, 3, 4)),
            ("2024-03-04T10:30:00Z", date(2024, 3, 4)),
            ("  2024-03-04  ", date(2024, 3, 4)),
        ],
    )
    def test_readable_values(self, value, expected):
        assert to_day(value) == expected

    @pytest.mark.parametrize("value", [None, "", "   ", "not-a-date", "2024-13-45", 42, []])
    def test_malformed_values(self, value):
        assert to_day(value) is None


class TestToDatetime:
    """Tests for lenient timestamp parsing."""

    def test_plain_date_is_midnight(self):
        assert to_datetime(date(2024, 3, 4)) == datetime(2024, 3, 4)

    def test_zulu_suffix_keeps_zone(self):
        parsed = to_datetime("2024-03-04T10:30:00Z")
        assert parsed == datetime(2024, 3, 4, 10, 30, tzinfo=timezone.utc)

    def test_garbage_is_none(self):
        assert to_datetime("yesterday-ish") is None


class TestSlugify:
    """Tests for checklist id generation."""

    def test_basic(self):
        assert slugify("Daily Floor Sweep") == "daily-floor-sweep"

    def test_special_characters(self):
        assert slugify("  Boiler / Inspection (Q1)! ") == "boiler-inspection-q1"
