"""Tests for date labels."""

from datetime import timedelta

from conftest import NOW

from storyline.formatting import (
    format_date_ddmmyyyy,
    format_date_long_ordinal,
    format_updated_at,
    time_ago,
)


def ago(**kwargs):
    return (NOW - timedelta(**kwargs)).isoformat()


class TestAbsoluteLabels:
    def test_ddmmyyyy(self):
        assert format_date_ddmmyyyy("2024-03-01") == "01/03/2024"
        assert format_date_ddmmyyyy({"seconds": 1700000000}) == "14/11/2023"

    def test_ddmmyyyy_passes_unparseable_text_through(self):
        assert format_date_ddmmyyyy("garbage") == "garbage"
        assert format_date_ddmmyyyy(None) == ""

    def test_long_ordinal(self):
        assert format_date_long_ordinal("2024-03-01") == "1st March 2024"
        assert format_date_long_ordinal("2024-03-22") == "22nd March 2024"
        assert format_date_long_ordinal("2024-03-23") == "23rd March 2024"
        assert format_date_long_ordinal("2024-03-11") == "11th March 2024"
        assert format_date_long_ordinal("") == ""


class TestRelativeLabels:
    def test_updated_at(self):
        assert format_updated_at(ago(seconds=30), now=NOW) == "Updated just now"
        assert format_updated_at(ago(minutes=5), now=NOW) == "Updated 5m ago"
        assert format_updated_at(ago(hours=3), now=NOW) == "Updated 3h ago"
        assert format_updated_at(ago(days=2), now=NOW) == "Updated 2d ago"
        assert format_updated_at(ago(days=30), now=NOW) == "Updated May 2"
        assert format_updated_at(None, now=NOW) == ""

    def test_time_ago(self):
        assert time_ago(None, now=NOW) == "Unknown"
        assert time_ago(ago(seconds=10), now=NOW) == "Updated just now"
        assert time_ago(ago(minutes=10), now=NOW) == "Updated 10 min ago"
        assert time_ago(ago(hours=5), now=NOW) == "Updated 5 hours ago"
        assert time_ago(ago(hours=30), now=NOW) == "Updated yesterday"
        assert time_ago(ago(days=5), now=NOW) == "Updated 5 days ago"
