"""
Tests for timestamp coercion.

Covers every RawTimestamp variant and the "0 means absent" contract.
"""

from datetime import datetime, timedelta, timezone

import pytest

from storyline.timestamps import (
    EPOCH,
    Convertible,
    Epoch,
    Instant,
    Iso,
    SecondsWrapper,
    classify_timestamp,
    coerce_timestamp_ms,
    ms_to_iso,
    timestamp_to_iso,
)

T = 1_700_000_000_123


class FakeDatabaseTimestamp:
    """Mimics a database client timestamp with a conversion method."""

    def __init__(self, millis):
        self.millis = millis

    def to_date(self):
        return EPOCH + timedelta(milliseconds=self.millis)


class CamelCaseTimestamp:
    def __init__(self, millis):
        self.millis = millis

    def toDate(self):
        return EPOCH + timedelta(milliseconds=self.millis)


class BrokenTimestamp:
    def to_date(self):
        raise RuntimeError("corrupt value")


class TestClassification:
    def test_numbers_are_epoch_millis(self):
        assert classify_timestamp(T) == Epoch(T)

    def test_strings_are_iso(self):
        assert classify_timestamp("2024-05-01") == Iso("2024-05-01")

    def test_seconds_mapping(self):
        assert classify_timestamp({"seconds": 10}) == SecondsWrapper(seconds=10, nanoseconds=0)

    def test_export_seconds_shape(self):
        raw = classify_timestamp({"_seconds": 10, "_nanoseconds": 5})
        assert raw == SecondsWrapper(seconds=10, nanoseconds=5)

    def test_conversion_method(self):
        assert isinstance(classify_timestamp(FakeDatabaseTimestamp(T)), Convertible)

    def test_datetime_is_instant(self):
        value = datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert classify_timestamp(value) == Instant(value)

    @pytest.mark.parametrize("value", [None, 0, "", False, {}, [], True, float("nan")])
    def test_not_a_timestamp(self, value):
        assert classify_timestamp(value) is None


class TestCoercion:
    def test_polymorphic_inputs_agree(self):
        """Epoch ms, ISO text, a seconds wrapper and a convertible all land on T."""
        values = [
            T,
            ms_to_iso(T),
            {"seconds": T / 1000},
            FakeDatabaseTimestamp(T),
        ]
        assert [coerce_timestamp_ms(value) for value in values] == [T, T, T, T]

    def test_camel_case_conversion_method(self):
        assert coerce_timestamp_ms(CamelCaseTimestamp(T)) == T

    def test_seconds_with_nanoseconds(self):
        assert coerce_timestamp_ms({"seconds": 1_700_000_000, "nanoseconds": 500_000_000}) == 1_700_000_000_500

    def test_naive_datetime_is_utc(self):
        assert coerce_timestamp_ms(datetime(1970, 1, 2)) == 86_400_000

    def test_date_only_string_is_utc_midnight(self):
        assert coerce_timestamp_ms("1970-01-02") == 86_400_000

    @pytest.mark.parametrize("value", [None, 0, "", "   ", False, {}, [], "garbage", object()])
    def test_degrades_to_zero(self, value):
        assert coerce_timestamp_ms(value) == 0

    @pytest.mark.parametrize("value", ["March", "10:30", "Tuesday", "14 March"])
    def test_text_without_a_year_is_absent(self, value):
        assert coerce_timestamp_ms(value) == 0

    def test_free_form_text_with_a_year(self):
        assert timestamp_to_iso("March 5, 2024 10:00 UTC") == "2024-03-05T10:00:00.000Z"
        assert timestamp_to_iso("Tue, 14 Nov 2023 22:13:20 GMT") == "2023-11-14T22:13:20.000Z"

    def test_failing_conversion_degrades_to_zero(self):
        assert coerce_timestamp_ms(BrokenTimestamp()) == 0

    def test_negative_epoch_is_absent(self):
        assert coerce_timestamp_ms(-5000) == 0


class TestIsoFormatting:
    def test_javascript_style_iso(self):
        assert ms_to_iso(T) == "2023-11-14T22:13:20.123Z"

    def test_zero_is_empty(self):
        assert ms_to_iso(0) == ""

    def test_timestamp_to_iso_from_seconds(self):
        assert timestamp_to_iso({"seconds": 1_700_000_000}) == "2023-11-14T22:13:20.000Z"
