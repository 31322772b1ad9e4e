"""Tests for the date-like value union."""

from datetime import date, datetime, timedelta, timezone

import pytest

from lending_admin.utils.instants import (
    IsoString,
    NativeInstant,
    StoreTimestamp,
    classify,
    format_iso,
    to_datetime,
    to_instant,
)


class TestClassify:
    def test_native_datetime(self):
        dt = datetime(2024, 1, 31, 23, 59, 59, tzinfo=timezone.utc)
        assert classify(dt) == NativeInstant(dt)

    def test_store_timestamp_passes_through(self):
        stamp = StoreTimestamp(1700000000, 5)
        assert classify(stamp) is stamp

    def test_serialized_timestamp_mapping(self):
        assert classify({"seconds": 10, "nanoseconds": 2000}) == StoreTimestamp(10, 2000)

    def test_string(self):
        assert classify("2024-01-01") == IsoString("2024-01-01")

    @pytest.mark.parametrize("value", [None, "", "   ", 42, 3.5, True, ["x"], {"name": "a"}])
    def test_unrecognized_shapes(self, value):
        assert classify(value) is None


class TestToInstant:
    def test_datetime_formats_with_milliseconds(self):
        dt = datetime(2024, 1, 31, 23, 59, 59, tzinfo=timezone.utc)
        assert to_instant(dt) == "2024-01-31T23:59:59.000Z"

    def test_naive_datetime_is_utc(self):
        assert to_instant(datetime(2024, 5, 1, 8, 30)) == "2024-05-01T08:30:00.000Z"

    def test_offset_is_normalized_to_utc(self):
        dt = datetime(2024, 5, 1, 9, 0, tzinfo=timezone(timedelta(hours=7)))
        assert to_instant(dt) == "2024-05-01T02:00:00.000Z"

    def test_store_timestamp(self):
        assert to_instant(StoreTimestamp(0)) == "1970-01-01T00:00:00.000Z"

    def test_seconds_mapping(self):
        assert to_instant({"seconds": 86400}) == "1970-01-02T00:00:00.000Z"

    def test_iso_string_with_z(self):
        assert to_instant("2024-03-04T05:06:07Z") == "2024-03-04T05:06:07.000Z"

    def test_plain_date(self):
        assert to_instant(date(2024, 3, 4)) == "2024-03-04T00:00:00.000Z"

    @pytest.mark.parametrize("value", [None, "not a date", 17, {"nanoseconds": 1}])
    def test_unrecognized_gives_none(self, value):
        assert to_instant(value) is None


class TestStoreTimestamp:
    def test_datetime_round_trip(self):
        dt = datetime(2024, 2, 29, 12, 0, 0, 123000, tzinfo=timezone.utc)
        assert StoreTimestamp.from_datetime(dt).to_datetime() == dt

    def test_ordering(self):
        assert StoreTimestamp(1) < StoreTimestamp(2) < StoreTimestamp(2, 1)

    def test_to_datetime_rejects_foreign_values(self):
        with pytest.raises(TypeError):
            to_datetime("2024-01-01")

    def test_format_iso(self):
        assert format_iso(datetime(2024, 1, 1)) == "2024-01-01T00:00:00.000Z"
