"""Tests for upstream timestamp normalization."""

import re
from datetime import datetime, timedelta, timezone

import pytest

from prototype_cache.normalizer.timestamps import LOCAL_UTC_OFFSET, normalize_timestamp

CANONICAL = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


class TestLocalTimestamps:
    """Timestamps without a timezone designator are treated as UTC+9."""

    def test_space_separated_local_time(self):
        assert normalize_timestamp("2024-01-15 12:34:56") == "2024-01-15T03:34:56.000Z"

    def test_upstream_format_with_single_fraction_digit(self):
        assert normalize_timestamp("2025-11-14 12:03:07.0") == "2025-11-14T03:03:07.000Z"

    def test_t_separator_is_accepted(self):
        assert normalize_timestamp("2024-01-15T12:34:56") == "2024-01-15T03:34:56.000Z"

    def test_crosses_midnight_backwards(self):
        assert normalize_timestamp("2024-01-01 08:59:59.0") == "2023-12-31T23:59:59.000Z"

    @pytest.mark.parametrize("raw,expected", [
        ("2024-01-15 12:34:56.1", "2024-01-15T03:34:56.100Z"),
        ("2024-01-15 12:34:56.12", "2024-01-15T03:34:56.120Z"),
        ("2024-01-15 12:34:56.123", "2024-01-15T03:34:56.123Z"),
        ("2024-01-15 12:34:56.123456", "2024-01-15T03:34:56.123Z"),
        ("2024-01-15 12:34:56.999999999", "2024-01-15T03:34:56.999Z"),
    ])
    def test_fraction_padded_or_truncated(self, raw, expected):
        """Fractions are padded/truncated to milliseconds, never rounded"""
        assert normalize_timestamp(raw) == expected

    def test_matches_manual_offset_conversion(self):
        """Output equals the wall-clock time at UTC+9 converted to UTC"""
        for hour in (0, 5, 9, 13, 23):
            raw = f"2023-06-30 {hour:02d}:15:30.5"
            local = datetime(2023, 6, 30, hour, 15, 30, 500000, tzinfo=timezone(LOCAL_UTC_OFFSET))
            expected = local.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.500Z")
            result = normalize_timestamp(raw)
            assert result == expected
            assert CANONICAL.match(result)

    def test_deterministic(self):
        values = {normalize_timestamp("2024-07-07 07:07:07.7") for _ in range(5)}
        assert values == {"2024-07-06T22:07:07.700Z"}


class TestExplicitOffsets:
    """Timestamps carrying Z or an offset are converted directly."""

    @pytest.mark.parametrize("raw,expected", [
        ("2025-11-14T12:03:07Z", "2025-11-14T12:03:07.000Z"),
        ("2025-11-14T12:03:07z", "2025-11-14T12:03:07.000Z"),
        ("2025-11-14T12:03Z", "2025-11-14T12:03:00.000Z"),
        ("2025-11-14T12:03:07.123Z", "2025-11-14T12:03:07.123Z"),
        ("2025-11-14T12:03:07+09:00", "2025-11-14T03:03:07.000Z"),
        ("2025-11-14T12:03:07.45+09:00", "2025-11-14T03:03:07.450Z"),
        ("2025-11-14T12:03:07-05:00", "2025-11-14T17:03:07.000Z"),
        ("2025-11-14T12:03:07+0530", "2025-11-14T06:33:07.000Z"),
    ])
    def test_offset_formats(self, raw, expected):
        assert normalize_timestamp(raw) == expected

    def test_offset_is_not_shifted_again(self):
        """An explicit +09:00 must not get the local offset applied twice"""
        assert normalize_timestamp("2024-01-15T12:34:56+09:00") == normalize_timestamp(
            "2024-01-15 12:34:56"
        )


class TestUnparseableTimestamps:
    """Invalid input yields None instead of raising."""

    @pytest.mark.parametrize("value", [None, "", "   ", "\t\n"])
    def test_blank_values(self, value):
        assert normalize_timestamp(value) is None

    @pytest.mark.parametrize("value", [
        "not a date",
        "2024-01-15",
        "2024/01/15 12:34:56",
        "2024-13-01 00:00:00",
        "2024-02-30 00:00:00",
        "2024-01-15 25:00:00",
        "2024-01-15 12:34",
        "2024-01-15T12:34:56+25:00",
    ])
    def test_invalid_strings(self, value):
        assert normalize_timestamp(value) is None

    @pytest.mark.parametrize("value", [12345, 1.5, ["2024-01-15 12:34:56"], {"date": "x"}])
    def test_non_string_values(self, value):
        assert normalize_timestamp(value) is None

    def test_out_of_range_instant(self):
        """Subtracting the local offset from year 1 falls outside the range"""
        assert normalize_timestamp("0001-01-01 00:00:00") is None

    def test_surrounding_whitespace_is_ignored(self):
        assert normalize_timestamp("  2024-01-15 12:34:56  ") == "2024-01-15T03:34:56.000Z"


def test_local_offset_constant():
    assert LOCAL_UTC_OFFSET == timedelta(hours=9)


pytestmark = pytest.mark.unit
