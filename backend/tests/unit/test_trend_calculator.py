"""
Theme Park Wait Watch - Trend Calculator Unit Tests

Tests calculate_trend() over the full decision table and
validate_wait_time() sanitisation of raw API values.

Priority: P0 - Computed for every stored sample
"""

import pytest

from collector.trend_calculator import calculate_trend, validate_wait_time
from models.wait_time import Trend


class TestCalculateTrend:
    """Trend is derived strictly from the immediately preceding sample."""

    @pytest.mark.parametrize("current,previous,expected", [
        (30, None, Trend.NEW),
        (None, None, Trend.NEW),
        (None, 20, Trend.SAME),
        (30, 20, Trend.UP),
        (10, 20, Trend.DOWN),
        (20, 20, Trend.SAME),
        (0, 5, Trend.DOWN),
        (5, 0, Trend.UP),
    ])
    def test_trend_table(self, current, previous, expected):
        assert calculate_trend(current, previous) == expected

    def test_zero_previous_is_not_treated_as_missing(self):
        """
        Given: previous wait of 0 minutes (a real sample)
        When: current is also 0
        Then: SAME, not NEW
        """
        assert calculate_trend(0, 0) == Trend.SAME

    def test_trend_values_are_storage_strings(self):
        assert calculate_trend(30, 20).value == "up"
        assert calculate_trend(30, None).value == "new"


class TestValidateWaitTime:

    def test_valid_wait_time_passes_through(self):
        assert validate_wait_time(45) == 45

    def test_zero_is_valid(self):
        assert validate_wait_time(0) == 0

    def test_negative_wait_time_becomes_none(self):
        assert validate_wait_time(-1) is None

    def test_none_stays_none(self):
        assert validate_wait_time(None) is None

    def test_numeric_string_is_converted(self):
        assert validate_wait_time("15") == 15

    def test_garbage_becomes_none(self):
        assert validate_wait_time("soon") is None
        assert validate_wait_time({"minutes": 5}) is None

    def test_boolean_is_not_a_wait_time(self):
        assert validate_wait_time(True) is None

    def test_large_values_are_not_capped(self):
        assert validate_wait_time(999) == 999
