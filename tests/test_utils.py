"""
Tests for the shared numeric and date helpers.
"""

import json
import math
from datetime import date, datetime, timezone

from repo_pulse.metrics.base import PulseStatus
from repo_pulse.utils import (
    average,
    clamp,
    days_between,
    days_since,
    empty_sparkline,
    format_number,
    get_metric_status,
    is_number,
    round_half_up,
    safe_parse_date,
    to_number,
)

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


class TestNumbers:
    """Test numeric coercion helpers."""

    def test_is_number_excludes_bool_and_nan(self):
        """Test booleans and NaN are not numbers."""
        assert is_number(3)
        assert is_number(2.5)
        assert not is_number(True)
        assert not is_number(float("nan"))
        assert not is_number("3")
        assert not is_number(None)

    def test_to_number_coerces_strings(self):
        """Test numeric strings are coerced."""
        assert to_number("12") == 12
        assert to_number(" 2.5 ") == 2.5
        assert to_number("abc") == 0
        assert to_number(None, default=7) == 7
        assert to_number(float("inf")) == 0
        assert to_number("nan") == 0

    def test_integers_beyond_float_range(self):
        """Test integers too large for a float degrade instead of raising."""
        huge = json.loads("1" + "0" * 400)
        assert not is_number(huge)
        assert to_number(huge) == 0
        assert to_number(-huge, default=5) == 5
        assert average([huge, 4]) == 2
        assert average([1e308, 1e308]) == 1e308
        assert round_half_up(huge) == huge
        assert round_half_up(1e308, 1) == 1e308

    def test_format_number_drops_trailing_zero(self):
        """Test whole floats drop the trailing zero."""
        assert format_number(5.0) == "5"
        assert format_number(5.5) == "5.5"
        assert format_number(12) == "12"

    def test_round_half_up(self):
        """Test halves round upwards."""
        assert round_half_up(2.5) == 3
        assert round_half_up(-2.5) == -2
        assert round_half_up(0.5) == 1
        assert round_half_up(1.25, 1) == 1.3
        assert isinstance(round_half_up(4.4), int)

    def test_average(self):
        """Test averages of mixed sequences."""
        assert average([1, 2, 3]) == 2
        assert average([]) == 0
        assert average(None) == 0
        assert average("123") == 0
        assert average([2, "x", "4"]) == 2

    def test_clamp(self):
        """Test clamping into a range."""
        assert clamp(150, -100, 100) == 100
        assert clamp(-150, -100, 100) == -100
        assert clamp(12, -100, 100) == 12
        assert clamp(float("nan"), 0, 10) == 0
        assert clamp(True, 0, 10) == 0
        assert clamp(None, 5, 10) == 5


class TestDates:
    """Test date parsing and day arithmetic."""

    def test_safe_parse_date_handles_z_suffix(self):
        """Test parsing a Z-suffixed timestamp."""
        parsed = safe_parse_date("2024-05-01T10:00:00Z")
        assert parsed == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)

    def test_safe_parse_date_date_only_and_naive(self):
        """Test date-only and naive values become UTC."""
        assert safe_parse_date("2024-05-01") == datetime(2024, 5, 1, tzinfo=timezone.utc)
        assert safe_parse_date(date(2024, 5, 1)) == datetime(
            2024, 5, 1, tzinfo=timezone.utc
        )
        naive = datetime(2024, 5, 1, 8, 30)
        assert safe_parse_date(naive).tzinfo is not None

    def test_safe_parse_date_invalid(self):
        """Test invalid dates parse to None."""
        assert safe_parse_date("not a date") is None
        assert safe_parse_date(None) is None
        assert safe_parse_date("") is None
        assert safe_parse_date(12345) is None

    def test_days_since(self):
        """Test whole days since a date."""
        assert days_since("2024-05-31T12:00:00Z", NOW) == 1
        assert days_since("2024-06-01T11:00:00Z", NOW) == 0
        assert days_since("2024-05-01T12:00:00Z", NOW) == 31

    def test_days_since_invalid_is_infinite(self):
        """Test an invalid date is infinitely old."""
        assert days_since(None, NOW) == math.inf
        assert days_since("garbage", NOW) == math.inf

    def test_days_between(self):
        """Test absolute days between two dates."""
        assert days_between("2024-05-01", "2024-05-04") == 3
        assert days_between("2024-05-04", "2024-05-01") == 3
        assert days_between("2024-05-01", None) == 0
        assert days_between("bad", "2024-05-01") == 0


class TestStatusHelpers:
    """Test status mapping and sparkline helpers."""

    def test_get_metric_status_bands(self):
        """Test score bands map to statuses."""
        assert get_metric_status(75) == PulseStatus.THRIVING
        assert get_metric_status(74.9) == PulseStatus.STABLE
        assert get_metric_status(50) == PulseStatus.STABLE
        assert get_metric_status(25) == PulseStatus.COOLING
        assert get_metric_status(24) == PulseStatus.AT_RISK
        assert get_metric_status("high") == PulseStatus.STABLE

    def test_status_compares_to_plain_string(self):
        """Test statuses compare equal to their string values."""
        assert get_metric_status(90) == "thriving"

    def test_empty_sparkline(self):
        """Test zero-filled sparklines."""
        assert empty_sparkline(3) == [0, 0, 0]
        assert empty_sparkline(2.7) == [0, 0]
        assert empty_sparkline(-1) == []
        assert empty_sparkline("5") == []
