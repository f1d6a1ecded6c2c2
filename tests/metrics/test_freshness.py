"""
Tests for the freshness index metric.
"""

from datetime import datetime, timedelta, timezone

import pytest

from repo_pulse.inputs import PulseInput
from repo_pulse.metrics.base import MetricContext, PulseStatus
from repo_pulse.metrics.freshness import (
    METRIC,
    calculate_freshness_index,
    calculate_freshness_score,
    format_days,
)

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def _at(days_ago: float) -> str:
    return (NOW - timedelta(days=days_ago)).isoformat().replace("+00:00", "Z")


def _release(tag: str, days_ago: float) -> dict:
    return {"tag_name": tag, "published_at": _at(days_ago)}


class TestFreshnessScore:
    """Test the calculate_freshness_score curve."""

    def test_anchor_points(self):
        """Test scores at the curve anchor points."""
        assert calculate_freshness_score(0) == 100
        assert calculate_freshness_score(7) == 80
        assert calculate_freshness_score(30) == pytest.approx(50)
        assert calculate_freshness_score(90) == pytest.approx(20)
        assert calculate_freshness_score(365) <= 10

    @pytest.mark.parametrize(
        "days", [None, -1, "5", float("inf"), float("nan"), 10**400]
    )
    def test_invalid_days_score_zero(self, days):
        """Test invalid day counts score zero."""
        assert calculate_freshness_score(days) == 0

    def test_score_never_increases_with_age(self):
        """Test the score never rises with age."""
        scores = [calculate_freshness_score(days) for days in range(0, 1000)]
        assert all(a >= b for a, b in zip(scores, scores[1:]))
        assert min(scores) >= 0


class TestFormatDays:
    """Test relative duration formatting."""

    @pytest.mark.parametrize(
        "days, expected",
        [
            (0, "today"),
            (1, "1 day"),
            (3, "3 days"),
            (7, "1 week"),
            (20, "2 weeks"),
            (45, "1 month"),
            (90, "3 months"),
            (400, "1 year"),
            (800, "2 years"),
            (None, "unknown"),
            (float("inf"), "unknown"),
        ],
    )
    def test_format_days(self, days, expected):
        """Test relative duration formatting."""
        assert format_days(days) == expected


class TestFreshnessIndexMetric:
    """Test the calculate_freshness_index function."""

    @pytest.mark.parametrize("repo", [None, [], "repo"])
    def test_invalid_repo_returns_default(self, repo):
        """Test when repository data is not available."""
        result = calculate_freshness_index(repo, now=NOW)
        assert result.label == "Update data unavailable"
        assert result.details["freshness"] == "stale"
        assert result.details["days_since_push"] is None

    def test_pushed_today_with_release(self):
        """Test with a push today and a release."""
        repo = {"pushed_at": _at(0.1)}
        result = calculate_freshness_index(repo, [_release("v2.0.0", 3)], now=NOW)
        assert result.label == "Fresh: pushed today, latest release v2.0.0"
        assert result.value == 100
        assert result.status == PulseStatus.THRIVING
        assert result.details["days_since_release"] == 3
        assert result.details["last_release"] == "v2.0.0"
        assert result.sparkline_data == []
        assert result.trend == 0

    def test_recent_release_promotes_recent_push(self):
        """Test a recent release promotes a recent push to fresh."""
        repo = {"pushed_at": _at(20)}
        result = calculate_freshness_index(repo, [_release("v1.4.0", 10)], now=NOW)
        assert result.details["freshness"] == "fresh"
        assert result.status == PulseStatus.THRIVING
        assert result.value == 63

    def test_recent_push_without_release(self):
        """Test with a recent push and no release."""
        result = calculate_freshness_index({"pushed_at": _at(20)}, now=NOW)
        assert result.details["freshness"] == "recent"
        assert result.status == PulseStatus.STABLE
        assert result.label == "Recent: pushed 2 weeks ago"
        assert result.details["last_release"] == "None"
        assert result.details["days_since_release"] is None

    def test_old_release_does_not_promote(self):
        """Test an old release does not promote the band."""
        repo = {"pushed_at": _at(20)}
        result = calculate_freshness_index(repo, [_release("v1.0.0", 200)], now=NOW)
        assert result.details["freshness"] == "recent"

    @pytest.mark.parametrize(
        "days, freshness, status",
        [
            (3, "fresh", PulseStatus.THRIVING),
            (60, "aging", PulseStatus.COOLING),
            (120, "stale", PulseStatus.AT_RISK),
            (400, "dormant", PulseStatus.AT_RISK),
        ],
    )
    def test_bands(self, days, freshness, status):
        """Test each freshness band."""
        result = calculate_freshness_index({"pushed_at": _at(days)}, now=NOW)
        assert result.details["freshness"] == freshness
        assert result.status == status
        assert result.details["days_since_push"] == days

    def test_dormant_label(self):
        """Test the label of a dormant repository."""
        result = calculate_freshness_index({"pushed_at": _at(400)}, now=NOW)
        assert result.label == "Dormant: pushed 1 year ago"

    def test_falls_back_to_updated_at(self):
        """Test updated_at is used when pushed_at is missing."""
        repo = {"pushed_at": "garbage", "updated_at": _at(2)}
        result = calculate_freshness_index(repo, now=NOW)
        assert result.details["days_since_push"] == 2
        assert result.details["freshness"] == "fresh"

    def test_unknown_push_is_stale(self):
        """Test an unknown push date is stale."""
        result = calculate_freshness_index({}, now=NOW)
        assert result.details["freshness"] == "stale"
        assert result.details["days_since_push"] is None
        assert result.value == 0
        assert result.label == "Stale: last push unknown"

    def test_latest_release_is_chosen_by_date(self):
        """Test the newest release is chosen by date."""
        releases = [
            _release("v1.0.0", 100),
            _release("v1.2.0", 5),
            {"tag_name": "broken", "published_at": "not a date"},
            _release("v1.1.0", 50),
        ]
        result = calculate_freshness_index({"pushed_at": _at(1)}, releases, now=NOW)
        assert result.details["last_release"] == "v1.2.0"
        assert result.details["days_since_release"] == 5

    def test_metric_spec_reads_repo_and_releases(self):
        """Test the metric spec reads repo and releases."""
        pulse_input = PulseInput(
            repo={"pushed_at": _at(0)}, releases=[_release("v3.0.0", 1)]
        )
        result = METRIC.checker(pulse_input, MetricContext(now=NOW))
        assert result.details["last_release"] == "v3.0.0"
