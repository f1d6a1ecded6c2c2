"""
Tests for the community momentum metric.
"""

import json
from datetime import datetime, timedelta, timezone

import pytest

from repo_pulse.inputs import PulseInput
from repo_pulse.metrics.base import MetricContext, PulseStatus, TrendDirection
from repo_pulse.metrics.momentum import (
    METRIC,
    approximate_star_sparkline,
    calculate_community_momentum,
)

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def _at(days_ago: float) -> str:
    return (NOW - timedelta(days=days_ago)).isoformat()


def _repo(stars: int, forks: int = 0, age_days: int | None = 1500) -> dict:
    repo = {"stargazers_count": stars, "forks_count": forks}
    if age_days is not None:
        repo["created_at"] = _at(age_days)
    return repo


def _events(event_type: str, count: int, days: int = 30) -> list[dict]:
    return [
        {"type": event_type, "created_at": _at((i % days) + 0.5)} for i in range(count)
    ]


class TestMomentumMetric:
    """Test the calculate_community_momentum function."""

    @pytest.mark.parametrize("repo", [None, [], "repo", 5])
    def test_invalid_repo_returns_default(self, repo):
        """Test when repository data is not available."""
        result = calculate_community_momentum(repo, now=NOW)
        assert result.label == "Growth data unavailable"
        assert result.status == PulseStatus.STABLE

    def test_established_project_without_events(self):
        """Test an established project without events."""
        result = calculate_community_momentum(_repo(1500, forks=300), now=NOW)
        assert result.value == 1500
        assert result.trend == 0
        assert result.direction == TrendDirection.STABLE
        assert result.label == "1.5K stars (stable)"
        # 80 (stars) + 5 (1 star/day) + 5 (fork ratio 0.2)
        assert result.details["score"] == 90
        assert result.status == PulseStatus.THRIVING
        assert result.details["daily_star_rate"] == 1.0
        assert result.details["fork_ratio"] == 0.2
        assert result.details["repo_age_days"] == 1500

    def test_sparkline_without_events_is_flagged_approximation(self):
        """Test the sparkline without events is flagged approximate."""
        result = calculate_community_momentum(_repo(1500), now=NOW)
        assert result.details["sparkline_approximate"] is True
        assert len(result.sparkline_data) == 30
        assert result.sparkline_data[0] == 1.2
        assert result.sparkline_data == approximate_star_sparkline(1500, 30)

    def test_zero_stars_gives_flat_sparkline(self):
        """Test with no stars."""
        result = calculate_community_momentum(_repo(0), now=NOW)
        assert result.sparkline_data == [0] * 30
        assert result.label == "0 stars (stable)"
        assert result.status == PulseStatus.AT_RISK

    def test_accelerating_stars(self):
        """Test with stars arriving faster than usual."""
        events = _events("WatchEvent", 60) + _events("ForkEvent", 4)
        result = calculate_community_momentum(_repo(1500, forks=300), events, now=NOW)
        assert result.trend == 100
        assert result.direction == TrendDirection.UP
        assert result.label == "1.5K stars (+100%)"
        assert result.details["recent_stars"] == 60
        assert result.details["recent_forks"] == 4
        assert result.details["sparkline_approximate"] is False
        assert sum(result.sparkline_data) == 60

    def test_slowing_stars(self):
        """Test with stars arriving slower than usual."""
        events = _events("WatchEvent", 3)
        result = calculate_community_momentum(_repo(3600, age_days=3600), events, now=NOW)
        assert result.trend == -90
        assert result.direction == TrendDirection.DOWN
        assert result.label == "3.6K stars (-90%)"

    def test_stars_without_lifetime_rate(self):
        """Test recent stars on a repository with no stars counted."""
        events = _events("WatchEvent", 2)
        result = calculate_community_momentum(_repo(0), events, now=NOW)
        assert result.trend == 100

    def test_old_events_are_ignored(self):
        """Test events outside the window are ignored."""
        events = [{"type": "WatchEvent", "created_at": _at(45)}]
        result = calculate_community_momentum(_repo(1500), events, now=NOW)
        assert result.details["recent_stars"] == 0
        assert result.trend == 0

    def test_missing_created_at_uses_max_age(self):
        """Test a missing creation date uses the maximum age."""
        result = calculate_community_momentum(_repo(3650, age_days=None), now=NOW)
        assert result.details["repo_age_days"] == 3650
        assert result.details["daily_star_rate"] == 1.0

    def test_brand_new_repo_has_minimum_age(self):
        """Test a brand new repository counts as one day old."""
        result = calculate_community_momentum(_repo(10, age_days=0), now=NOW)
        assert result.details["repo_age_days"] == 1

    def test_star_formatting(self):
        """Test star count formatting."""
        assert calculate_community_momentum(_repo(1000), now=NOW).label.startswith(
            "1K stars"
        )
        assert calculate_community_momentum(_repo(12345), now=NOW).label.startswith(
            "12.3K stars"
        )
        assert calculate_community_momentum(_repo(42), now=NOW).label.startswith(
            "42 stars"
        )

    def test_string_counts_are_coerced(self):
        """Test numeric strings are accepted as counts."""
        result = calculate_community_momentum(
            {"stargazers_count": "200", "forks_count": None}, now=NOW
        )
        assert result.value == 200
        assert result.details["forks"] == 0

    def test_huge_counts_fall_back_to_zero(self):
        """Test star and fork counts beyond float range count as zero."""
        huge = json.loads("1" + "0" * 400)
        result = calculate_community_momentum(_repo(huge, huge), now=NOW)
        assert result.value == 0
        assert result.details["forks"] == 0
        assert result.label == "0 stars (stable)"

    def test_idempotent_with_fixed_now(self):
        """Test repeated runs with a fixed clock agree."""
        events = _events("WatchEvent", 10)
        first = calculate_community_momentum(_repo(500), events, now=NOW)
        second = calculate_community_momentum(_repo(500), events, now=NOW)
        assert first == second

    def test_metric_spec_passes_events_and_now(self):
        """Test the metric spec passes events and the clock."""
        pulse_input = PulseInput(repo=_repo(1500), events=_events("WatchEvent", 60))
        result = METRIC.checker(pulse_input, MetricContext(now=NOW))
        assert result.details["recent_stars"] == 60
