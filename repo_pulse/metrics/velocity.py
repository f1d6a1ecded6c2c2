"""Commit velocity metric."""

from typing import Any

from repo_pulse.constants import VELOCITY
from repo_pulse.metrics.base import (
    MetricContext,
    MetricResult,
    MetricSpec,
    PulseStatus,
    TrendDirection,
)
from repo_pulse.metrics.defaults import default_velocity
from repo_pulse.trend import get_trend_direction, percentage_change
from repo_pulse.utils import (
    average,
    clamp,
    format_number,
    round_half_up,
    to_number,
)


def _activity_score(recent_avg: float) -> int:
    commits = VELOCITY["COMMITS"]
    if recent_avg >= commits["EXCELLENT"]:
        return 100
    if recent_avg >= commits["GOOD"]:
        return 80
    if recent_avg >= commits["FAIR"]:
        return 60
    if recent_avg >= commits["MINIMAL"]:
        return 40
    return 20


def _growth_tier(trend: float) -> tuple[int, PulseStatus]:
    """Score modifier and status for a growth percentage."""
    growth = VELOCITY["GROWTH"]
    if trend >= growth["THRIVING"]:
        return 15, PulseStatus.THRIVING
    if trend >= growth["STABLE"]:
        return 0, PulseStatus.STABLE
    if trend >= growth["COOLING"]:
        return -15, PulseStatus.COOLING
    return -25, PulseStatus.AT_RISK


def calculate_velocity_score(participation: Any) -> MetricResult:
    """
    Evaluates commit cadence from weekly participation counts.

    ``participation["all"]`` must be ordered oldest week first, as returned by
    the GitHub participation stats endpoint. The last 4 weeks ("recent") are
    compared against the up to 12 weeks before them ("previous").

    Scoring (0-100):
    - Activity tier by recent commits/week: 20+ = 100, 10+ = 80, 5+ = 60,
      1+ = 40, else 20
    - Growth modifier: +25% or more = +15, -10% or more = 0,
      -30% or more = -15, else -25

    Status follows the growth tier rather than the clamped score, since a
    busy but shrinking project is still cooling.
    """
    if not isinstance(participation, dict):
        return default_velocity()
    weeks = participation.get("all")
    if not isinstance(weeks, (list, tuple)):
        return default_velocity()

    weeks = [to_number(count) for count in weeks]
    sparkline = weeks[-VELOCITY["SPARKLINE_WEEKS"] :]

    recent_weeks = VELOCITY["RECENT_WEEKS"]
    if len(weeks) < recent_weeks:
        return default_velocity()._replace(
            sparkline_data=sparkline,
            label="Insufficient commit history",
        )

    previous_start = max(0, len(weeks) - recent_weeks - VELOCITY["PREVIOUS_WEEKS"])
    recent_avg = average(weeks[-recent_weeks:])
    previous_avg = average(weeks[previous_start : len(weeks) - recent_weeks])

    growth = percentage_change(recent_avg, previous_avg)
    growth_modifier, status = _growth_tier(growth)
    score = clamp(_activity_score(recent_avg) + growth_modifier, 0, 100)

    trend = clamp(round_half_up(growth), -100, 100)
    direction = get_trend_direction(trend)
    value = round_half_up(recent_avg, 1)

    if direction == TrendDirection.UP:
        label = f"{format_number(value)} commits/week (+{trend}%)"
    elif direction == TrendDirection.DOWN:
        label = f"{format_number(value)} commits/week ({trend}%)"
    else:
        label = f"{format_number(value)} commits/week (stable)"

    return MetricResult(
        value=value,
        trend=trend,
        direction=direction,
        sparkline_data=sparkline,
        status=status,
        label=label,
        details={
            "recent_avg": recent_avg,
            "previous_avg": previous_avg,
            "score": score,
        },
    )


def _check(pulse_input: Any, _context: MetricContext) -> MetricResult:
    return calculate_velocity_score(pulse_input.participation)


def _on_error(error: Exception) -> MetricResult:
    return default_velocity()._replace(label=f"Note: Analysis incomplete - {error}")


METRIC = MetricSpec(
    name="velocity",
    title="Commit Velocity",
    checker=_check,
    on_error=_on_error,
    error_log="  [yellow]⚠️  Commit velocity check incomplete: {error}[/yellow]",
)
