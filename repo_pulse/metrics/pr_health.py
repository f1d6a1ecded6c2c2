"""Pull request health metric."""

from datetime import datetime
from typing import Any

from repo_pulse.constants import PR_HEALTH
from repo_pulse.metrics.base import MetricContext, MetricResult, MetricSpec
from repo_pulse.metrics.defaults import default_prs
from repo_pulse.trend import (
    daily_counts,
    filter_window,
    get_trend_direction,
    percentage_change,
    split_window,
)
from repo_pulse.utils import (
    average,
    clamp,
    days_between,
    format_number,
    get_metric_status,
    round_half_up,
)


def is_merged(pr: dict[str, Any]) -> bool:
    """A PR counts as merged if either merge signal is present."""
    return pr.get("merged") is True or bool(pr.get("merged_at"))


def is_closed_unmerged(pr: dict[str, Any]) -> bool:
    return (
        pr.get("state") == "closed"
        and not pr.get("merged")
        and not pr.get("merged_at")
    )


def _merge_rate(prs: list[dict[str, Any]]) -> float:
    merged = sum(1 for pr in prs if is_merged(pr))
    completed = merged + sum(1 for pr in prs if is_closed_unmerged(pr))
    return merged * 100 / completed if completed > 0 else 0


def _merge_rate_score(merge_rate: float) -> int:
    rates = PR_HEALTH["MERGE_RATE"]
    if merge_rate >= rates["EXCELLENT"]:
        return 100
    if merge_rate >= rates["GOOD"]:
        return 75
    if merge_rate >= rates["FAIR"]:
        return 50
    if merge_rate >= rates["POOR"]:
        return 25
    return 10


def _time_modifier(avg_days: float) -> int:
    times = PR_HEALTH["TIME_TO_MERGE"]
    if avg_days <= times["EXCELLENT"]:
        return 15
    if avg_days <= times["GOOD"]:
        return 10
    if avg_days <= times["FAIR"]:
        return 0
    if avg_days <= times["SLOW"]:
        return -10
    return -15


def _volume_modifier(weekly_volume: float) -> int:
    volume = PR_HEALTH["VOLUME"]
    if weekly_volume >= volume["HIGH"]:
        return 5
    if weekly_volume >= volume["MEDIUM"]:
        return 0
    if weekly_volume >= volume["LOW"]:
        return -5
    return -10


def calculate_pr_health(
    pull_requests: Any, *, now: datetime | None = None
) -> MetricResult:
    """
    Evaluates the pull request funnel over the last 30 days.

    Merge rate only counts completed PRs: merged / (merged + closed unmerged).

    Scoring (0-100):
    - Merge rate tier: 80%+ = 100, 60%+ = 75, 40%+ = 50, 20%+ = 25, else 10
    - Time to merge: <=1d = +15, <=3d = +10, <=7d = 0, <=14d = -10, else -15
    - Weekly volume: 10+ = +5, 5+ = 0, 1+ = -5, else -10
    """
    if not isinstance(pull_requests, (list, tuple)):
        return default_prs()

    window_days = PR_HEALTH["WINDOW_DAYS"]
    recent = filter_window(pull_requests, window_days, now)
    if not recent:
        return default_prs()

    merged = [pr for pr in recent if is_merged(pr)]
    total_opened = len(recent)
    merged_count = len(merged)
    closed_count = sum(1 for pr in recent if is_closed_unmerged(pr))
    open_count = sum(1 for pr in recent if pr.get("state") == "open")
    completed = merged_count + closed_count
    merge_rate = _merge_rate(recent)

    merge_days = [
        days_between(pr["created_at"], pr["merged_at"])
        for pr in merged
        if pr.get("created_at") and pr.get("merged_at")
    ]
    avg_time_to_merge = average(merge_days)
    weekly_volume = total_opened / (window_days / 7)

    score = clamp(
        _merge_rate_score(merge_rate)
        + _time_modifier(avg_time_to_merge)
        + _volume_modifier(weekly_volume),
        0,
        100,
    )

    halves = split_window(recent, window_days, now)
    change = percentage_change(_merge_rate(halves.newer), _merge_rate(halves.older))
    trend = clamp(round_half_up(change), -100, 100)

    rounded_rate = round_half_up(merge_rate)
    rounded_days = round_half_up(avg_time_to_merge, 1)
    if completed == 0 and open_count > 0:
        label = f"{open_count} open PRs"
    elif avg_time_to_merge > 0:
        label = f"{rounded_rate}% merged, ~{format_number(rounded_days)}d avg"
    else:
        label = f"{rounded_rate}% merge rate"

    return MetricResult(
        value=rounded_rate,
        trend=trend,
        direction=get_trend_direction(trend),
        sparkline_data=daily_counts(recent, window_days, now),
        status=get_metric_status(score),
        label=label,
        details={
            "funnel": {
                "opened": total_opened,
                "merged": merged_count,
                "closed": closed_count,
                "open": open_count,
            },
            "merge_rate": round_half_up(merge_rate, 1),
            "avg_time_to_merge": rounded_days,
            "total_opened": total_opened,
            "merged_count": merged_count,
            "closed_count": closed_count,
            "open_count": open_count,
            "weekly_volume": round_half_up(weekly_volume, 1),
            "score": score,
        },
    )


def _check(pulse_input: Any, context: MetricContext) -> MetricResult:
    return calculate_pr_health(pulse_input.prs, now=context.now)


def _on_error(error: Exception) -> MetricResult:
    return default_prs()._replace(label=f"Note: Analysis incomplete - {error}")


METRIC = MetricSpec(
    name="prs",
    title="PR Health",
    checker=_check,
    on_error=_on_error,
    error_log="  [yellow]⚠️  PR health check incomplete: {error}[/yellow]",
)
