"""Issue temperature metric."""

from datetime import datetime
from typing import Any

from repo_pulse.constants import ISSUES
from repo_pulse.metrics.base import MetricContext, MetricResult, MetricSpec, PulseStatus
from repo_pulse.metrics.defaults import default_issues
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
    round_half_up,
)

_TEMPERATURE_STATUS = {
    "cool": PulseStatus.THRIVING,
    "warm": PulseStatus.STABLE,
    "hot": PulseStatus.COOLING,
    "critical": PulseStatus.AT_RISK,
}


def _is_closed(issue: dict[str, Any]) -> bool:
    return issue.get("state") == "closed"


def _close_rate(issues: list[dict[str, Any]]) -> float:
    if not issues:
        return 0
    return sum(1 for issue in issues if _is_closed(issue)) * 100 / len(issues)


def _temperature(close_rate: float) -> str:
    rates = ISSUES["CLOSE_RATE"]
    if close_rate >= rates["COOL"]:
        return "cool"
    if close_rate >= rates["WARM"]:
        return "warm"
    if close_rate >= rates["HOT"]:
        return "hot"
    return "critical"


def _close_rate_score(temperature: str) -> int:
    return {"cool": 100, "warm": 70, "hot": 40}.get(temperature, 15)


def _response_modifier(avg_days: float) -> int:
    response = ISSUES["RESPONSE_TIME"]
    if avg_days <= response["EXCELLENT"]:
        return 10
    if avg_days <= response["GOOD"]:
        return 5
    if avg_days <= response["FAIR"]:
        return 0
    if avg_days <= response["SLOW"]:
        return -10
    return -15


def calculate_issue_temperature(
    issues: Any, *, now: datetime | None = None
) -> MetricResult:
    """
    Evaluates how quickly issues opened in the last 30 days are being closed.

    Temperature by close rate: 70%+ cool, 40%+ warm, 20%+ hot, else critical.
    No recent issues is reported as cool, since there is nothing piling up.

    The trend compares the close rate of the newer half of the window against
    the older half.
    """
    if not isinstance(issues, (list, tuple)):
        return default_issues()

    window_days = ISSUES["WINDOW_DAYS"]
    recent = filter_window(issues, window_days, now)
    if not recent:
        return default_issues()

    closed = [issue for issue in recent if _is_closed(issue)]
    total_count = len(recent)
    closed_count = len(closed)
    open_count = sum(1 for issue in recent if issue.get("state") == "open")
    close_rate = closed_count * 100 / total_count

    response_days = [
        days_between(issue["created_at"], issue["closed_at"])
        for issue in closed
        if issue.get("created_at") and issue.get("closed_at")
    ]
    avg_response_days = average(response_days)

    temperature = _temperature(close_rate)
    temperature_label = ISSUES["TEMPERATURE"][temperature]["label"]
    score = clamp(
        _close_rate_score(temperature) + _response_modifier(avg_response_days), 0, 100
    )

    halves = split_window(recent, window_days, now)
    change = percentage_change(_close_rate(halves.newer), _close_rate(halves.older))
    trend = clamp(round_half_up(change), -100, 100)

    rounded_rate = round_half_up(close_rate)
    rounded_days = round_half_up(avg_response_days, 1)
    if closed_count == 0 and open_count > 0:
        label = f"{temperature_label}: {open_count} open (0% closed)"
    elif avg_response_days > 0:
        label = (
            f"{temperature_label}: {rounded_rate}% closed, "
            f"~{format_number(rounded_days)}d avg"
        )
    else:
        label = f"{temperature_label}: {rounded_rate}% closed"

    return MetricResult(
        value=temperature_label,
        trend=trend,
        direction=get_trend_direction(trend),
        sparkline_data=daily_counts(recent, window_days, now),
        status=_TEMPERATURE_STATUS[temperature],
        label=label,
        details={
            "temperature": temperature,
            "total_count": total_count,
            "open_count": open_count,
            "closed_count": closed_count,
            "close_rate": round_half_up(close_rate, 1),
            "avg_response_days": rounded_days,
            "score": score,
        },
    )


def _check(pulse_input: Any, context: MetricContext) -> MetricResult:
    return calculate_issue_temperature(pulse_input.issues, now=context.now)


def _on_error(error: Exception) -> MetricResult:
    return default_issues()._replace(label=f"Note: Analysis incomplete - {error}")


METRIC = MetricSpec(
    name="issues",
    title="Issue Temperature",
    checker=_check,
    on_error=_on_error,
    error_log="  [yellow]⚠️  Issue temperature check incomplete: {error}[/yellow]",
)
