"""
Fallback results for metrics whose input data is missing or unusable.

Each builder returns a fresh ``MetricResult`` so callers can never share or
mutate another result's ``details``.
"""

from typing import Callable

from repo_pulse.metrics.base import MetricResult, PulseStatus, TrendDirection


def default_metric(label: str = "Data unavailable") -> MetricResult:
    """Generic stable, zero-valued result."""
    return MetricResult(
        value=0,
        trend=0,
        direction=TrendDirection.STABLE,
        sparkline_data=[],
        status=PulseStatus.STABLE,
        label=label,
        details={},
    )


def default_velocity() -> MetricResult:
    return default_metric("Commit data unavailable")


def default_momentum() -> MetricResult:
    return default_metric("Growth data unavailable")


def default_issues() -> MetricResult:
    # No recent issues reads as healthy, not as missing data
    return default_metric("No recent issues")._replace(
        value="Cool",
        details={"temperature": "cool"},
    )


def default_prs() -> MetricResult:
    return default_metric("No recent pull requests")._replace(
        details={"funnel": {"opened": 0, "merged": 0, "closed": 0, "open": 0}},
    )


def default_bus_factor() -> MetricResult:
    return default_metric("Contributor data unavailable")._replace(
        value=1,
        details={"risk_level": "critical"},
    )


def default_freshness() -> MetricResult:
    return default_metric("Update data unavailable")._replace(
        details={
            "freshness": "stale",
            "days_since_push": None,
            "days_since_release": None,
            "last_release": "None",
        },
    )


DEFAULT_BUILDERS: dict[str, Callable[[], MetricResult]] = {
    "velocity": default_velocity,
    "momentum": default_momentum,
    "issues": default_issues,
    "prs": default_prs,
    "busFactor": default_bus_factor,
    "freshness": default_freshness,
}


def get_default_metric(metric_type: str | None = None) -> MetricResult:
    """
    Return the fallback result for a metric type.

    Unknown types get the generic default with the type named in its label.

    Example:
        >>> get_default_metric("issues").value
        'Cool'
        >>> get_default_metric("unknown").label
        'unknown data unavailable'
    """
    if not isinstance(metric_type, str) or not metric_type:
        return default_metric()
    builder = DEFAULT_BUILDERS.get(metric_type)
    if builder is not None:
        return builder()
    return default_metric(f"{metric_type} data unavailable")
