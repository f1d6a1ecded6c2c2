"""
Core scoring logic for Repository Pulse.

``calculate_all_metrics`` runs every registered metric over one repository's
activity bundle and ``calculate_overall_pulse`` folds the six built-in
metrics into a single verdict.
"""

import math
from datetime import datetime
from typing import Any, NamedTuple

from rich.console import Console

from repo_pulse.constants import METRIC_KEYS, PULSE, STATUS_LABELS
from repo_pulse.inputs import PulseInput, parse_pulse_input
from repo_pulse.metrics import load_metric_specs
from repo_pulse.metrics.base import (
    MetricContext,
    MetricResult,
    MetricSpec,
    PulseStatus,
    TrendDirection,
)
from repo_pulse.metrics.defaults import get_default_metric
from repo_pulse.trend import get_trend_direction
from repo_pulse.utils import is_number, round_half_up, to_number, utc_now

# Warnings go to stderr so --json output stays parseable
console = Console(stderr=True)


class Concerns(NamedTuple):
    """Metrics currently cooling or at risk."""

    count: int
    metrics: list[str]


class OverallPulse(NamedTuple):
    """Aggregate health verdict for a repository."""

    status: PulseStatus
    score: int  # 0-100
    pulse_speed: int  # Heartbeat interval in ms; faster is healthier
    trend: int
    direction: TrendDirection
    label: str
    concerns: Concerns
    breakdown: dict[str, PulseStatus]
    metrics_used: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "score": self.score,
            "pulse_speed": self.pulse_speed,
            "trend": self.trend,
            "direction": self.direction.value,
            "label": self.label,
            "concerns": {
                "count": self.concerns.count,
                "metrics": list(self.concerns.metrics),
            },
            "breakdown": {key: status.value for key, status in self.breakdown.items()},
            "metrics_used": self.metrics_used,
        }


class PulseReport(NamedTuple):
    """All metric results plus the overall pulse."""

    metrics: dict[str, MetricResult]
    overall: OverallPulse

    def to_dict(self) -> dict[str, Any]:
        return {
            "metrics": {key: result.to_dict() for key, result in self.metrics.items()},
            "overall": self.overall.to_dict(),
        }


def _field(metric: Any, name: str) -> Any:
    """Read a field from a MetricResult or a plain mapping."""
    if isinstance(metric, MetricResult):
        return getattr(metric, name)
    if isinstance(metric, dict):
        return metric.get(name)
    return None


def _resolve_weights(weights: Any) -> dict[str, float]:
    """Usable per-metric weights; falls back to defaults when unusable."""
    if not isinstance(weights, dict):
        return dict(PULSE["WEIGHTS"])
    resolved = {key: max(0, to_number(weights.get(key, 0))) for key in METRIC_KEYS}
    if sum(resolved.values()) <= 0:
        return dict(PULSE["WEIGHTS"])
    return resolved


def _aggregate_status(statuses: list[PulseStatus]) -> PulseStatus:
    # Thresholds assume exactly six metrics
    aggregation = PULSE["AGGREGATION"]
    at_risk = statuses.count(PulseStatus.AT_RISK)
    cooling = statuses.count(PulseStatus.COOLING)
    thriving = statuses.count(PulseStatus.THRIVING)

    if at_risk >= aggregation["AT_RISK_COUNT"]:
        return PulseStatus.AT_RISK
    if cooling >= aggregation["COOLING_COUNT"] or at_risk > 0:
        return PulseStatus.COOLING
    if thriving >= aggregation["THRIVING_COUNT"]:
        return PulseStatus.THRIVING
    return PulseStatus.STABLE


def calculate_overall_pulse(
    metrics: Any,
    overall_status: Any = None,
    weights: dict[str, int] | None = None,
) -> OverallPulse:
    """
    Combine the six metric statuses into an overall pulse.

    Status rules (first match wins):
    - 2+ metrics at_risk: at_risk
    - 3+ cooling or any at_risk: cooling
    - 4+ thriving: thriving
    - otherwise: stable

    Missing metrics and unrecognised statuses count as stable. A recognised
    ``overall_status`` replaces the computed status.

    The score is the weighted mean of per-status scores (thriving 100,
    stable 70, cooling 40, at_risk 15).
    """
    if not isinstance(metrics, dict):
        metrics = {}

    breakdown: dict[str, PulseStatus] = {}
    trends = []
    metrics_used = 0
    for key in METRIC_KEYS:
        metric = metrics.get(key)
        if metric is None:
            breakdown[key] = PulseStatus.STABLE
            continue
        metrics_used += 1
        breakdown[key] = PulseStatus.parse(_field(metric, "status")) or PulseStatus.STABLE
        trend = _field(metric, "trend")
        if is_number(trend) and not math.isinf(trend):
            trends.append(trend)

    status = PulseStatus.parse(overall_status) or _aggregate_status(
        list(breakdown.values())
    )

    resolved = _resolve_weights(weights)
    status_scores = PULSE["STATUS_SCORES"]
    weighted = sum(
        resolved[key] * status_scores[breakdown[key].value] for key in METRIC_KEYS
    )
    score = round_half_up(weighted / sum(resolved.values()))

    trend = round_half_up(sum(trends) / len(trends)) if trends else 0

    concern_keys = [
        key
        for key in METRIC_KEYS
        if breakdown[key] in (PulseStatus.COOLING, PulseStatus.AT_RISK)
    ]
    status_text = STATUS_LABELS[status.value]
    label = f"{status_text['label']}: {status_text['description']}"
    if concern_keys:
        noun = "concern" if len(concern_keys) == 1 else "concerns"
        label += f" ({len(concern_keys)} {noun})"

    return OverallPulse(
        status=status,
        score=score,
        pulse_speed=PULSE["ANIMATION_SPEED"][status.value],
        trend=trend,
        direction=get_trend_direction(trend),
        label=label,
        concerns=Concerns(count=len(concern_keys), metrics=concern_keys),
        breakdown=breakdown,
        metrics_used=metrics_used,
    )


def _run_metric(
    spec: MetricSpec, pulse_input: PulseInput, context: MetricContext
) -> MetricResult:
    try:
        return spec.checker(pulse_input, context)
    except Exception as e:
        if spec.error_log:
            console.print(spec.error_log.format(error=e))
        if spec.on_error is not None:
            return spec.on_error(e)
        return get_default_metric(spec.name)._replace(
            label=f"Note: Analysis incomplete - {e}"
        )


def calculate_all_metrics(
    data: Any,
    *,
    weights: dict[str, int] | None = None,
    now: datetime | None = None,
) -> PulseReport:
    """
    Compute every metric and the overall pulse for one repository.

    Args:
        data: JSON bundle with ``repo``, ``participation``, ``issues``,
            ``prs``, ``contributors``, ``events`` and ``releases``; any other
            value yields default metrics.
        weights: Per-metric weights for the overall score. Defaults to the
            built-in weights.
        now: Reference time for windowed metrics. Defaults to the current time.

    Returns:
        PulseReport with one MetricResult per registered metric.
    """
    if not isinstance(data, (dict, PulseInput)):
        defaults = {key: get_default_metric(key) for key in METRIC_KEYS}
        return PulseReport(
            metrics=defaults,
            overall=calculate_overall_pulse(None, weights=weights),
        )

    context = MetricContext(now=utc_now(now))
    pulse_input = parse_pulse_input(data)

    results = {
        spec.name: _run_metric(spec, pulse_input, context)
        for spec in load_metric_specs()
    }
    return PulseReport(
        metrics=results,
        overall=calculate_overall_pulse(results, weights=weights),
    )
