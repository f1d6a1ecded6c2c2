"""
Repository Pulse: health vital signs for GitHub repositories.
"""

from repo_pulse.core import (
    Concerns,
    OverallPulse,
    PulseReport,
    calculate_all_metrics,
    calculate_overall_pulse,
)
from repo_pulse.inputs import PulseInput, parse_pulse_input
from repo_pulse.metrics.base import MetricResult, PulseStatus, TrendDirection
from repo_pulse.metrics.bus_factor import calculate_bus_factor
from repo_pulse.metrics.defaults import get_default_metric
from repo_pulse.metrics.freshness import calculate_freshness_index, calculate_freshness_score
from repo_pulse.metrics.issue_temperature import calculate_issue_temperature
from repo_pulse.metrics.momentum import calculate_community_momentum
from repo_pulse.metrics.pr_health import calculate_pr_health
from repo_pulse.metrics.velocity import calculate_velocity_score

__all__ = [
    "Concerns",
    "MetricResult",
    "OverallPulse",
    "PulseInput",
    "PulseReport",
    "PulseStatus",
    "TrendDirection",
    "calculate_all_metrics",
    "calculate_bus_factor",
    "calculate_community_momentum",
    "calculate_freshness_index",
    "calculate_freshness_score",
    "calculate_issue_temperature",
    "calculate_overall_pulse",
    "calculate_pr_health",
    "calculate_velocity_score",
    "get_default_metric",
    "parse_pulse_input",
]
