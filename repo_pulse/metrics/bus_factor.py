"""Bus factor (contributor concentration) metric."""

import math
from typing import Any

from repo_pulse.constants import BUS_FACTOR
from repo_pulse.metrics.base import MetricContext, MetricResult, MetricSpec, PulseStatus
from repo_pulse.metrics.defaults import default_bus_factor
from repo_pulse.utils import clamp, format_number, is_number, round_half_up


def _risk_level(top_share: float) -> str:
    concentration = BUS_FACTOR["CONCENTRATION"]
    if top_share > concentration["CRITICAL"]:
        return "critical"
    if top_share > concentration["WARNING"]:
        return "warning"
    return "healthy"


def _status(risk_level: str, bus_factor: int) -> PulseStatus:
    if risk_level == "critical":
        return PulseStatus.AT_RISK
    if risk_level == "warning":
        return PulseStatus.COOLING
    if bus_factor >= BUS_FACTOR["HEALTHY"]:
        return PulseStatus.THRIVING
    return PulseStatus.STABLE


def calculate_bus_factor(contributors: Any) -> MetricResult:
    """
    Analyzes how concentrated commit history is among contributors.

    The bus factor is the smallest number of top contributors who together
    hold 75% of all commits, clamped to 1-10. Risk level follows the top
    contributor's share: above 50% is critical, above 30% a warning.

    Args:
        contributors: GitHub contributor stats, ``[{"total": n, "author":
            {"login": ...}}, ...]``. Entries without a usable commit total or
            author are ignored.
    """
    if not isinstance(contributors, (list, tuple)):
        return default_bus_factor()

    def extract_login(entry: dict[str, Any]) -> str:
        login = entry["author"].get("login")
        return login if isinstance(login, str) and login else "unknown"

    valid = [
        entry
        for entry in contributors
        if isinstance(entry, dict)
        and is_number(entry.get("total"))
        and 0 <= entry["total"] < math.inf
        and isinstance(entry.get("author"), dict)
    ]
    total_commits = sum(entry["total"] for entry in valid)
    if not valid or total_commits <= 0 or math.isinf(total_commits):
        return default_bus_factor()

    ranked = sorted(valid, key=lambda entry: entry["total"], reverse=True)
    shares = [entry["total"] / total_commits * 100 for entry in ranked]
    top_share = shares[0]

    # Count contributors until they jointly hold the continuity share
    key_count = 0
    covered = 0
    for entry in ranked:
        key_count += 1
        covered += entry["total"]
        if covered * 100 >= BUS_FACTOR["CONTINUITY_SHARE"] * total_commits:
            break
    bus_factor = int(clamp(key_count, BUS_FACTOR["MIN"], BUS_FACTOR["MAX"]))

    risk_level = _risk_level(top_share)
    points = BUS_FACTOR["SPARKLINE_POINTS"]
    sparkline = [round_half_up(share, 1) for share in shares[:points]]
    sparkline += [0] * (points - len(sparkline))

    top_contributors = [
        {
            "login": extract_login(entry),
            "commits": entry["total"],
            "percentage": round_half_up(share, 1),
        }
        for entry, share in zip(ranked[:points], shares)
    ]

    noun = "contributor" if bus_factor == 1 else "contributors"
    label = (
        f"{bus_factor} key {noun}, "
        f"top holds {format_number(round_half_up(top_share))}%"
    )

    return MetricResult(
        value=bus_factor,
        trend=0,
        sparkline_data=sparkline,
        status=_status(risk_level, bus_factor),
        label=label,
        details={
            "risk_level": risk_level,
            "top_concentration": round_half_up(top_share, 1),
            "contributor_count": len(ranked),
            "total_commits": total_commits,
            "top_contributors": top_contributors,
        },
    )


def _check(pulse_input: Any, _context: MetricContext) -> MetricResult:
    return calculate_bus_factor(pulse_input.contributors)


def _on_error(error: Exception) -> MetricResult:
    return default_bus_factor()._replace(label=f"Note: Analysis incomplete - {error}")


METRIC = MetricSpec(
    name="busFactor",
    title="Bus Factor",
    checker=_check,
    on_error=_on_error,
    error_log="  [yellow]⚠️  Bus factor check incomplete: {error}[/yellow]",
)
