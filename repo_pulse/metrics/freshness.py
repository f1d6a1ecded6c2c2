"""Freshness index metric."""

import math
from datetime import datetime
from typing import Any

from repo_pulse.constants import FRESHNESS
from repo_pulse.metrics.base import MetricContext, MetricResult, MetricSpec, PulseStatus
from repo_pulse.metrics.defaults import default_freshness
from repo_pulse.utils import days_since, is_number, round_half_up, safe_parse_date

_FRESHNESS_STATUS = {
    "fresh": PulseStatus.THRIVING,
    "recent": PulseStatus.STABLE,
    "aging": PulseStatus.COOLING,
    "stale": PulseStatus.AT_RISK,
    "dormant": PulseStatus.AT_RISK,
}


def calculate_freshness_score(days: Any) -> float:
    """
    Score 0-100 for the number of days since the last push.

    Piecewise linear for the first 90 days (100 at 0 days, 50 at 30 days),
    then exponential decay towards 0. Missing or negative input scores 0.
    """
    if not is_number(days) or days < 0 or math.isinf(days):
        return 0
    if days <= 7:
        return 100 - days / 7 * 20
    if days <= 30:
        return 79 - (days - 7) / 23 * 29
    if days <= 90:
        return 49 - (days - 30) / 60 * 29
    return max(0, round_half_up(19 * math.exp(-(days - 90) / 180)))


def format_days(days: Any) -> str:
    """Render a day count as a short relative duration, e.g. "3 weeks"."""
    if not is_number(days) or days < 0 or math.isinf(days):
        return "unknown"
    days = math.floor(days)
    if days == 0:
        return "today"
    if days < 7:
        amount, unit = days, "day"
    elif days < 30:
        amount, unit = days // 7, "week"
    elif days < 365:
        amount, unit = days // 30, "month"
    else:
        amount, unit = days // 365, "year"
    return f"{amount} {unit}" if amount == 1 else f"{amount} {unit}s"


def _band(days_since_push: float) -> str:
    if math.isinf(days_since_push):
        return "stale"
    push_days = FRESHNESS["PUSH_DAYS"]
    if days_since_push <= push_days["FRESH"]:
        return "fresh"
    if days_since_push <= push_days["RECENT"]:
        return "recent"
    if days_since_push <= push_days["AGING"]:
        return "aging"
    if days_since_push <= push_days["STALE"]:
        return "stale"
    return "dormant"


def _latest_release(releases: Any) -> tuple[dict[str, Any], datetime] | None:
    """Release with the most recent parseable ``published_at``."""
    if not isinstance(releases, (list, tuple)):
        return None
    latest = None
    for release in releases:
        if not isinstance(release, dict):
            continue
        published = safe_parse_date(release.get("published_at"))
        if published is None:
            continue
        if latest is None or published > latest[1]:
            latest = (release, published)
    return latest


def calculate_freshness_index(
    repo: Any, releases: Any = None, *, now: datetime | None = None
) -> MetricResult:
    """
    Evaluates how recently the repository was updated.

    Days since the last push (falling back to ``updated_at``) drive both the
    score and the band: fresh <=7d, recent <=30d, aging <=90d, stale <=180d,
    dormant beyond. A release in the last 30 days lifts a recent push to fresh.
    """
    if not isinstance(repo, dict):
        return default_freshness()

    days_since_push = days_since(repo.get("pushed_at"), now)
    if math.isinf(days_since_push):
        days_since_push = days_since(repo.get("updated_at"), now)
    # Clock skew can put a push slightly in the future
    days_since_push = max(0, days_since_push)

    latest = _latest_release(releases)
    if latest is None:
        last_release = "None"
        days_since_release = None
    else:
        tag = latest[0].get("tag_name")
        last_release = tag if isinstance(tag, str) and tag else "untagged"
        days_since_release = max(0, days_since(latest[1], now))

    freshness = _band(days_since_push)
    if (
        freshness == "recent"
        and days_since_release is not None
        and days_since_release <= FRESHNESS["RELEASE_BOOST_DAYS"]
    ):
        freshness = "fresh"

    score = round_half_up(calculate_freshness_score(days_since_push))
    band_label = FRESHNESS["LABELS"][freshness]["label"]

    if math.isinf(days_since_push):
        label = f"{band_label}: last push unknown"
    elif days_since_push == 0:
        label = f"{band_label}: pushed today"
    else:
        label = f"{band_label}: pushed {format_days(days_since_push)} ago"
    if latest is not None:
        label += f", latest release {last_release}"

    return MetricResult(
        value=score,
        trend=0,
        sparkline_data=[],
        status=_FRESHNESS_STATUS[freshness],
        label=label,
        details={
            "freshness": freshness,
            "days_since_push": None if math.isinf(days_since_push) else days_since_push,
            "days_since_release": days_since_release,
            "last_release": last_release,
            "score": score,
        },
    )


def _check(pulse_input: Any, context: MetricContext) -> MetricResult:
    return calculate_freshness_index(
        pulse_input.repo, pulse_input.releases, now=context.now
    )


def _on_error(error: Exception) -> MetricResult:
    return default_freshness()._replace(label=f"Note: Analysis incomplete - {error}")


METRIC = MetricSpec(
    name="freshness",
    title="Freshness Index",
    checker=_check,
    on_error=_on_error,
    error_log="  [yellow]⚠️  Freshness check incomplete: {error}[/yellow]",
)
