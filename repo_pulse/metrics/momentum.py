"""Community momentum metric."""

import math
from datetime import datetime
from typing import Any

from repo_pulse.constants import COMMUNITY
from repo_pulse.metrics.base import (
    MetricContext,
    MetricResult,
    MetricSpec,
    TrendDirection,
)
from repo_pulse.metrics.defaults import default_momentum
from repo_pulse.trend import (
    daily_counts,
    filter_window,
    get_trend_direction,
    percentage_change,
)
from repo_pulse.utils import (
    clamp,
    days_since,
    get_metric_status,
    round_half_up,
    to_number,
)


def _is_star(event: dict[str, Any]) -> bool:
    return event.get("type") == "WatchEvent"


def _is_fork(event: dict[str, Any]) -> bool:
    return event.get("type") == "ForkEvent"


def approximate_star_sparkline(stars: float, days: int) -> list[float]:
    """
    Build a placeholder star curve when no event history is available.

    The curve is a sine wave around a base daily rate, seeded by the star
    count so it is deterministic. It is NOT real history and must only be
    used for display.
    """
    if stars <= 0 or days <= 0:
        return [0] * max(days, 0)
    base_daily = max(0.1, stars / (days * 30))
    seed = stars % 100
    return [
        round_half_up(base_daily * (math.sin((i + seed) * 0.3) * 0.3 + 0.7), 1)
        for i in range(days)
    ]


def _format_stars(stars: float) -> str:
    if stars >= 1000:
        return f"{stars / 1000:.1f}".removesuffix(".0") + "K"
    return f"{stars:g}"


def _star_score(stars: float) -> int:
    tiers = COMMUNITY["STARS"]
    if stars >= tiers["EXCELLENT"]:
        return 100
    if stars >= tiers["GOOD"]:
        return 80
    if stars >= tiers["FAIR"]:
        return 60
    if stars >= tiers["EMERGING"]:
        return 40
    return 20


def _growth_modifier(daily_star_rate: float) -> int:
    rates = COMMUNITY["GROWTH_RATE"]
    if daily_star_rate >= rates["THRIVING"]:
        return 15
    if daily_star_rate >= rates["STABLE"]:
        return 5
    if daily_star_rate >= rates["COOLING"]:
        return 0
    return -10


def _fork_bonus(fork_ratio: float) -> int:
    ratios = COMMUNITY["FORK_RATIO"]
    if fork_ratio >= ratios["HIGH"]:
        return 10
    if fork_ratio >= ratios["MEDIUM"]:
        return 5
    if fork_ratio >= ratios["LOW"]:
        return 0
    return -5


def calculate_community_momentum(
    repo: Any, events: Any = None, *, now: datetime | None = None
) -> MetricResult:
    """
    Evaluates community growth from star/fork counts and recent events.

    Considers:
    - Star count (primary indicator)
    - Lifetime daily star rate (repository age capped at 10 years)
    - Fork ratio (forks / stars) as an engagement signal
    - Recent WatchEvent/ForkEvent activity over the last 30 days

    The trend compares the recent daily star rate against the lifetime rate.
    Without events the sparkline is an approximation, flagged by
    ``details["sparkline_approximate"]``.
    """
    if not isinstance(repo, dict):
        return default_momentum()

    stars = max(0, to_number(repo.get("stargazers_count")))
    forks = max(0, to_number(repo.get("forks_count")))

    max_age = COMMUNITY["MAX_AGE_DAYS"]
    effective_age_days = max(1, min(days_since(repo.get("created_at"), now), max_age))
    daily_star_rate = stars / effective_age_days
    fork_ratio = forks / stars if stars > 0 else 0

    window_days = COMMUNITY["SPARKLINE_DAYS"]
    event_list = []
    if isinstance(events, (list, tuple)):
        event_list = [event for event in events if isinstance(event, dict)]
    recent_events = filter_window(event_list, window_days, now)
    recent_stars = sum(1 for event in recent_events if _is_star(event))
    recent_forks = sum(1 for event in recent_events if _is_fork(event))

    recent_daily_rate = recent_stars / window_days
    if recent_stars > 0 and daily_star_rate > 0:
        trend = percentage_change(recent_daily_rate, daily_star_rate)
    elif recent_stars > 0:
        trend = 100
    else:
        trend = 0
    trend = round_half_up(clamp(trend, -100, 100))
    direction = get_trend_direction(trend)

    if event_list:
        sparkline = daily_counts(event_list, window_days, now, predicate=_is_star)
        approximate = False
    else:
        sparkline = approximate_star_sparkline(stars, window_days)
        approximate = True

    score = clamp(
        _star_score(stars) + _growth_modifier(daily_star_rate) + _fork_bonus(fork_ratio),
        0,
        100,
    )
    status = get_metric_status(score)

    stars_text = _format_stars(stars)
    if direction == TrendDirection.UP:
        label = f"{stars_text} stars (+{trend}%)"
    elif direction == TrendDirection.DOWN:
        label = f"{stars_text} stars ({trend}%)"
    else:
        label = f"{stars_text} stars (stable)"

    return MetricResult(
        value=stars,
        trend=trend,
        direction=direction,
        sparkline_data=sparkline,
        status=status,
        label=label,
        details={
            "forks": forks,
            "fork_ratio": round_half_up(fork_ratio, 2),
            "daily_star_rate": round_half_up(daily_star_rate, 2),
            "recent_stars": recent_stars,
            "recent_forks": recent_forks,
            "repo_age_days": math.floor(effective_age_days),
            "score": score,
            "sparkline_approximate": approximate,
        },
    )


def _check(pulse_input: Any, context: MetricContext) -> MetricResult:
    return calculate_community_momentum(
        pulse_input.repo, pulse_input.events, now=context.now
    )


def _on_error(error: Exception) -> MetricResult:
    return default_momentum()._replace(label=f"Note: Analysis incomplete - {error}")


METRIC = MetricSpec(
    name="momentum",
    title="Community Momentum",
    checker=_check,
    on_error=_on_error,
    error_log="  [yellow]⚠️  Community momentum check incomplete: {error}[/yellow]",
)
