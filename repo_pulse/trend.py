"""
Trend analysis helpers for Repository Pulse.

Provides percentage-change and direction classification together with the
trailing time windows used by the windowed calculators (issues, pull requests
and community momentum).
"""

import math
from datetime import datetime, timedelta
from typing import Any, Callable, Iterable, NamedTuple

from repo_pulse.constants import DAY_SECONDS, TREND_THRESHOLDS
from repo_pulse.metrics.base import TrendDirection
from repo_pulse.utils import is_number, safe_parse_date, utc_now


class WindowSplit(NamedTuple):
    """Items of a trailing window divided at its midpoint."""

    older: list[dict[str, Any]]
    newer: list[dict[str, Any]]


def percentage_change(current: Any, previous: Any) -> float:
    """
    Relative change from ``previous`` to ``current`` in percent.

    Growth from zero is reported as +100 (or -100 for a negative current
    value) instead of an infinite percentage.
    """
    if not is_number(current) or not is_number(previous):
        return 0
    if previous == 0:
        if current > 0:
            return 100
        if current < 0:
            return -100
        return 0
    return ((current - previous) / abs(previous)) * 100


def get_trend_direction(
    change: Any, threshold: float = TREND_THRESHOLDS["SIGNIFICANT"]
) -> TrendDirection:
    """Classify a percentage change as up, down or stable."""
    if not is_number(change):
        return TrendDirection.STABLE
    if change > threshold:
        return TrendDirection.UP
    if change < -threshold:
        return TrendDirection.DOWN
    return TrendDirection.STABLE


def window_cutoff(days: int, now: datetime | None = None) -> datetime:
    """Start of the trailing window of ``days`` days ending at ``now``."""
    return utc_now(now) - timedelta(days=days)


def filter_window(
    items: Iterable[Any],
    days: int,
    now: datetime | None = None,
    date_field: str = "created_at",
) -> list[dict[str, Any]]:
    """
    Keep the mappings whose ``date_field`` falls inside the trailing window.

    Entries that are not mappings or carry an unparsable date are dropped.
    """
    cutoff = window_cutoff(days, now)
    windowed = []
    for item in items:
        if not isinstance(item, dict):
            continue
        created = safe_parse_date(item.get(date_field))
        if created is not None and created >= cutoff:
            windowed.append(item)
    return windowed


def split_window(
    items: Iterable[dict[str, Any]],
    days: int,
    now: datetime | None = None,
    date_field: str = "created_at",
) -> WindowSplit:
    """
    Split windowed items into the older and newer halves of the window.

    Items created exactly at the midpoint belong to the newer half.
    """
    midpoint = window_cutoff(days, now) + timedelta(days=days / 2)
    older: list[dict[str, Any]] = []
    newer: list[dict[str, Any]] = []
    for item in items:
        created = safe_parse_date(item.get(date_field))
        if created is None:
            continue
        if created < midpoint:
            older.append(item)
        else:
            newer.append(item)
    return WindowSplit(older=older, newer=newer)


def daily_counts(
    items: Iterable[Any],
    days: int,
    now: datetime | None = None,
    predicate: Callable[[dict[str, Any]], bool] | None = None,
    date_field: str = "created_at",
) -> list[int]:
    """
    Count items per day over the trailing window.

    Index 0 is the oldest day and index ``days - 1`` is today.
    """
    counts = [0] * days
    current = utc_now(now)
    for item in items:
        if not isinstance(item, dict):
            continue
        if predicate is not None and not predicate(item):
            continue
        created = safe_parse_date(item.get(date_field))
        if created is None:
            continue
        days_ago = math.floor((current - created).total_seconds() / DAY_SECONDS)
        if 0 <= days_ago < days:
            counts[days - 1 - days_ago] += 1
    return counts
