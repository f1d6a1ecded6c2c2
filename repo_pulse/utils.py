"""
Numeric and date helpers shared by the pulse calculators.

Every helper is total: malformed input degrades to a documented fallback
value instead of raising.
"""

import math
from datetime import date, datetime, timezone
from typing import Any

from repo_pulse.constants import DAY_SECONDS, STATUS_THRESHOLDS
from repo_pulse.metrics.base import PulseStatus


def is_number(value: Any) -> bool:
    """
    Return True for real, non-NaN numbers (booleans excluded).

    Integers too large to convert to a float are not numbers here.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return not math.isnan(value)
    except OverflowError:
        return False


def to_number(value: Any, default: float = 0) -> float:
    """
    Coerce a value to a finite number.

    Numeric strings are accepted; anything that fails conversion, is NaN,
    is infinite or lies beyond float range falls back to ``default``.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value if is_number(value) else default
    if isinstance(value, float):
        return value if math.isfinite(value) else default
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return default
        if not math.isfinite(number):
            return default
        return int(number) if number.is_integer() else number
    return default


def format_number(value: Any) -> str:
    """Render whole floats without a trailing ".0"."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def round_half_up(value: float, digits: int = 0) -> float:
    """
    Round halves upwards, e.g. 2.5 -> 3 and -2.5 -> -2.

    Returns an int when ``digits`` is 0.
    """
    if not is_number(value) or math.isinf(value):
        return value
    factor = 10**digits
    scaled = value * factor
    if math.isinf(scaled):
        return value
    rounded = math.floor(scaled + 0.5) / factor
    if digits == 0:
        return int(rounded)
    return rounded


def average(values: Any) -> float:
    """
    Average of a sequence; 0 for empty or non-sequence input.

    Non-numeric entries count as 0 rather than poisoning the result.
    """
    if not isinstance(values, (list, tuple)) or not values:
        return 0
    total = sum(to_number(v) for v in values)
    if math.isinf(total):
        return sum(to_number(v) / len(values) for v in values)
    return total / len(values)


def clamp(value: Any, lo: float, hi: float) -> float:
    """Clamp ``value`` into [lo, hi]; non-numeric values become ``lo``."""
    if not is_number(value):
        return lo
    return max(lo, min(hi, value))


def safe_parse_date(value: Any) -> datetime | None:
    """
    Parse an ISO-8601 string, ``datetime`` or ``date`` into an aware UTC datetime.

    Naive datetimes are treated as UTC. Returns None for anything unparsable.
    """
    if not value:
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError:
        return None


def utc_now(now: datetime | None = None) -> datetime:
    """Return ``now`` normalised to UTC, or the current time."""
    if now is None:
        return datetime.now(timezone.utc)
    return safe_parse_date(now) or datetime.now(timezone.utc)


def days_since(value: Any, now: datetime | None = None) -> float:
    """
    Whole days elapsed since ``value``.

    Returns ``math.inf`` for missing or invalid dates so that unknown activity
    compares as infinitely stale.
    """
    parsed = safe_parse_date(value)
    if parsed is None:
        return math.inf
    elapsed = (utc_now(now) - parsed).total_seconds()
    return math.floor(elapsed / DAY_SECONDS)


def days_between(start: Any, end: Any) -> int:
    """Absolute whole days between two dates; 0 if either is invalid."""
    start_date = safe_parse_date(start)
    end_date = safe_parse_date(end)
    if start_date is None or end_date is None:
        return 0
    return math.floor(abs((end_date - start_date).total_seconds()) / DAY_SECONDS)


def get_metric_status(score: Any) -> PulseStatus:
    """Map a 0-100 score onto a status band."""
    if not is_number(score):
        return PulseStatus.STABLE
    if score >= STATUS_THRESHOLDS["THRIVING"]:
        return PulseStatus.THRIVING
    if score >= STATUS_THRESHOLDS["STABLE"]:
        return PulseStatus.STABLE
    if score >= STATUS_THRESHOLDS["COOLING"]:
        return PulseStatus.COOLING
    return PulseStatus.AT_RISK


def empty_sparkline(length: Any) -> list[int]:
    """A list of ``length`` zeros; empty for negative or non-numeric lengths."""
    if not is_number(length) or length < 0 or math.isinf(length):
        return []
    return [0] * math.floor(length)
