"""
Shared metric types and context helpers.
"""

from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Mapping, NamedTuple, Sequence


class PulseStatus(str, Enum):
    """Ordinal health classification of a metric or of the whole repository."""

    THRIVING = "thriving"
    STABLE = "stable"
    COOLING = "cooling"
    AT_RISK = "at_risk"

    @classmethod
    def parse(cls, value: Any) -> "PulseStatus | None":
        """Return the matching status, or None for unrecognised values."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                return None
        return None


class TrendDirection(str, Enum):
    """Direction of a percentage trend."""

    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class MetricResult(NamedTuple):
    """A single pulse vital sign."""

    value: int | float | str
    trend: int | float = 0  # Percentage change, clamped to [-100, 100]
    direction: TrendDirection = TrendDirection.STABLE
    sparkline_data: Sequence[int | float] = ()
    status: PulseStatus = PulseStatus.STABLE
    label: str = "Data unavailable"
    # Metric-specific extras (funnel, risk_level, ...); read-only when omitted
    details: Mapping[str, Any] = MappingProxyType({})

    def to_dict(self) -> dict[str, Any]:
        """Flatten the result into a JSON-ready mapping."""
        data: dict[str, Any] = {
            "value": self.value,
            "trend": self.trend,
            "direction": self.direction.value,
            "sparkline_data": list(self.sparkline_data),
            "status": self.status.value,
            "label": self.label,
        }
        for key, extra in self.details.items():
            data.setdefault(key, extra)
        return data


class MetricContext(NamedTuple):
    """Context provided to metric checks."""

    now: datetime


class MetricSpec(NamedTuple):
    """Specification for a pulse metric calculator."""

    name: str  # Key in the pulse report, e.g. "busFactor"
    title: str
    checker: Callable[[Any, MetricContext], MetricResult]
    on_error: Callable[[Exception], MetricResult] | None = None
    error_log: str | None = None
