"""
Metric registry for Repository Pulse.

Built-in calculators are loaded from their modules' ``METRIC`` attribute.
Third-party packages can contribute extra metrics through the
``repo_pulse.metrics`` entry point group; these appear in the report but do
not take part in the overall pulse, which is defined over the six built-ins.
"""

from importlib import import_module
from importlib.metadata import entry_points

from rich.console import Console

from repo_pulse.metrics.base import MetricSpec

_BUILTIN_MODULES = [
    "repo_pulse.metrics.velocity",
    "repo_pulse.metrics.momentum",
    "repo_pulse.metrics.issue_temperature",
    "repo_pulse.metrics.pr_health",
    "repo_pulse.metrics.bus_factor",
    "repo_pulse.metrics.freshness",
]

ENTRY_POINT_GROUP = "repo_pulse.metrics"

console = Console(stderr=True)


def _load_builtin_metric_specs() -> list[MetricSpec]:
    specs = []
    for module_path in _BUILTIN_MODULES:
        module = import_module(module_path)
        spec = getattr(module, "METRIC", None)
        if isinstance(spec, MetricSpec):
            specs.append(spec)
    return specs


def _load_entrypoint_metric_specs() -> list[MetricSpec]:
    """
    Load plugin metrics; an entry point may expose a spec or a factory.

    A plugin that fails to load is skipped with a warning.
    """
    specs = []
    for entry_point in entry_points(group=ENTRY_POINT_GROUP):
        try:
            loaded = entry_point.load()
            spec = loaded() if callable(loaded) else loaded
        except Exception as e:
            console.print(
                f"  [yellow]⚠️  Skipping metric plugin {entry_point.name}: {e}[/yellow]"
            )
            continue
        if isinstance(spec, MetricSpec):
            specs.append(spec)
    return specs


def load_metric_specs() -> list[MetricSpec]:
    """
    Return built-in metric specs followed by plugin specs.

    Plugins cannot replace a built-in metric: later specs with an already
    registered name are skipped.
    """
    specs: list[MetricSpec] = []
    seen: set[str] = set()
    for spec in _load_builtin_metric_specs() + _load_entrypoint_metric_specs():
        if spec.name in seen:
            continue
        seen.add(spec.name)
        specs.append(spec)
    return specs
