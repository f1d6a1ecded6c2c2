"""
Command-line interface for Repository Pulse.
"""

import json
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from repo_pulse.config import get_pulse_weights, load_weights_file
from repo_pulse.constants import TREND_ARROW_MAX_PERCENTAGE, TREND_ARROW_THRESHOLD
from repo_pulse.core import PulseReport, calculate_all_metrics
from repo_pulse.metrics import load_metric_specs
from repo_pulse.metrics.base import PulseStatus
from repo_pulse.metrics.freshness import calculate_freshness_score
from repo_pulse.utils import format_number, is_number, round_half_up

# --- Typer App ---
app = typer.Typer()
console = Console()

STATUS_STYLES = {
    PulseStatus.THRIVING: ("green", "Thriving ✓"),
    PulseStatus.STABLE: ("cyan", "Stable"),
    PulseStatus.COOLING: ("yellow", "Cooling"),
    PulseStatus.AT_RISK: ("red", "At risk"),
}

# --- Helper Functions ---


def format_trend(trend: object) -> str:
    """
    Render a trend percentage with an arrow.

    Changes up to the display threshold, inclusive, show as a flat arrow.
    Magnitudes keep one decimal place; those above the cap are shown as
    "999+%".
    """
    if not is_number(trend):
        return "[dim]→ 0%[/dim]"
    magnitude = abs(trend)
    if magnitude > TREND_ARROW_MAX_PERCENTAGE:
        text = f"{TREND_ARROW_MAX_PERCENTAGE}+%"
    else:
        text = f"{format_number(round_half_up(magnitude, 1))}%"
    if trend > TREND_ARROW_THRESHOLD:
        return f"[green]↑ {text}[/green]"
    if trend < -TREND_ARROW_THRESHOLD:
        return f"[red]↓ {text}[/red]"
    return f"[dim]→ {text}[/dim]"


def _status_text(status: object) -> str:
    style, text = STATUS_STYLES[PulseStatus.parse(status) or PulseStatus.STABLE]
    return f"[{style}]{text}[/{style}]"


def read_bundle(source: str) -> object:
    """Read a JSON bundle from a file path, or stdin for "-"."""
    if source == "-":
        return json.load(sys.stdin)
    with open(Path(source).expanduser(), encoding="utf-8") as f:
        return json.load(f)


def display_report(report: PulseReport):
    """Display the pulse report in a rich table."""
    titles = {spec.name: spec.title for spec in load_metric_specs()}

    table = Table(title="Repository Pulse")
    table.add_column("Metric", justify="left", style="cyan", no_wrap=True)
    table.add_column("Value", justify="center", style="magenta")
    table.add_column("Trend", justify="right")
    table.add_column("Status", justify="left")
    table.add_column("Observation", justify="left")

    for key, result in report.metrics.items():
        table.add_row(
            titles.get(key, key),
            format_number(result.value),
            format_trend(result.trend),
            _status_text(result.status),
            result.label,
        )

    console.print(table)

    overall = report.overall
    style, _ = STATUS_STYLES[overall.status]
    console.print(
        f"\n💓 [bold {style}]{overall.label}[/bold {style}]"
        f"  Score: [{style}]{overall.score}/100[/{style}]"
        f"  Trend: {format_trend(overall.trend)}"
    )
    if overall.concerns.count:
        console.print(
            f"   [dim]Needs attention: {', '.join(overall.concerns.metrics)}[/dim]"
        )


@app.command()
def analyze(
    source: str = typer.Argument(
        ...,
        help="Path to a JSON activity bundle, or '-' to read from stdin.",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Print the full report as JSON instead of a table.",
    ),
    weights_config: Path | None = typer.Option(
        None,
        "--weights-config",
        help="TOML file with a [tool.repo-pulse.weights] table.",
    ),
):
    """Score a repository activity bundle."""
    try:
        if weights_config is not None:
            weights = load_weights_file(weights_config)
        else:
            weights = get_pulse_weights()
    except ValueError as e:
        console.print(f"[red]❌ Invalid weights configuration: {e}[/red]")
        raise typer.Exit(code=1) from None

    try:
        bundle = read_bundle(source)
    except FileNotFoundError:
        console.print(f"[red]❌ File not found: {source}[/red]")
        raise typer.Exit(code=1) from None
    except json.JSONDecodeError as e:
        console.print(f"[red]❌ Invalid JSON in {source}: {e}[/red]")
        raise typer.Exit(code=1) from None

    if not isinstance(bundle, dict) and not json_output:
        console.print("[dim]Note: Input is not a JSON object, reporting defaults.[/dim]")

    report = calculate_all_metrics(bundle, weights=weights)
    if json_output:
        typer.echo(json.dumps(report.to_dict(), indent=2))
        return
    display_report(report)


@app.command()
def freshness(
    days: float = typer.Argument(..., help="Days since the last push."),
):
    """Print the freshness score for a number of days since the last push."""
    score = calculate_freshness_score(days)
    console.print(f"Freshness score: [cyan]{round_half_up(score)}[/cyan]/100")


if __name__ == "__main__":
    app()
