"""
Boundary parsing for raw pulse data.

The data-fetching side hands over GitHub-shaped JSON that may be partial or
malformed. ``parse_pulse_input`` reduces any JSON value to a ``PulseInput``
whose slices are either the expected container type or None.
"""

from typing import Any, NamedTuple

# Alternate spellings accepted for the pull request slice
_PR_KEYS = ("prs", "pullRequests", "pull_requests")


class PulseInput(NamedTuple):
    """Raw activity data for one repository, split by source."""

    repo: dict[str, Any] | None = None
    participation: dict[str, Any] | None = None
    issues: list[dict[str, Any]] | None = None
    prs: list[dict[str, Any]] | None = None
    contributors: list[dict[str, Any]] | None = None
    events: list[dict[str, Any]] | None = None
    releases: list[dict[str, Any]] | None = None


def _mapping_or_none(value: Any) -> dict[str, Any] | None:
    return value if isinstance(value, dict) else None


def _records_or_none(value: Any) -> list[dict[str, Any]] | None:
    """Keep only mapping entries of a list slice."""
    if not isinstance(value, (list, tuple)):
        return None
    return [entry for entry in value if isinstance(entry, dict)]


def parse_pulse_input(raw: Any) -> PulseInput:
    """
    Convert an untrusted JSON bundle into a ``PulseInput``.

    Args:
        raw: Mapping with any of ``repo``, ``participation``, ``issues``,
            ``prs`` (or ``pullRequests``), ``contributors``, ``events`` and
            ``releases``. Any other value yields an empty input.

    Returns:
        PulseInput with each slice validated or set to None.
    """
    if isinstance(raw, PulseInput):
        return raw
    if not isinstance(raw, dict):
        return PulseInput()

    prs = next(
        (raw[key] for key in _PR_KEYS if isinstance(raw.get(key), (list, tuple))),
        None,
    )

    return PulseInput(
        repo=_mapping_or_none(raw.get("repo")),
        participation=_mapping_or_none(raw.get("participation")),
        issues=_records_or_none(raw.get("issues")),
        prs=_records_or_none(prs),
        contributors=_records_or_none(raw.get("contributors")),
        events=_records_or_none(raw.get("events")),
        releases=_records_or_none(raw.get("releases")),
    )
