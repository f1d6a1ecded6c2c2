"""
Configuration management for Repository Pulse.

Loads overall pulse weights from:
1. A file named by the REPO_PULSE_CONFIG environment variable
2. .repo-pulse.toml (local config)
3. pyproject.toml (project-level config)

Weights live in the ``[tool.repo-pulse.weights]`` table.
"""

import os
import tomllib
from pathlib import Path

from repo_pulse.constants import METRIC_KEYS, PULSE

# project_root is the parent directory of repo_pulse/
PROJECT_ROOT = Path(__file__).resolve().parent.parent

CONFIG_ENV_VAR = "REPO_PULSE_CONFIG"

# Weights set explicitly via set_pulse_weights() or the CLI
_PULSE_WEIGHTS: dict[str, int] | None = None


def load_config_file(config_path: Path) -> dict:
    """Load a TOML configuration file."""
    if not config_path.exists():
        return {}
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except Exception as e:
        raise ValueError(f"Failed to load config from {config_path}: {e}") from e


def validate_pulse_weights(weights: object) -> dict[str, int]:
    """
    Check a weight table for the overall pulse.

    Args:
        weights: Mapping of metric key to weight.

    Returns:
        A copy of the validated weights.

    Raises:
        ValueError: If metrics are missing or unknown, a weight is not a
            non-negative integer, or the weights do not sum to 100.
    """
    if not isinstance(weights, dict):
        raise ValueError("Pulse weights should be a table of metric names to integers.")

    required_metrics = set(METRIC_KEYS)
    missing_metrics = required_metrics - weights.keys()
    if missing_metrics:
        missing_list = ", ".join(sorted(missing_metrics))
        raise ValueError(f"Pulse weights are missing metrics: {missing_list}.")

    unknown_metrics = set(weights.keys()) - required_metrics
    if unknown_metrics:
        unknown_list = ", ".join(sorted(unknown_metrics))
        raise ValueError(f"Pulse weights include unknown metrics: {unknown_list}.")

    invalid_weights = {
        metric: value
        for metric, value in weights.items()
        if type(value) is not int or value < 0
    }
    if invalid_weights:
        invalid_list = ", ".join(
            f"{metric}={value}" for metric, value in invalid_weights.items()
        )
        raise ValueError(
            "Pulse weights must be non-negative integers. "
            f"Invalid values: {invalid_list}."
        )

    total = sum(weights.values())
    if total != 100:
        raise ValueError(f"Pulse weights must sum to 100, got {total}.")

    return dict(weights)


def _weights_from_config(config: dict) -> dict[str, int] | None:
    weights = config.get("tool", {}).get("repo-pulse", {}).get("weights")
    if weights is None:
        return None
    return validate_pulse_weights(weights)


def load_weights_file(config_path: Path | str) -> dict[str, int]:
    """
    Load pulse weights from a specific TOML file.

    Raises:
        ValueError: If the file is missing, unreadable, has no weights table
            or the weights are invalid.
    """
    path = Path(config_path).expanduser()
    if not path.exists():
        raise ValueError(f"Config file not found: {path}")
    weights = _weights_from_config(load_config_file(path))
    if weights is None:
        raise ValueError(f"No [tool.repo-pulse.weights] table in {path}")
    return weights


def get_pulse_weights() -> dict[str, int]:
    """
    Get the weights used by the overall pulse.

    Priority:
    1. Explicitly set value via set_pulse_weights()
    2. REPO_PULSE_CONFIG environment variable
    3. .repo-pulse.toml config
    4. pyproject.toml config
    5. Default weights

    Returns:
        Mapping of metric key to weight.
    """
    if _PULSE_WEIGHTS is not None:
        return dict(_PULSE_WEIGHTS)

    env_config = os.getenv(CONFIG_ENV_VAR)
    if env_config:
        return load_weights_file(env_config)

    for filename in (".repo-pulse.toml", "pyproject.toml"):
        config_path = PROJECT_ROOT / filename
        if config_path.exists():
            weights = _weights_from_config(load_config_file(config_path))
            if weights is not None:
                return weights

    return dict(PULSE["WEIGHTS"])


def set_pulse_weights(weights: dict[str, int] | None) -> None:
    """
    Set the pulse weights explicitly.

    Args:
        weights: Weight table, or None to go back to file/default lookup.

    Raises:
        ValueError: If the weights are invalid.
    """
    global _PULSE_WEIGHTS
    _PULSE_WEIGHTS = None if weights is None else validate_pulse_weights(weights)
