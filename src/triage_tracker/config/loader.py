"""YAML configuration loading utilities."""

from pathlib import Path

import yaml

from triage_tracker.config.models import TrackerConfig


def load_config(path: Path | str) -> TrackerConfig:
    """Load configuration from YAML file.

    An empty file gives the default configuration.

    Args:
        path: Path to YAML config file.

    Returns:
        Validated TrackerConfig.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        pydantic.ValidationError: If config is invalid.
    """
    path = Path(path)
    with path.open() as f:
        raw = yaml.safe_load(f)

    return TrackerConfig.model_validate(raw or {})


def get_default_config_path() -> Path:
    """Get path to default config file."""
    return Path(__file__).parent.parent.parent.parent / "configs" / "default.yaml"
