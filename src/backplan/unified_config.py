"""Unified configuration loader.

A single configuration file (backplan_config.yaml) holds the scheduler
settings and the status/dashboard thresholds.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from .exceptions import ParseError
from .scheduler import SchedulingConfig

CONFIG_FILENAME = "backplan_config.yaml"

_KNOWN_SECTIONS = {"scheduler", "status"}


class StatusConfig(BaseModel):
    """Thresholds for the project status summary."""

    urgent_threshold_days: int = Field(default=5, ge=0)  # Anchor closer than this -> urgent
    focus_urgent_days: int = Field(default=2, ge=0)  # Focus task ending sooner -> urgent
    upcoming_limit: int = Field(default=5, ge=1)


class UnifiedConfig(BaseModel):
    """Unified configuration; every section is optional."""

    scheduler: SchedulingConfig | None = None
    status: StatusConfig | None = None

    @property
    def scheduling(self) -> SchedulingConfig:
        """Scheduler settings, or defaults when the section is absent."""
        return self.scheduler or SchedulingConfig()

    @property
    def status_settings(self) -> StatusConfig:
        """Status settings, or defaults when the section is absent."""
        return self.status or StatusConfig()


def load_unified_config(config_path: Path | str) -> UnifiedConfig:
    """Load unified configuration from YAML file.

    Args:
        config_path: Path to backplan_config.yaml file

    Returns:
        UnifiedConfig with whichever sections the file defines

    Raises:
        FileNotFoundError: If config file doesn't exist
        ParseError: If the file is not valid YAML
        ValueError: If config is invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with config_path.open(encoding="utf-8") as f:
            data: Any = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ParseError(f"Failed to parse {config_path.name}: {e}") from e

    if not data:
        raise ValueError("Empty configuration file")

    if not isinstance(data, dict):
        raise ValueError("Configuration file must contain a mapping at the root level")

    unknown = set(data) - _KNOWN_SECTIONS  # type: ignore[arg-type]
    if unknown:
        raise ValueError(
            f"Unknown config section(s): {', '.join(sorted(unknown))}. "
            f"Valid sections are: {', '.join(sorted(_KNOWN_SECTIONS))}"
        )

    # Build SchedulingConfig if scheduler section exists
    scheduler_config = None
    if data.get("scheduler") is not None:
        scheduler_config = SchedulingConfig.model_validate(data["scheduler"])

    # Build StatusConfig if status section exists
    status_config = None
    if data.get("status") is not None:
        status_config = StatusConfig.model_validate(data["status"])

    return UnifiedConfig(scheduler=scheduler_config, status=status_config)
