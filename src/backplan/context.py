"""Global application context for CLI-wide options."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path


@dataclass
class _Context:
    """Options set once by the CLI callback and read by commands and loaders."""

    config_path: Path | None = None
    as_of: datetime | None = None


_context = _Context()


def get_config_path() -> Path | None:
    """Get the config path given with --config, if any."""
    return _context.config_path


def set_config_path(path: Path | None) -> None:
    """Set the global config path."""
    _context.config_path = path


def get_as_of() -> datetime:
    """Get the reference "now" for status calculations.

    Falls back to the local wall clock when no override was set.
    """
    return _context.as_of or datetime.now().replace(second=0, microsecond=0)  # noqa: DTZ005


def set_as_of(moment: datetime | None) -> None:
    """Override the reference "now" (used by --now and by tests)."""
    _context.as_of = moment


def reset_context() -> None:
    """Restore defaults; tests call this between CLI invocations."""
    _context.config_path = None
    _context.as_of = None
