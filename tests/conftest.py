"""Pytest configuration and fixtures for backplan tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from backplan import context
from backplan.logger import reset_logger
from backplan.models import TaskDefinition

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def clean_state() -> Iterator[None]:
    """Reset the global logger and CLI context around each test for isolation."""
    reset_logger()
    context.reset_context()
    yield
    reset_logger()
    context.reset_context()


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding sample project files."""
    return FIXTURES_DIR


def task(
    task_id: str,
    days: int = 1,
    *deps: str,
    minutes: int | None = None,
    milestone: bool = False,
    completed: bool = False,
) -> TaskDefinition:
    """Create a TaskDefinition with a short call.

    Example:
        task("b", 3, "a")  # 3-day task depending on "a"
    """
    return TaskDefinition(
        id=task_id,
        name=task_id.upper(),
        duration_days=days,
        duration_minutes=minutes,
        dependencies=deps,
        is_milestone=milestone,
        completed=completed,
    )
