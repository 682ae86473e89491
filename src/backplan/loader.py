"""Project loading with config discovery and validation."""

from __future__ import annotations

from pathlib import Path

from . import context
from .models import Project
from .parser import ProjectParser
from .scheduler import DependencyGraph, SchedulingConfig, normalize_anchors, normalize_tasks
from .unified_config import CONFIG_FILENAME, UnifiedConfig, load_unified_config


def discover_config(
    project_path: Path | str | None = None,
    config_path: Path | None = None,
) -> UnifiedConfig | None:
    """Discover unified config from various locations.

    Search order:
    1. Explicit config_path argument
    2. Global context (set via CLI --config)
    3. project file directory / backplan_config.yaml
    4. Current directory / backplan_config.yaml
    """
    # 1. Explicit argument
    if config_path and config_path.exists():
        return load_unified_config(config_path)

    # 2. Global context
    ctx_config = context.get_config_path()
    if ctx_config and ctx_config.exists():
        return load_unified_config(ctx_config)

    # 3. Project file directory
    if project_path is not None:
        dir_config = Path(project_path).parent / CONFIG_FILENAME
        if dir_config.exists():
            return load_unified_config(dir_config)

    # 4. Current directory
    cwd_config = Path(CONFIG_FILENAME)
    if cwd_config.exists():
        return load_unified_config(cwd_config)

    return None


def load_project(path: Path | str) -> Project:
    """Load a project file.

    Only the file structure is checked here; references, cycles and anchors
    are checked by validate_project() or by the scheduler itself.

    Args:
        path: Path to a YAML or JSON project file

    Returns:
        Parsed Project

    Raises:
        ParseError: If the file is missing or is not valid YAML/JSON
        ValidationError: If the file has the wrong structure
    """
    return ProjectParser().parse_file(path)


def validate_project(project: Project, config: SchedulingConfig | None = None) -> list[str]:
    """Validate a project without computing dates.

    Checks durations, duplicate ids, dependency references, cycles and
    anchors, in that order.

    Returns:
        Warnings from anchor normalization (e.g. duplicate anchors resolved)

    Raises:
        SchedulingError: The first problem found
    """
    config = config or SchedulingConfig()
    graph = DependencyGraph(normalize_tasks(project.tasks))
    graph.topological_order()
    _, warnings = normalize_anchors(project.anchors, set(graph.tasks), config)
    return warnings
