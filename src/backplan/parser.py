"""YAML/JSON parser for backplan project files."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ParseError, ValidationError
from .models import Project, SubTask, TaskDefinition
from .schemas import ProjectSchema, TaskSchema


class ProjectParser:
    """Parser for project files.

    JSON is a subset of YAML, so both formats go through ``yaml.safe_load``.
    This parser only handles parsing and model creation; graph validation
    happens in backplan.loader.
    """

    def parse_file(self, file_path: Path | str) -> Project:
        """Parse a project file into a Project."""
        path = Path(file_path)
        if not path.exists():
            raise ParseError(f"File not found: {file_path}")

        try:
            with path.open(encoding="utf-8") as f:
                data: Any = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ParseError(f"Failed to parse {path.name}: {e}") from e

        if not isinstance(data, dict):
            raise ParseError("Project file must contain a mapping at the root level")

        return self.parse_data(data)  # type: ignore[arg-type]

    def parse_data(self, data: dict[str, Any]) -> Project:
        """Validate already-loaded data and convert it to a Project."""
        try:
            schema = ProjectSchema(**data)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid project structure: {e}") from e

        return Project(
            id=schema.id,
            name=schema.name,
            tasks=[_to_definition(task) for task in schema.tasks],
            anchors=dict(schema.anchors),
            created_at=schema.created_at,
            last_modified=schema.last_modified,
        )


def _to_definition(task: TaskSchema) -> TaskDefinition:
    return TaskDefinition(
        id=task.id,
        name=task.name,
        duration_days=task.duration_days if task.duration_days is not None else 0,
        duration_minutes=task.duration_minutes,
        dependencies=tuple(task.dependencies),
        completed=task.completed,
        is_milestone=task.is_milestone,
        notes=task.notes,
        subtasks=tuple(
            SubTask(id=sub.id, name=sub.name, completed=sub.completed) for sub in task.subtasks
        ),
    )
