"""Pydantic schemas for project file validation."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from .scheduler.normalize import parse_duration


class SubTaskSchema(BaseModel):
    """Schema for a checklist item inside a task."""

    id: str
    name: str = ""
    completed: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id_to_string(cls, v: Any) -> str:
        """Allow numeric ids in YAML."""
        return str(v)


class TaskSchema(BaseModel):
    """Schema for a single task entry."""

    id: str
    name: str = ""
    duration_days: Any = None
    duration_minutes: Any = None
    duration: str | None = None  # Shorthand: "3d", "4h", "90m"
    dependencies: list[str] = Field(default_factory=list)
    completed: bool = False
    is_milestone: bool = False
    notes: str | None = None
    subtasks: list[SubTaskSchema] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id_to_string(cls, v: Any) -> str:
        """Allow numeric ids in YAML."""
        return str(v)

    @field_validator("duration", mode="before")
    @classmethod
    def coerce_duration_to_string(cls, v: Any) -> str | None:
        """Accept bare numbers as a day count."""
        if v is None:
            return None
        return str(v)

    @field_validator("dependencies", mode="before")
    @classmethod
    def ensure_list(cls, v: Any) -> list[str]:
        """Ensure value is a list."""
        if v is None:
            return []
        if isinstance(v, list):
            return [str(item) for item in v]  # type: ignore[misc]
        return [str(v)]

    @model_validator(mode="after")
    def expand_duration_shorthand(self) -> TaskSchema:
        """Fill duration_days/duration_minutes from the ``duration`` shorthand."""
        if self.duration is None:
            return self
        if self.duration_days is not None or self.duration_minutes is not None:
            raise ValueError(
                f"Task '{self.id}': cannot combine 'duration' with 'duration_days' "
                "or 'duration_minutes'"
            )
        days, minutes = parse_duration(self.duration)
        self.duration_days = days
        self.duration_minutes = minutes
        return self


class ProjectSchema(BaseModel):
    """Schema for the entire project file."""

    id: str | None = None
    name: str = ""
    created_at: str | None = None
    last_modified: str | None = None
    tasks: list[TaskSchema] = Field(default_factory=list)
    anchors: dict[str, str] = Field(default_factory=dict)

    @field_validator("id", "created_at", "last_modified", mode="before")
    @classmethod
    def coerce_to_string(cls, v: Any) -> str | None:
        """Convert ids and date objects to string."""
        if v is None:
            return None
        if isinstance(v, (date, datetime)):
            return v.isoformat()
        return str(v)

    @field_validator("tasks", mode="before")
    @classmethod
    def none_tasks(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("anchors", mode="before")
    @classmethod
    def coerce_anchor_values(cls, v: Any) -> dict[str, str]:
        """YAML turns unquoted dates into date objects; keep them as ISO strings."""
        if v is None:
            return {}
        if not isinstance(v, dict):
            raise ValueError("anchors must be a mapping of task id to date")
        anchors: dict[str, str] = {}
        for task_id, value in v.items():  # type: ignore[misc]
            if isinstance(value, (date, datetime)):
                anchors[str(task_id)] = value.isoformat()
            elif isinstance(value, str):
                anchors[str(task_id)] = value
            else:
                raise ValueError(
                    f"anchor for '{task_id}' must be a date or datetime, got {value!r}"
                )
        return anchors
