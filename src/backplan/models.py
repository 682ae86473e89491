"""Data models for backplan."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any

AnchorValue = str | date | datetime


@dataclass(frozen=True)
class SubTask:
    """A checklist item inside a task. Opaque to the scheduler."""

    id: str
    name: str
    completed: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "completed": self.completed}


@dataclass(frozen=True)
class TaskDefinition:
    """A task as supplied by the caller.

    Duration is given either as whole days or as minutes; ``duration_minutes``
    wins when both are present. Milestones are zero-duration no matter what
    duration is stated. ``completed``, ``notes`` and ``subtasks`` are echoed to
    the output untouched.
    """

    id: str
    name: str = ""
    duration_days: int = 0
    duration_minutes: int | None = None
    dependencies: tuple[str, ...] = ()
    completed: bool = False
    is_milestone: bool = False
    notes: str | None = None
    subtasks: tuple[SubTask, ...] = ()

    def __post_init__(self) -> None:
        # Accept any iterable for the collection fields, store tuples; repeated
        # dependency ids collapse to their first occurrence.
        deps = tuple(dict.fromkeys(self.dependencies))
        object.__setattr__(self, "dependencies", deps)
        object.__setattr__(self, "subtasks", tuple(self.subtasks))

    @property
    def all_day(self) -> bool:
        """True when the duration is expressed in whole days."""
        return self.duration_minutes is None


@dataclass
class Project:
    """A project document: the full task set plus its anchors."""

    id: str | None
    name: str
    tasks: list[TaskDefinition]
    anchors: dict[str, AnchorValue]
    created_at: str | None = None
    last_modified: str | None = None

    def get_task(self, task_id: str) -> TaskDefinition | None:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None


@dataclass(frozen=True)
class ScheduledTask:
    """Output record for one task.

    ``start``/``end`` are calendar dates for whole-day tasks and full datetimes
    for minute-precision tasks; ``start_instant``/``end_instant`` always carry
    the exact datetimes.
    """

    id: str
    name: str
    start: date | datetime
    end: date | datetime
    start_instant: datetime
    end_instant: datetime
    all_day: bool
    slack_minutes: int
    is_critical: bool
    is_milestone: bool = False
    is_anchored: bool = False
    completed: bool = False
    notes: str | None = None
    subtasks: tuple[SubTask, ...] = ()

    @property
    def slack(self) -> timedelta:
        return timedelta(minutes=self.slack_minutes)

    @property
    def duration(self) -> timedelta:
        return self.end_instant - self.start_instant

    def to_dict(self) -> dict[str, Any]:
        """Serialize with ISO strings for dates."""
        return {
            "id": self.id,
            "name": self.name,
            "start_date": self.start.isoformat(),
            "end_date": self.end.isoformat(),
            "all_day": self.all_day,
            "completed": self.completed,
            "notes": self.notes,
            "is_critical": self.is_critical,
            "slack_minutes": self.slack_minutes,
            "is_milestone": self.is_milestone,
            "is_anchored": self.is_anchored,
            "subtasks": [subtask.to_dict() for subtask in self.subtasks],
        }


@dataclass(frozen=True)
class UnscheduledTask:
    """Advisory: a task with no path to any anchor, left without dates."""

    id: str
    name: str
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "reason": self.reason}


def _default_scheduled() -> list[ScheduledTask]:
    return []


def _default_unscheduled() -> list[UnscheduledTask]:
    return []


def _default_str_list() -> list[str]:
    return []


@dataclass
class ScheduleResult:
    """Complete result of one scheduling run."""

    tasks: list[ScheduledTask] = field(default_factory=_default_scheduled)
    unscheduled: list[UnscheduledTask] = field(default_factory=_default_unscheduled)
    warnings: list[str] = field(default_factory=_default_str_list)

    def get(self, task_id: str) -> ScheduledTask | None:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def __iter__(self) -> Iterator[ScheduledTask]:
        return iter(self.tasks)

    def __len__(self) -> int:
        return len(self.tasks)

    @property
    def critical_path(self) -> list[str]:
        """Ids of zero-slack tasks ordered by start instant, then input order."""
        indexed = [
            (task.start_instant, idx, task.id)
            for idx, task in enumerate(self.tasks)
            if task.is_critical
        ]
        return [task_id for _, _, task_id in sorted(indexed)]

    @property
    def tasks_by_id(self) -> dict[str, ScheduledTask]:
        return {task.id: task for task in self.tasks}

    def to_dict(self) -> dict[str, Any]:
        return {
            "tasks": [task.to_dict() for task in self.tasks],
            "unscheduled": [task.to_dict() for task in self.unscheduled],
            "critical_path": self.critical_path,
            "warnings": list(self.warnings),
        }
