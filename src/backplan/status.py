"""Project status summary: next deadline, urgency, current focus and progress.

Everything here is display logic layered on top of a ScheduleResult. The
engine itself never looks at the wall clock; callers pass ``now`` in.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, time, timedelta
from enum import Enum
from typing import Any

from .models import AnchorValue, ScheduledTask, ScheduleResult
from .scheduler import parse_instant
from .unified_config import StatusConfig

_SECONDS_PER_DAY = 86400
_SECONDS_PER_HOUR = 3600


class ProjectStatus(str, Enum):
    """Overall urgency of a project."""

    EMPTY = "empty"  # No anchors at all
    ON_TRACK = "on_track"
    URGENT = "urgent"
    OVERDUE = "overdue"


class TaskState(str, Enum):
    """Where an incomplete task sits relative to now."""

    ACTIVE = "active"
    FUTURE = "future"


@dataclass(frozen=True)
class UpcomingTask:
    """An incomplete task that ends now or later."""

    task: ScheduledTask
    state: TaskState

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.task.id,
            "name": self.task.name,
            "start_date": self.task.start_instant.isoformat(),
            "end_date": self.task.end_instant.isoformat(),
            "completed": self.task.completed,
            "is_milestone": self.task.is_milestone,
            "status": self.state.value,
        }


def _default_upcoming() -> list[UpcomingTask]:
    return []


@dataclass
class ProjectSummary:
    """Derived status of one project at one moment."""

    status: ProjectStatus
    next_deadline: datetime | None = None
    current_focus: str | None = None
    upcoming: list[UpcomingTask] = field(default_factory=_default_upcoming)
    task_progress: float | None = None
    focus_task: ScheduledTask | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "next_deadline": self.next_deadline.isoformat() if self.next_deadline else None,
            "current_focus": self.current_focus,
            "upcoming_tasks": [item.to_dict() for item in self.upcoming],
            "task_progress": self.task_progress,
        }


def _whole_days(delta: timedelta) -> int:
    """Whole days in ``delta``, truncated toward zero."""
    return int(delta.total_seconds() / _SECONDS_PER_DAY)


def classify_status(until: timedelta, urgent_days: int) -> ProjectStatus:
    """Classify the time left until a deadline.

    Args:
        until: Deadline minus now
        urgent_days: Deadlines this many whole days away or closer are urgent

    Returns:
        OVERDUE, URGENT or ON_TRACK
    """
    if until.total_seconds() < 0:
        return ProjectStatus.OVERDUE
    if _whole_days(until) <= urgent_days:
        return ProjectStatus.URGENT
    return ProjectStatus.ON_TRACK


def focus_text(task: ScheduledTask, now: datetime) -> str:
    """Describe the focus task: its name, or when it starts."""
    if task.start_instant <= now <= task.end_instant:
        return task.name
    until_start = (task.start_instant - now).total_seconds()
    days = int(until_start / _SECONDS_PER_DAY)
    if days > 0:
        return f"{task.name} (starts in {days} days)"
    return f"{task.name} (starts in {int(until_start / _SECONDS_PER_HOUR)} hours)"


def task_progress(task: ScheduledTask, now: datetime) -> float:
    """Fraction of the task's window elapsed at ``now``, clamped to [0, 1]."""
    if task.completed:
        return 1.0
    total = max((task.end_instant - task.start_instant).total_seconds(), 1.0)
    elapsed = max((now - task.start_instant).total_seconds(), 0.0)
    return min(max(elapsed / total, 0.0), 1.0)


def upcoming_tasks(
    result: ScheduleResult, now: datetime, limit: int | None = None
) -> list[UpcomingTask]:
    """Incomplete tasks that end now or later, by start instant."""
    ordered = sorted(result.tasks, key=lambda task: task.start_instant)
    items = [
        UpcomingTask(
            task=task,
            state=TaskState.ACTIVE if task.start_instant <= now else TaskState.FUTURE,
        )
        for task in ordered
        if not task.completed and task.end_instant >= now
    ]
    return items if limit is None else items[:limit]


def _progress_task(result: ScheduleResult, now: datetime) -> ScheduledTask | None:
    # First incomplete task, by end instant, that is running or not yet started
    for task in sorted(result.tasks, key=lambda t: t.end_instant):
        if task.completed:
            continue
        if task.start_instant <= now <= task.end_instant or now < task.start_instant:
            return task
    return None


def summarize_project(
    result: ScheduleResult,
    anchors: Mapping[str, AnchorValue],
    now: datetime,
    config: StatusConfig | None = None,
    end_of_day: time | None = None,
) -> ProjectSummary:
    """Summarize a scheduled project for a dashboard.

    The nearest future anchor sets the first guess for the deadline and
    status. The incomplete task with the nearest end that has not finished
    yet then takes over both, with its own tighter urgency threshold, and
    becomes the current focus.

    Args:
        result: Schedule computed for the project
        anchors: The project's anchors, as given to the scheduler
        now: Reference moment
        config: Status thresholds (defaults apply when None)
        end_of_day: Time of day for date-only anchors (scheduler default when None)

    Returns:
        ProjectSummary
    """
    config = config or StatusConfig()
    summary = ProjectSummary(status=ProjectStatus.EMPTY)
    if not anchors:
        return summary

    instants: list[datetime] = []
    for value in anchors.values():
        instant = parse_instant(value, end_of_day or time(23, 59))
        if instant >= now:
            instants.append(instant)

    if instants:
        summary.next_deadline = min(instants)
        summary.status = classify_status(summary.next_deadline - now, config.urgent_threshold_days)
    else:
        summary.status = ProjectStatus.OVERDUE

    pending = sorted(
        (task for task in result.tasks if not task.completed and task.end_instant >= now),
        key=lambda task: task.end_instant,
    )
    if pending:
        focus = pending[0]
        summary.focus_task = focus
        summary.next_deadline = focus.end_instant
        summary.status = classify_status(focus.end_instant - now, config.focus_urgent_days)
        summary.current_focus = focus_text(focus, now)
    else:
        summary.current_focus = "All tasks completed"

    summary.upcoming = upcoming_tasks(result, now, config.upcoming_limit)

    progress_task = _progress_task(result, now)
    if progress_task is not None:
        summary.task_progress = task_progress(progress_task, now)
    elif result.tasks and all(task.completed for task in result.tasks):
        summary.task_progress = 1.0

    return summary
