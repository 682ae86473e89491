"""Schedule assembly: minutes back to calendar values plus echoed metadata."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime

from backplan.models import ScheduledTask, ScheduleResult, TaskDefinition, UnscheduledTask

from .core import BackwardPassResult, SlackResult
from .normalize import from_minutes


def _calendar_value(moment: datetime, all_day: bool) -> date | datetime:
    return moment.date() if all_day else moment


class ScheduleAssembler:
    """Builds the caller-facing ScheduleResult.

    Whole-day tasks report dates, minute-precision tasks report datetimes. A
    whole-day task's dates are the calendar days of its start and end
    instants, so a task anchored to a date ends on exactly that date under
    the same end-of-day convention used when parsing anchors.
    """

    def assemble(
        self,
        definitions: Sequence[TaskDefinition],
        backward: BackwardPassResult,
        slack: SlackResult,
        anchored_ids: set[str],
        warnings: list[str] | None = None,
    ) -> ScheduleResult:
        result = ScheduleResult(warnings=list(warnings or []))

        for definition in definitions:
            task_id = definition.id
            if not backward.is_scheduled(task_id):
                result.unscheduled.append(
                    UnscheduledTask(
                        id=task_id,
                        name=definition.name,
                        reason=backward.unscheduled.get(task_id, "not scheduled"),
                    )
                )
                continue

            start = from_minutes(backward.latest_start[task_id])
            end = from_minutes(backward.latest_finish[task_id])
            all_day = definition.all_day

            result.tasks.append(
                ScheduledTask(
                    id=task_id,
                    name=definition.name,
                    start=_calendar_value(start, all_day),
                    end=_calendar_value(end, all_day),
                    start_instant=start,
                    end_instant=end,
                    all_day=all_day,
                    slack_minutes=slack.slack[task_id],
                    is_critical=slack.is_critical(task_id),
                    is_milestone=definition.is_milestone,
                    is_anchored=task_id in anchored_ids,
                    completed=definition.completed,
                    notes=definition.notes,
                    subtasks=definition.subtasks,
                )
            )

        return result
