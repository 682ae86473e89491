"""Tests for the project status summary."""

from datetime import datetime, timedelta

from backplan import compute_schedule
from backplan.status import (
    ProjectStatus,
    TaskState,
    classify_status,
    focus_text,
    summarize_project,
    task_progress,
    upcoming_tasks,
)
from backplan.unified_config import StatusConfig
from tests.conftest import task

# a: Jan 5 23:59 -> Jan 7 23:59, b: Jan 7 23:59 -> Jan 10 23:59
TASKS = [task("a", 2), task("b", 3, "a")]
ANCHORS = {"b": "2026-01-10"}


class TestClassifyStatus:
    """Urgency thresholds."""

    def test_overdue(self) -> None:
        assert classify_status(timedelta(minutes=-1), 5) == ProjectStatus.OVERDUE

    def test_urgent_boundary(self) -> None:
        assert classify_status(timedelta(days=5, hours=23), 5) == ProjectStatus.URGENT
        assert classify_status(timedelta(days=6), 5) == ProjectStatus.ON_TRACK

    def test_now_is_urgent(self) -> None:
        assert classify_status(timedelta(0), 2) == ProjectStatus.URGENT


class TestSummarizeProject:
    """Deadline, status and focus."""

    def test_no_anchors_is_empty(self) -> None:
        result = compute_schedule(TASKS, {})
        summary = summarize_project(result, {}, datetime(2026, 1, 1))

        assert summary.status == ProjectStatus.EMPTY
        assert summary.next_deadline is None
        assert summary.current_focus is None

    def test_focus_on_future_task(self) -> None:
        result = compute_schedule(TASKS, ANCHORS)
        summary = summarize_project(result, ANCHORS, datetime(2026, 1, 1, 12, 0))

        assert summary.next_deadline == datetime(2026, 1, 7, 23, 59)
        assert summary.status == ProjectStatus.ON_TRACK
        assert summary.current_focus == "A (starts in 4 days)"
        assert summary.focus_task is not None and summary.focus_task.id == "a"

    def test_focus_in_hours(self) -> None:
        result = compute_schedule(TASKS, ANCHORS)
        summary = summarize_project(result, ANCHORS, datetime(2026, 1, 5, 20, 59))

        assert summary.current_focus == "A (starts in 3 hours)"
        assert summary.status == ProjectStatus.URGENT

    def test_focus_on_active_task(self) -> None:
        result = compute_schedule(TASKS, ANCHORS)
        summary = summarize_project(result, ANCHORS, datetime(2026, 1, 8, 12, 0))

        assert summary.current_focus == "B"
        assert summary.next_deadline == datetime(2026, 1, 10, 23, 59)
        assert summary.status == ProjectStatus.URGENT

    def test_completed_tasks_skipped(self) -> None:
        tasks = [task("a", 2, completed=True), task("b", 3, "a")]
        result = compute_schedule(tasks, ANCHORS)
        summary = summarize_project(result, ANCHORS, datetime(2026, 1, 1))

        assert summary.focus_task is not None and summary.focus_task.id == "b"

    def test_all_completed(self) -> None:
        tasks = [task("a", 2, completed=True), task("b", 3, "a", completed=True)]
        result = compute_schedule(tasks, ANCHORS)
        summary = summarize_project(result, ANCHORS, datetime(2026, 1, 1))

        assert summary.current_focus == "All tasks completed"
        assert summary.status == ProjectStatus.ON_TRACK
        assert summary.task_progress == 1.0

    def test_everything_past_is_overdue(self) -> None:
        result = compute_schedule(TASKS, ANCHORS)
        summary = summarize_project(result, ANCHORS, datetime(2026, 2, 1))

        assert summary.status == ProjectStatus.OVERDUE
        assert summary.current_focus == "All tasks completed"
        assert summary.upcoming == []

    def test_custom_thresholds(self) -> None:
        result = compute_schedule(TASKS, ANCHORS)
        config = StatusConfig(focus_urgent_days=10)
        summary = summarize_project(result, ANCHORS, datetime(2026, 1, 1), config)

        assert summary.status == ProjectStatus.URGENT

    def test_to_dict(self) -> None:
        result = compute_schedule(TASKS, ANCHORS)
        data = summarize_project(result, ANCHORS, datetime(2026, 1, 6)).to_dict()

        assert data["status"] == "urgent"
        assert data["next_deadline"] == "2026-01-07T23:59:00"
        assert [t["id"] for t in data["upcoming_tasks"]] == ["a", "b"]
        assert data["upcoming_tasks"][0]["status"] == "active"


class TestUpcomingAndProgress:
    """Up-next list and progress fraction."""

    def test_upcoming_states_and_limit(self) -> None:
        result = compute_schedule(TASKS, ANCHORS)
        now = datetime(2026, 1, 6)

        items = upcoming_tasks(result, now)
        assert [(i.task.id, i.state) for i in items] == [
            ("a", TaskState.ACTIVE),
            ("b", TaskState.FUTURE),
        ]
        assert len(upcoming_tasks(result, now, limit=1)) == 1

    def test_progress_halfway(self) -> None:
        result = compute_schedule(TASKS, ANCHORS)
        a = result.get("a")
        assert a is not None

        assert task_progress(a, datetime(2026, 1, 6, 23, 59)) == 0.5
        assert task_progress(a, datetime(2026, 1, 1)) == 0.0
        assert task_progress(a, datetime(2026, 2, 1)) == 1.0

    def test_summary_progress_tracks_focus(self) -> None:
        result = compute_schedule(TASKS, ANCHORS)
        summary = summarize_project(result, ANCHORS, datetime(2026, 1, 6, 23, 59))

        assert summary.task_progress == 0.5

    def test_focus_text_for_running_task(self) -> None:
        result = compute_schedule(TASKS, ANCHORS)
        b = result.get("b")
        assert b is not None
        assert focus_text(b, datetime(2026, 1, 9)) == "B"
