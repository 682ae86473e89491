"""Custom exceptions for backplan."""

from __future__ import annotations

from collections.abc import Sequence


class BackplanError(Exception):
    """Base exception for all backplan errors."""

    pass


class ParseError(BackplanError):
    """Raised when a project or config file cannot be read or parsed."""

    pass


class ValidationError(BackplanError):
    """Raised when a project file has an invalid structure."""

    pass


class SchedulingError(BackplanError):
    """Base class for fatal scheduling failures.

    A scheduling error always aborts the whole computation; no partial
    schedule is ever returned alongside it.
    """

    pass


class CycleDetectedError(SchedulingError):
    """Raised when the dependency graph contains a cycle."""

    def __init__(self, cycle: Sequence[str]):
        self.cycle = list(cycle)
        super().__init__(f"Cycle detected in task dependencies: {' -> '.join(self.cycle)}")


class UnknownTaskReferenceError(SchedulingError):
    """Raised when a dependency or anchor names a task that does not exist."""

    def __init__(self, task_id: str, referenced_by: str | None = None, kind: str = "dependency"):
        self.task_id = task_id
        self.referenced_by = referenced_by
        self.kind = kind
        if kind == "anchor":
            msg = f"Anchor task '{task_id}' not found in task list"
        else:
            msg = f"Task '{referenced_by}' depends on unknown task '{task_id}'"
        super().__init__(msg)


class DuplicateTaskError(SchedulingError):
    """Raised when two tasks share the same id."""

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Duplicate task id '{task_id}'")


class InvalidDurationError(SchedulingError):
    """Raised for a non-positive or unparsable task duration."""

    def __init__(self, task_id: str, value: object, reason: str = "must be a positive integer"):
        self.task_id = task_id
        self.value = value
        super().__init__(f"Invalid duration {value!r} for task '{task_id}': {reason}")


class InvalidAnchorDateError(SchedulingError):
    """Raised when an anchor instant cannot be interpreted."""

    def __init__(self, task_id: str, value: object, details: str):
        self.task_id = task_id
        self.value = value
        super().__init__(f"Invalid date format for anchor task '{task_id}': {details}")


class InfeasibleScheduleError(SchedulingError):
    """Raised when anchors conflict and no schedule can satisfy all of them."""

    def __init__(self, task_id: str, detail: str):
        self.task_id = task_id
        self.detail = detail
        super().__init__(f"Infeasible schedule at task '{task_id}': {detail}")


class UnanchoredTaskError(SchedulingError):
    """Raised when tasks cannot reach any anchor and the policy forbids that."""

    def __init__(self, task_ids: Sequence[str]):
        self.task_ids = list(task_ids)
        super().__init__(
            "No end date computed - tasks not connected to any anchor: "
            + ", ".join(self.task_ids)
        )
