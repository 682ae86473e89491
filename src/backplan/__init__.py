"""backplan - deadline-driven backward scheduling."""

from .exceptions import (
    BackplanError,
    CycleDetectedError,
    DuplicateTaskError,
    InfeasibleScheduleError,
    InvalidAnchorDateError,
    InvalidDurationError,
    ParseError,
    SchedulingError,
    UnanchoredTaskError,
    UnknownTaskReferenceError,
    ValidationError,
)
from .loader import load_project, validate_project
from .models import (
    Project,
    ScheduledTask,
    ScheduleResult,
    SubTask,
    TaskDefinition,
    UnscheduledTask,
)
from .scheduler import SchedulingConfig, SchedulingService, compute_schedule

__all__ = [
    "compute_schedule",
    "SchedulingService",
    "SchedulingConfig",
    "load_project",
    "validate_project",
    "Project",
    "TaskDefinition",
    "SubTask",
    "ScheduledTask",
    "UnscheduledTask",
    "ScheduleResult",
    "BackplanError",
    "ParseError",
    "ValidationError",
    "SchedulingError",
    "CycleDetectedError",
    "UnknownTaskReferenceError",
    "DuplicateTaskError",
    "InvalidDurationError",
    "InvalidAnchorDateError",
    "InfeasibleScheduleError",
    "UnanchoredTaskError",
]
