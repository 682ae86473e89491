"""Core dataclasses shared by the scheduling passes.

All times are integer minutes since ``normalize.EPOCH``; durations are
integer minutes.
"""

from dataclasses import dataclass, field


def _default_str_list() -> list[str]:
    return []


def _default_minutes() -> dict[str, int]:
    return {}


def _default_reasons() -> dict[str, str]:
    return {}


@dataclass(frozen=True)
class Task:
    """A task after unit normalization."""

    id: str
    duration: int  # minutes, 0 for milestones
    dependencies: tuple[str, ...]
    index: int  # position in the caller's task list, used for deterministic ordering


@dataclass
class BackwardPassResult:
    """Late dates from the backward pass."""

    latest_start: dict[str, int] = field(default_factory=_default_minutes)
    latest_finish: dict[str, int] = field(default_factory=_default_minutes)
    # task_id -> reason, for tasks left without dates
    unscheduled: dict[str, str] = field(default_factory=_default_reasons)
    warnings: list[str] = field(default_factory=_default_str_list)

    def is_scheduled(self, task_id: str) -> bool:
        return task_id in self.latest_finish


@dataclass
class ForwardPassResult:
    """Early dates on the relative clock (roots start at 0)."""

    earliest_start: dict[str, int] = field(default_factory=_default_minutes)
    earliest_finish: dict[str, int] = field(default_factory=_default_minutes)


@dataclass
class SlackResult:
    """Per-task float and the derived critical set."""

    slack: dict[str, int] = field(default_factory=_default_minutes)

    def is_critical(self, task_id: str) -> bool:
        return self.slack.get(task_id) == 0

    @property
    def critical(self) -> set[str]:
        return {task_id for task_id, value in self.slack.items() if value == 0}
