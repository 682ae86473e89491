"""Backward pass: latest feasible dates working from anchors toward prerequisites."""

from __future__ import annotations

from backplan.exceptions import InfeasibleScheduleError, UnanchoredTaskError
from backplan.logger import checks_enabled, get_logger

from .config import AnchorMode, SchedulingConfig, UnanchoredPolicy
from .core import BackwardPassResult
from .graph import DependencyGraph
from .normalize import from_minutes, in_calendar_range

logger = get_logger()

REASON_NO_ANCHOR_IN_COMPONENT = "no anchor in its group of connected tasks"
REASON_NO_PATH_TO_ANCHOR = "no path to any anchor"


def _fmt(minutes: int) -> str:
    return from_minutes(minutes).isoformat(sep=" ", timespec="minutes")


class BackwardPass:
    """Computes latest finish and latest start for every task.

    Processing runs in reverse topological order so every successor is
    resolved before the tasks it depends on. A non-anchored task must finish
    by the earliest latest-start among its successors; when several anchors
    pull on the same task through different paths, the tightest one wins.

    Tasks that lead to no anchor are placed only after every task that does
    is resolved, and never constrain them.
    """

    def __init__(self, config: SchedulingConfig | None = None):
        self.config = config or SchedulingConfig()

    def process(
        self,
        graph: DependencyGraph,
        order: list[str],
        anchors: dict[str, int],
    ) -> BackwardPassResult:
        """Run the backward pass.

        Args:
            graph: Validated dependency graph
            order: Topological order of ``graph``
            anchors: task_id -> anchor instant in minutes

        Returns:
            BackwardPassResult with late dates and unscheduled tasks

        Raises:
            InfeasibleScheduleError: If a fixed anchor is later than a successor allows,
                or a date falls outside the calendar
            UnanchoredTaskError: If the "fail" policy meets a task without an anchor
        """
        result = BackwardPassResult()
        policy = self.config.unanchored_policy

        leading = graph.upstream(anchors)
        floating = [task_id for task_id in order if task_id not in leading]
        if floating and policy == UnanchoredPolicy.FAIL:
            raise UnanchoredTaskError(floating)

        for task_id in reversed(order):
            if task_id not in leading:
                continue
            successor_starts = self._successor_starts(graph, task_id, result)
            if task_id in anchors:
                latest_finish = self._resolve_anchored(task_id, anchors[task_id], successor_starts)
            else:
                latest_finish = min(successor_starts.values())
            self._place(graph, task_id, latest_finish, result)

        if policy == UnanchoredPolicy.EXCLUDE:
            for task_id in floating:
                self._leave_unscheduled(task_id, REASON_NO_PATH_TO_ANCHOR, result)
        elif floating:
            self._align(graph, order, leading, result)

        return result

    def _successor_starts(
        self, graph: DependencyGraph, task_id: str, result: BackwardPassResult
    ) -> dict[str, int]:
        return {
            succ_id: result.latest_start[succ_id]
            for succ_id in graph.successors[task_id]
            if succ_id in result.latest_start
        }

    def _place(
        self,
        graph: DependencyGraph,
        task_id: str,
        latest_finish: int,
        result: BackwardPassResult,
    ) -> None:
        latest_start = latest_finish - graph.tasks[task_id].duration
        if not (in_calendar_range(latest_start) and in_calendar_range(latest_finish)):
            raise InfeasibleScheduleError(
                task_id, "its dates fall outside the supported calendar (years 1 to 9999)"
            )

        result.latest_finish[task_id] = latest_finish
        result.latest_start[task_id] = latest_start
        if checks_enabled():
            logger.task(task_id, f"latest {_fmt(latest_start)} -> {_fmt(latest_finish)}")

    def _leave_unscheduled(self, task_id: str, reason: str, result: BackwardPassResult) -> None:
        result.unscheduled[task_id] = reason
        logger.task(task_id, f"unscheduled ({reason})")

    def _warn(self, msg: str, result: BackwardPassResult) -> None:
        logger.changes(msg)
        result.warnings.append(msg)

    def _resolve_anchored(
        self, task_id: str, anchor: int, successor_starts: dict[str, int]
    ) -> int:
        if not successor_starts or min(successor_starts.values()) >= anchor:
            return anchor

        # Ties go to the first successor in input order
        blocker = min(successor_starts, key=lambda succ_id: successor_starts[succ_id])
        required = successor_starts[blocker]
        if self.config.anchor_mode == AnchorMode.FIXED:
            raise InfeasibleScheduleError(
                task_id,
                f"anchored to {_fmt(anchor)} but '{blocker}' must start by {_fmt(required)}",
            )

        logger.changes(
            f"Anchor of '{task_id}' tightened from {_fmt(anchor)} to {_fmt(required)} "
            f"by '{blocker}'"
        )
        return required

    def _align(
        self,
        graph: DependencyGraph,
        order: list[str],
        leading: set[str],
        result: BackwardPassResult,
    ) -> None:
        """Place the tasks that lead to no anchor.

        A task downstream of a scheduled chain starts when its last
        prerequisite finishes. Any other such task finishes by the latest
        resolved finish in its connected group, or stays unscheduled when the
        group has no anchor.
        """
        components = graph.components()
        deadlines: dict[int, int] = {}
        for task_id, finish in result.latest_finish.items():
            label = components[task_id]
            deadlines[label] = max(deadlines.get(label, finish), finish)

        trailing: set[str] = set()
        for task_id in order:
            if task_id not in leading and any(
                dep_id in leading or dep_id in trailing for dep_id in graph.predecessors(task_id)
            ):
                trailing.add(task_id)

        for task_id in reversed(order):
            if task_id in leading or task_id in trailing:
                continue
            deadline = deadlines.get(components[task_id])
            if deadline is None:
                self._leave_unscheduled(task_id, REASON_NO_ANCHOR_IN_COMPONENT, result)
                continue

            successor_starts = self._successor_starts(graph, task_id, result)
            if successor_starts:
                latest_finish = min(successor_starts.values())
            else:
                latest_finish = deadline
                self._warn(
                    f"Task '{task_id}' does not lead to any anchor; "
                    f"aligned to the latest deadline of its group ({_fmt(deadline)})",
                    result,
                )
            self._place(graph, task_id, latest_finish, result)

        for task_id in order:
            if task_id not in trailing:
                continue
            latest_start = max(
                result.latest_finish[dep_id] for dep_id in graph.predecessors(task_id)
            )
            if graph.is_sink(task_id):
                self._warn(
                    f"Task '{task_id}' does not lead to any anchor; "
                    f"placed after its prerequisites ({_fmt(latest_start)})",
                    result,
                )
            self._place(graph, task_id, latest_start + graph.tasks[task_id].duration, result)
