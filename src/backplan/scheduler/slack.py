"""Slack and critical path resolution."""

from __future__ import annotations

from backplan.exceptions import InfeasibleScheduleError
from backplan.logger import get_logger

from .core import BackwardPassResult, ForwardPassResult, SlackResult
from .graph import DependencyGraph

logger = get_logger()


class SlackResolver:
    """Combines the backward and forward passes into per-task float.

    The forward pass runs on a relative clock, so each connected group of
    scheduled tasks gets its own origin: the earliest latest-start among its
    root tasks. ``slack = latest_start - (origin + earliest_start)``.
    """

    def resolve(
        self,
        graph: DependencyGraph,
        backward: BackwardPassResult,
        forward: ForwardPassResult,
    ) -> SlackResult:
        """Compute slack for every scheduled task.

        Raises:
            InfeasibleScheduleError: If any task would have negative slack
        """
        scheduled = [task_id for task_id in graph.tasks if backward.is_scheduled(task_id)]
        components = graph.components(scheduled)

        origins: dict[int, int] = {}
        for task_id in scheduled:
            if not graph.is_root(task_id):
                continue
            label = components[task_id]
            latest_start = backward.latest_start[task_id]
            origins[label] = min(origins.get(label, latest_start), latest_start)

        result = SlackResult()
        for task_id in scheduled:
            origin = origins[components[task_id]]
            slack = backward.latest_start[task_id] - (origin + forward.earliest_start[task_id])
            if slack < 0:
                raise InfeasibleScheduleError(
                    task_id,
                    f"anchors cannot all be met; the task would need to start "
                    f"{-slack} minutes before its latest possible start",
                )
            result.slack[task_id] = slack

        logger.checks(f"Critical tasks: {', '.join(sorted(result.critical)) or '(none)'}")
        return result
