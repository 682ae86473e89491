"""Forward baseline pass: earliest dates ignoring anchors."""

from __future__ import annotations

from backplan.logger import get_logger

from .core import ForwardPassResult
from .graph import DependencyGraph

logger = get_logger()


class ForwardPass:
    """Computes earliest start/finish on a relative clock.

    Tasks without dependencies start at 0; every other task starts when its
    last dependency finishes. The numbers are only ever compared with late
    dates to measure slack; they are never shown as dates.
    """

    def process(self, graph: DependencyGraph, order: list[str]) -> ForwardPassResult:
        """Run the forward pass over ``order`` (predecessors first)."""
        result = ForwardPassResult()

        for task_id in order:
            task = graph.tasks[task_id]
            earliest_start = max(
                (result.earliest_finish[dep_id] for dep_id in task.dependencies), default=0
            )
            result.earliest_start[task_id] = earliest_start
            result.earliest_finish[task_id] = earliest_start + task.duration
            logger.debug(
                f"  {task_id}: earliest +{earliest_start} -> +{result.earliest_finish[task_id]}"
            )

        return result
