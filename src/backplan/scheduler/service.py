"""High-level scheduling service."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from backplan.logger import get_logger
from backplan.models import AnchorValue, ScheduleResult, TaskDefinition

from .assembler import ScheduleAssembler
from .backward_pass import BackwardPass
from .config import SchedulingConfig
from .forward_pass import ForwardPass
from .graph import DependencyGraph
from .normalize import normalize_anchors, normalize_tasks
from .slack import SlackResolver

logger = get_logger()

Anchors = Mapping[str, AnchorValue] | Iterable[tuple[str, AnchorValue]]


class SchedulingService:
    """Computes a complete backward schedule from one task/anchor snapshot.

    This service coordinates:
    - unit normalization (durations and anchors to minutes)
    - DependencyGraph (successor derivation, cycle detection)
    - BackwardPass (late dates from anchors)
    - ForwardPass (early dates for slack measurement)
    - SlackResolver (float and critical flags)
    - ScheduleAssembler (calendar values and echoed metadata)

    The service keeps no state between runs and never mutates its inputs; the
    caller builds a new service, or calls compute_schedule(), after every edit.
    """

    def __init__(
        self,
        tasks: Sequence[TaskDefinition],
        anchors: Anchors,
        config: SchedulingConfig | None = None,
    ):
        """Initialize scheduling service.

        Args:
            tasks: Complete task set
            anchors: task_id -> instant, or (task_id, instant) pairs
            config: Optional scheduling configuration
        """
        self.tasks = list(tasks)
        self.anchors = anchors
        self.config = config or SchedulingConfig()

    def schedule(self) -> ScheduleResult:
        """Run every pass and assemble the result.

        Returns:
            ScheduleResult with dated tasks, unscheduled advisories and warnings

        Raises:
            SchedulingError: Any fatal problem; no partial result is produced
        """
        if not self.tasks:
            # Anchors are still validated against the empty set.
            normalize_anchors(self.anchors, set(), self.config)
            return ScheduleResult()

        normalized = normalize_tasks(self.tasks)
        graph = DependencyGraph(normalized)
        order = graph.topological_order()

        anchors, warnings = normalize_anchors(self.anchors, set(graph.tasks), self.config)
        logger.debug(f"Scheduling {len(graph)} tasks against {len(anchors)} anchors")

        backward = BackwardPass(self.config).process(graph, order, anchors)
        forward = ForwardPass().process(graph, order)
        slack = SlackResolver().resolve(graph, backward, forward)

        warnings.extend(backward.warnings)
        for task in self.tasks:
            if task.id in backward.unscheduled:
                warnings.append(
                    f"Task '{task.id}' left unscheduled: {backward.unscheduled[task.id]}"
                )

        return ScheduleAssembler().assemble(self.tasks, backward, slack, set(anchors), warnings)


def compute_schedule(
    tasks: Sequence[TaskDefinition],
    anchors: Anchors,
    config: SchedulingConfig | None = None,
) -> ScheduleResult:
    """Compute the schedule for a task set and its anchors.

    Convenience wrapper around SchedulingService.
    """
    return SchedulingService(tasks, anchors, config).schedule()
