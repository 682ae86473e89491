"""Dependency graph construction, topological ordering and cycle detection."""

from __future__ import annotations

import heapq
from collections.abc import Iterable, Sequence

from backplan.exceptions import CycleDetectedError, DuplicateTaskError, UnknownTaskReferenceError
from backplan.logger import get_logger

from .core import Task

logger = get_logger()


class DependencyGraph:
    """Precedence graph over normalized tasks.

    Only the predecessor direction (``Task.dependencies``) is taken from the
    input. The successor direction is derived once, here, and never updated
    afterwards; a new graph is built for every scheduling run.
    """

    def __init__(self, tasks: Sequence[Task]):
        """Build the graph.

        Raises:
            DuplicateTaskError: If two tasks share an id
            UnknownTaskReferenceError: If a dependency names a task not in the set
        """
        self.tasks: dict[str, Task] = {}
        for task in tasks:
            if task.id in self.tasks:
                raise DuplicateTaskError(task.id)
            self.tasks[task.id] = task

        self.successors: dict[str, list[str]] = {task_id: [] for task_id in self.tasks}
        for task in tasks:
            for dep_id in task.dependencies:
                if dep_id not in self.tasks:
                    raise UnknownTaskReferenceError(dep_id, referenced_by=task.id)
                self.successors[dep_id].append(task.id)

    def __len__(self) -> int:
        return len(self.tasks)

    def predecessors(self, task_id: str) -> tuple[str, ...]:
        return self.tasks[task_id].dependencies

    def is_root(self, task_id: str) -> bool:
        return not self.tasks[task_id].dependencies

    def is_sink(self, task_id: str) -> bool:
        return not self.successors[task_id]

    def upstream(self, targets: Iterable[str]) -> set[str]:
        """Tasks that ``targets`` depend on, directly or transitively, plus the targets."""
        found = set(targets)
        frontier = list(found)
        while frontier:
            for dep_id in self.tasks[frontier.pop()].dependencies:
                if dep_id not in found:
                    found.add(dep_id)
                    frontier.append(dep_id)
        return found

    def topological_order(self) -> list[str]:
        """Order tasks so that every dependency precedes its dependents.

        Ties are broken by input position, so the order is deterministic.

        Raises:
            CycleDetectedError: If the graph is not acyclic
        """
        indegree = {task_id: len(task.dependencies) for task_id, task in self.tasks.items()}

        ready = [
            (task.index, task_id)
            for task_id, task in self.tasks.items()
            if indegree[task_id] == 0
        ]
        heapq.heapify(ready)

        order: list[str] = []
        while ready:
            _, current = heapq.heappop(ready)
            order.append(current)
            for nxt in self.successors[current]:
                indegree[nxt] -= 1
                if indegree[nxt] == 0:
                    heapq.heappush(ready, (self.tasks[nxt].index, nxt))

        if len(order) != len(self.tasks):
            remaining = [task_id for task_id, degree in indegree.items() if degree > 0]
            cycle = self.find_cycle(remaining)
            logger.debug(f"Topological sort stalled with {len(remaining)} tasks left")
            raise CycleDetectedError(cycle)

        return order

    def find_cycle(self, candidates: Iterable[str]) -> list[str]:
        """Return one dependency cycle among ``candidates``.

        Every task left over by a stalled topological sort either sits on a
        cycle or depends on one, so following dependencies from any of them
        must revisit a task. The result starts and ends with the same id.
        """
        pending = set(candidates)
        visited: set[str] = set()

        for start in sorted(pending, key=lambda task_id: self.tasks[task_id].index):
            if start in visited:
                continue
            path: list[str] = []
            on_path: set[str] = set()
            stack: list[tuple[str, int]] = [(start, 0)]
            while stack:
                node, dep_idx = stack[-1]
                if dep_idx == 0:
                    path.append(node)
                    on_path.add(node)
                    visited.add(node)
                deps = [d for d in self.tasks[node].dependencies if d in pending]
                if dep_idx < len(deps):
                    stack[-1] = (node, dep_idx + 1)
                    nxt = deps[dep_idx]
                    if nxt in on_path:
                        # Dependency edges point backwards in time; reverse so the
                        # cycle reads prerequisite -> dependent.
                        cycle = path[path.index(nxt) :] + [nxt]
                        return list(reversed(cycle))
                    if nxt not in visited:
                        stack.append((nxt, 0))
                else:
                    stack.pop()
                    path.pop()
                    on_path.discard(node)

        # Unreachable for a stalled sort; keep the error informative regardless.
        return sorted(pending)

    def components(self, subset: Iterable[str] | None = None) -> dict[str, int]:
        """Label weakly connected components.

        Args:
            subset: Restrict the graph to these task ids (edges leaving the
                subset are ignored). Defaults to all tasks.

        Returns:
            Mapping task_id -> component number. Components are numbered in
            order of their first task's input position.
        """
        members = set(self.tasks) if subset is None else set(subset)
        ordered = sorted(members, key=lambda task_id: self.tasks[task_id].index)

        labels: dict[str, int] = {}
        next_label = 0
        for start in ordered:
            if start in labels:
                continue
            labels[start] = next_label
            frontier = [start]
            while frontier:
                current = frontier.pop()
                neighbours = list(self.tasks[current].dependencies) + self.successors[current]
                for other in neighbours:
                    if other in members and other not in labels:
                        labels[other] = next_label
                        frontier.append(other)
            next_label += 1

        return labels
