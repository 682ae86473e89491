"""Tests for dependency graph construction, ordering and cycle detection."""

import pytest

from backplan.exceptions import CycleDetectedError, DuplicateTaskError, UnknownTaskReferenceError
from backplan.scheduler import DependencyGraph
from backplan.scheduler.core import Task


def _graph(*edges: tuple[str, tuple[str, ...]]) -> DependencyGraph:
    return DependencyGraph(
        [
            Task(id=task_id, duration=60, dependencies=deps, index=i)
            for i, (task_id, deps) in enumerate(edges)
        ]
    )


class TestGraphConstruction:
    """Successor derivation and reference checks."""

    def test_successors_derived(self) -> None:
        graph = _graph(("a", ()), ("b", ("a",)), ("c", ("a",)))
        assert graph.successors["a"] == ["b", "c"]
        assert graph.successors["b"] == []
        assert graph.predecessors("b") == ("a",)

    def test_roots_and_sinks(self) -> None:
        graph = _graph(("a", ()), ("b", ("a",)))
        assert graph.is_root("a")
        assert not graph.is_root("b")
        assert graph.is_sink("b")
        assert not graph.is_sink("a")

    def test_unknown_dependency(self) -> None:
        with pytest.raises(UnknownTaskReferenceError) as exc_info:
            _graph(("a", ("ghost",)))
        assert exc_info.value.task_id == "ghost"
        assert exc_info.value.referenced_by == "a"
        assert "Task 'a' depends on unknown task 'ghost'" in str(exc_info.value)

    def test_duplicate_task(self) -> None:
        with pytest.raises(DuplicateTaskError):
            _graph(("a", ()), ("a", ()))


class TestTopologicalOrder:
    """Deterministic ordering."""

    def test_dependencies_first(self) -> None:
        graph = _graph(("c", ("b",)), ("b", ("a",)), ("a", ()))
        assert graph.topological_order() == ["a", "b", "c"]

    def test_ties_broken_by_input_position(self) -> None:
        graph = _graph(("z", ()), ("y", ()), ("x", ("z", "y")))
        assert graph.topological_order() == ["z", "y", "x"]

    def test_repeatable(self) -> None:
        edges = [("d", ("b", "c")), ("c", ("a",)), ("b", ("a",)), ("a", ())]
        first = _graph(*edges).topological_order()
        second = _graph(*edges).topological_order()
        assert first == second == ["a", "c", "b", "d"]


class TestCycleDetection:
    """Cycles are rejected before any date arithmetic."""

    def test_two_cycle(self) -> None:
        graph = _graph(("a", ("b",)), ("b", ("a",)))
        with pytest.raises(CycleDetectedError) as exc_info:
            graph.topological_order()
        cycle = exc_info.value.cycle
        assert cycle[0] == cycle[-1]
        assert set(cycle) == {"a", "b"}
        assert "Cycle detected" in str(exc_info.value)

    def test_self_dependency(self) -> None:
        graph = _graph(("a", ("a",)))
        with pytest.raises(CycleDetectedError) as exc_info:
            graph.topological_order()
        assert exc_info.value.cycle == ["a", "a"]

    def test_cycle_reported_not_its_dependents(self) -> None:
        # "d" depends on the cycle but is not part of it
        graph = _graph(("a", ("c",)), ("b", ("a",)), ("c", ("b",)), ("d", ("c",)), ("e", ()))
        with pytest.raises(CycleDetectedError) as exc_info:
            graph.topological_order()
        cycle = exc_info.value.cycle
        assert set(cycle) == {"a", "b", "c"}
        assert len(cycle) == 4

    def test_cycle_reads_prerequisite_first(self) -> None:
        graph = _graph(("a", ("c",)), ("b", ("a",)), ("c", ("b",)))
        with pytest.raises(CycleDetectedError) as exc_info:
            graph.topological_order()
        cycle = exc_info.value.cycle
        for prerequisite, dependent in zip(cycle, cycle[1:]):
            assert prerequisite in graph.predecessors(dependent)


class TestComponents:
    """Weakly connected components."""

    def test_labels_follow_input_order(self) -> None:
        graph = _graph(("a", ()), ("x", ()), ("b", ("a",)), ("c", ("b",)))
        labels = graph.components()
        assert labels == {"a": 0, "b": 0, "c": 0, "x": 1}

    def test_shared_prerequisite_joins_components(self) -> None:
        graph = _graph(("root", ()), ("left", ("root",)), ("right", ("root",)))
        labels = graph.components()
        assert len(set(labels.values())) == 1

    def test_subset_splits_graph(self) -> None:
        graph = _graph(("a", ()), ("b", ("a",)), ("c", ("b",)))
        labels = graph.components(["a", "c"])
        assert labels == {"a": 0, "c": 1}


class TestUpstream:
    """Tasks leading into a target set."""

    def test_collects_transitive_prerequisites(self) -> None:
        graph = _graph(
            ("a", ()), ("b", ("a",)), ("c", ("b",)), ("side", ("a",)), ("x", ())
        )
        assert graph.upstream(["c"]) == {"a", "b", "c"}

    def test_empty_targets(self) -> None:
        graph = _graph(("a", ()), ("b", ("a",)))
        assert graph.upstream([]) == set()
