"""Scheduler package - deadline-driven backward scheduling.

This package computes late dates for a task graph from one or more anchors:
- Unit normalization of durations and anchor instants to integer minutes
- Dependency graph with eager successor derivation and cycle detection
- Backward pass (late dates) and forward baseline pass (early dates)
- Slack and critical path resolution
- Assembly into caller-facing ScheduledTask records

Main entry points:
- compute_schedule: one-shot function over a task/anchor snapshot
- SchedulingService: the same, as an object

Configuration:
- SchedulingConfig: anchor mode, unanchored-task policy, duplicate anchors, end of day
"""

from .assembler import ScheduleAssembler
from .backward_pass import BackwardPass
from .config import AnchorMode, DuplicateAnchorPolicy, SchedulingConfig, UnanchoredPolicy
from .core import BackwardPassResult, ForwardPassResult, SlackResult, Task
from .forward_pass import ForwardPass
from .graph import DependencyGraph
from .normalize import (
    EPOCH,
    MINUTES_PER_DAY,
    format_duration,
    from_minutes,
    normalize_anchors,
    normalize_tasks,
    parse_duration,
    parse_instant,
    to_minutes,
)
from .service import SchedulingService, compute_schedule
from .slack import SlackResolver

__all__ = [
    # Core dataclasses
    "Task",
    "BackwardPassResult",
    "ForwardPassResult",
    "SlackResult",
    # Configuration
    "SchedulingConfig",
    "AnchorMode",
    "UnanchoredPolicy",
    "DuplicateAnchorPolicy",
    # Normalization
    "EPOCH",
    "MINUTES_PER_DAY",
    "to_minutes",
    "from_minutes",
    "parse_instant",
    "parse_duration",
    "format_duration",
    "normalize_tasks",
    "normalize_anchors",
    # Passes
    "DependencyGraph",
    "BackwardPass",
    "ForwardPass",
    "SlackResolver",
    "ScheduleAssembler",
    # High-level service
    "SchedulingService",
    "compute_schedule",
]
