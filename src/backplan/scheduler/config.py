"""Configuration classes for the scheduling engine."""

from datetime import time
from enum import Enum
from typing import Any

from pydantic import BaseModel, field_validator


class AnchorMode(str, Enum):
    """How an anchor interacts with constraints coming from downstream tasks."""

    FIXED = "fixed"  # Anchored task ends exactly at its anchor; conflicts are infeasible
    DEADLINE = "deadline"  # Anchor is an upper bound; successors may pull the task earlier


class UnanchoredPolicy(str, Enum):
    """What to do with a task that has neither an anchor nor a scheduled successor."""

    ALIGN = "align"  # Place after its prerequisites, or by its group's latest deadline
    EXCLUDE = "exclude"  # Leave every task without a path to an anchor unscheduled
    FAIL = "fail"  # Abort the computation


class DuplicateAnchorPolicy(str, Enum):
    """How to treat several anchors given for the same task."""

    EARLIEST = "earliest"
    FAIL = "fail"


class SchedulingConfig(BaseModel):
    """Configuration for the backward scheduler."""

    anchor_mode: AnchorMode = AnchorMode.FIXED
    unanchored_policy: UnanchoredPolicy = UnanchoredPolicy.ALIGN
    duplicate_anchors: DuplicateAnchorPolicy = DuplicateAnchorPolicy.EARLIEST

    # A date-only anchor means "by the end of that day"
    end_of_day: time = time(23, 59)

    @field_validator("end_of_day", mode="before")
    @classmethod
    def sexagesimal_minutes(cls, v: Any) -> Any:
        """YAML 1.1 reads an unquoted 23:59 as the integer 1439 (minutes)."""
        if isinstance(v, int) and not isinstance(v, bool):
            if not 0 <= v < 24 * 60:
                raise ValueError(f"end_of_day {v} is outside a single day")
            return time(v // 60, v % 60)
        return v

    @field_validator("end_of_day")
    @classmethod
    def whole_minute(cls, v: time) -> time:
        """Internal arithmetic is in whole minutes."""
        if v.second or v.microsecond or v.tzinfo is not None:
            raise ValueError("end_of_day must be a naive time with whole minutes, e.g. '23:59'")
        return v
