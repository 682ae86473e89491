"""Unit normalization: durations and anchor instants to integer minutes.

Everything the passes touch is an integer number of minutes. Instants are
minutes since ``EPOCH``; the epoch is arbitrary and only has to be shared by
input parsing and output assembly.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from datetime import date, datetime, time, timedelta
from decimal import Decimal, InvalidOperation

from backplan.exceptions import (
    DuplicateTaskError,
    InfeasibleScheduleError,
    InvalidAnchorDateError,
    InvalidDurationError,
    UnknownTaskReferenceError,
)
from backplan.logger import get_logger
from backplan.models import AnchorValue, TaskDefinition

from .config import DuplicateAnchorPolicy, SchedulingConfig
from .core import Task

logger = get_logger()

MINUTES_PER_HOUR = 60
MINUTES_PER_DAY = 24 * MINUTES_PER_HOUR
EPOCH = datetime(1970, 1, 1)

_ONE_MINUTE = timedelta(minutes=1)
_DURATION_RE = re.compile(r"^(\d*(?:\.\d+)?)\s*([dhm])?$")
_UNIT_MINUTES = {"d": MINUTES_PER_DAY, "h": MINUTES_PER_HOUR, "m": 1}


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def to_minutes(moment: datetime) -> int:
    """Convert a naive, whole-minute datetime to minutes since the epoch."""
    if moment.tzinfo is not None:
        raise ValueError("timezone-aware instants are not supported")
    if moment.second or moment.microsecond:
        raise ValueError(f"instant {moment.isoformat()} does not fall on a whole minute")
    return (moment - EPOCH) // _ONE_MINUTE


def from_minutes(minutes: int) -> datetime:
    """Inverse of to_minutes()."""
    return EPOCH + timedelta(minutes=minutes)


# Instants representable as a datetime, 0001-01-01 00:00 to 9999-12-31 23:59
MIN_INSTANT = to_minutes(datetime.min)
MAX_INSTANT = to_minutes(datetime.max.replace(second=0, microsecond=0))


def in_calendar_range(minutes: int) -> bool:
    return MIN_INSTANT <= minutes <= MAX_INSTANT


def parse_instant(value: AnchorValue, end_of_day: time = time(23, 59)) -> datetime:
    """Interpret an anchor value as a naive datetime.

    Date-only values (``date`` objects or ``YYYY-MM-DD`` strings) mean the end
    of that calendar day, i.e. ``end_of_day`` on that date.

    Raises:
        ValueError: If the value cannot be interpreted
    """
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, date):
        moment = datetime.combine(value, end_of_day)
    elif isinstance(value, str):
        text = value.strip()
        try:
            day = date.fromisoformat(text)
        except ValueError:
            try:
                moment = datetime.fromisoformat(text)
            except ValueError as e:
                raise ValueError(
                    f"Could not parse date '{value}', expected YYYY-MM-DDTHH:MM:SS or YYYY-MM-DD"
                ) from e
        else:
            moment = datetime.combine(day, end_of_day)
    else:
        raise ValueError(f"unsupported anchor value of type {type(value).__name__}")

    if moment.tzinfo is not None:
        raise ValueError("timezone-aware instants are not supported")
    if moment.second or moment.microsecond:
        raise ValueError(f"instant {moment.isoformat()} does not fall on a whole minute")
    return moment


def parse_duration(text: str) -> tuple[int, int | None]:
    """Parse duration shorthand into ``(duration_days, duration_minutes)``.

    Supported formats:
    - "3d", "3" - 3 whole days (a bare number means days)
    - "1.5d" - 2160 minutes (fractional days lose whole-day status)
    - "4h", "1.5h" - hours, stored as minutes
    - "30m" - minutes

    Raises:
        ValueError: If the text is not a positive whole number of minutes
    """
    match = _DURATION_RE.match(text.strip().lower())
    if not match or not match.group(1):
        raise ValueError(f"Could not parse duration '{text}', expected e.g. 1d, 4h, 30m")

    number, unit = match.groups()
    try:
        value = Decimal(number)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse duration '{text}'") from e
    if value <= 0:
        raise ValueError(f"Duration '{text}' must be positive")

    unit = unit or "d"
    if unit == "d" and value == value.to_integral_value():
        return (int(value), None)

    minutes = value * _UNIT_MINUTES[unit]
    if minutes != minutes.to_integral_value():
        raise ValueError(f"Duration '{text}' is not a whole number of minutes")
    return (0, int(minutes))


def format_duration(duration_days: int, duration_minutes: int | None) -> str:
    """Render a duration the short way: "3d", "45m", "1.5h"."""
    if duration_minutes is None:
        return f"{duration_days}d"
    if duration_minutes >= MINUTES_PER_HOUR:
        return f"{round(duration_minutes / MINUTES_PER_HOUR, 1):g}h"
    return f"{duration_minutes}m"


def duration_in_minutes(definition: TaskDefinition) -> int:
    """Resolve a task's duration to minutes.

    Raises:
        InvalidDurationError: For non-milestones without a positive integer duration
    """
    if definition.is_milestone:
        return 0

    if definition.duration_minutes is not None:
        value: object = definition.duration_minutes
        factor = 1
    else:
        value = definition.duration_days
        factor = MINUTES_PER_DAY

    if not _is_int(value):
        raise InvalidDurationError(definition.id, value, "must be an integer")
    assert isinstance(value, int)
    if value <= 0:
        raise InvalidDurationError(definition.id, value)
    return value * factor


def normalize_tasks(definitions: Sequence[TaskDefinition]) -> list[Task]:
    """Convert task definitions to internal minute-based tasks.

    Raises:
        DuplicateTaskError: If two definitions share an id
        InvalidDurationError: If a duration is not usable
    """
    seen: set[str] = set()
    tasks: list[Task] = []
    for index, definition in enumerate(definitions):
        if definition.id in seen:
            raise DuplicateTaskError(definition.id)
        seen.add(definition.id)
        duration = duration_in_minutes(definition)
        logger.debug(f"  normalized {definition.id}: {duration} min")
        tasks.append(
            Task(
                id=definition.id,
                duration=duration,
                dependencies=definition.dependencies,
                index=index,
            )
        )
    return tasks


def normalize_anchors(
    anchors: Mapping[str, AnchorValue] | Iterable[tuple[str, AnchorValue]],
    known_ids: set[str],
    config: SchedulingConfig,
) -> tuple[dict[str, int], list[str]]:
    """Validate anchors and convert them to minutes.

    Anchors may be a mapping or a sequence of ``(task_id, instant)`` pairs; the
    latter can name a task more than once.

    Returns:
        Tuple of (task_id -> anchor minute, warnings)

    Raises:
        UnknownTaskReferenceError: If an anchor names an unknown task
        InvalidAnchorDateError: If an instant cannot be interpreted
        InfeasibleScheduleError: On differing duplicate anchors with the "fail" policy
    """
    pairs = anchors.items() if isinstance(anchors, Mapping) else anchors

    resolved: dict[str, int] = {}
    warnings: list[str] = []
    for task_id, value in pairs:
        if task_id not in known_ids:
            raise UnknownTaskReferenceError(task_id, kind="anchor")
        try:
            minutes = to_minutes(parse_instant(value, config.end_of_day))
        except ValueError as e:
            raise InvalidAnchorDateError(task_id, value, str(e)) from e

        previous = resolved.get(task_id)
        if previous is None or previous == minutes:
            resolved[task_id] = minutes
            continue

        first, second = sorted((previous, minutes))
        if config.duplicate_anchors == DuplicateAnchorPolicy.FAIL:
            raise InfeasibleScheduleError(
                task_id,
                f"conflicting anchors {from_minutes(first).isoformat()} and "
                f"{from_minutes(second).isoformat()}",
            )
        msg = (
            f"Task '{task_id}' has several anchors; using the earliest "
            f"({from_minutes(first).isoformat()})"
        )
        logger.changes(msg)
        warnings.append(msg)
        resolved[task_id] = first

    return (resolved, warnings)
