"""Command-line interface for backplan."""

from __future__ import annotations

import csv
import io
import json
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer

from . import context
from .exceptions import BackplanError
from .loader import discover_config, load_project, validate_project
from .logger import setup_logger
from .models import Project, ScheduledTask, ScheduleResult
from .scheduler import (
    AnchorMode,
    SchedulingConfig,
    UnanchoredPolicy,
    compute_schedule,
    format_duration,
)
from .status import summarize_project
from .unified_config import UnifiedConfig

app = typer.Typer(
    name="backplan",
    help="Plan backwards from deadlines - compute when each task must start",
    add_completion=False,
)

CSV_COLUMNS = [
    "task_id",
    "task_name",
    "start",
    "end",
    "slack_minutes",
    "is_critical",
    "is_milestone",
    "completed",
]


class OutputFormat(str, Enum):
    """Output formats for schedule results."""

    TEXT = "text"
    JSON = "json"
    CSV = "csv"


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbosity level: 0=silent (default), 1=show changes, 2=show all checks, 3=debug",
            min=0,
            max=3,
        ),
    ] = 0,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to unified config file (default: backplan_config.yaml)",
        ),
    ] = None,
) -> None:
    """Global options for backplan commands."""
    setup_logger(verbose)
    context.set_config_path(config)


def _fail(message: str) -> typer.Exit:
    typer.echo(f"Error: {message}", err=True)
    return typer.Exit(1)


def _load(file: Path) -> tuple[Project, UnifiedConfig]:
    """Load the project file and its discovered config, exiting on errors."""
    try:
        project = load_project(file)
        config = discover_config(file) or UnifiedConfig()
    except (BackplanError, FileNotFoundError, ValueError) as e:
        raise _fail(str(e)) from None
    return project, config


def _schedule(project: Project, config: SchedulingConfig) -> ScheduleResult:
    try:
        return compute_schedule(project.tasks, project.anchors, config)
    except BackplanError as e:
        raise _fail(str(e)) from None


def _echo_warnings(result: ScheduleResult) -> None:
    if result.unscheduled:
        typer.echo("\nUnscheduled:", err=True)
        for item in result.unscheduled:
            typer.echo(f"  - {item.name or item.id} ({item.id}): {item.reason}", err=True)

    if result.warnings:
        typer.echo("\nWarnings:", err=True)
        for warning in result.warnings:
            typer.echo(f"  - {warning}", err=True)


def _format_value(value: date | datetime) -> str:
    if isinstance(value, datetime):
        return value.isoformat(sep=" ", timespec="minutes")
    return value.isoformat()


def _task_duration(task: ScheduledTask) -> str:
    if task.is_milestone:
        return "milestone"
    minutes = int(task.duration.total_seconds() // 60)
    if task.all_day:
        return format_duration(minutes // (24 * 60), None)
    return format_duration(0, minutes)


def _flags(task: ScheduledTask) -> list[str]:
    flags: list[str] = []
    if task.is_critical:
        flags.append("critical")
    if task.is_anchored:
        flags.append("anchored")
    if task.is_milestone:
        flags.append("milestone")
    if task.completed:
        flags.append("done")
    return flags


def _render_text(result: ScheduleResult) -> str:
    lines = ["Schedule Results", "=" * 80, ""]
    for task in result:
        lines.append(f"{task.name or task.id} ({task.id})")
        lines.append(f"  Start:    {_format_value(task.start)}")
        lines.append(f"  End:      {_format_value(task.end)}")
        lines.append(f"  Duration: {_task_duration(task)}")
        lines.append(f"  Slack:    {task.slack_minutes}m")
        flags = _flags(task)
        if flags:
            lines.append(f"  ({', '.join(flags)})")
        lines.append("")
    return "\n".join(lines)


def _render_csv(result: ScheduleResult) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for task in result:
        writer.writerow(
            [
                task.id,
                task.name,
                task.start.isoformat(),
                task.end.isoformat(),
                task.slack_minutes,
                task.is_critical,
                task.is_milestone,
                task.completed,
            ]
        )
    return buffer.getvalue()


def _render(result: ScheduleResult, output_format: OutputFormat) -> str:
    if output_format == OutputFormat.JSON:
        return json.dumps(result.to_dict(), indent=2) + "\n"
    if output_format == OutputFormat.CSV:
        return _render_csv(result)
    return _render_text(result)


@app.command()
def schedule(  # noqa: PLR0913 - CLI command needs multiple options
    file: Annotated[Path, typer.Argument(help="Path to the project YAML/JSON file")],
    *,
    output_format: Annotated[
        OutputFormat, typer.Option("--format", "-f", help="Output format")
    ] = OutputFormat.TEXT,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
    anchor_mode: Annotated[
        AnchorMode | None,
        typer.Option("--anchor-mode", help="Anchor handling. Overrides config"),
    ] = None,
    unanchored: Annotated[
        UnanchoredPolicy | None,
        typer.Option(
            "--unanchored", help="Policy for tasks not leading to an anchor. Overrides config"
        ),
    ] = None,
) -> None:
    """Compute the backward schedule and print or save it."""
    project, config = _load(file)

    scheduler_config = config.scheduling
    overrides: dict[str, object] = {}
    if anchor_mode is not None:
        overrides["anchor_mode"] = anchor_mode
    if unanchored is not None:
        overrides["unanchored_policy"] = unanchored
    if overrides:
        scheduler_config = scheduler_config.model_copy(update=overrides)

    result = _schedule(project, scheduler_config)
    rendered = _render(result, output_format)

    if output:
        output.write_text(rendered, encoding="utf-8")
        typer.echo(f"Schedule written to {output}")
    else:
        typer.echo(rendered, nl=False)

    _echo_warnings(result)


@app.command()
def check(
    file: Annotated[Path, typer.Argument(help="Path to the project YAML/JSON file")],
) -> None:
    """Validate a project file without computing dates."""
    project, config = _load(file)

    try:
        warnings = validate_project(project, config.scheduling)
    except BackplanError as e:
        raise _fail(str(e)) from None

    typer.echo(f"OK: {len(project.tasks)} tasks, {len(project.anchors)} anchors")
    for warning in warnings:
        typer.echo(f"  - {warning}", err=True)


@app.command(name="critical-path")
def critical_path(
    file: Annotated[Path, typer.Argument(help="Path to the project YAML/JSON file")],
) -> None:
    """List the zero-slack tasks in start order."""
    project, config = _load(file)
    result = _schedule(project, config.scheduling)

    path = result.critical_path
    if not path:
        typer.echo("No critical tasks")
        return

    tasks = result.tasks_by_id
    for task_id in path:
        task = tasks[task_id]
        typer.echo(
            f"{_format_value(task.start):<16}  {_format_value(task.end):<16}  "
            f"{task.name or task.id} ({task.id})"
        )


def _parse_now(value: str | None) -> datetime | None:
    if value is None:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise _fail(
            f"Invalid --now value '{value}'. Use YYYY-MM-DD or YYYY-MM-DDTHH:MM"
        ) from None
    return parsed.replace(second=0, microsecond=0)


@app.command()
def status(
    file: Annotated[Path, typer.Argument(help="Path to the project YAML/JSON file")],
    now: Annotated[
        str | None,
        typer.Option("--now", help="Reference moment (YYYY-MM-DD[THH:MM]). Defaults to now"),
    ] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the summary as JSON")] = False,
) -> None:
    """Show next deadline, urgency, current focus and upcoming tasks."""
    parsed_now = _parse_now(now)
    if parsed_now is not None:
        context.set_as_of(parsed_now)
    moment = context.get_as_of()

    project, config = _load(file)
    scheduler_config = config.scheduling
    result = _schedule(project, scheduler_config)
    summary = summarize_project(
        result,
        project.anchors,
        moment,
        config.status_settings,
        end_of_day=scheduler_config.end_of_day,
    )

    if as_json:
        typer.echo(json.dumps(summary.to_dict(), indent=2))
        return

    deadline = _format_value(summary.next_deadline) if summary.next_deadline else "-"
    typer.echo(f"Project:       {project.name or project.id or file.stem}")
    typer.echo(f"Status:        {summary.status.value}")
    typer.echo(f"Next deadline: {deadline}")
    typer.echo(f"Focus:         {summary.current_focus or '-'}")
    if summary.task_progress is not None:
        typer.echo(f"Progress:      {summary.task_progress:.0%}")

    if summary.upcoming:
        typer.echo("\nUp next:")
        for item in summary.upcoming:
            typer.echo(
                f"  [{item.state.value:<6}] {_format_value(item.task.start)}  "
                f"{item.task.name or item.task.id}"
            )


def main() -> int:
    """Main entry point."""
    # Typer handles sys.exit() internally
    app()
    return 0


if __name__ == "__main__":
    main()
