"""Terminal output helpers for the taskfilter CLI."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager, nullcontext
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from rich.console import Console

from taskfilter.color import (
    colorize,
    dim_white,
    escape_text,
    get_priority_color,
    magenta,
    should_use_color,
)
from taskfilter.models import Task


class OutputArgs(Protocol):
    """Protocol for arguments controlling terminal output."""

    color_flag: bool | None


@dataclass(frozen=True)
class TaskLineConfig:
    """Configuration for rendering one task line."""

    color_enabled: bool
    project_names: Mapping[str, str] = field(default_factory=dict)


def setup_output(args: OutputArgs) -> bool:
    """Resolve whether colored output is enabled for this run."""
    return should_use_color(args.color_flag)


def build_console(color_enabled: bool) -> Console:
    """Build the Rich console used for command output."""
    return Console(
        no_color=not color_enabled,
        force_terminal=color_enabled,
        highlight=False,
        soft_wrap=True,
    )


@contextmanager
def processing_status(console: Console, color_enabled: bool) -> Iterator[None]:
    """Show a spinner while data loads, only on color terminals."""
    status = console.status("Processing...") if color_enabled else nullcontext()
    with status:
        yield


def format_timestamp(timestamp: int | None) -> str:
    """Format epoch milliseconds as a local date, with time when not midnight."""
    if timestamp is None:
        return ""
    moment = datetime.fromtimestamp(timestamp / 1000)
    if moment.hour == 0 and moment.minute == 0:
        return moment.strftime("%Y-%m-%d")
    return moment.strftime("%Y-%m-%d %H:%M")


def format_task_line(task: Task, config: TaskLineConfig) -> str:
    """Return one line describing a task.

    Layout: ``p<priority> <content> [due <date>] [#project] [@label ...]``.
    """
    enabled = config.color_enabled
    parts = [
        colorize(f"p{task.priority}", get_priority_color(task.priority, enabled), enabled),
        escape_text(task.content, enabled),
    ]
    if task.due_date is not None:
        parts.append(magenta(f"due {format_timestamp(task.due_date)}", enabled))
    if task.deadline is not None:
        parts.append(magenta(f"deadline {format_timestamp(task.deadline)}", enabled))
    if task.project_id is not None:
        project_name = config.project_names.get(task.project_id, task.project_id)
        parts.append(dim_white(f"#{project_name}", enabled))
    parts.extend(dim_white(f"@{label.name}", enabled) for label in task.labels or [])
    return " ".join(parts)


def lines_to_text(lines: list[str]) -> str:
    """Join lines with a trailing newline, empty for no lines."""
    if not lines:
        return ""
    return "\n".join(lines) + "\n"
