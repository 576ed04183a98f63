"""Output formatting for filter results."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Protocol

from rich.console import Console
from rich.syntax import Syntax

from taskfilter.models import Task
from taskfilter.tui import TaskLineConfig, format_task_line, lines_to_text


DEFAULT_OUTPUT_THEME = "github-dark"


class OutputFormat(StrEnum):
    """Supported output formats."""

    TEXT = "text"
    JSON = "json"


class OutputFormatError(RuntimeError):
    """Raised when output formatting fails."""


@dataclass(frozen=True)
class OutputOperation:
    """One prepared output operation."""

    kind: str
    text: str | None = None
    renderable: object | None = None
    markup: bool = False
    end: str = "\n"


@dataclass(frozen=True)
class PreparedOutput:
    """Prepared output operations ready for console rendering."""

    operations: tuple[OutputOperation, ...]


@dataclass(frozen=True)
class TasksRenderInput:
    """Render input for task list formatters."""

    tasks: list[Task]
    color_enabled: bool
    project_names: Mapping[str, str] = field(default_factory=dict)


class TasksOutputFormatter(Protocol):
    """Formatter interface for task results."""

    def prepare(self, data: TasksRenderInput) -> PreparedOutput:
        """Prepare task results for rendering."""
        ...


NO_RESULTS = PreparedOutput(
    operations=(OutputOperation(kind="console_print", text="No results", markup=False),)
)


def _write_plain_output(console: Console, text: str, end: str = "\n") -> None:
    """Write plain output directly to console stream."""
    console.file.write(f"{text}{end}")
    console.file.flush()


def print_prepared_output(console: Console, prepared_output: PreparedOutput) -> None:
    """Print already prepared output operations."""
    for operation in prepared_output.operations:
        if operation.kind == "plain_write":
            if operation.text is not None:
                _write_plain_output(console, operation.text, operation.end)
            continue
        if operation.renderable is not None:
            console.print(operation.renderable)
            continue
        console.print(
            operation.text if operation.text is not None else "",
            markup=operation.markup,
            end=operation.end,
        )


def prepare_text(text: str, color_enabled: bool) -> PreparedOutput:
    """Prepare already formatted text, rendering markup only when color is on."""
    return PreparedOutput(
        operations=(
            OutputOperation(
                kind="console_print" if color_enabled else "plain_write",
                text=text,
                markup=color_enabled,
                end="",
            ),
        )
    )


def _prepare_json(text: str, color_enabled: bool) -> PreparedOutput:
    """Prepare JSON text, highlighted when color is on."""
    if color_enabled:
        return PreparedOutput(
            operations=(
                OutputOperation(
                    kind="console_print",
                    renderable=Syntax(
                        text,
                        "json",
                        theme=DEFAULT_OUTPUT_THEME,
                        line_numbers=False,
                        word_wrap=True,
                    ),
                ),
            )
        )
    return PreparedOutput(operations=(OutputOperation(kind="plain_write", text=text),))


class TextTasksOutputFormatter:
    """One line per task."""

    def prepare(self, data: TasksRenderInput) -> PreparedOutput:
        if not data.tasks:
            return NO_RESULTS
        config = TaskLineConfig(color_enabled=data.color_enabled, project_names=data.project_names)
        return prepare_text(
            lines_to_text([format_task_line(task, config) for task in data.tasks]),
            data.color_enabled,
        )


class JsonTasksOutputFormatter:
    """JSON array of tasks in export shape."""

    def prepare(self, data: TasksRenderInput) -> PreparedOutput:
        payload = [task.to_dict() for task in data.tasks]
        return _prepare_json(json.dumps(payload, ensure_ascii=True, indent=2), data.color_enabled)


_TEXT_FORMATTER = TextTasksOutputFormatter()
_JSON_FORMATTER = JsonTasksOutputFormatter()


def get_tasks_formatter(output_format: str) -> TasksOutputFormatter:
    """Return the task formatter for the selected output format.

    Raises:
        OutputFormatError: If the format is not supported
    """
    normalized_output = output_format.strip().lower()
    if normalized_output == OutputFormat.TEXT:
        return _TEXT_FORMATTER
    if normalized_output == OutputFormat.JSON:
        return _JSON_FORMATTER
    supported = ", ".join(item.value for item in OutputFormat)
    raise OutputFormatError(f"Unsupported output format '{output_format}'. Use one of: {supported}")
