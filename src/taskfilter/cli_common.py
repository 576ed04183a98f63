"""Shared CLI helpers for loading data and running filter queries."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

import click
import typer

from taskfilter import config as config_module
from taskfilter.filters import evaluate_filter
from taskfilter.logging_config import LOGGER_NAME
from taskfilter.models import ExportData, SavedFilter, Task
from taskfilter.output_format import (
    OutputFormatError,
    TasksRenderInput,
    get_tasks_formatter,
    print_prepared_output,
)
from taskfilter.parse import load_export
from taskfilter.query_language import FilterContext, create_context
from taskfilter.tui import build_console, processing_status, setup_output
from taskfilter.validation import parse_now_argument, validate_paging_arguments


logger = logging.getLogger(LOGGER_NAME)


class FilterRunArgs(Protocol):
    """Protocol for arguments of commands that evaluate a filter."""

    data: str | None
    now: str | None
    color_flag: bool | None
    max_results: int
    offset: int
    out: str


@dataclass(frozen=True)
class LoadedData:
    """Export data plus the context built from it."""

    export: ExportData
    context: FilterContext


def require_data_path(data: str | None) -> str:
    """Return the export path or fail with a usage hint."""
    if data is None or not data.strip():
        raise typer.BadParameter(
            "No export file given. Pass --data FILE or set it in the config defaults."
        )
    return data


def load_data(data: str | None) -> LoadedData:
    """Load an export and build the name lookups for it."""
    export = load_export(require_data_path(data))
    context = create_context(export.projects, export.labels, export.sections)
    return LoadedData(export=export, context=context)


def page_results(tasks: list[Task], offset: int, max_results: int) -> list[Task]:
    """Apply offset and limit to a result list."""
    return tasks[offset : offset + max_results]


def run_filter(args: FilterRunArgs, query: str, loaded: LoadedData | None = None) -> None:
    """Evaluate ``query`` over the export named by ``args`` and print the result."""
    color_enabled = setup_output(args)
    console = build_console(color_enabled)
    validate_paging_arguments(args)
    now = parse_now_argument(args.now)
    try:
        formatter = get_tasks_formatter(args.out)
    except OutputFormatError as exc:
        raise click.UsageError(str(exc)) from exc

    with processing_status(console, color_enabled):
        if loaded is None:
            loaded = load_data(args.data)
        matched = evaluate_filter(loaded.export.tasks, query, loaded.context, now=now)
        logger.info("Filter %r matched %d tasks", query, len(matched))
        prepared_output = formatter.prepare(
            TasksRenderInput(
                tasks=page_results(matched, args.offset, args.max_results),
                color_enabled=color_enabled,
                project_names={project.id: project.name for project in loaded.export.projects},
            )
        )

    print_prepared_output(console, prepared_output)


def collect_saved_filters(export: ExportData | None) -> list[SavedFilter]:
    """Merge saved filters from the export with named filters from the config.

    Export filters come first in sort order; config filters follow in name
    order and never shadow an export filter of the same name.
    """
    saved = sorted(export.filters, key=lambda item: item.sort_order) if export else []
    known = {item.name.lower() for item in saved}
    next_order = max((item.sort_order for item in saved), default=0) + 1
    for name, query in sorted(config_module.CONFIG_CUSTOM_FILTERS.items()):
        if name.lower() in known:
            continue
        saved.append(
            SavedFilter(id=f"config:{name}", name=name, query=query, sort_order=next_order)
        )
        next_order += 1
    return saved


def find_saved_filter(filters: list[SavedFilter], name: str) -> SavedFilter:
    """Find a saved filter by case-insensitive name.

    Raises:
        typer.BadParameter: If no filter has the name
    """
    for item in filters:
        if item.name.lower() == name.strip().lower():
            return item
    available = ", ".join(item.name for item in filters) or "none"
    raise typer.BadParameter(f"Unknown filter '{name}'. Available filters: {available}")
