"""Loading task manager JSON exports."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping

import typer

from taskfilter.logging_config import LOGGER_NAME
from taskfilter.models import (
    ExportData,
    Label,
    Project,
    SavedFilter,
    Section,
    Task,
    TaskLabel,
)


logger = logging.getLogger(LOGGER_NAME)


def _read_export_file(name: str) -> dict[str, object]:
    """Read and decode one export file."""
    try:
        with open(name, encoding="utf-8") as f:
            logger.info("Processing %s...", name)
            data = json.load(f)
    except FileNotFoundError as err:
        raise typer.BadParameter(f"File '{name}' not found") from err
    except PermissionError as err:
        raise typer.BadParameter(f"Permission denied for '{name}'") from err
    except IsADirectoryError as err:
        raise typer.BadParameter(f"'{name}' is a directory") from err
    except json.JSONDecodeError as err:
        raise typer.BadParameter(f"Invalid JSON in '{name}': {err}") from err

    if not isinstance(data, dict):
        raise typer.BadParameter(f"Export file '{name}' must contain a JSON object")
    if not isinstance(data.get("tasks"), list):
        raise typer.BadParameter(f"Invalid export format in '{name}': missing tasks array")
    return data


def _records(data: Mapping[str, object], key: str) -> list[Mapping[str, object]]:
    """Return list entries under ``key`` that are JSON objects."""
    value = data.get(key)
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, Mapping)]


def populate_labels(
    tasks: list[Task],
    labels: list[Label],
    task_labels: list[Mapping[str, object]],
) -> list[Task]:
    """Attach labels to tasks so label predicates can see them.

    Labels come from ``taskLabels`` join rows when the export carries them,
    otherwise from each task's embedded labels. Embedded labels that only
    carry an id get their name from the label list.

    Args:
        tasks: Tasks as loaded from the export
        labels: All labels in the export
        task_labels: Rows of ``{"taskId": ..., "labelId": ...}``

    Returns:
        The same tasks, with ``labels`` populated
    """
    by_id = {label.id: label for label in labels}

    joined: dict[str, list[TaskLabel]] = {}
    for row in task_labels:
        label = by_id.get(str(row.get("labelId", "")))
        if label is None:
            continue
        joined.setdefault(str(row.get("taskId", "")), []).append(TaskLabel(label.id, label.name))

    for task in tasks:
        if task.id in joined:
            task.labels = joined[task.id]
            continue
        resolved: list[TaskLabel] = []
        for task_label in task.labels or []:
            known = by_id.get(task_label.id)
            name = task_label.name or (known.name if known is not None else "")
            resolved.append(TaskLabel(task_label.id, name, task_label.color))
        task.labels = resolved
    return tasks


def load_export(name: str) -> ExportData:
    """Load an export file into typed records with labels populated.

    Raises:
        typer.BadParameter: If file cannot be read or is not an export
    """
    data = _read_export_file(name)
    labels = [Label.from_dict(item) for item in _records(data, "labels")]
    tasks = [Task.from_dict(item) for item in _records(data, "tasks")]
    populate_labels(tasks, labels, _records(data, "taskLabels"))

    export = ExportData(
        tasks=tasks,
        projects=[Project.from_dict(item) for item in _records(data, "projects")],
        labels=labels,
        sections=[Section.from_dict(item) for item in _records(data, "sections")],
        filters=[SavedFilter.from_dict(item) for item in _records(data, "filters")],
    )
    logger.info(
        "Loaded %d tasks, %d projects, %d labels, %d sections, %d filters",
        len(export.tasks),
        len(export.projects),
        len(export.labels),
        len(export.sections),
        len(export.filters),
    )
    return export
