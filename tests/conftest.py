"""Shared builders for taskfilter tests."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

import pytest

from taskfilter.logging_config import LOGGER_NAME
from taskfilter.models import Label, Project, Section, Task, TaskLabel
from taskfilter.query_language import FilterContext, create_context
from taskfilter.query_language.dates import to_millis


NOW = datetime(2026, 10, 16, 12, 0)


def at(days: int = 0, hour: int = 9, minute: int = 0) -> int:
    """Return epoch milliseconds for a local time ``days`` after NOW's date."""
    moment = NOW.replace(hour=hour, minute=minute) + timedelta(days=days)
    return to_millis(moment)


def make_task(task_id: str, content: str = "", **fields: Any) -> Task:
    """Build a task with sensible defaults."""
    return Task(id=task_id, content=content or f"Task {task_id}", **fields)


def label(name: str, label_id: str | None = None) -> TaskLabel:
    """Build a task label."""
    return TaskLabel(id=label_id or f"l-{name.lower()}", name=name)


PROJECTS = [
    Project(id="proj-1", name="Work"),
    Project(id="proj-2", name="Home"),
    Project(id="proj-3", name="Work Archive"),
]

LABELS = [
    Label(id="l-urgent", name="urgent"),
    Label(id="l-waiting", name="Waiting"),
]

SECTIONS = [
    Section(id="sec-1", name="Inbox", project_id="proj-1"),
    Section(id="sec-2", name="Later", project_id="proj-1"),
]


@pytest.fixture(autouse=True)
def reset_taskfilter_logger() -> Iterator[None]:
    """Undo logging changes made by CLI runs with --verbose."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def context() -> FilterContext:
    """Context with three projects, two labels and two sections."""
    return create_context(PROJECTS, LABELS, SECTIONS)


@pytest.fixture
def scenario_tasks() -> list[Task]:
    """Tasks A-D used by the concrete filter scenarios."""
    return [
        make_task("A", priority=1, due_date=at(0), project_id="proj-1", labels=[label("urgent")]),
        make_task("B", priority=2, due_date=at(0), labels=[]),
        make_task("C", priority=4, due_date=at(-1), labels=[]),
        make_task("D", priority=4, labels=[]),
    ]


def write_export(path: Path, **sections: object) -> Path:
    """Write an export JSON file with the given top-level sections."""
    payload: dict[str, object] = {"tasks": []}
    payload.update(sections)
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


SAMPLE_EXPORT: dict[str, object] = {
    "tasks": [
        {
            "id": "t1",
            "content": "Write report",
            "projectId": "proj-1",
            "dueDate": at(0),
            "priority": 1,
        },
        {
            "id": "t2",
            "content": "Buy milk",
            "projectId": "proj-2",
            "priority": 3,
        },
        {
            "id": "t3",
            "content": "Old report",
            "projectId": "proj-1",
            "dueDate": at(-2),
            "priority": 2,
            "completed": True,
        },
        {
            "id": "t4",
            "content": "Call plumber",
            "dueDate": at(-1),
            "priority": 4,
        },
    ],
    "projects": [{"id": "proj-1", "name": "Work"}, {"id": "proj-2", "name": "Home"}],
    "labels": [{"id": "l-urgent", "name": "urgent"}],
    "taskLabels": [{"taskId": "t2", "labelId": "l-urgent"}],
    "sections": [],
    "filters": [
        {"id": "f2", "name": "Overdue", "query": "overdue", "sortOrder": 2},
        {
            "id": "f1",
            "name": "Work today",
            "query": "#Work & today",
            "sortOrder": 1,
            "isFavorite": True,
        },
    ],
}


@pytest.fixture
def export_path(tmp_path: Path) -> Path:
    """Path to a small export file with tasks, projects, labels and filters."""
    return write_export(tmp_path / "export.json", **SAMPLE_EXPORT)
