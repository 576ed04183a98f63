"""Task manager records as read from a JSON export."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    return str(value)


def _optional_int(value: object) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    return None


@dataclass(frozen=True, slots=True)
class TaskLabel:
    """Label attached to a task."""

    id: str
    name: str
    color: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> TaskLabel:
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            color=str(data.get("color") or ""),
        )


@dataclass(slots=True)
class Task:
    """Task view used by the filter engine.

    ``due_date`` and ``deadline`` are epoch milliseconds. ``labels`` is
    populated by the caller; ``None`` means nobody attached them.
    """

    id: str
    content: str
    description: str | None = None
    project_id: str | None = None
    section_id: str | None = None
    due_date: int | None = None
    deadline: int | None = None
    duration: int | None = None
    priority: int = 4
    completed: bool = False
    deleted_at: int | None = None
    recurrence_rule: str | None = None
    delegated_to: str | None = None
    labels: list[TaskLabel] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Task:
        """Build a task from the camelCase export representation."""
        raw_labels = data.get("labels")
        labels = (
            [TaskLabel.from_dict(item) for item in raw_labels if isinstance(item, Mapping)]
            if isinstance(raw_labels, list)
            else None
        )
        priority = _optional_int(data.get("priority"))
        return cls(
            id=str(data.get("id", "")),
            content=str(data.get("content") or ""),
            description=_optional_str(data.get("description")),
            project_id=_optional_str(data.get("projectId")),
            section_id=_optional_str(data.get("sectionId")),
            due_date=_optional_int(data.get("dueDate")),
            deadline=_optional_int(data.get("deadline")),
            duration=_optional_int(data.get("duration")),
            priority=4 if priority is None else priority,
            completed=bool(data.get("completed", False)),
            deleted_at=_optional_int(data.get("deletedAt")),
            recurrence_rule=_optional_str(data.get("recurrenceRule")),
            delegated_to=_optional_str(data.get("delegatedTo")),
            labels=labels,
        )

    def to_dict(self) -> dict[str, object]:
        """Return the camelCase export representation."""
        return {
            "id": self.id,
            "content": self.content,
            "description": self.description,
            "projectId": self.project_id,
            "sectionId": self.section_id,
            "dueDate": self.due_date,
            "deadline": self.deadline,
            "duration": self.duration,
            "priority": self.priority,
            "completed": self.completed,
            "deletedAt": self.deleted_at,
            "recurrenceRule": self.recurrence_rule,
            "delegatedTo": self.delegated_to,
            "labels": (
                None
                if self.labels is None
                else [
                    {"id": label.id, "name": label.name, "color": label.color}
                    for label in self.labels
                ]
            ),
        }


@dataclass(frozen=True, slots=True)
class Project:
    """Project record."""

    id: str
    name: str

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Project:
        return cls(id=str(data.get("id", "")), name=str(data.get("name", "")))


@dataclass(frozen=True, slots=True)
class Label:
    """Label record."""

    id: str
    name: str

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Label:
        return cls(id=str(data.get("id", "")), name=str(data.get("name", "")))


@dataclass(frozen=True, slots=True)
class Section:
    """Section record inside a project."""

    id: str
    name: str
    project_id: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Section:
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            project_id=str(data.get("projectId") or ""),
        )


@dataclass(frozen=True, slots=True)
class SavedFilter:
    """Named filter query, stored verbatim and never validated on save."""

    id: str
    name: str
    query: str
    color: str = "#808080"
    sort_order: int = 0
    is_favorite: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> SavedFilter:
        sort_order = _optional_int(data.get("sortOrder"))
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            query=str(data.get("query") or ""),
            color=str(data.get("color") or "#808080"),
            sort_order=0 if sort_order is None else sort_order,
            is_favorite=bool(data.get("isFavorite", False)),
        )


@dataclass
class ExportData:
    """Everything the filter commands need from an export file."""

    tasks: list[Task] = field(default_factory=list)
    projects: list[Project] = field(default_factory=list)
    labels: list[Label] = field(default_factory=list)
    sections: list[Section] = field(default_factory=list)
    filters: list[SavedFilter] = field(default_factory=list)
