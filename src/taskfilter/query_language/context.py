"""Name to id lookup tables used to resolve ``#project`` and ``/section`` references."""

from __future__ import annotations

import fnmatch
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Protocol


class Named(Protocol):
    """Anything with an id and a display name."""

    id: str
    name: str


@dataclass(frozen=True, slots=True)
class FilterContext:
    """Case-insensitive name lookups for one evaluation.

    Keys are lowercased names; values hold every id that carries the name, so
    duplicate project names all resolve. The engine never mutates or caches a
    context; callers rebuild it when projects or labels change.
    """

    projects: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    labels: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    sections: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    def project_ids(self, name: str) -> set[str]:
        """Return ids of projects whose name matches, wildcards allowed."""
        return resolve_ids(self.projects, name)

    def label_ids(self, name: str) -> set[str]:
        """Return ids of labels whose name matches, wildcards allowed."""
        return resolve_ids(self.labels, name)

    def section_ids(self, name: str) -> set[str]:
        """Return ids of sections whose name matches, wildcards allowed."""
        return resolve_ids(self.sections, name)


def matches_name(pattern: str, name: str) -> bool:
    """Compare names case-insensitively; ``*`` in pattern matches any run of characters."""
    pattern = pattern.lower()
    name = name.lower()
    if "*" not in pattern:
        return pattern == name
    return fnmatch.fnmatchcase(name, pattern.replace("[", "[[]").replace("?", "[?]"))


def resolve_ids(table: Mapping[str, tuple[str, ...]], name: str) -> set[str]:
    """Resolve a name (or wildcard pattern) against one lookup table."""
    if "*" not in name:
        return set(table.get(name.lower(), ()))
    ids: set[str] = set()
    for key, key_ids in table.items():
        if matches_name(name, key):
            ids.update(key_ids)
    return ids


def _index(items: Iterable[Named]) -> dict[str, tuple[str, ...]]:
    table: dict[str, list[str]] = {}
    for item in items:
        table.setdefault(item.name.lower(), []).append(item.id)
    return {name: tuple(ids) for name, ids in table.items()}


def create_context(
    projects: Iterable[Named],
    labels: Iterable[Named],
    sections: Iterable[Named] = (),
) -> FilterContext:
    """Build a filter context from current project, label and section lists."""
    return FilterContext(
        projects=_index(projects),
        labels=_index(labels),
        sections=_index(sections),
    )
