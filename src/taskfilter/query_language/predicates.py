"""Closed set of leaf predicate kinds."""

from __future__ import annotations

from dataclasses import dataclass

from taskfilter.query_language.dates import DateRef


@dataclass(frozen=True, slots=True)
class PredicateKind:
    """Base type for leaf predicates."""


@dataclass(frozen=True, slots=True)
class Today(PredicateKind):
    """Due date falls on the current local day."""


@dataclass(frozen=True, slots=True)
class Tomorrow(PredicateKind):
    """Due date falls on the next local day."""


@dataclass(frozen=True, slots=True)
class Overdue(PredicateKind):
    """Due date is before the start of today."""


@dataclass(frozen=True, slots=True)
class NoDueDate(PredicateKind):
    """Task has no due date."""


@dataclass(frozen=True, slots=True)
class DueWithinDays(PredicateKind):
    """Due date is between now and now plus the given number of days."""

    days: int


@dataclass(frozen=True, slots=True)
class Priority(PredicateKind):
    """Task priority equals the given level (1 is highest)."""

    level: int


@dataclass(frozen=True, slots=True)
class ByProject(PredicateKind):
    """Task belongs to a project with the given name."""

    name: str


@dataclass(frozen=True, slots=True)
class ByLabel(PredicateKind):
    """Task carries a label with the given name."""

    name: str


@dataclass(frozen=True, slots=True)
class BySection(PredicateKind):
    """Task sits in a section with the given name."""

    name: str


@dataclass(frozen=True, slots=True)
class Recurring(PredicateKind):
    """Task has a recurrence rule."""


@dataclass(frozen=True, slots=True)
class Assigned(PredicateKind):
    """Task belongs to some project."""


@dataclass(frozen=True, slots=True)
class Unassigned(PredicateKind):
    """Task belongs to no project."""


@dataclass(frozen=True, slots=True)
class HasDate(PredicateKind):
    """Task has a due date."""


@dataclass(frozen=True, slots=True)
class HasDescription(PredicateKind):
    """Task has a non-empty description."""


@dataclass(frozen=True, slots=True)
class HasLabels(PredicateKind):
    """Task has at least one label."""


@dataclass(frozen=True, slots=True)
class HasDeadline(PredicateKind):
    """Task has a deadline."""


@dataclass(frozen=True, slots=True)
class NoDeadline(PredicateKind):
    """Task has no deadline."""


@dataclass(frozen=True, slots=True)
class HasDuration(PredicateKind):
    """Task has a positive duration."""


@dataclass(frozen=True, slots=True)
class DeadlineToday(PredicateKind):
    """Deadline falls on the current local day."""


@dataclass(frozen=True, slots=True)
class DeadlineTomorrow(PredicateKind):
    """Deadline falls on the next local day."""


@dataclass(frozen=True, slots=True)
class DeadlineOverdue(PredicateKind):
    """Deadline is before the start of today."""


@dataclass(frozen=True, slots=True)
class Delegated(PredicateKind):
    """Task is delegated, optionally to a person matching ``name``."""

    name: str | None = None


@dataclass(frozen=True, slots=True)
class DueBefore(PredicateKind):
    """Due date is strictly before the referenced moment."""

    ref: DateRef


@dataclass(frozen=True, slots=True)
class DueAfter(PredicateKind):
    """Due date is strictly after the referenced moment."""

    ref: DateRef


@dataclass(frozen=True, slots=True)
class DeadlineBefore(PredicateKind):
    """Deadline is strictly before the referenced moment."""

    ref: DateRef


@dataclass(frozen=True, slots=True)
class DeadlineAfter(PredicateKind):
    """Deadline is strictly after the referenced moment."""

    ref: DateRef


@dataclass(frozen=True, slots=True)
class Search(PredicateKind):
    """Text occurs in content or description."""

    text: str


@dataclass(frozen=True, slots=True)
class RawContains(PredicateKind):
    """Fallback: text occurs in content."""

    text: str
