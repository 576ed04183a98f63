"""Runtime evaluation of filter expressions against single tasks."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import TypeAlias

from taskfilter.models import Task, TaskLabel
from taskfilter.query_language.ast import And, Expr, Not, Or, Predicate
from taskfilter.query_language.context import FilterContext, matches_name
from taskfilter.query_language.dates import add_days, end_of_day, start_of_day, to_millis
from taskfilter.query_language.errors import FilterRuntimeError
from taskfilter.query_language.predicates import (
    Assigned,
    ByLabel,
    ByProject,
    BySection,
    DeadlineAfter,
    DeadlineBefore,
    DeadlineOverdue,
    DeadlineToday,
    DeadlineTomorrow,
    Delegated,
    DueAfter,
    DueBefore,
    DueWithinDays,
    HasDate,
    HasDeadline,
    HasDescription,
    HasDuration,
    HasLabels,
    NoDeadline,
    NoDueDate,
    Overdue,
    PredicateKind,
    Priority,
    RawContains,
    Recurring,
    Search,
    Today,
    Tomorrow,
    Unassigned,
)


LabelLookup: TypeAlias = Callable[[str], Sequence[TaskLabel]]


@dataclass(frozen=True, slots=True)
class EvalEnv:
    """Inputs shared by every predicate during one evaluation."""

    context: FilterContext
    now: datetime
    label_lookup: LabelLookup | None = None

    def labels_for(self, task: Task) -> Sequence[TaskLabel]:
        """Return task labels through the lookup when given, else the populated field."""
        if self.label_lookup is not None:
            return self.label_lookup(task.id)
        return task.labels or ()


def _on_day(timestamp: int | None, now: datetime, offset_days: int) -> bool:
    if timestamp is None:
        return False
    return start_of_day(now, offset_days) <= timestamp <= end_of_day(now, offset_days)


def _before_today(timestamp: int | None, now: datetime) -> bool:
    return timestamp is not None and timestamp < start_of_day(now)


def _contains(text: str, haystack: str | None) -> bool:
    return haystack is not None and text.lower() in haystack.lower()


def _has_text(value: str | None) -> bool:
    return value is not None and value != ""


def _evaluate_schedule(kind: PredicateKind, task: Task, now: datetime) -> bool | None:
    """Evaluate due date and deadline predicates."""
    match kind:
        case Today():
            return _on_day(task.due_date, now, 0)
        case Tomorrow():
            return _on_day(task.due_date, now, 1)
        case Overdue():
            return _before_today(task.due_date, now)
        case NoDueDate():
            return task.due_date is None
        case HasDate():
            return task.due_date is not None
        case DueWithinDays(days=days):
            if task.due_date is None:
                return False
            return to_millis(now) <= task.due_date <= add_days(now, days)
        case DueBefore(ref=ref):
            return task.due_date is not None and task.due_date < ref.resolve(now)
        case DueAfter(ref=ref):
            return task.due_date is not None and task.due_date > ref.resolve(now)
        case DeadlineToday():
            return _on_day(task.deadline, now, 0)
        case DeadlineTomorrow():
            return _on_day(task.deadline, now, 1)
        case DeadlineOverdue():
            return _before_today(task.deadline, now)
        case NoDeadline():
            return task.deadline is None
        case HasDeadline():
            return task.deadline is not None
        case DeadlineBefore(ref=ref):
            return task.deadline is not None and task.deadline < ref.resolve(now)
        case DeadlineAfter(ref=ref):
            return task.deadline is not None and task.deadline > ref.resolve(now)
    return None


def _evaluate_reference(kind: PredicateKind, task: Task, env: EvalEnv) -> bool | None:
    """Evaluate project, section, label and delegation predicates."""
    match kind:
        case ByProject(name=name):
            return task.project_id is not None and task.project_id in env.context.project_ids(name)
        case BySection(name=name):
            return task.section_id is not None and task.section_id in env.context.section_ids(name)
        case ByLabel(name=name):
            label_ids = env.context.label_ids(name)
            return any(
                label.id in label_ids or matches_name(name, label.name)
                for label in env.labels_for(task)
            )
        case HasLabels():
            return len(env.labels_for(task)) > 0
        case Assigned():
            return task.project_id is not None
        case Unassigned():
            return task.project_id is None
        case Delegated(name=None):
            return _has_text(task.delegated_to)
        case Delegated(name=str() as name):
            return task.delegated_to is not None and matches_name(name, task.delegated_to)
    return None


def evaluate_predicate(kind: PredicateKind, task: Task, env: EvalEnv) -> bool:
    """Evaluate one leaf predicate against a task."""
    result = _evaluate_schedule(kind, task, env.now)
    if result is None:
        result = _evaluate_reference(kind, task, env)
    if result is not None:
        return result

    match kind:
        case Priority(level=level):
            return task.priority == level
        case Recurring():
            return _has_text(task.recurrence_rule)
        case HasDescription():
            return _has_text(task.description)
        case HasDuration():
            return task.duration is not None and task.duration > 0
        case Search(text=text):
            return _contains(text, task.content) or _contains(text, task.description)
        case RawContains(text=text):
            return _contains(text, task.content)
    raise FilterRuntimeError(f"Unsupported predicate: {kind!r}")


def evaluate_expr(expr: Expr, task: Task, env: EvalEnv) -> bool:
    """Evaluate an expression tree against one task, short-circuiting and/or.

    Walks the tree with an explicit stack so long operator chains and deep
    nesting never hit the interpreter recursion limit. A pending ``Not`` flips
    the value of the subtree evaluated after it; a pending ``And``/``Or``
    only evaluates its right side when the left side did not decide it.
    """
    pending: list[Not | And | Or] = []
    stack: list[Expr] = [expr]
    value = False
    while stack:
        node = stack.pop()
        if isinstance(node, Predicate):
            value = evaluate_predicate(node.kind, task, env)
        elif isinstance(node, Not | And | Or):
            pending.append(node)
            stack.append(node.child if isinstance(node, Not) else node.left)
            continue
        else:
            raise FilterRuntimeError("Unsupported expression type")

        while pending:
            parent = pending.pop()
            if isinstance(parent, Not):
                value = not value
            elif (isinstance(parent, And) and value) or (isinstance(parent, Or) and not value):
                stack.append(parent.right)
                break
    return value
