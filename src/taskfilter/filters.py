"""Filter driver applying compiled queries to task collections."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import TypeAlias

from taskfilter.logging_config import LOGGER_NAME
from taskfilter.models import Task
from taskfilter.query_language import (
    EvalEnv,
    Expr,
    FilterContext,
    LabelLookup,
    evaluate_expr,
    is_match_all,
    parse_query,
)


logger = logging.getLogger(LOGGER_NAME)


CompiledFilter: TypeAlias = Callable[[Task, EvalEnv], bool]


def is_excluded(task: Task) -> bool:
    """Return whether a task can never appear in filter results.

    Completed and soft-deleted tasks are excluded before any predicate runs.
    """
    return task.completed or task.deleted_at is not None


def filter_visible(tasks: Iterable[Task]) -> list[Task]:
    """Drop completed and deleted tasks, keeping order."""
    return [task for task in tasks if not is_excluded(task)]


def compile_expr(expr: Expr) -> CompiledFilter:
    """Compile an expression into a reusable task predicate."""

    def _compiled(task: Task, env: EvalEnv) -> bool:
        return evaluate_expr(expr, task, env)

    return _compiled


def compile_filter(query: str) -> CompiledFilter | None:
    """Parse and compile query text.

    Returns:
        Task predicate, or None when the query matches every visible task
    """
    expr = parse_query(query)
    if is_match_all(expr):
        return None
    return compile_expr(expr)


def evaluate_filter(
    tasks: Iterable[Task],
    query: str,
    context: FilterContext,
    *,
    now: datetime | None = None,
    label_lookup: LabelLookup | None = None,
) -> list[Task]:
    """Return the visible tasks matching a filter query.

    The result is a stable subset of ``tasks``: original order, no sorting.
    Label predicates read ``task.labels`` unless ``label_lookup`` is given,
    in which case labels are fetched through it by task id.

    Args:
        tasks: In-memory task snapshot
        query: Raw filter text as typed by the user
        context: Project, label and section name lookups
        now: Evaluation clock, defaults to the current local time
        label_lookup: Optional task id to labels function

    Returns:
        Matching tasks that are neither completed nor deleted
    """
    visible = filter_visible(tasks)
    compiled = compile_filter(query)
    if compiled is None:
        return visible

    env = EvalEnv(
        context=context,
        now=datetime.now() if now is None else now,
        label_lookup=label_lookup,
    )
    matched = [task for task in visible if compiled(task, env)]
    logger.debug("Filter %r matched %d of %d tasks", query, len(matched), len(visible))
    return matched
