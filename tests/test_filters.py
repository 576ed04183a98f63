"""Tests for the filter driver: exclusion rule, set properties and scenarios."""

from __future__ import annotations

import logging

import pytest

from taskfilter.filters import compile_filter, evaluate_filter, filter_visible, is_excluded
from taskfilter.models import Task, TaskLabel
from taskfilter.query_language import FilterContext, create_context
from tests.conftest import NOW, PROJECTS, at, label, make_task


def _ids(tasks: list[Task]) -> list[str]:
    return [task.id for task in tasks]


def _mixed_tasks() -> list[Task]:
    return [
        make_task("a", priority=1, due_date=at(0), project_id="proj-1", labels=[label("urgent")]),
        make_task("b", priority=2, due_date=at(1), description="call back", labels=[]),
        make_task("c", priority=3, due_date=at(-2), project_id="proj-2", labels=[]),
        make_task("d", priority=4, labels=[label("waiting")], recurrence_rule="FREQ=WEEKLY"),
        make_task("e", priority=1, due_date=at(0), completed=True, labels=[]),
        make_task("f", priority=2, deleted_at=at(-1), labels=[label("urgent")]),
        make_task("g", content="Report draft", priority=3, deadline=at(0), labels=[]),
        make_task("h", priority=4, due_date=at(2), project_id="proj-3", delegated_to="Sam"),
    ]


QUERIES = [
    "",
    "today",
    "p1",
    "p1 | p2",
    "today & p1",
    "!today",
    "#Work",
    "@urgent",
    "overdue | no date",
    "(p1 | p3) & !@waiting",
    "report",
    "3 days",
    "has:deadline",
    "garbage ((& |",
]


def test_is_excluded() -> None:
    """Completed or deleted tasks should be excluded."""
    assert is_excluded(make_task("a", completed=True)) is True
    assert is_excluded(make_task("b", deleted_at=1)) is True
    assert is_excluded(make_task("c", deleted_at=0)) is True
    assert is_excluded(make_task("d")) is False


def test_filter_visible_keeps_order() -> None:
    """Visible tasks should keep their original order."""
    assert _ids(filter_visible(_mixed_tasks())) == ["a", "b", "c", "d", "g", "h"]


@pytest.mark.parametrize("query", QUERIES)
def test_results_never_include_excluded_tasks(context: FilterContext, query: str) -> None:
    """No query should ever return completed or deleted tasks."""
    result = evaluate_filter(_mixed_tasks(), query, context, now=NOW)

    assert not any(is_excluded(task) for task in result)


@pytest.mark.parametrize("query", QUERIES)
def test_results_are_stable_subsequence(context: FilterContext, query: str) -> None:
    """Results should keep the input order."""
    tasks = _mixed_tasks()
    result = evaluate_filter(tasks, query, context, now=NOW)

    positions = [tasks.index(task) for task in result]
    assert positions == sorted(positions)


@pytest.mark.parametrize("query", QUERIES)
def test_evaluation_is_idempotent(context: FilterContext, query: str) -> None:
    """Filtering a result again with the same query should change nothing."""
    first = evaluate_filter(_mixed_tasks(), query, context, now=NOW)
    second = evaluate_filter(first, query, context, now=NOW)

    assert _ids(second) == _ids(first)


@pytest.mark.parametrize("query", ["", "   ", "&", "()"])
def test_empty_query_returns_all_visible(context: FilterContext, query: str) -> None:
    """Empty queries should return every visible task in order."""
    result = evaluate_filter(_mixed_tasks(), query, context, now=NOW)

    assert _ids(result) == ["a", "b", "c", "d", "g", "h"]


@pytest.mark.parametrize(
    ("left", "right"), [("today", "p2"), ("#Work", "@urgent"), ("overdue", "no date")]
)
def test_or_is_union(context: FilterContext, left: str, right: str) -> None:
    """a | b should match the union of a and b."""
    tasks = _mixed_tasks()
    union = set(_ids(evaluate_filter(tasks, left, context, now=NOW))) | set(
        _ids(evaluate_filter(tasks, right, context, now=NOW))
    )

    assert set(_ids(evaluate_filter(tasks, f"{left} | {right}", context, now=NOW))) == union


@pytest.mark.parametrize(
    ("left", "right"), [("today", "p1"), ("#Work", "@urgent"), ("3 days", "!p4")]
)
def test_and_is_intersection(context: FilterContext, left: str, right: str) -> None:
    """a & b should match the intersection of a and b."""
    tasks = _mixed_tasks()
    both = set(_ids(evaluate_filter(tasks, left, context, now=NOW))) & set(
        _ids(evaluate_filter(tasks, right, context, now=NOW))
    )

    assert set(_ids(evaluate_filter(tasks, f"{left} & {right}", context, now=NOW))) == both


@pytest.mark.parametrize("query", ["today", "@urgent", "#Work", "p1 | overdue"])
def test_negation_is_complement(context: FilterContext, query: str) -> None:
    """!a should match the visible tasks a does not match."""
    tasks = _mixed_tasks()
    visible = set(_ids(filter_visible(tasks)))
    matched = set(_ids(evaluate_filter(tasks, query, context, now=NOW)))

    assert set(_ids(evaluate_filter(tasks, f"!({query})", context, now=NOW))) == visible - matched


def test_priorities_partition_visible_tasks(context: FilterContext) -> None:
    """p1 to p4 should be pairwise disjoint and cover every visible task."""
    tasks = _mixed_tasks()
    groups = [
        set(_ids(evaluate_filter(tasks, f"p{level}", context, now=NOW))) for level in range(1, 5)
    ]

    assert set().union(*groups) == set(_ids(filter_visible(tasks)))
    assert sum(len(group) for group in groups) == len(set().union(*groups))


@pytest.mark.parametrize(
    ("query", "expected"),
    [
        ("today & p1", ["A"]),
        ("today & p1 | overdue", ["A", "C"]),
        ("p1 | p2", ["A", "B"]),
        ("no date", ["D"]),
        ("#Work", ["A"]),
        ("@urgent", ["A"]),
    ],
)
def test_scenarios(
    scenario_tasks: list[Task], context: FilterContext, query: str, expected: list[str]
) -> None:
    """Concrete queries over tasks A-D should return the documented sets."""
    assert _ids(evaluate_filter(scenario_tasks, query, context, now=NOW)) == expected


def test_project_scenario_without_project_in_context(scenario_tasks: list[Task]) -> None:
    """A project missing from the context should match nothing."""
    context = create_context([], [])

    assert evaluate_filter(scenario_tasks, "#Work", context, now=NOW) == []


def test_label_scenario_with_unpopulated_labels(
    scenario_tasks: list[Task], context: FilterContext
) -> None:
    """Tasks without populated labels should not match label predicates."""
    for task in scenario_tasks:
        task.labels = None

    assert evaluate_filter(scenario_tasks, "@urgent", context, now=NOW) == []


def test_label_lookup_covers_unpopulated_labels(
    scenario_tasks: list[Task], context: FilterContext
) -> None:
    """A label lookup should make label predicates work without pre-population."""
    for task in scenario_tasks:
        task.labels = None
    stored: dict[str, list[TaskLabel]] = {"A": [label("urgent")]}

    result = evaluate_filter(
        scenario_tasks,
        "@urgent",
        context,
        now=NOW,
        label_lookup=lambda task_id: stored.get(task_id, []),
    )

    assert _ids(result) == ["A"]


def test_context_project_mapping_is_case_insensitive(scenario_tasks: list[Task]) -> None:
    """Project names should match regardless of case."""
    context = create_context(PROJECTS, [])

    assert _ids(evaluate_filter(scenario_tasks, "#WORK", context, now=NOW)) == ["A"]


def test_malformed_queries_never_raise(context: FilterContext) -> None:
    """Any query text should evaluate without raising."""
    for query in ["((", "))", "!!!", "& | &", "(p1 | ) & (", "#", "@", "due before:", "|(|)|"]:
        evaluate_filter(_mixed_tasks(), query, context, now=NOW)


def test_compile_filter_returns_none_for_empty_query() -> None:
    """Empty queries should compile to nothing."""
    assert compile_filter("") is None
    assert compile_filter("today") is not None


def test_evaluate_filter_defaults_clock_to_now(context: FilterContext) -> None:
    """Without an explicit clock, evaluation should use the current time."""
    tasks = [make_task("x", due_date=None), make_task("y", due_date=at(-4000))]

    assert _ids(evaluate_filter(tasks, "overdue", context)) == ["y"]


def test_evaluate_filter_logs_match_count(
    context: FilterContext, caplog: pytest.LogCaptureFixture
) -> None:
    """Evaluation should log how many tasks matched at debug level."""
    with caplog.at_level(logging.DEBUG, logger="taskfilter"):
        evaluate_filter(_mixed_tasks(), "p1", context, now=NOW)

    assert "matched 1 of 6 tasks" in caplog.text


def test_huge_day_windows_and_out_of_range_dates(context: FilterContext) -> None:
    """Day windows past the calendar range and impossible dates should not raise."""
    tasks = [
        make_task("soon", due_date=at(30)),
        make_task("past", due_date=at(-1)),
        make_task("note", content="Due before: 0001-01-01 paperwork"),
    ]

    assert _ids(evaluate_filter(tasks, "99999999 days", context, now=NOW)) == ["soon"]
    assert _ids(evaluate_filter(tasks, "next 5000000 days", context, now=NOW)) == ["soon"]
    assert _ids(evaluate_filter(tasks, "due before: 0001-01-01", context, now=NOW)) == ["note"]


def test_empty_group_keeps_surrounding_or(context: FilterContext) -> None:
    """An empty group between operators should not turn an OR into an AND."""
    tasks = [
        make_task("x", content="alpha"),
        make_task("y", content="zzz"),
        make_task("w", content="other"),
    ]

    assert _ids(evaluate_filter(tasks, "zzz & () | alpha", context, now=NOW)) == ["x", "y"]


@pytest.mark.parametrize(
    "query",
    [
        " & ".join(["p1"] * 3000),
        " | ".join(["p4"] * 2999 + ["p1"]),
        "(" * 200 + "p1" + ")" * 200,
        "(today | " * 200 + "p1" + ")" * 200,
        "!" * 3000 + "p1",
    ],
)
def test_deep_and_long_queries_evaluate(context: FilterContext, query: str) -> None:
    """Deep nesting, long chains and NOT runs should evaluate like their short forms."""
    tasks = [make_task("a", priority=1), make_task("b", priority=2), make_task("c", priority=3)]

    assert _ids(evaluate_filter(tasks, query, context, now=NOW)) == ["a"]
