"""Tests for the filter query parser and its repair pass."""

from __future__ import annotations

import logging
from datetime import datetime

import parsy
import pytest

from taskfilter.query_language import MATCH_ALL, And, Not, Or, Predicate, parse_query
from taskfilter.query_language import parser as parser_module
from taskfilter.query_language.dates import DateRef
from taskfilter.query_language.lexer import TokenKind, tokenize
from taskfilter.query_language.parser import repair_tokens
from taskfilter.query_language.predicates import (
    ByLabel,
    ByProject,
    DueBefore,
    NoDueDate,
    Overdue,
    Priority,
    RawContains,
    Today,
)


P1 = Predicate(Priority(1))
P2 = Predicate(Priority(2))
P3 = Predicate(Priority(3))
TODAY = Predicate(Today())
OVERDUE = Predicate(Overdue())


def test_parse_single_predicate() -> None:
    """A lone atom should parse to one predicate."""
    assert parse_query("today") == TODAY


def test_parse_and_binds_tighter_than_or() -> None:
    """AND should bind tighter than OR."""
    assert parse_query("today & p1 | overdue") == Or(And(TODAY, P1), OVERDUE)
    assert parse_query("p1 | p2 & today") == Or(P1, And(P2, TODAY))


def test_parse_not_binds_tightest() -> None:
    """NOT should apply to the nearest operand only."""
    assert parse_query("!today & p1") == And(Not(TODAY), P1)
    assert parse_query("!!today") == TODAY
    assert parse_query("!!!today") == Not(TODAY)


def test_parse_operators_are_left_associative() -> None:
    """Chains of the same operator should group to the left."""
    assert parse_query("p1 | p2 | p3") == Or(Or(P1, P2), P3)
    assert parse_query("p1 & p2 & p3") == And(And(P1, P2), P3)


def test_parse_groups_override_precedence() -> None:
    """Parentheses should override operator precedence."""
    assert parse_query("today & (p1 | p2)") == And(TODAY, Or(P1, P2))
    assert parse_query("!(p1 | p2)") == Not(Or(P1, P2))


def test_parse_arbitrary_nesting() -> None:
    """Groups should nest to any depth."""
    expr = parse_query("((p1 | p2) & (today | (overdue & p3)))")

    assert expr == And(Or(P1, P2), Or(TODAY, And(OVERDUE, P3)))
    assert parse_query("((((p1))))") == P1


def test_parse_deep_nesting_without_recursion_limit() -> None:
    """Hundreds of nested groups should parse like shallow ones."""
    assert parse_query("(" * 200 + "today" + ")" * 200) == TODAY

    expected = TODAY
    for _ in range(200):
        expected = And(P1, expected)
    assert parse_query("(p1 & " * 200 + "today" + ")" * 200) == expected


def test_parse_long_chains_and_negation_runs() -> None:
    """Long operator chains and runs of NOT should parse without recursing per token."""
    expr = parse_query(" & ".join(["p1"] * 3000))

    depth = 0
    while isinstance(expr, And):
        assert expr.right == P1
        expr = expr.left
        depth += 1
    assert (expr, depth) == (P1, 2999)
    assert parse_query("!" * 3000 + "today") == TODAY
    assert parse_query("!" * 3001 + "today") == Not(TODAY)


def test_parse_joins_multi_word_atoms() -> None:
    """Adjacent atoms should form one multi-word predicate."""
    assert parse_query("no date | p1") == Or(Predicate(NoDueDate()), P1)
    assert parse_query("#Work Archive & @urgent") == And(
        Predicate(ByProject("Work Archive")), Predicate(ByLabel("urgent"))
    )


def test_parse_date_bound_spanning_atoms() -> None:
    """Date bounds written with spaces should still compile."""
    expr = parse_query("due before: 2026-01-01")

    assert expr == Predicate(DueBefore(DateRef(moment=datetime(2026, 1, 1))))


def test_parse_unknown_words_fall_back_to_content_search() -> None:
    """Unrecognized text should become a content search."""
    assert parse_query("Buy milk") == Predicate(RawContains("Buy milk"))
    assert parse_query("today p1") == Predicate(RawContains("today p1"))


@pytest.mark.parametrize("query", ["", "   ", "&", "&&", "|", "!", "()", "(!)", "( & )", "((()))"])
def test_parse_empty_queries_match_all(query: str) -> None:
    """Queries with no operands should match everything."""
    assert parse_query(query) == MATCH_ALL


@pytest.mark.parametrize(
    ("query", "expected"),
    [
        ("today &", TODAY),
        ("& today", TODAY),
        ("today |", TODAY),
        ("| today", TODAY),
        ("today | !", TODAY),
        ("today && p1", And(TODAY, P1)),
        ("today &| p1", And(TODAY, P1)),
        ("today & ()", TODAY),
        ("p1 & () | p2", Or(P1, P2)),
        ("p1 | () & p2", Or(P1, P2)),
        ("p1 & !() | p2", Or(P1, P2)),
        ("p1 & (( )) | p2", Or(P1, P2)),
        ("() | p1 & p2", And(P1, P2)),
        ("(today &)", TODAY),
        ("( | p1)", P1),
        ("today)", TODAY),
        ("today) & p1", And(TODAY, P1)),
    ],
)
def test_parse_repairs_dangling_operators(query: str, expected: object) -> None:
    """Dangling operators, stray parens and empty groups should be dropped."""
    assert parse_query(query) == expected


@pytest.mark.parametrize(
    ("query", "expected"),
    [
        ("today (p1)", And(TODAY, P1)),
        ("(p1) today", And(P1, TODAY)),
        ("today !p1", And(TODAY, Not(P1))),
        ("(p1) (p2)", And(P1, P2)),
    ],
)
def test_parse_inserts_implicit_and(query: str, expected: object) -> None:
    """Operands written side by side should be joined with AND."""
    assert parse_query(query) == expected


def test_parse_unmatched_open_paren_becomes_text() -> None:
    """An unmatched '(' should be kept as literal atom text."""
    assert parse_query("(today") == Predicate(RawContains("(today"))
    assert parse_query("p1 & (") == And(P1, Predicate(RawContains("(")))


def test_repair_tokens_keeps_well_formed_stream() -> None:
    """Repair should leave already valid token streams untouched."""
    tokens = tokenize("!(p1 | p2) & today")

    assert repair_tokens(tokens) == tokens


def test_repair_tokens_inserts_and_token() -> None:
    """Repair should insert an AND token between adjacent operands."""
    repaired = repair_tokens(tokenize("(p1) !p2"))

    assert [token.kind for token in repaired] == [
        TokenKind.LPAREN,
        TokenKind.ATOM,
        TokenKind.RPAREN,
        TokenKind.AND,
        TokenKind.NOT,
        TokenKind.ATOM,
    ]


def test_parse_falls_back_when_grammar_rejects(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    """A grammar failure should degrade to a content search over atom text."""
    monkeypatch.setattr(parser_module, "FILTER_PARSER", parsy.fail("anything"))

    with caplog.at_level(logging.WARNING, logger="taskfilter"):
        expr = parse_query("today & p1")

    assert expr == Predicate(RawContains("today p1"))
    assert "Falling back to content search" in caplog.text
