"""AST nodes for filter queries."""

from __future__ import annotations

from dataclasses import dataclass

from taskfilter.query_language.predicates import PredicateKind, RawContains


@dataclass(frozen=True, slots=True)
class Expr:
    """Base AST expression type."""


@dataclass(frozen=True, slots=True)
class Or(Expr):
    """Either side matches."""

    left: Expr
    right: Expr


@dataclass(frozen=True, slots=True)
class And(Expr):
    """Both sides match."""

    left: Expr
    right: Expr


@dataclass(frozen=True, slots=True)
class Not(Expr):
    """Child does not match."""

    child: Expr


@dataclass(frozen=True, slots=True)
class Predicate(Expr):
    """Leaf condition evaluated against a single task."""

    kind: PredicateKind


MATCH_ALL = Predicate(RawContains(""))


def is_match_all(expr: Expr) -> bool:
    """Return whether expression is the empty-query sentinel."""
    return expr == MATCH_ALL


def format_expr(expr: Expr) -> str:
    """Render an expression as a compact, fully parenthesized string."""
    parts: list[str] = []
    stack: list[tuple[Expr, bool]] = [(expr, False)]
    while stack:
        node, children_done = stack.pop()
        if isinstance(node, Or | And):
            if children_done:
                right = parts.pop()
                parts.append(f"{type(node).__name__}({parts.pop()}, {right})")
            else:
                stack.extend([(node, True), (node.right, False), (node.left, False)])
        elif isinstance(node, Not):
            if children_done:
                parts.append(f"Not({parts.pop()})")
            else:
                stack.extend([(node, True), (node.child, False)])
        elif isinstance(node, Predicate):
            parts.append(repr(node.kind))
        else:
            parts.append(repr(node))
    return parts[0]
