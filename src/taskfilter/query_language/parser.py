"""Parser for filter query expressions.

Grammar, loosest binding first::

    Or   := And ('|' And)*
    And  := Not ('&' Not)*
    Not  := '!'* Atom
    Atom := '(' Or ')' | ATOM

The grammar runs over the token list produced by the lexer. A repair pass
runs first so partially typed queries still parse to something useful.
Groups are parsed innermost first and spliced back as finished trees, so
nesting depth never turns into parser recursion.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator, Sequence
from typing import TypeAlias, cast

from parsy import ParseError, Parser, eof, generate, seq, test_item

from taskfilter.logging_config import LOGGER_NAME
from taskfilter.query_language.ast import MATCH_ALL, And, Expr, Not, Or, Predicate
from taskfilter.query_language.compiler import compile_predicate
from taskfilter.query_language.errors import FilterParseError
from taskfilter.query_language.lexer import Token, TokenKind, atom, tokenize
from taskfilter.query_language.predicates import RawContains


logger = logging.getLogger(LOGGER_NAME)

BINARY_KINDS = {TokenKind.AND, TokenKind.OR}
OPERAND_END_KINDS = {TokenKind.ATOM, TokenKind.RPAREN}
IMPLICIT_AND = Token(TokenKind.AND, "&")

Item: TypeAlias = Token | Expr


def _balance_parens(tokens: list[Token]) -> list[Token]:
    """Drop unmatched ``)`` and turn unmatched ``(`` into atom text."""
    open_positions: list[int] = []
    dropped: set[int] = set()
    for index, token in enumerate(tokens):
        if token.kind is TokenKind.LPAREN:
            open_positions.append(index)
        elif token.kind is TokenKind.RPAREN:
            if open_positions:
                open_positions.pop()
            else:
                dropped.add(index)

    literal = set(open_positions)
    balanced: list[Token] = []
    index = 0
    while index < len(tokens):
        token = tokens[index]
        if index in dropped:
            index += 1
            continue
        if index in literal:
            following = tokens[index + 1] if index + 1 < len(tokens) else None
            if following is not None and following.kind is TokenKind.ATOM:
                balanced.append(atom(token.text + following.text))
                index += 2
                continue
            balanced.append(atom(token.text))
            index += 1
            continue
        balanced.append(token)
        index += 1
    return balanced


def _pop_dangling(output: list[Token]) -> None:
    """Remove trailing operators that have no right operand."""
    while output and (output[-1].kind in BINARY_KINDS or output[-1].kind is TokenKind.NOT):
        output.pop()


def _close_group(output: list[Token], token: Token) -> bool:
    """Append ``)``, dropping the group entirely when it turns out empty.

    Returns:
        True when an empty group was dropped
    """
    _pop_dangling(output)
    if output and output[-1].kind is TokenKind.LPAREN:
        output.pop()
        while output and output[-1].kind is TokenKind.NOT:
            output.pop()
        return True
    output.append(token)
    return False


def _looser(left: Token, right: Token) -> Token:
    """Pick the operator that binds loosest of two."""
    return right if right.kind is TokenKind.OR else left


def repair_tokens(tokens: list[Token]) -> list[Token]:
    """Normalize a token stream so the grammar always accepts it.

    Joins adjacent atoms into multi-word atoms, drops operators without
    operands and empty groups, and inserts ``&`` between operands written
    side by side. An empty group takes the tighter of its two surrounding
    operators with it, so ``a & () | b`` reads as ``a | b``.

    Args:
        tokens: Tokens from the lexer

    Returns:
        Well-formed tokens, possibly empty
    """
    output: list[Token] = []
    dropped_group = False
    for token in _balance_parens(tokens):
        previous = output[-1] if output else None
        expects_operand = previous is None or previous.kind not in OPERAND_END_KINDS
        continues_atom = previous is not None and previous.kind is TokenKind.ATOM
        after_empty_group = dropped_group
        dropped_group = False

        if token.kind is TokenKind.RPAREN:
            dropped_group = _close_group(output, token)
        elif token.kind in BINARY_KINDS:
            if not expects_operand:
                output.append(token)
            elif after_empty_group and previous is not None and previous.kind in BINARY_KINDS:
                output[-1] = _looser(previous, token)
        elif token.kind is TokenKind.ATOM and continues_atom:
            output[-1] = atom(f"{output[-1].text} {token.text}")
        else:
            if not expects_operand:
                output.append(IMPLICIT_AND)
            output.append(token)

    _pop_dangling(output)
    if len(output) != len(tokens):
        logger.debug("Repaired filter tokens: %s", " ".join(t.text for t in output))
    return output


def _kind(kind: TokenKind) -> Parser:
    """Build a parser accepting one token of the given kind."""
    return test_item(lambda item: isinstance(item, Token) and item.kind is kind, kind.value)


def _negate(nots: list[object], operand: Expr) -> Expr:
    """Apply a run of ``!`` by parity."""
    return Not(operand) if len(nots) % 2 else operand


def _chain_left(
    term: Parser,
    op: Parser,
    builder: Callable[[Expr, Expr], Expr],
) -> Parser:
    """Build a left-associative parser from term and operator parsers."""

    @generate
    def parser() -> Generator[Parser, object, Expr]:
        left_result = yield term
        if not isinstance(left_result, Expr):
            raise FilterParseError("Invalid left expression")

        rest_result = yield seq(op, term).many()
        if not isinstance(rest_result, list):
            raise FilterParseError("Invalid operator chain")

        current: Expr = left_result
        rest = cast(list[tuple[object, object]], rest_result)
        for _operator, right in rest:
            if not isinstance(right, Expr):
                raise FilterParseError("Invalid right expression")
            current = builder(current, right)
        return current

    return parser


def _make_parser() -> Parser:
    """Create the parser for one group-free run of items."""
    predicate = _kind(TokenKind.ATOM).map(
        lambda token: Predicate(compile_predicate(cast(Token, token).text))
    )
    grouped = test_item(lambda item: isinstance(item, Expr), "group")
    negation = seq(_kind(TokenKind.NOT).many(), grouped | predicate).combine(_negate)

    conjunction = _chain_left(negation, _kind(TokenKind.AND), And)
    disjunction = _chain_left(conjunction, _kind(TokenKind.OR), Or)
    return disjunction << eof


FILTER_PARSER = _make_parser()


def _parse_flat(items: Sequence[Item]) -> Expr:
    result = FILTER_PARSER.parse(list(items))
    if not isinstance(result, Expr):
        raise FilterParseError("Parser produced no expression")
    return result


def _parse_groups(tokens: list[Token]) -> Expr:
    """Parse innermost groups first, replacing each with its finished tree."""
    levels: list[list[Item]] = [[]]
    for token in tokens:
        if token.kind is TokenKind.LPAREN:
            levels.append([])
        elif token.kind is TokenKind.RPAREN and len(levels) > 1:
            inner = levels.pop()
            levels[-1].append(_parse_flat(inner))
        else:
            levels[-1].append(token)
    if len(levels) != 1:
        raise FilterParseError("Unbalanced group")
    return _parse_flat(levels[0])


def _fallback(tokens: list[Token]) -> Expr:
    text = " ".join(token.text for token in tokens if token.kind is TokenKind.ATOM)
    if not text:
        return MATCH_ALL
    return Predicate(RawContains(text))


def parse_tokens(tokens: list[Token]) -> Expr:
    """Parse tokens into an expression tree.

    Never raises: malformed input is repaired first, and anything the grammar
    still rejects degrades to a content search over the atom text.

    Args:
        tokens: Tokens from ``tokenize``

    Returns:
        Expression tree, or ``MATCH_ALL`` for an empty stream
    """
    repaired = repair_tokens(tokens)
    if not repaired:
        return MATCH_ALL
    try:
        return _parse_groups(repaired)
    except (ParseError, FilterParseError) as exc:
        logger.warning("Falling back to content search for unparseable filter: %s", exc)
        return _fallback(repaired)


def parse_query(query: str) -> Expr:
    """Tokenize and parse query text into an expression tree."""
    return parse_tokens(tokenize(query))
