"""Lexer splitting filter query text into operator and atom tokens."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class TokenKind(StrEnum):
    """Kinds of tokens produced by the lexer."""

    AND = "&"
    OR = "|"
    NOT = "!"
    LPAREN = "("
    RPAREN = ")"
    ATOM = "atom"


@dataclass(frozen=True, slots=True)
class Token:
    """One lexical token."""

    kind: TokenKind
    text: str


OPERATOR_CHARS: dict[str, TokenKind] = {
    "&": TokenKind.AND,
    "|": TokenKind.OR,
    "!": TokenKind.NOT,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
}


def atom(text: str) -> Token:
    """Build an atom token."""
    return Token(TokenKind.ATOM, text)


def tokenize(raw: str) -> list[Token]:
    """Split raw query text into tokens.

    Whitespace separates atoms and the characters ``& | ! ( )`` are always
    operators. Everything else, including ``:``, ``#`` and ``@``, is atom text.
    Multi-word predicates such as ``no date`` come out as separate atoms and
    are joined by the parser.

    Args:
        raw: Query text as typed by the user

    Returns:
        Tokens in source order, empty for blank input
    """
    tokens: list[Token] = []
    buffer: list[str] = []

    def flush() -> None:
        if buffer:
            tokens.append(atom("".join(buffer)))
            buffer.clear()

    for char in raw:
        kind = OPERATOR_CHARS.get(char)
        if kind is not None:
            flush()
            tokens.append(Token(kind, char))
        elif char.isspace():
            flush()
        else:
            buffer.append(char)
    flush()
    return tokens
