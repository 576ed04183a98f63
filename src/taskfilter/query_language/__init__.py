"""Public API for the filter query lexer/parser/compiler/runtime."""

from taskfilter.query_language.ast import MATCH_ALL, And, Expr, Not, Or, Predicate, is_match_all
from taskfilter.query_language.compiler import compile_predicate
from taskfilter.query_language.context import FilterContext, create_context
from taskfilter.query_language.errors import (
    FilterLanguageError,
    FilterParseError,
    FilterRuntimeError,
)
from taskfilter.query_language.lexer import Token, TokenKind, tokenize
from taskfilter.query_language.parser import parse_query, parse_tokens
from taskfilter.query_language.runtime import EvalEnv, LabelLookup, evaluate_expr


__all__ = [
    "MATCH_ALL",
    "And",
    "EvalEnv",
    "Expr",
    "FilterContext",
    "FilterLanguageError",
    "FilterParseError",
    "FilterRuntimeError",
    "LabelLookup",
    "Not",
    "Or",
    "Predicate",
    "Token",
    "TokenKind",
    "compile_predicate",
    "create_context",
    "evaluate_expr",
    "is_match_all",
    "parse_query",
    "parse_tokens",
    "tokenize",
]
