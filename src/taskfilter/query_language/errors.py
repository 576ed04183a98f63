"""Errors for filter query parsing and evaluation."""


class FilterLanguageError(Exception):
    """Base exception for filter language failures."""


class FilterParseError(FilterLanguageError):
    """Raised when a token stream cannot be turned into an expression."""


class FilterRuntimeError(FilterLanguageError):
    """Raised when evaluation meets an expression node it does not know."""
