"""Validation and parsing helpers for CLI arguments."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

import typer


SUPPORTED_DATE_FORMATS = [
    "YYYY-MM-DD",
    "YYYY-MM-DDThh:mm",
    "YYYY-MM-DDThh:mm:ss",
    "YYYY-MM-DD hh:mm",
    "YYYY-MM-DD hh:mm:ss",
]


class PagingArgs(Protocol):
    """Protocol for arguments that page through results."""

    max_results: int
    offset: int


def parse_date_argument(date_str: str, arg_name: str) -> datetime:
    """Parse and validate timestamp argument in multiple supported formats.

    Args:
        date_str: Date/timestamp string to parse
        arg_name: Argument name for error messages

    Returns:
        Parsed datetime object

    Raises:
        typer.BadParameter: If format is invalid
    """
    if date_str and date_str.strip():
        for candidate in (date_str, date_str.replace(" ", "T")):
            try:
                return datetime.fromisoformat(candidate)
            except ValueError:
                continue

    formats_str = ", ".join(SUPPORTED_DATE_FORMATS)
    raise typer.BadParameter(
        f"{arg_name} must be in one of these formats: {formats_str}\nGot: '{date_str}'"
    )


def parse_now_argument(now: str | None) -> datetime | None:
    """Parse the optional evaluation clock override."""
    if now is None:
        return None
    return parse_date_argument(now, "--now")


def validate_paging_arguments(args: PagingArgs) -> None:
    """Validate result paging arguments.

    Raises:
        typer.BadParameter: If a value is negative
    """
    if args.max_results < 0:
        raise typer.BadParameter("--max-results must be non-negative")
    if args.offset < 0:
        raise typer.BadParameter("--offset must be non-negative")
