"""Filters command wiring."""

import typer

from taskfilter.commands.filters import list as filters_list
from taskfilter.commands.filters import run as filters_run


def register(app: typer.Typer) -> None:
    """Register saved filter commands on the root CLI app."""
    filters_app = typer.Typer(
        help="List and run saved filters.",
        no_args_is_help=True,
    )
    filters_list.register(filters_app)
    filters_run.register(filters_app)
    app.add_typer(filters_app, name="filters")
