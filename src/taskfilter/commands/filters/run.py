"""Filters run command."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import typer

from taskfilter import config as config_module
from taskfilter.cli_common import collect_saved_filters, find_saved_filter, load_data, run_filter
from taskfilter.logging_config import LOGGER_NAME
from taskfilter.output_format import OutputFormat


logger = logging.getLogger(LOGGER_NAME)


@dataclass
class RunArgs:
    """Arguments for the filters run command."""

    name: str
    config: str
    data: str | None
    now: str | None
    color_flag: bool | None
    max_results: int
    offset: int
    out: str


def run_saved(args: RunArgs) -> None:
    """Evaluate a saved filter by name."""
    loaded = load_data(args.data) if args.data else None
    export = loaded.export if loaded is not None else None
    saved = find_saved_filter(collect_saved_filters(export), args.name)
    logger.info("Running saved filter %r: %s", saved.name, saved.query)
    run_filter(args, saved.query, loaded)


def register(app: typer.Typer) -> None:
    """Register the filters run command."""

    @app.command("run")
    def run_command(  # noqa: PLR0913
        name: str = typer.Argument(..., metavar="NAME", help="Saved filter name"),
        config: str = typer.Option(
            config_module.DEFAULT_CONFIG_NAME,
            "--config",
            metavar="FILE",
            help="Config file name to load from current directory",
        ),
        data: str | None = typer.Option(
            None,
            "--data",
            "-d",
            metavar="FILE",
            help="JSON export of the task manager",
        ),
        now: str | None = typer.Option(
            None,
            "--now",
            metavar="DATETIME",
            help="Evaluate as if the current time were DATETIME",
        ),
        color_flag: bool | None = typer.Option(
            None,
            "--color/--no-color",
            help="Force colored output",
        ),
        max_results: int = typer.Option(
            50,
            "--max-results",
            "-n",
            metavar="N",
            help="Maximum number of tasks to display",
        ),
        offset: int = typer.Option(
            0,
            "--offset",
            metavar="N",
            help="Number of tasks to skip before displaying",
        ),
        out: str = typer.Option(
            OutputFormat.TEXT,
            "--out",
            help="Output format: text or json",
        ),
    ) -> None:
        """Show visible tasks matching a saved filter."""
        args = RunArgs(
            name=name,
            config=config,
            data=data,
            now=now,
            color_flag=color_flag,
            max_results=max_results,
            offset=offset,
            out=out,
        )
        config_module.log_applied_config_defaults("filters run")
        config_module.log_command_arguments(args, "filters run")
        run_saved(args)
