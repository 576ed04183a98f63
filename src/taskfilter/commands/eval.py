"""Eval command evaluating a filter query against an export."""

from __future__ import annotations

from dataclasses import dataclass

import typer

from taskfilter import config as config_module
from taskfilter.cli_common import run_filter
from taskfilter.output_format import OutputFormat


@dataclass
class EvalArgs:
    """Arguments for the eval command."""

    query: str
    config: str
    data: str | None
    now: str | None
    color_flag: bool | None
    max_results: int
    offset: int
    out: str


def run_eval(args: EvalArgs) -> None:
    """Run the eval command."""
    run_filter(args, args.query)


def register(app: typer.Typer) -> None:
    """Register the eval command."""

    @app.command("eval")
    def eval_command(  # noqa: PLR0913
        query: str = typer.Argument(..., metavar="QUERY", help="Filter query, e.g. 'today & p1'"),
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
        """Show visible tasks matching a filter query."""
        args = EvalArgs(
            query=query,
            config=config,
            data=data,
            now=now,
            color_flag=color_flag,
            max_results=max_results,
            offset=offset,
            out=out,
        )
        config_module.log_applied_config_defaults("eval")
        config_module.log_command_arguments(args, "eval")
        run_eval(args)
