"""Filters list command."""

from __future__ import annotations

from dataclasses import dataclass

import typer

from taskfilter import config as config_module
from taskfilter.cli_common import collect_saved_filters, load_data
from taskfilter.color import bright_white, colorize, dim_white
from taskfilter.models import ExportData, SavedFilter
from taskfilter.output_format import prepare_text, print_prepared_output
from taskfilter.tui import build_console, lines_to_text, setup_output


@dataclass
class ListArgs:
    """Arguments for the filters list command."""

    config: str
    data: str | None
    color_flag: bool | None


def format_filter_line(saved: SavedFilter, color_enabled: bool) -> str:
    """Return one line describing a saved filter."""
    marker = colorize("*", "bold yellow", color_enabled) if saved.is_favorite else " "
    name = bright_white(saved.name, color_enabled)
    query = dim_white(saved.query, color_enabled)
    return f"{marker} {name}  {query}"


def run_list(args: ListArgs) -> None:
    """Run the filters list command."""
    color_enabled = setup_output(args)
    console = build_console(color_enabled)
    export: ExportData | None = load_data(args.data).export if args.data else None
    saved = collect_saved_filters(export)

    if not saved:
        text = "No results\n"
    else:
        text = lines_to_text([format_filter_line(item, color_enabled) for item in saved])
    print_prepared_output(console, prepare_text(text, color_enabled))


def register(app: typer.Typer) -> None:
    """Register the filters list command."""

    @app.command("list")
    def list_command(
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
        color_flag: bool | None = typer.Option(
            None,
            "--color/--no-color",
            help="Force colored output",
        ),
    ) -> None:
        """List saved filters from the export and the config file."""
        args = ListArgs(config=config, data=data, color_flag=color_flag)
        config_module.log_applied_config_defaults("filters list")
        config_module.log_command_arguments(args, "filters list")
        run_list(args)
