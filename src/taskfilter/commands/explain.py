"""Explain command showing how a filter query is read."""

from __future__ import annotations

from dataclasses import dataclass

import typer

from taskfilter import config as config_module
from taskfilter.color import bright_white, escape_text
from taskfilter.output_format import prepare_text, print_prepared_output
from taskfilter.query_language import is_match_all, parse_tokens, tokenize
from taskfilter.query_language.ast import format_expr
from taskfilter.tui import build_console, lines_to_text, setup_output


@dataclass
class ExplainArgs:
    """Arguments for the explain command."""

    query: str
    color_flag: bool | None


def explain_lines(query: str, color_enabled: bool) -> list[str]:
    """Return token and tree description lines for a query."""
    tokens = tokenize(query)
    expr = parse_tokens(tokens)
    token_text = " ".join(repr(token.text) for token in tokens) or "(none)"
    tree_text = "matches all visible tasks" if is_match_all(expr) else format_expr(expr)
    return [
        f"{bright_white('Tokens:', color_enabled)} {escape_text(token_text, color_enabled)}",
        f"{bright_white('Tree:', color_enabled)} {escape_text(tree_text, color_enabled)}",
    ]


def run_explain(args: ExplainArgs) -> None:
    """Run the explain command."""
    color_enabled = setup_output(args)
    console = build_console(color_enabled)
    text = lines_to_text(explain_lines(args.query, color_enabled))
    print_prepared_output(console, prepare_text(text, color_enabled))


def register(app: typer.Typer) -> None:
    """Register the explain command."""

    @app.command("explain")
    def explain_command(
        query: str = typer.Argument(..., metavar="QUERY", help="Filter query to explain"),
        color_flag: bool | None = typer.Option(
            None,
            "--color/--no-color",
            help="Force colored output",
        ),
    ) -> None:
        """Show the tokens and expression tree for a filter query."""
        args = ExplainArgs(query=query, color_flag=color_flag)
        config_module.log_command_arguments(args, "explain")
        run_explain(args)
