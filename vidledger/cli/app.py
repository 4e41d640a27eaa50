"""Main Typer application — imports and registers all CLI commands.

Entry point: ``vidledger`` (configured via pyproject.toml project.scripts).
"""

from __future__ import annotations

import typer
from rich.console import Console

from vidledger.cli.commands.demo import demo_cmd
from vidledger.cli.commands.replay import replay_cmd
from vidledger.config import configure_logging, settings

app = typer.Typer(
    name="vidledger",
    help="vidledger: marketplace ledger for digital video listings.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="demo", help="Run the list/buy/resell demo scenario.")(demo_cmd)
app.command(name="replay", help="Run a JSON script of ledger operations.")(replay_cmd)


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        None, "--log-level", help="Override VIDLEDGER_LOG_LEVEL for this run."
    ),
) -> None:
    """Configure logging before any command runs."""
    if log_level:
        settings.log_level = log_level
    configure_logging(settings)


@app.command(name="errors", help="List every error kind with its code.")
def errors_cmd() -> None:
    """Print the error taxonomy."""
    from vidledger.monitor.renderer import LedgerRenderer

    Console().print(LedgerRenderer.build_error_table())


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
