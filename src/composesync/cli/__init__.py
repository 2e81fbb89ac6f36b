"""
compose-sync CLI - Main application entry point.

This module sets up the Typer CLI application with all subcommands.
"""

import typer
from rich.console import Console

from composesync import __version__
from composesync.cli import run, status

app = typer.Typer(
    name="composesync",
    help="Reconcile a git repository of compose projects with Arcane",
    no_args_is_help=True,
    add_completion=False,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


@app.callback()
def main() -> None:
    """
    compose-sync - GitOps reconciler for Arcane.

    Each run forces the local checkout onto the remote branch, then creates
    projects Arcane is missing and redeploys the ones whose compose file
    changed. Meant to be run on a schedule (systemd timer or cron).

    Quick Start:
        composesync status --env-file /etc/sync-tool/config.env
        composesync run --env-file /etc/sync-tool/config.env
    """


app.command(name="run")(run.run)
app.command(name="status")(status.status)


@app.command()
def version() -> None:
    """Show compose-sync version and exit."""
    console.print(f"composesync version {__version__}")
    raise typer.Exit(0)


def cli_main() -> None:
    """Main CLI entry point."""
    app()


__all__ = ["app", "cli_main"]
