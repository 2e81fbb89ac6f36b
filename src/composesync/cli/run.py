"""
compose-sync CLI - Run command.

Execute one reconciliation pass: force the checkout to the remote branch,
then converge Arcane to the projects on disk.
"""

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from composesync.cli.context import DEBUG_OPTION, ENV_FILE_OPTION, load_settings, start_logging
from composesync.cli.errors import ExitCode, print_error, print_git_error
from composesync.core.git.backend import GitError
from composesync.core.projects.scanner import ProjectScanError
from composesync.core.reconcile.models import OutcomeStatus, ReconcileReport
from composesync.core.service import PassResult, SyncService

logger = logging.getLogger(__name__)

console = Console()

STATUS_STYLES = {
    OutcomeStatus.CREATED: "green",
    OutcomeStatus.ADOPTED: "yellow",
    OutcomeStatus.SYNCED: "cyan",
    OutcomeStatus.UNCHANGED: "dim",
}


def _render_report(report: ReconcileReport) -> Table:
    table = Table(title="Projects", show_header=True, header_style="bold")
    table.add_column("Project", style="bold")
    table.add_column("Action")
    table.add_column("Result")
    table.add_column("Arcane ID", style="dim")
    table.add_column("Notes")

    for outcome in sorted(report.outcomes, key=lambda o: o.name):
        style = STATUS_STYLES.get(outcome.status, "red")
        notes = outcome.errors + outcome.warnings
        if outcome.name in report.duplicates:
            notes.append(f"{len(report.duplicates[outcome.name])} records share this name")
        table.add_row(
            outcome.name,
            outcome.action.value,
            f"[{style}]{outcome.status.value}[/{style}]",
            outcome.remote_id or "-",
            "; ".join(notes),
        )
    return table


def _print_result(result: PassResult) -> None:
    console.print(f"[bold]Git:[/bold] {result.git.summary()}")
    if result.changed_projects:
        console.print(f"[bold]Changed:[/bold] {', '.join(result.changed_projects)}")
    if result.remote_listing_failed:
        console.print("[yellow]Arcane listing failed; treated as empty[/yellow]")
    if result.report.outcomes:
        console.print(_render_report(result.report))
    console.print(f"[bold]Summary:[/bold] {result.report.summary()}")


def run(
    env_file: Path | None = ENV_FILE_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """
    Run one reconciliation pass.

    Exits 0 when the pass completed, 1 when the checkout could not be
    synchronized or every project that needed action failed, and 2 on
    configuration errors.

    Examples:
        composesync run --env-file /etc/sync-tool/config.env
        composesync run --debug
    """
    config = load_settings(env_file)
    start_logging(config.log_file, debug)

    try:
        with SyncService(config) as service:
            result = service.run()
    except GitError as e:
        logger.error("Git synchronization failed: %s", e)
        print_git_error(str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR) from e
    except ProjectScanError as e:
        logger.error("%s", e)
        print_error(str(e), solution="check COMPOSE_REPO_PATH")
        raise typer.Exit(ExitCode.GENERAL_ERROR) from e

    _print_result(result)

    if not result.success:
        raise typer.Exit(ExitCode.GENERAL_ERROR)
