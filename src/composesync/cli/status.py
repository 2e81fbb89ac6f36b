"""
compose-sync CLI - Status command.

Show where the checkout stands relative to the remote and what a pass
would do with each project, without changing anything.
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from composesync.cli.context import DEBUG_OPTION, ENV_FILE_OPTION, load_settings, start_logging
from composesync.cli.errors import ExitCode, print_error, print_git_error
from composesync.core.git.backend import GitError
from composesync.core.git.models import BranchState
from composesync.core.projects.scanner import ProjectScanError
from composesync.core.reconcile.models import PlannedAction
from composesync.core.service import StatusSnapshot, SyncService

console = Console()

STATE_STYLES = {
    BranchState.IN_SYNC: "green",
    BranchState.AHEAD: "yellow",
    BranchState.BEHIND: "cyan",
    BranchState.DIVERGED: "red",
}


def _render(snapshot: StatusSnapshot) -> None:
    state = snapshot.status.state
    style = STATE_STYLES[state]
    console.print(f"[bold]Branch:[/bold] {snapshot.branch} @ {snapshot.head[:12]}")
    console.print(
        f"[bold]State:[/bold] [{style}]{state.value}[/{style}] "
        f"(ahead {snapshot.status.ahead}, behind {snapshot.status.behind})"
    )
    if snapshot.status.dirty:
        console.print("[yellow]Working tree has uncommitted changes[/yellow]")
    if snapshot.remote_error:
        console.print(f"[yellow]Arcane listing failed:[/yellow] {snapshot.remote_error}")

    if not snapshot.projects:
        console.print("[dim]No projects found on disk[/dim]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Project", style="bold")
    table.add_column("In Arcane")
    table.add_column("Arcane IDs", style="dim")

    for project in snapshot.projects:
        if project.action == PlannedAction.CREATE:
            present = "[yellow]no (would create)[/yellow]"
        elif len(project.remote_ids) > 1:
            present = f"[red]yes ({len(project.remote_ids)} duplicates)[/red]"
        else:
            present = "[green]yes[/green]"
        table.add_row(project.name, present, ", ".join(project.remote_ids) or "-")

    console.print(table)


def status(
    env_file: Path | None = ENV_FILE_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """
    Show checkout and project status without changing anything.

    Fetches from the remote so the ahead/behind counts are current, but
    never resets the checkout or modifies Arcane.

    Examples:
        composesync status --env-file /etc/sync-tool/config.env
    """
    config = load_settings(env_file)
    start_logging(None, debug)

    try:
        with SyncService(config) as service:
            snapshot = service.inspect()
    except GitError as e:
        print_git_error(str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR) from e
    except ProjectScanError as e:
        print_error(str(e), solution="check COMPOSE_REPO_PATH")
        raise typer.Exit(ExitCode.GENERAL_ERROR) from e

    _render(snapshot)
