"""
Standardized error handling and exit codes for the compose-sync CLI.

This module provides consistent error messaging with actionable guidance
and standardized exit codes across all CLI commands.
"""

from enum import IntEnum

from rich.console import Console

console = Console(stderr=True)


class ExitCode(IntEnum):
    """Standard exit codes for compose-sync operations."""

    SUCCESS = 0
    """Pass completed (possibly with per-project warnings)."""

    GENERAL_ERROR = 1
    """Fatal error, or every project that needed action failed."""

    USER_ERROR = 2
    """Missing or invalid configuration (actionable by the operator)."""


def print_error(
    problem: str,
    *,
    reason: str | None = None,
    solution: str | None = None,
) -> None:
    """
    Print a standardized error message with actionable guidance.

    Args:
        problem: Brief description of what went wrong
        reason: Optional explanation of why it happened
        solution: Optional command or action to fix it

    Example:
        >>> print_error(
        ...     "Missing configuration",
        ...     reason="COMPOSE_REPO_PATH is not set",
        ...     solution="composesync run --env-file /etc/sync-tool/config.env",
        ... )
    """
    console.print(f"[red]Error:[/red] {problem}")

    if reason:
        console.print(f"[dim]{reason}[/dim]")

    if solution:
        console.print(f"[cyan]→ Try:[/cyan] {solution}")


def print_config_error(missing: list[str], message: str) -> None:
    """Print error when configuration is missing or invalid."""
    if missing:
        print_error(
            "Missing required configuration",
            reason=message,
            solution=f"export {missing[0]}=...  # or pass --env-file",
        )
    else:
        print_error("Invalid configuration", reason=message)


def print_git_error(message: str) -> None:
    """Print error when the checkout cannot be synchronized."""
    print_error(
        f"Git synchronization failed: {message}",
        solution="check GIT_AUTH_METHOD and the credentials it uses",
    )


__all__ = [
    "ExitCode",
    "print_config_error",
    "print_error",
    "print_git_error",
]
