"""
Shared startup for CLI commands: env file, configuration, logging.
"""

from pathlib import Path

import typer

from composesync.cli.errors import ExitCode, print_config_error, print_error
from composesync.core.config import ConfigError, SyncConfig, load_config, load_env_files
from composesync.utils.logging import configure_logging

ENV_FILE_OPTION = typer.Option(
    None,
    "--env-file",
    envvar="COMPOSESYNC_ENV_FILE",
    help="Env file to read settings from (e.g. /etc/sync-tool/config.env)",
    dir_okay=False,
)

DEBUG_OPTION = typer.Option(
    False,
    "--debug",
    help="Enable debug logging, including every git command",
)


def load_settings(env_file: Path | None) -> SyncConfig:
    """Load the env file (if any) and validate configuration, exiting 2 on failure."""
    if env_file is not None:
        if not env_file.exists():
            print_error(f"Env file not found: {env_file}")
            raise typer.Exit(ExitCode.USER_ERROR)
        load_env_files([env_file])

    try:
        return load_config()
    except ConfigError as e:
        print_config_error(e.missing, str(e))
        raise typer.Exit(ExitCode.USER_ERROR) from e


def start_logging(log_file: Path | None, debug: bool) -> None:
    """Configure logging, exiting 1 if the log file cannot be opened."""
    try:
        configure_logging(log_file, debug)
    except OSError as e:
        print_error(
            f"Cannot open log file {log_file}",
            reason=str(e),
            solution="set LOG_FILE to a writable path",
        )
        raise typer.Exit(ExitCode.GENERAL_ERROR) from e
