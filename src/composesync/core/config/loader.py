"""
Configuration loading from environment variables.

Reads the variables the systemd unit provides and validates them into a
``SyncConfig``. Required variables are checked together so the operator
sees every missing one in a single error.

Supported env vars:
    COMPOSE_REPO_PATH  - local checkout (required)
    ARCANE_BASE_URL    - Arcane base URL (required)
    ARCANE_API_KEY     - Arcane API key (required)
    ARCANE_ENV_ID      - Arcane environment ID (default "0")
    ARCANE_TIMEOUT     - request timeout in seconds (default 60)
    LOG_FILE           - log destination (default /var/log/sync-tool.log)
    GIT_REMOTE         - remote treated as source of truth (default origin)
    GIT_AUTH_METHOD    - ssh or https (default ssh)
    GIT_SSH_KEY_PATH   - SSH private key
    GIT_HTTPS_TOKEN    - HTTPS personal access token
"""

import os
from pathlib import Path
from typing import Any, Mapping

from pydantic import ValidationError

from .models import GitAuthConfig, SyncConfig

REQUIRED_VARS: dict[str, str] = {
    "COMPOSE_REPO_PATH": "path to the compose repository checkout",
    "ARCANE_BASE_URL": "Arcane base URL, e.g. http://localhost:3552",
    "ARCANE_API_KEY": "Arcane API key",
}


class ConfigError(Exception):
    """Raised when the configuration is missing or invalid."""

    def __init__(self, message: str, missing: list[str] | None = None) -> None:
        super().__init__(message)
        self.missing = missing or []


def _get(environ: Mapping[str, str], key: str) -> str | None:
    """Return a stripped value, treating empty strings as unset."""
    value = environ.get(key, "").strip()
    return value or None


def build_config_dict(environ: Mapping[str, str]) -> dict[str, Any]:
    """
    Map environment variables onto ``SyncConfig`` fields.

    Only variables that are set are included, so model defaults apply to
    everything else.
    """
    result: dict[str, Any] = {
        "repo_path": _get(environ, "COMPOSE_REPO_PATH"),
        "arcane_base_url": _get(environ, "ARCANE_BASE_URL"),
        "arcane_api_key": _get(environ, "ARCANE_API_KEY"),
    }

    optional = {
        "arcane_env_id": "ARCANE_ENV_ID",
        "request_timeout": "ARCANE_TIMEOUT",
        "log_file": "LOG_FILE",
        "git_remote": "GIT_REMOTE",
    }
    for field, var in optional.items():
        if (value := _get(environ, var)) is not None:
            result[field] = value

    auth: dict[str, Any] = {}
    if method := _get(environ, "GIT_AUTH_METHOD"):
        auth["method"] = method
    if key_path := _get(environ, "GIT_SSH_KEY_PATH"):
        auth["ssh_key_path"] = Path(key_path).expanduser()
    if token := _get(environ, "GIT_HTTPS_TOKEN"):
        auth["https_token"] = token
    result["git_auth"] = GitAuthConfig(**auth)

    return result


def load_config(environ: Mapping[str, str] | None = None) -> SyncConfig:
    """
    Load and validate configuration.

    Args:
        environ: Variables to read (defaults to ``os.environ``)

    Returns:
        Validated SyncConfig

    Raises:
        ConfigError: If required variables are missing or a value is invalid

    Example:
        >>> config = load_config({
        ...     "COMPOSE_REPO_PATH": "/srv/compose",
        ...     "ARCANE_BASE_URL": "http://localhost:3552",
        ...     "ARCANE_API_KEY": "secret",
        ... })
        >>> config.arcane_env_id
        '0'
    """
    if environ is None:
        environ = os.environ

    missing = [var for var in REQUIRED_VARS if _get(environ, var) is None]
    if missing:
        details = "; ".join(f"{var} ({REQUIRED_VARS[var]})" for var in missing)
        raise ConfigError(f"Missing required environment variables: {details}", missing=missing)

    try:
        return SyncConfig(**build_config_dict(environ))
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
