"""
Credential injection for git subprocesses.

Turns the configured authentication method into environment variables
that are handed to each git invocation. The process environment itself is
never modified.

SSH uses ``GIT_SSH_COMMAND`` pointing at the configured key. HTTPS injects
a ``credential.helper`` through git's ``GIT_CONFIG_COUNT`` variables (git
2.31+). The helper is a shell snippet run by git itself; it answers with
``x-access-token`` and the token, which is passed through a private
variable rather than embedded in the configuration.
"""

from __future__ import annotations

import logging
import shlex
from pathlib import Path

from composesync.core.config.models import GitAuthConfig, GitAuthMethod

logger = logging.getLogger(__name__)

TOKEN_ENV_VAR = "COMPOSESYNC_GIT_TOKEN"

# Only answers "get"; "store" and "erase" are no-ops.
CREDENTIAL_HELPER = (
    '!f() { test "$1" = get || exit 0; '
    "echo username=x-access-token; "
    f'echo "password=${TOKEN_ENV_VAR}"; '
    "}; f"
)


def ssh_environment(key_path: Path | None) -> dict[str, str]:
    """Environment that makes git use ``key_path`` for SSH remotes."""
    if key_path is None:
        logger.warning("GIT_SSH_KEY_PATH not set, git operations may fail")
        return {}
    if not key_path.exists():
        logger.warning("SSH key not found at %s, git operations may fail", key_path)
        return {}

    command = (
        f"ssh -i {shlex.quote(str(key_path))} "
        "-o StrictHostKeyChecking=accept-new -o UserKnownHostsFile=/dev/null"
    )
    logger.info("Configured git to use SSH key: %s", key_path)
    return {"GIT_SSH_COMMAND": command}


def https_environment(token: str | None) -> dict[str, str]:
    """
    Environment that answers git's HTTPS credential requests with ``token``.

    The first injected entry empties the helper list so helpers from the
    user or system configuration are not consulted.
    """
    if not token:
        logger.warning("HTTPS token not provided, git HTTPS operations may fail")
        return {}

    logger.info("Configured git to use HTTPS with personal access token")
    return {
        "GIT_CONFIG_COUNT": "2",
        "GIT_CONFIG_KEY_0": "credential.helper",
        "GIT_CONFIG_VALUE_0": "",
        "GIT_CONFIG_KEY_1": "credential.helper",
        "GIT_CONFIG_VALUE_1": CREDENTIAL_HELPER,
        TOKEN_ENV_VAR: token,
    }


def git_environment(auth: GitAuthConfig) -> dict[str, str]:
    """
    Compute the extra environment for git subprocesses.

    Args:
        auth: Configured authentication method and credentials

    Returns:
        Variables to overlay on the inherited environment. Always disables
        interactive terminal prompts so a missing credential fails fast.
    """
    env = {"GIT_TERMINAL_PROMPT": "0"}

    if auth.method == GitAuthMethod.HTTPS:
        env.update(https_environment(auth.https_token))
    else:
        env.update(ssh_environment(auth.ssh_key_path))

    return env


__all__ = [
    "git_environment",
    "ssh_environment",
    "https_environment",
    "CREDENTIAL_HELPER",
    "TOKEN_ENV_VAR",
]
