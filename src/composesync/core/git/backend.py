"""
Narrow interface over the git command line.

The synchronizer and change detector only need a handful of git
operations. ``GitBackend`` names exactly those so the reconciliation logic
can be exercised against a fake, and ``GitCLI`` implements them by running
``git`` in the checkout with the configured credential environment.
"""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


class GitError(Exception):
    """Exception raised when a git operation fails."""

    def __init__(self, message: str, command: list[str] | None = None, stderr: str = ""):
        super().__init__(message)
        self.command = command
        self.stderr = stderr

    def __str__(self) -> str:
        message = super().__str__()
        if self.stderr:
            return f"{message}: {self.stderr}"
        return message


@runtime_checkable
class GitBackend(Protocol):
    """
    Git operations used by the synchronizer and change detector.

    Every method raises ``GitError`` on failure.
    """

    def fetch(self, remote: str, branch: str | None = None) -> None:
        """Fetch ``remote`` (optionally a single branch)."""
        ...

    def current_branch(self) -> str:
        """Name of the checked-out branch."""
        ...

    def rev_parse(self, ref: str = "HEAD") -> str:
        """Full commit ID of ``ref``."""
        ...

    def ahead_behind(self, upstream: str) -> tuple[int, int]:
        """Return ``(ahead, behind)`` of HEAD relative to ``upstream``."""
        ...

    def is_dirty(self) -> bool:
        """Whether the working tree has uncommitted or untracked changes."""
        ...

    def reset_hard(self, ref: str) -> None:
        """Move the branch and working tree to ``ref``."""
        ...

    def clean(self, excludes: list[str]) -> None:
        """Remove untracked files and directories except ``excludes`` patterns."""
        ...

    def diff_name_only(self, old: str, new: str) -> list[str]:
        """Paths that differ between two commits."""
        ...


class GitCLI:
    """
    ``GitBackend`` implementation that shells out to ``git``.

    Example:
        >>> git = GitCLI(Path("/srv/compose"), env={"GIT_TERMINAL_PROMPT": "0"})
        >>> git.current_branch()
        'main'
    """

    DEFAULT_TIMEOUT = 120

    def __init__(
        self,
        repo_path: Path,
        env: dict[str, str] | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """
        Initialize the backend.

        Args:
            repo_path: Root of the git checkout
            env: Extra variables overlaid on the inherited environment for
                every git invocation (credentials, prompt suppression)
            timeout: Per-command timeout in seconds
        """
        self.repo_path = repo_path
        self.extra_env = dict(env or {})
        self.timeout = timeout

    def _run_git(self, args: list[str]) -> str:
        """
        Run a git command and return its stdout.

        Args:
            args: Git command arguments (without "git" prefix).

        Returns:
            Command stdout as string (stripped).

        Raises:
            GitError: If the command fails, times out or git is missing.
        """
        cmd = ["git"] + args

        logger.debug("Running git command: %s", " ".join(cmd))

        try:
            result = subprocess.run(
                cmd,
                cwd=self.repo_path,
                env={**os.environ, **self.extra_env},
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise GitError(f"Git command timed out: {' '.join(cmd)}", command=cmd) from e
        except FileNotFoundError as e:
            raise GitError("git not found in PATH", command=cmd) from e

        if result.returncode != 0:
            stderr = result.stderr.strip() if result.stderr else ""
            raise GitError(
                f"Git command failed: {' '.join(cmd)}",
                command=cmd,
                stderr=stderr,
            )

        return result.stdout.strip() if result.stdout else ""

    def fetch(self, remote: str, branch: str | None = None) -> None:
        args = ["fetch", remote]
        if branch:
            args.append(branch)
        self._run_git(args)

    def current_branch(self) -> str:
        return self._run_git(["rev-parse", "--abbrev-ref", "HEAD"])

    def rev_parse(self, ref: str = "HEAD") -> str:
        return self._run_git(["rev-parse", ref])

    def ahead_behind(self, upstream: str) -> tuple[int, int]:
        # Left side is the upstream, so output reads "<behind> <ahead>"
        output = self._run_git(["rev-list", "--left-right", "--count", f"{upstream}...HEAD"])
        counts = output.split()
        if len(counts) != 2:
            raise GitError(f"Unexpected rev-list output: {output!r}")
        try:
            behind, ahead = int(counts[0]), int(counts[1])
        except ValueError as e:
            raise GitError(f"Unexpected rev-list output: {output!r}") from e
        return ahead, behind

    def is_dirty(self) -> bool:
        return bool(self._run_git(["status", "--porcelain"]))

    def reset_hard(self, ref: str) -> None:
        self._run_git(["reset", "--hard", ref])

    def clean(self, excludes: list[str]) -> None:
        args = ["clean", "-fd"]
        for pattern in excludes:
            args.extend(["-e", pattern])
        self._run_git(args)

    def diff_name_only(self, old: str, new: str) -> list[str]:
        output = self._run_git(["diff", "--name-only", old, new])
        return [line.strip() for line in output.splitlines() if line.strip()]


__all__ = ["GitBackend", "GitCLI", "GitError"]
