"""
Force the local checkout onto the tracked remote branch.

The remote branch is the source of truth. Whatever state the checkout is
in (local commits, uncommitted edits, both) it ends up with HEAD equal to
the remote tip and an empty ``ahead`` count. Locally-owned env files are
kept out of the untracked cleanup.

Transitions by branch state:

    diverged     fetch branch, reset --hard to remote, clean     changed
    ahead        fetch branch, reset --hard to remote            not changed
    behind       (if dirty: reset --hard HEAD, clean) then
                 fetch branch, reset --hard to remote            changed
    in_sync      nothing                                         not changed

Fetch and reset-to-remote failures propagate as ``GitError``; a wrong tip
is never acceptable. Cleanup failures only leave untracked leftovers and are
logged as warnings.
"""

from __future__ import annotations

import logging

from composesync.core.git.backend import GitBackend, GitError
from composesync.core.git.models import BranchState, GitStatus, GitSyncResult

logger = logging.getLogger(__name__)


class GitSynchronizer:
    """
    Brings a checkout into exact alignment with ``<remote>/<branch>``.

    Example:
        >>> git = GitCLI(Path("/srv/compose"))
        >>> result = GitSynchronizer(git).synchronize()
        >>> if result.changed:
        ...     print(result.old_commit, "->", result.new_commit)
    """

    DEFAULT_CLEAN_EXCLUDES = (".env.global", "*.env.local", ".env")

    def __init__(
        self,
        git: GitBackend,
        remote: str = "origin",
        clean_excludes: list[str] | None = None,
    ) -> None:
        """
        Initialize the synchronizer.

        Args:
            git: Git backend bound to the checkout
            remote: Remote treated as the source of truth
            clean_excludes: Untracked patterns to preserve during cleanup
        """
        self.git = git
        self.remote = remote
        self.clean_excludes = (
            list(clean_excludes)
            if clean_excludes is not None
            else list(self.DEFAULT_CLEAN_EXCLUDES)
        )

    def upstream(self, branch: str) -> str:
        return f"{self.remote}/{branch}"

    def read_status(self, branch: str) -> GitStatus:
        """Compute ahead/behind counts and the dirty flag for ``branch``."""
        ahead, behind = self.git.ahead_behind(self.upstream(branch))
        return GitStatus(ahead=ahead, behind=behind, dirty=self.git.is_dirty())

    def _force_to_remote(self, branch: str) -> None:
        self.git.fetch(self.remote, branch)
        self.git.reset_hard(self.upstream(branch))

    def _clean(self) -> None:
        try:
            self.git.clean(self.clean_excludes)
        except GitError as e:
            logger.warning("Failed to clean untracked files: %s", e)

    def _discard_local_changes(self) -> None:
        logger.warning("Local changes detected, discarding (remote is source of truth)...")
        try:
            self.git.reset_hard("HEAD")
        except GitError as e:
            logger.warning("Failed to reset HEAD: %s", e)
        self._clean()

    def synchronize(self) -> GitSyncResult:
        """
        Fetch and force the checkout onto the remote branch.

        Returns:
            What was observed and whether the remote brought new commits

        Raises:
            GitError: If fetching, inspecting or resetting the checkout fails
        """
        old_commit = self.git.rev_parse("HEAD")

        logger.info("Fetching from %s...", self.remote)
        self.git.fetch(self.remote)

        branch = self.git.current_branch()
        logger.info("Current branch: %s", branch)

        status = self.read_status(branch)
        changed = False

        if status.state == BranchState.DIVERGED:
            logger.warning(
                "Local has diverged (ahead by %d, behind by %d)", status.ahead, status.behind
            )
            logger.warning("Remote is source of truth - discarding local commits and syncing")
            self._force_to_remote(branch)
            self._clean()
            logger.info("Successfully force-synced to remote")
            changed = True

        elif status.state == BranchState.AHEAD:
            logger.warning("Local is ahead by %d commits (unusual for GitOps)", status.ahead)
            logger.warning("Remote is source of truth - discarding local commits")
            self._force_to_remote(branch)
            logger.info("Successfully reset to remote")

        elif status.state == BranchState.BEHIND:
            logger.info("Local is behind by %d commits, pulling...", status.behind)
            if status.dirty:
                self._discard_local_changes()
            self._force_to_remote(branch)
            logger.info("Successfully synced to remote (force reset)")
            changed = True

        else:
            logger.info("Local branch is up to date with %s", self.upstream(branch))

        new_commit = self.git.rev_parse("HEAD")

        return GitSyncResult(
            branch=branch,
            status=status,
            old_commit=old_commit,
            new_commit=new_commit,
            changed=changed,
        )


__all__ = ["GitSynchronizer"]
