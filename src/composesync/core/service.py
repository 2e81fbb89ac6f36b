"""
One reconciliation pass, end to end.

Wires the components together in their fixed order:

1. Force the checkout onto the remote branch (always).
2. Scan the disk inventory and list the Arcane inventory.
3. If the checkout moved, compute the change-set between old and new HEAD.
4. Let the engine converge Arcane to disk.

Steps 1 and 2 (disk side) are fatal on failure. A failed Arcane listing is
not: the pass continues with an empty inventory, and the create guard in the
engine keeps that from producing duplicates.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field

from composesync.core.arcane.client import ArcaneClient
from composesync.core.arcane.exceptions import ArcaneError
from composesync.core.arcane.models import RemoteProject
from composesync.core.config.models import SyncConfig
from composesync.core.git.auth import git_environment
from composesync.core.git.backend import GitBackend, GitCLI
from composesync.core.git.models import GitStatus, GitSyncResult
from composesync.core.git.synchronizer import GitSynchronizer
from composesync.core.projects.changes import ChangeDetector
from composesync.core.projects.scanner import scan_projects
from composesync.core.reconcile.engine import (
    ProjectInventory,
    ReconcileEngine,
    classify,
    index_by_name,
)
from composesync.core.reconcile.models import PlannedAction, ReconcileReport

logger = logging.getLogger(__name__)


class PassResult(BaseModel):
    """Everything one pass observed and did."""

    git: GitSyncResult
    disk_projects: list[str] = Field(default_factory=list)
    remote_count: int = 0
    remote_listing_failed: bool = False
    changed_projects: list[str] = Field(default_factory=list)
    report: ReconcileReport = Field(default_factory=ReconcileReport)

    @property
    def success(self) -> bool:
        return self.report.success


class PlannedProject(BaseModel):
    """Read-only classification of one disk project."""

    name: str
    action: PlannedAction
    remote_ids: list[str] = Field(default_factory=list)


class StatusSnapshot(BaseModel):
    """What ``status`` shows: checkout position and per-project classification."""

    branch: str
    head: str
    status: GitStatus
    projects: list[PlannedProject] = Field(default_factory=list)
    remote_error: str | None = None


class SyncService:
    """
    Runs reconciliation passes for one configuration.

    Example:
        >>> service = SyncService(load_config())
        >>> result = service.run()
        >>> print(result.report.summary())
    """

    def __init__(
        self,
        config: SyncConfig,
        *,
        git: GitBackend | None = None,
        client: ProjectInventory | None = None,
    ) -> None:
        """
        Initialize the service.

        Args:
            config: Validated configuration
            git: Git backend (defaults to GitCLI with injected credentials)
            client: Arcane client (defaults to ArcaneClient from config)
        """
        self.config = config
        self.git = git or GitCLI(config.repo_path, env=git_environment(config.git_auth))
        self._owns_client = client is None
        self.client: ProjectInventory = client or ArcaneClient(
            config.arcane_base_url,
            config.arcane_api_key,
            config.arcane_env_id,
            timeout=config.request_timeout,
        )
        self.synchronizer = GitSynchronizer(
            self.git,
            remote=config.git_remote,
            clean_excludes=config.clean_excludes,
        )
        self.detector = ChangeDetector(self.git)
        self.engine = ReconcileEngine(self.client)

    def close(self) -> None:
        if self._owns_client and isinstance(self.client, ArcaneClient):
            self.client.close()

    def __enter__(self) -> SyncService:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _list_remote(self) -> tuple[list[RemoteProject], str | None]:
        try:
            return self.client.list_projects(), None
        except ArcaneError as e:
            logger.warning("Could not list Arcane projects: %s", e)
            return [], str(e)

    def run(self) -> PassResult:
        """
        Execute one full pass.

        Returns:
            PassResult with the git outcome and the reconcile report

        Raises:
            GitError: If fetching or resetting the checkout fails
            ProjectScanError: If the checkout root cannot be read
        """
        logger.info("Starting compose sync check")
        logger.info("Repository: %s", self.config.repo_path)

        git_result = self.synchronizer.synchronize()

        disk_projects = scan_projects(self.config.repo_path)
        logger.info("Found %d project(s) on disk", len(disk_projects))

        remote_projects, remote_error = self._list_remote()
        logger.info("Found %d project(s) in Arcane", len(remote_projects))

        changed: set[str] = set()
        if git_result.changed:
            changed = self.detector.detect(git_result.old_commit, git_result.new_commit)

        report = self.engine.reconcile(disk_projects, remote_projects, changed)

        if report.success:
            logger.info("Compose sync completed: %s", report.summary())
        else:
            logger.error("Compose sync failed for every project that needed action")

        return PassResult(
            git=git_result,
            disk_projects=[p.name for p in disk_projects],
            remote_count=len(remote_projects),
            remote_listing_failed=remote_error is not None,
            changed_projects=sorted(changed),
            report=report,
        )

    def inspect(self) -> StatusSnapshot:
        """
        Describe the current state without changing anything.

        Fetches so ahead/behind counts are current, but never resets the
        checkout or calls a mutating Arcane endpoint. Projects are classified
        as if no manifest had changed.

        Raises:
            GitError: If fetching or reading the checkout fails
            ProjectScanError: If the checkout root cannot be read
        """
        self.git.fetch(self.config.git_remote)
        branch = self.git.current_branch()
        status = self.synchronizer.read_status(branch)
        head = self.git.rev_parse("HEAD")

        disk_projects = scan_projects(self.config.repo_path)
        remote_projects, remote_error = self._list_remote()
        index = index_by_name(remote_projects)

        projects = [
            PlannedProject(
                name=project.name,
                action=action,
                remote_ids=[p.id for p in index.get(project.name, [])],
            )
            for project, action in classify(disk_projects, index, set())
        ]

        return StatusSnapshot(
            branch=branch,
            head=head,
            status=status,
            projects=projects,
            remote_error=remote_error,
        )


__all__ = ["PassResult", "PlannedProject", "StatusSnapshot", "SyncService"]
