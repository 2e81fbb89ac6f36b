"""
Reconciliation of disk projects against the Arcane inventory.

Disk is authoritative for which projects exist. For each disk project:

    no remote record                      -> create, then start
    remote record(s), manifest changed    -> update, then redeploy
    remote record(s), manifest unchanged  -> nothing

Remote projects missing from disk are left alone. Failures are contained
to the project they happen in; the rest of the pass carries on.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Protocol

from composesync.core.arcane.exceptions import ArcaneError
from composesync.core.arcane.models import RemoteProject
from composesync.core.projects.models import DiskProject
from composesync.core.reconcile.models import (
    OutcomeStatus,
    PlannedAction,
    ProjectOutcome,
    ReconcileReport,
)
from composesync.core.reconcile.selection import select_preferred_project

logger = logging.getLogger(__name__)

RemoteIndex = dict[str, list[RemoteProject]]


class ProjectInventory(Protocol):
    """The remote operations a pass needs. ``ArcaneClient`` satisfies it."""

    def list_projects(self) -> list[RemoteProject]: ...

    def find_projects_by_name(self, name: str) -> list[RemoteProject]: ...

    def create_project(self, name: str, compose_content: str, env_content: str = "") -> str: ...

    def update_project(
        self, project_id: str, compose_content: str = "", env_content: str = ""
    ) -> None: ...

    def start_project(self, project_id: str) -> None: ...

    def redeploy_project(self, project_id: str) -> None: ...


def index_by_name(projects: Iterable[RemoteProject]) -> RemoteIndex:
    """Group remote projects by name, keeping listing order within each name."""
    index: RemoteIndex = {}
    for project in projects:
        index.setdefault(project.name, []).append(project)
    return index


def classify(
    disk_projects: Iterable[DiskProject],
    index: RemoteIndex,
    changed: set[str],
) -> list[tuple[DiskProject, PlannedAction]]:
    """
    Decide what each disk project needs.

    Example:
        >>> [(p.name, a.value) for p, a in classify(disk, index, {"a"})]
        [('a', 'sync'), ('b', 'noop'), ('c', 'create')]
    """
    plan: list[tuple[DiskProject, PlannedAction]] = []
    for project in disk_projects:
        if not index.get(project.name):
            plan.append((project, PlannedAction.CREATE))
        elif project.name in changed:
            plan.append((project, PlannedAction.SYNC))
        else:
            plan.append((project, PlannedAction.NOOP))
    return plan


class ReconcileEngine:
    """
    Converges Arcane to the disk inventory with as few calls as possible.

    Example:
        >>> engine = ReconcileEngine(client)
        >>> report = engine.reconcile(scan_projects(root), client.list_projects(), {"immich"})
        >>> report.summary()
        '1 created, 1 synced, 12 unchanged'
    """

    def __init__(self, client: ProjectInventory) -> None:
        self.client = client

    def reconcile(
        self,
        disk_projects: Iterable[DiskProject],
        remote_projects: Iterable[RemoteProject],
        changed: set[str],
    ) -> ReconcileReport:
        """
        Run one reconciliation.

        Args:
            disk_projects: Projects found in the checkout
            remote_projects: Arcane inventory (may contain duplicate names)
            changed: Names whose manifest changed in this pass

        Returns:
            One outcome per disk project plus duplicate diagnostics
        """
        report = ReconcileReport()
        index = index_by_name(remote_projects)

        for name, entries in index.items():
            self._note_duplicates(name, entries, report)

        plan = classify(disk_projects, index, changed)
        to_create = [p for p, action in plan if action == PlannedAction.CREATE]
        to_sync = [p for p, action in plan if action == PlannedAction.SYNC]

        if not to_create and not to_sync:
            logger.info("All projects are in sync, no changes needed")

        if to_create:
            logger.info("Creating %d new project(s) in Arcane...", len(to_create))
            for project in to_create:
                report.add(self._create(project, index, report))

        if to_sync:
            logger.info("Syncing %d changed project(s)...", len(to_sync))
            for project in to_sync:
                report.add(self._sync(project, index))

        for project, action in plan:
            if action == PlannedAction.NOOP:
                target = select_preferred_project(index[project.name])
                report.add(
                    ProjectOutcome(
                        name=project.name,
                        action=action,
                        status=OutcomeStatus.UNCHANGED,
                        remote_id=target.id if target else None,
                    )
                )

        return report

    def _note_duplicates(
        self, name: str, entries: list[RemoteProject], report: ReconcileReport
    ) -> None:
        """Warn once per name and pass when several remote projects share it."""
        if len(entries) < 2 or name in report.duplicates:
            return
        ids = [p.id for p in entries]
        report.duplicates[name] = ids
        logger.warning(
            "Multiple Arcane projects share the same name '%s' (IDs: %s). "
            "Only one will be operated on; please delete duplicates in Arcane.",
            name,
            ", ".join(ids),
        )

    def _create(
        self, project: DiskProject, index: RemoteIndex, report: ReconcileReport
    ) -> ProjectOutcome:
        name = project.name
        outcome = ProjectOutcome(
            name=name, action=PlannedAction.CREATE, status=OutcomeStatus.CREATED
        )

        # Guard against a stale listing before creating anything
        try:
            existing = self.client.find_projects_by_name(name)
        except ArcaneError as e:
            message = f"Could not verify whether project {name} exists: {e}"
            logger.warning("%s (will attempt create)", message)
            outcome.warnings.append(message)
            existing = []

        if existing:
            ids = ", ".join(p.id for p in existing)
            logger.warning(
                "Project %s already exists in Arcane (IDs: %s). Skipping create to avoid "
                "duplicates.",
                name,
                ids,
            )
            index[name] = existing
            self._note_duplicates(name, existing, report)
            target = select_preferred_project(existing)
            outcome.status = OutcomeStatus.ADOPTED
            outcome.remote_id = target.id if target else None
            return outcome

        try:
            compose_content = project.read_manifest()
        except OSError as e:
            logger.error("Failed to read compose file for project %s: %s", name, e)
            outcome.status = OutcomeStatus.READ_FAILED
            outcome.errors.append(str(e))
            return outcome
        env_content = project.read_env()

        logger.info("Creating project: %s", name)
        try:
            project_id = self.client.create_project(name, compose_content, env_content)
        except ArcaneError as e:
            logger.error("Failed to create project %s: %s", name, e)
            outcome.status = OutcomeStatus.CREATE_FAILED
            outcome.errors.append(str(e))
            return outcome

        logger.info("Created project: %s (ID: %s)", name, project_id)
        outcome.remote_id = project_id
        index[name] = [RemoteProject(id=project_id, name=name)]

        logger.info("Starting project: %s", name)
        try:
            self.client.start_project(project_id)
        except ArcaneError as e:
            logger.warning("Failed to start project %s (ID: %s): %s", name, project_id, e)
            outcome.warnings.append(f"start failed: {e}")
            try:
                self.client.redeploy_project(project_id)
            except ArcaneError as redeploy_error:
                logger.error(
                    "Failed to redeploy project %s (ID: %s): %s", name, project_id, redeploy_error
                )
                outcome.status = OutcomeStatus.START_FAILED
                outcome.errors.append(f"redeploy failed: {redeploy_error}")
                return outcome
            outcome.redeployed = True
            logger.info("Redeployed project: %s", name)
        else:
            logger.info("Started project: %s", name)

        return outcome

    def _sync(self, project: DiskProject, index: RemoteIndex) -> ProjectOutcome:
        name = project.name
        outcome = ProjectOutcome(name=name, action=PlannedAction.SYNC, status=OutcomeStatus.SYNCED)

        target = select_preferred_project(index.get(name, []))
        project_id = target.id if target else ""
        if not project_id:
            logger.warning("Could not resolve Arcane project ID for %s, using name as fallback", name)
            project_id = name
        outcome.remote_id = project_id

        try:
            compose_content = project.read_manifest()
        except OSError as e:
            logger.error("Failed to read compose file for project %s: %s", name, e)
            outcome.status = OutcomeStatus.READ_FAILED
            outcome.errors.append(str(e))
            return outcome
        env_content = project.read_env()

        # Update is best-effort; redeploy runs regardless
        logger.info("Updating project configuration: %s", name)
        try:
            self.client.update_project(project_id, compose_content, env_content)
        except ArcaneError as e:
            logger.warning("Failed to update project %s (ID: %s) config: %s", name, project_id, e)
            outcome.warnings.append(f"update failed: {e}")

        logger.info("Redeploying project: %s", name)
        try:
            self.client.redeploy_project(project_id)
        except ArcaneError as e:
            logger.error("Failed to redeploy project %s (ID: %s): %s", name, project_id, e)
            outcome.status = OutcomeStatus.SYNC_FAILED
            outcome.errors.append(f"redeploy failed: {e}")
            return outcome

        outcome.redeployed = True
        logger.info("Redeployed project: %s", name)
        return outcome


__all__ = ["ReconcileEngine", "ProjectInventory", "classify", "index_by_name"]
