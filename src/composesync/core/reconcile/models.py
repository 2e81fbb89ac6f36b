"""
Data models for reconciliation results.

Each disk project gets exactly one ``ProjectOutcome`` per pass; the
``ReconcileReport`` aggregates them and decides whether the pass as a whole
succeeded.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class PlannedAction(str, Enum):
    """What a disk project needs on the remote side."""

    CREATE = "create"
    SYNC = "sync"
    NOOP = "noop"


class OutcomeStatus(str, Enum):
    """How handling a project ended."""

    CREATED = "created"
    ADOPTED = "adopted"
    SYNCED = "synced"
    UNCHANGED = "unchanged"
    READ_FAILED = "read_failed"
    CREATE_FAILED = "create_failed"
    START_FAILED = "start_failed"
    SYNC_FAILED = "sync_failed"


FAILED_STATUSES = frozenset(
    {
        OutcomeStatus.READ_FAILED,
        OutcomeStatus.CREATE_FAILED,
        OutcomeStatus.START_FAILED,
        OutcomeStatus.SYNC_FAILED,
    }
)


class ProjectOutcome(BaseModel):
    """
    Result of handling one disk project.

    ``ADOPTED`` means creation was skipped because Arcane already had the
    project. ``START_FAILED`` means the project was created but neither
    starting nor redeploying it worked.
    """

    name: str = Field(description="Project name")
    action: PlannedAction = Field(description="Classification of the project")
    status: OutcomeStatus = Field(description="How handling ended")
    remote_id: str | None = Field(default=None, description="Arcane ID operated on")
    redeployed: bool = Field(default=False, description="A redeploy request succeeded")
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def failed(self) -> bool:
        return self.status in FAILED_STATUSES


class ReconcileReport(BaseModel):
    """
    Aggregate result of one reconciliation.

    Example:
        >>> report = ReconcileReport()
        >>> report.success
        True
    """

    outcomes: list[ProjectOutcome] = Field(default_factory=list)
    duplicates: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Names shared by several remote projects, with their IDs",
    )

    def add(self, outcome: ProjectOutcome) -> ProjectOutcome:
        self.outcomes.append(outcome)
        return outcome

    @property
    def actionable(self) -> list[ProjectOutcome]:
        """Outcomes of projects that needed a create or a sync."""
        return [o for o in self.outcomes if o.action != PlannedAction.NOOP]

    @property
    def failed(self) -> list[ProjectOutcome]:
        return [o for o in self.outcomes if o.failed]

    @property
    def success(self) -> bool:
        """False only when something needed doing and all of it failed."""
        actionable = self.actionable
        if not actionable:
            return True
        return any(not o.failed for o in actionable)

    def summary(self) -> str:
        """Generate a human-readable summary of the pass."""
        created = sum(1 for o in self.outcomes if o.status == OutcomeStatus.CREATED)
        synced = sum(1 for o in self.outcomes if o.status == OutcomeStatus.SYNCED)
        unchanged = sum(1 for o in self.outcomes if o.status == OutcomeStatus.UNCHANGED)

        parts = [f"{created} created", f"{synced} synced", f"{unchanged} unchanged"]
        if adopted := sum(1 for o in self.outcomes if o.status == OutcomeStatus.ADOPTED):
            parts.append(f"{adopted} already present")
        if self.failed:
            parts.append(f"{len(self.failed)} failed")
        if self.duplicates:
            parts.append(f"{len(self.duplicates)} duplicated name(s)")
        return ", ".join(parts)
