"""
Reconciliation engine.

Classifies disk projects against the Arcane inventory and converges the
remote side: create what is missing, update and redeploy what changed,
leave everything else alone.

Example:
    >>> from composesync.core.reconcile import ReconcileEngine
    >>> report = ReconcileEngine(client).reconcile(disk, remote, changed={"immich"})
    >>> report.success
    True
"""

from composesync.core.reconcile.engine import (
    ProjectInventory,
    ReconcileEngine,
    classify,
    index_by_name,
)
from composesync.core.reconcile.models import (
    OutcomeStatus,
    PlannedAction,
    ProjectOutcome,
    ReconcileReport,
)
from composesync.core.reconcile.selection import (
    effective_timestamp,
    parse_timestamp,
    select_preferred_project,
)

__all__ = [
    "OutcomeStatus",
    "PlannedAction",
    "ProjectInventory",
    "ProjectOutcome",
    "ReconcileEngine",
    "ReconcileReport",
    "classify",
    "effective_timestamp",
    "index_by_name",
    "parse_timestamp",
    "select_preferred_project",
]
