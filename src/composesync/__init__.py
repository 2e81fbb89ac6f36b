"""
compose-sync - GitOps reconciler for Arcane

Keeps a git repository of compose projects and an Arcane environment in
step: the checkout is forced to the remote branch, then Arcane is converged
to what is on disk.
"""

__version__ = "0.3.0"

# Re-export core models for convenience
from composesync.core.config.models import SyncConfig
from composesync.core.reconcile.models import ReconcileReport

__all__ = ["ReconcileReport", "SyncConfig", "__version__"]
