"""
Git state synchronization.

Keeps the compose checkout identical to its remote branch and exposes the
small set of git operations the reconciler relies on.

Example:
    >>> from composesync.core.git import GitCLI, GitSynchronizer
    >>> result = GitSynchronizer(GitCLI(Path("."))).synchronize()
    >>> result.summary()
    'main: behind, behind 2, 1a2b3c4d -> 5e6f7a8b'
"""

from composesync.core.git.auth import git_environment
from composesync.core.git.backend import GitBackend, GitCLI, GitError
from composesync.core.git.models import BranchState, GitStatus, GitSyncResult
from composesync.core.git.synchronizer import GitSynchronizer

__all__ = [
    "BranchState",
    "GitBackend",
    "GitCLI",
    "GitError",
    "GitStatus",
    "GitSyncResult",
    "GitSynchronizer",
    "git_environment",
]
