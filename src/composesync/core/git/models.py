"""
Data models for the git synchronizer.

Defines Pydantic models for the checkout's position relative to its
tracked remote branch and for the outcome of a synchronization.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class BranchState(str, Enum):
    """Position of the local branch relative to the remote branch."""

    IN_SYNC = "in_sync"
    AHEAD = "ahead"
    BEHIND = "behind"
    DIVERGED = "diverged"


class GitStatus(BaseModel):
    """
    Ahead/behind counts and working tree state.

    Example:
        >>> GitStatus(ahead=2, behind=1).state
        <BranchState.DIVERGED: 'diverged'>
    """

    ahead: int = Field(default=0, ge=0, description="Local commits not on the remote branch")
    behind: int = Field(default=0, ge=0, description="Remote commits not on the local branch")
    dirty: bool = Field(default=False, description="Uncommitted or untracked changes present")

    @property
    def state(self) -> BranchState:
        if self.ahead > 0 and self.behind > 0:
            return BranchState.DIVERGED
        if self.ahead > 0:
            return BranchState.AHEAD
        if self.behind > 0:
            return BranchState.BEHIND
        return BranchState.IN_SYNC


class GitSyncResult(BaseModel):
    """
    Outcome of forcing the checkout onto the remote branch.

    ``changed`` is set only when the remote tip brought in new commits;
    discarding local-only commits does not count as a change.
    """

    branch: str = Field(description="Branch that was synchronized")
    status: GitStatus = Field(description="Status observed before any correction")
    old_commit: str = Field(description="HEAD before synchronization")
    new_commit: str = Field(description="HEAD after synchronization")
    changed: bool = Field(default=False)

    @property
    def state(self) -> BranchState:
        return self.status.state

    def summary(self) -> str:
        """Generate a one-line description of what happened."""
        parts = [f"{self.branch}: {self.state.value}"]
        if self.status.ahead:
            parts.append(f"ahead {self.status.ahead}")
        if self.status.behind:
            parts.append(f"behind {self.status.behind}")
        if self.old_commit != self.new_commit:
            parts.append(f"{self.old_commit[:8]} -> {self.new_commit[:8]}")
        return ", ".join(parts)
