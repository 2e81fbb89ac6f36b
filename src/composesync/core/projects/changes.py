"""
Change-set detection between two revisions.

A project is changed when its manifest file differs between the two
commits. Other files in the project directory (READMEs, config snippets)
do not count.
"""

from __future__ import annotations

import logging
from pathlib import PurePosixPath

from composesync.core.git.backend import GitBackend, GitError
from composesync.core.projects.models import is_manifest_filename

logger = logging.getLogger(__name__)


def projects_from_paths(paths: list[str]) -> set[str]:
    """
    Map changed file paths to project names.

    Keeps paths whose basename is a manifest name and returns the basename
    of each one's parent directory. Manifests at the repository root have no
    project directory and are ignored.

    Example:
        >>> projects_from_paths(["a/compose.yaml", "unrelated/readme.md"])
        {'a'}
    """
    changed: set[str] = set()
    for raw in paths:
        path = PurePosixPath(raw.strip())
        if not raw.strip() or not is_manifest_filename(path.name):
            continue
        parent = path.parent.name
        if not parent:
            logger.debug("Ignoring manifest outside a project directory: %s", raw)
            continue
        changed.add(parent)
    return changed


class ChangeDetector:
    """
    Computes which projects' manifests changed between two commits.

    Example:
        >>> detector = ChangeDetector(GitCLI(Path("/srv/compose")))
        >>> detector.detect("1a2b3c", "4d5e6f")
        {'immich'}
    """

    def __init__(self, git: GitBackend) -> None:
        self.git = git

    def detect(self, old_commit: str, new_commit: str) -> set[str]:
        """
        Return the names of projects whose manifest changed.

        A failed diff is logged and yields an empty set.
        """
        if old_commit == new_commit:
            return set()

        try:
            files = self.git.diff_name_only(old_commit, new_commit)
        except GitError as e:
            logger.error("Failed to get changed files: %s", e)
            return set()

        logger.info("Detected %d changed file(s)", len(files))
        for file in files:
            logger.debug("Changed file: %s", file)

        changed = projects_from_paths(files)
        for name in sorted(changed):
            logger.info("Detected change in project: %s", name)
        return changed


__all__ = ["ChangeDetector", "projects_from_paths"]
