"""
Disk inventory scanning.

Every immediate subdirectory of the checkout that holds a compose manifest
is a project. Hidden directories and the tool's own installation directory
are never projects.
"""

from __future__ import annotations

import logging
from pathlib import Path

from composesync.core.projects.models import DiskProject, find_manifest, is_valid_project_name

logger = logging.getLogger(__name__)

HIDDEN_PREFIX = "."
RESERVED_NAMES = frozenset({"syncTool"})


class ProjectScanError(Exception):
    """Raised when the project root cannot be listed."""

    def __init__(self, message: str, root: Path | None = None) -> None:
        super().__init__(message)
        self.root = root


def is_candidate_dir(path: Path) -> bool:
    """Whether a directory entry may hold a project."""
    name = path.name
    if name.startswith(HIDDEN_PREFIX) or name in RESERVED_NAMES:
        return False
    return path.is_dir()


def scan_projects(root: Path) -> list[DiskProject]:
    """
    Enumerate projects under ``root`` in name order.

    Args:
        root: Compose checkout root

    Returns:
        One DiskProject per directory containing a manifest

    Raises:
        ProjectScanError: If ``root`` cannot be read

    Example:
        >>> [p.name for p in scan_projects(Path("/srv/compose"))]
        ['gitea', 'immich', 'traefik']
    """
    try:
        entries = sorted(root.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise ProjectScanError(f"Failed to read projects directory {root}: {e}", root=root) from e

    projects: list[DiskProject] = []
    for entry in entries:
        if not is_candidate_dir(entry):
            continue

        manifest = find_manifest(entry)
        if manifest is None:
            logger.debug("Skipping %s: no compose file", entry.name)
            continue

        if not is_valid_project_name(entry.name):
            logger.warning("Skipping %s: not a valid project name", entry.name)
            continue

        projects.append(DiskProject(name=entry.name, path=entry, manifest_path=manifest))

    return projects


__all__ = ["ProjectScanError", "scan_projects", "is_candidate_dir", "RESERVED_NAMES"]
