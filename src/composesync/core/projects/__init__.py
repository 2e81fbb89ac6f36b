"""
Local project inventory.

Discovers project directories in the compose checkout and works out which
of them changed between two revisions.
"""

from composesync.core.projects.changes import ChangeDetector, projects_from_paths
from composesync.core.projects.models import (
    MANIFEST_FILENAMES,
    DiskProject,
    find_manifest,
    is_manifest_filename,
    is_valid_project_name,
)
from composesync.core.projects.scanner import ProjectScanError, scan_projects

__all__ = [
    "ChangeDetector",
    "DiskProject",
    "MANIFEST_FILENAMES",
    "ProjectScanError",
    "find_manifest",
    "is_manifest_filename",
    "is_valid_project_name",
    "projects_from_paths",
    "scan_projects",
]
