"""
Disk project model and manifest naming rules.
"""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, Field

# Priority order: the first file found in a project directory is the manifest.
MANIFEST_FILENAMES: tuple[str, ...] = (
    "compose.yaml",
    "compose.yml",
    "docker-compose.yaml",
    "docker-compose.yml",
)

ENV_FILENAME = ".env"

_PROJECT_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")


def is_manifest_filename(filename: str) -> bool:
    """Whether ``filename`` (a basename) is a recognized manifest name."""
    return filename in MANIFEST_FILENAMES


def is_valid_project_name(name: str) -> bool:
    """
    Whether ``name`` can be used as an Arcane project name.

    Example:
        >>> is_valid_project_name("home-assistant")
        True
        >>> is_valid_project_name("my project")
        False
    """
    return bool(_PROJECT_NAME_RE.match(name))


def find_manifest(project_dir: Path) -> Path | None:
    """Return the highest-priority manifest inside ``project_dir``, if any."""
    for filename in MANIFEST_FILENAMES:
        candidate = project_dir / filename
        if candidate.is_file():
            return candidate
    return None


class DiskProject(BaseModel):
    """
    A project directory in the compose checkout.

    Content is read lazily so a project that needs no remote action never
    touches its files.
    """

    name: str = Field(description="Directory name, used as the Arcane project name")
    path: Path = Field(description="Absolute path of the project directory")
    manifest_path: Path = Field(description="Manifest chosen by priority order")

    @property
    def env_path(self) -> Path:
        return self.path / ENV_FILENAME

    def read_manifest(self) -> str:
        """
        Read the manifest content.

        Raises:
            OSError: If the file cannot be read
        """
        return self.manifest_path.read_text(encoding="utf-8")

    def read_env(self) -> str:
        """Read the optional .env file; a missing or unreadable file yields ""."""
        try:
            return self.env_path.read_text(encoding="utf-8")
        except OSError:
            return ""
