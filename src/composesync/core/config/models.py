"""
Configuration data models for compose-sync.

These models describe the settings read from the process environment
(optionally seeded from an env file), with validation via Pydantic.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)


class GitAuthMethod(str, Enum):
    """How git authenticates to the remote."""

    SSH = "ssh"
    HTTPS = "https"


class GitAuthConfig(BaseModel):
    """
    Credentials for the git remote.

    Unknown methods fall back to SSH with a warning.
    """
    model_config = ConfigDict(frozen=True)

    method: GitAuthMethod = Field(
        default=GitAuthMethod.SSH,
        description="Authentication method: ssh or https"
    )
    ssh_key_path: Optional[Path] = Field(
        default=None,
        description="Private key used for SSH remotes"
    )
    https_token: Optional[str] = Field(
        default=None,
        repr=False,
        description="Personal access token used for HTTPS remotes"
    )

    @field_validator("method", mode="before")
    @classmethod
    def normalize_method(cls, v: object) -> object:
        if isinstance(v, str):
            lowered = v.strip().lower()
            if lowered not in {m.value for m in GitAuthMethod}:
                logger.warning("Unknown git auth method: %s, defaulting to SSH", v)
                return GitAuthMethod.SSH
            return lowered
        return v


class SyncConfig(BaseModel):
    """
    Complete configuration for one reconciliation pass.

    Example:
        >>> config = SyncConfig(
        ...     repo_path=Path("/srv/compose"),
        ...     arcane_base_url="http://localhost:3552/",
        ...     arcane_api_key="secret",
        ... )
        >>> config.arcane_base_url
        'http://localhost:3552'
    """
    model_config = ConfigDict(frozen=True)

    repo_path: Path = Field(description="Local checkout holding one directory per project")
    arcane_base_url: str = Field(description="Arcane base URL, e.g. http://localhost:3552")
    arcane_api_key: str = Field(repr=False, description="Arcane API key")
    arcane_env_id: str = Field(default="0", description="Arcane environment ID")
    request_timeout: float = Field(
        default=60.0,
        gt=0,
        description="Timeout in seconds for each Arcane request"
    )
    log_file: Path = Field(
        default=Path("/var/log/sync-tool.log"),
        description="File that receives a copy of every log line"
    )
    git_remote: str = Field(default="origin", description="Remote treated as source of truth")
    git_auth: GitAuthConfig = Field(default_factory=GitAuthConfig)
    clean_excludes: list[str] = Field(
        default_factory=lambda: [".env.global", "*.env.local", ".env"],
        description="Untracked paths preserved when cleaning the checkout"
    )

    @field_validator("arcane_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")
