"""
Arcane API integration.

Provides the HTTP client used to read and converge the remote project
inventory of one Arcane environment.
"""

from composesync.core.arcane.client import ArcaneClient
from composesync.core.arcane.exceptions import (
    ArcaneAPIError,
    ArcaneError,
    ArcaneNetworkError,
    ArcaneParseError,
)
from composesync.core.arcane.models import Pagination, ProjectPage, RemoteProject

__all__ = [
    "ArcaneClient",
    "ArcaneError",
    "ArcaneAPIError",
    "ArcaneNetworkError",
    "ArcaneParseError",
    "Pagination",
    "ProjectPage",
    "RemoteProject",
]
