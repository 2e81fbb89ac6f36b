"""Utility modules for compose-sync."""

from .logging import LOG_FORMAT, configure_logging

__all__ = ["LOG_FORMAT", "configure_logging"]
