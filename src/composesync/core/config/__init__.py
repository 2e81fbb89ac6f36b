"""
Configuration models and loading.

Settings come from environment variables, optionally seeded from an env
file: env file < process environment.
"""

from .env import load_env_files, read_env_file
from .loader import REQUIRED_VARS, ConfigError, load_config
from .models import GitAuthConfig, GitAuthMethod, SyncConfig

__all__ = [
    # Models
    "GitAuthConfig",
    "GitAuthMethod",
    "SyncConfig",
    # Loader functions
    "ConfigError",
    "REQUIRED_VARS",
    "load_config",
    "load_env_files",
    "read_env_file",
]
