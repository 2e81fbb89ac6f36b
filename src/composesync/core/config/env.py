"""Environment file loading.

The installer writes settings to an env file (typically
``/etc/sync-tool/config.env``) which the systemd unit also reads. When run by
hand, ``--env-file`` loads the same file.

Variables already present in the process environment always win over the
file, so a value exported in the shell can override one setting for a
single run.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, MutableMapping

from dotenv import dotenv_values


def read_env_file(path: Path) -> dict[str, str]:
    """Parse an env file, dropping keys without a value."""
    if not path.exists():
        return {}
    values = dotenv_values(path)
    out: dict[str, str] = {}
    for k, v in values.items():
        if k is None or v is None:
            continue
        out[str(k)] = str(v)
    return out


def load_env_files(
    paths: Iterable[Path],
    *,
    environ: MutableMapping[str, str] | None = None,
) -> list[str]:
    """Load env files into ``environ`` without overriding existing keys.

    Later files override keys set by earlier files, but nothing overrides a
    key that was present before loading started.

    Args:
        paths: Env files, lowest priority first
        environ: Target mapping (defaults to ``os.environ``)

    Returns:
        Names of the keys that were set
    """
    if environ is None:
        environ = os.environ

    preexisting = set(environ)
    loaded: list[str] = []
    for p in paths:
        for k, v in read_env_file(Path(p)).items():
            if k in preexisting:
                continue
            environ[k] = v
            if k not in loaded:
                loaded.append(k)
    return loaded
