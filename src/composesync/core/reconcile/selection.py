"""
Picking one remote project among duplicates.

Arcane does not enforce unique project names. When several remote records
share a disk project's name, the most recently touched one is the target:
``updatedAt`` first, then ``createdAt``. Records without a parsable
timestamp never beat one that has one, and ties keep listing order.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import datetime, timezone

from composesync.core.arcane.models import RemoteProject

_EXTRA_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


def parse_timestamp(value: str | None) -> datetime | None:
    """
    Parse an Arcane ISO-8601 timestamp.

    Accepts fractional seconds of any precision and a ``Z`` or numeric
    offset. Naive values are taken as UTC.

    Returns:
        An aware datetime, or None if the value is empty or unparsable

    Example:
        >>> parse_timestamp("2025-03-01T10:00:00.123456789Z")
        datetime.datetime(2025, 3, 1, 10, 0, 0, 123456, tzinfo=datetime.timezone.utc)
        >>> parse_timestamp("yesterday") is None
        True
    """
    if not value or not value.strip():
        return None

    text = value.strip()
    if text[-1] in "zZ":
        text = text[:-1] + "+00:00"
    # datetime only holds microseconds
    text = _EXTRA_FRACTION_RE.sub(r"\1", text)

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def effective_timestamp(project: RemoteProject) -> datetime | None:
    """``updatedAt`` if parsable, else ``createdAt`` if parsable, else None."""
    return parse_timestamp(project.updated_at) or parse_timestamp(project.created_at)


def select_preferred_project(candidates: Iterable[RemoteProject]) -> RemoteProject | None:
    """
    Choose the record an operation should target.

    Args:
        candidates: Remote records sharing one name, in listing order

    Returns:
        The most recently updated record, or None if there are no candidates
    """
    best: RemoteProject | None = None
    best_time: datetime | None = None

    for candidate in candidates:
        if best is None:
            best, best_time = candidate, effective_timestamp(candidate)
            continue
        t = effective_timestamp(candidate)
        if t is not None and (best_time is None or t > best_time):
            best, best_time = candidate, t

    return best


__all__ = ["parse_timestamp", "effective_timestamp", "select_preferred_project"]
