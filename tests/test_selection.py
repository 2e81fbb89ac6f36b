"""
Tests for timestamp parsing and duplicate selection.
"""

from datetime import datetime, timedelta, timezone

import pytest

from composesync.core.arcane.models import RemoteProject
from composesync.core.reconcile import (
    effective_timestamp,
    parse_timestamp,
    select_preferred_project,
)


class TestParseTimestamp:
    """Tests for parse_timestamp."""

    def test_zulu_with_nanoseconds(self):
        """Fractions beyond microseconds are truncated."""
        parsed = parse_timestamp("2025-03-01T10:00:00.123456789Z")
        assert parsed == datetime(2025, 3, 1, 10, 0, 0, 123456, tzinfo=timezone.utc)

    def test_numeric_offset(self):
        """Numeric offsets are honored."""
        parsed = parse_timestamp("2025-03-01T12:00:00+02:00")
        assert parsed == datetime(2025, 3, 1, 10, 0, 0, tzinfo=timezone.utc)

    def test_naive_is_utc(self):
        """Values without an offset are treated as UTC."""
        assert parse_timestamp("2025-03-01T10:00:00").tzinfo == timezone.utc

    @pytest.mark.parametrize("value", ["", "   ", None, "yesterday", "2025-13-45T00:00:00Z"])
    def test_unparsable_is_none(self, value):
        assert parse_timestamp(value) is None


class TestEffectiveTimestamp:
    """Tests for effective_timestamp."""

    def test_prefers_updated_at(self):
        project = RemoteProject(
            id="1", name="x", updated_at="2025-02-01T00:00:00Z", created_at="2025-01-01T00:00:00Z"
        )
        assert effective_timestamp(project).month == 2

    def test_falls_back_to_created_at(self):
        project = RemoteProject(
            id="1", name="x", updated_at="garbage", created_at="2025-01-01T00:00:00Z"
        )
        assert effective_timestamp(project).month == 1

    def test_none_when_neither_parses(self):
        assert effective_timestamp(RemoteProject(id="1", name="x")) is None


class TestSelectPreferredProject:
    """Tests for select_preferred_project."""

    def stamp(self, minutes: int) -> str:
        base = datetime(2025, 1, 1, tzinfo=timezone.utc)
        return (base + timedelta(minutes=minutes)).isoformat()

    def test_empty_is_none(self):
        assert select_preferred_project([]) is None

    def test_single_candidate(self):
        project = RemoteProject(id="1", name="x")
        assert select_preferred_project([project]) is project

    def test_most_recent_wins(self):
        """The record with the latest effective timestamp is chosen."""
        older = RemoteProject(id="old", name="x", updated_at=self.stamp(1))
        newer = RemoteProject(id="new", name="x", updated_at=self.stamp(2))

        assert select_preferred_project([older, newer]).id == "new"
        assert select_preferred_project([newer, older]).id == "new"

    def test_ties_keep_listing_order(self):
        """Equal timestamps keep the first record."""
        first = RemoteProject(id="first", name="x", updated_at=self.stamp(1))
        second = RemoteProject(id="second", name="x", updated_at=self.stamp(1))

        assert select_preferred_project([first, second]).id == "first"

    def test_timestamped_beats_untimestamped(self):
        """A record with a timestamp replaces a first record without one."""
        bare = RemoteProject(id="bare", name="x")
        dated = RemoteProject(id="dated", name="x", created_at=self.stamp(0))

        assert select_preferred_project([bare, dated]).id == "dated"

    def test_untimestamped_never_wins(self):
        """A record without a timestamp never replaces one that has one."""
        dated = RemoteProject(id="dated", name="x", created_at=self.stamp(0))
        bare = RemoteProject(id="bare", name="x")

        assert select_preferred_project([dated, bare]).id == "dated"

    def test_all_unparsable_keeps_first(self):
        """Without any timestamps the first listed record is chosen."""
        a = RemoteProject(id="a", name="x", updated_at="nope")
        b = RemoteProject(id="b", name="x")

        assert select_preferred_project([a, b]).id == "a"
