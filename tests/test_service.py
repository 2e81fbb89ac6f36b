"""
Tests for the sync pass service.
"""

import pytest

from composesync.core.arcane.models import RemoteProject
from composesync.core.config.models import SyncConfig
from composesync.core.git import GitCLI, GitError
from composesync.core.projects import ProjectScanError
from composesync.core.reconcile import OutcomeStatus, PlannedAction
from composesync.core.service import SyncService


class TestRun:
    """Tests for SyncService.run with fakes."""

    def test_creates_missing_projects(
        self, sync_config, compose_root, fake_git, fake_arcane, make_project
    ):
        """An in-sync checkout with new projects creates and starts them."""
        make_project(compose_root, "a")
        make_project(compose_root, "b", manifest="compose.yml")
        client = fake_arcane()

        result = SyncService(sync_config, git=fake_git(), client=client).run()

        assert result.success
        assert result.disk_projects == ["a", "b"]
        assert result.changed_projects == []
        assert [c[0] for c in client.mutating_calls()] == ["create", "start", "create", "start"]

    def test_changed_manifest_is_redeployed(
        self, sync_config, compose_root, fake_git, fake_arcane, make_project
    ):
        """New remote commits touching a manifest trigger a sync of that project only."""
        make_project(compose_root, "a")
        make_project(compose_root, "b")
        git = fake_git(heads=["old", "new"], behind=1, diff=["a/compose.yaml"])
        client = fake_arcane(
            [RemoteProject(id="r-a", name="a"), RemoteProject(id="r-b", name="b")]
        )

        result = SyncService(sync_config, git=git, client=client).run()

        assert result.git.changed is True
        assert result.changed_projects == ["a"]
        assert client.mutating_calls() == [
            ("update", "r-a", (compose_root / "a" / "compose.yaml").read_text(), ""),
            ("redeploy", "r-a"),
        ]

    def test_no_diff_when_checkout_did_not_move(
        self, sync_config, compose_root, fake_git, fake_arcane, make_project
    ):
        """The change detector is skipped when the pass brought no commits."""
        make_project(compose_root, "a")
        git = fake_git(heads=["local", "remote"], ahead=1)

        SyncService(sync_config, git=git, client=fake_arcane()).run()

        assert "diff_name_only" not in git.call_names()

    def test_git_failure_is_fatal(self, sync_config, fake_git, fake_arcane):
        """A failed fetch aborts the pass before any remote call."""
        git = fake_git(fail={"fetch": GitError("unreachable")})
        client = fake_arcane()

        with pytest.raises(GitError):
            SyncService(sync_config, git=git, client=client).run()

        assert client.calls == []

    def test_unreadable_root_is_fatal(self, tmp_path, fake_git, fake_arcane):
        """A missing checkout root aborts the pass."""
        config = SyncConfig(
            repo_path=tmp_path / "missing",
            arcane_base_url="http://arcane.test",
            arcane_api_key="k",
        )

        with pytest.raises(ProjectScanError):
            SyncService(config, git=fake_git(), client=fake_arcane()).run()

    def test_listing_failure_continues_without_duplicates(
        self, sync_config, compose_root, caplog, fake_git, fake_arcane, make_project
    ):
        """A failed listing is advisory; the create guard prevents duplicates."""
        make_project(compose_root, "a")
        client = fake_arcane([RemoteProject(id="r-a", name="a")]).fail_on("list")

        result = SyncService(sync_config, git=fake_git(), client=client).run()

        assert result.remote_listing_failed is True
        assert client.calls_for("create") == []
        assert result.report.outcomes[0].status == OutcomeStatus.ADOPTED
        assert "Could not list Arcane projects" in caplog.text


class TestInspect:
    """Tests for the read-only status snapshot."""

    def test_inspect_mutates_nothing(
        self, sync_config, compose_root, fake_git, fake_arcane, make_project
    ):
        """Status fetches but never resets, cleans, or calls mutating endpoints."""
        make_project(compose_root, "a")
        make_project(compose_root, "b")
        git = fake_git(ahead=1, behind=2, dirty=True)
        client = fake_arcane(
            [RemoteProject(id="1", name="a"), RemoteProject(id="2", name="a")]
        )

        snapshot = SyncService(sync_config, git=git, client=client).inspect()

        assert "reset_hard" not in git.call_names()
        assert "clean" not in git.call_names()
        assert client.mutating_calls() == []
        assert snapshot.status.ahead == 1 and snapshot.status.behind == 2
        assert snapshot.status.dirty is True
        assert [(p.name, p.action, p.remote_ids) for p in snapshot.projects] == [
            ("a", PlannedAction.NOOP, ["1", "2"]),
            ("b", PlannedAction.CREATE, []),
        ]

    def test_inspect_reports_listing_error(
        self, sync_config, compose_root, fake_git, fake_arcane, make_project
    ):
        """A failed listing is surfaced instead of raised."""
        make_project(compose_root, "a")
        client = fake_arcane().fail_on("list")

        snapshot = SyncService(sync_config, git=fake_git(), client=client).inspect()

        assert snapshot.remote_error
        assert snapshot.projects[0].action == PlannedAction.CREATE


class TestEndToEnd:
    """Tests for consecutive passes over a real repository."""

    def test_passes_converge_and_stay_idempotent(self, git_remote_setup, tmp_path, fake_arcane):
        """Create on the first pass, sync on change, nothing when quiet."""
        setup = git_remote_setup
        config = SyncConfig(
            repo_path=setup.checkout,
            arcane_base_url="http://arcane.test",
            arcane_api_key="k",
            log_file=tmp_path / "sync.log",
        )
        client = fake_arcane()

        def run_pass():
            client.calls.clear()
            return SyncService(config, git=GitCLI(setup.checkout), client=client).run()

        first = run_pass()
        assert [c[:2] for c in client.mutating_calls()] == [("create", "a"), ("start", "id-1")]
        assert first.git.changed is False

        setup.push_upstream(
            "Change a, add b",
            {"a/compose.yaml": "services:\n  a2: {}\n", "b/compose.yml": "services: {}\n"},
        )
        second = run_pass()
        assert second.git.changed is True
        assert second.changed_projects == ["a", "b"]
        ops = [c[:2] for c in client.mutating_calls()]
        assert ("create", "b") in ops
        assert ("update", "id-1") in ops
        assert ("redeploy", "id-1") in ops

        third = run_pass()
        assert client.mutating_calls() == []
        assert third.report.summary() == "0 created, 0 synced, 2 unchanged"
