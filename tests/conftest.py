"""
Pytest configuration and shared fixtures.

Provides fixtures for project trees on disk, real git repositories with a
bare remote, a fake git backend and a recording fake Arcane client.
"""

import logging
import subprocess
from pathlib import Path

import pytest

from composesync.core.arcane.exceptions import ArcaneAPIError
from composesync.core.arcane.models import RemoteProject
from composesync.core.config.models import SyncConfig
from composesync.core.git.backend import GitError

MUTATING_OPS = ("create", "update", "start", "redeploy")


# ==============================================================================
# Fakes
# ==============================================================================


class FakeGitBackend:
    """
    In-memory ``GitBackend``.

    ``heads`` is consumed by successive ``rev_parse("HEAD")`` calls (the last
    value repeats). ``fail`` maps method names to the error they raise.
    """

    def __init__(
        self,
        *,
        branch: str = "main",
        heads: list[str] | None = None,
        ahead: int = 0,
        behind: int = 0,
        dirty: bool = False,
        diff: list[str] | None = None,
        fail: dict[str, GitError] | None = None,
    ) -> None:
        self.branch = branch
        self.heads = list(heads or ["abc123"])
        self.ahead = ahead
        self.behind = behind
        self.dirty = dirty
        self.diff = list(diff or [])
        self.fail = dict(fail or {})
        self.calls: list[tuple] = []

    def _record(self, name: str, *args) -> None:
        self.calls.append((name, *args))
        if name in self.fail:
            raise self.fail[name]

    def call_names(self) -> list[str]:
        return [c[0] for c in self.calls]

    def fetch(self, remote, branch=None):
        self._record("fetch", remote, branch)

    def current_branch(self):
        self._record("current_branch")
        return self.branch

    def rev_parse(self, ref="HEAD"):
        self._record("rev_parse", ref)
        if len(self.heads) > 1:
            return self.heads.pop(0)
        return self.heads[0]

    def ahead_behind(self, upstream):
        self._record("ahead_behind", upstream)
        return self.ahead, self.behind

    def is_dirty(self):
        self._record("is_dirty")
        return self.dirty

    def reset_hard(self, ref):
        self._record("reset_hard", ref)

    def clean(self, excludes):
        self._record("clean", list(excludes))

    def diff_name_only(self, old, new):
        self._record("diff_name_only", old, new)
        return list(self.diff)


class FakeArcaneClient:
    """
    Recording stand-in for ``ArcaneClient``.

    Keeps an inventory that ``create_project`` appends to, so consecutive
    passes see their own creations. ``fail`` maps an operation name to the
    set of project IDs (or names, for create/find) it should fail for; the
    key ``"list"`` makes listing fail.
    """

    def __init__(self, projects: list[RemoteProject] | None = None) -> None:
        self.projects = list(projects or [])
        self.calls: list[tuple] = []
        self.fail: dict[str, set[str]] = {}
        self._next_id = 1

    def fail_on(self, op: str, *keys: str) -> "FakeArcaneClient":
        self.fail.setdefault(op, set()).update(keys or {"*"})
        return self

    def _check(self, op: str, key: str) -> None:
        keys = self.fail.get(op, set())
        if key in keys or "*" in keys:
            raise ArcaneAPIError(500, f"{op} failed for {key}")

    def mutating_calls(self) -> list[tuple]:
        return [c for c in self.calls if c[0] in MUTATING_OPS]

    def calls_for(self, op: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == op]

    def list_projects(self):
        self.calls.append(("list",))
        self._check("list", "*")
        return list(self.projects)

    def find_projects_by_name(self, name):
        self.calls.append(("find", name))
        self._check("find", name)
        return [p for p in self.projects if p.name == name]

    def create_project(self, name, compose_content, env_content=""):
        self.calls.append(("create", name, compose_content, env_content))
        self._check("create", name)
        project_id = f"id-{self._next_id}"
        self._next_id += 1
        self.projects.append(RemoteProject(id=project_id, name=name))
        return project_id

    def update_project(self, project_id, compose_content="", env_content=""):
        self.calls.append(("update", project_id, compose_content, env_content))
        self._check("update", project_id)

    def start_project(self, project_id):
        self.calls.append(("start", project_id))
        self._check("start", project_id)

    def redeploy_project(self, project_id):
        self.calls.append(("redeploy", project_id))
        self._check("redeploy", project_id)


@pytest.fixture
def fake_git():
    """Provide the FakeGitBackend factory."""
    return FakeGitBackend


@pytest.fixture
def fake_arcane():
    """Provide the FakeArcaneClient factory."""
    return FakeArcaneClient


@pytest.fixture
def restore_root_logging():
    """Undo root logger changes made by configure_logging during a test."""
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    yield root
    for handler in list(root.handlers):
        if handler not in saved_handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in saved_handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(saved_level)


# ==============================================================================
# Project Tree Fixtures
# ==============================================================================


def write_project(
    root: Path,
    name: str,
    manifest: str = "compose.yaml",
    content: str | None = None,
    env: str | None = None,
) -> Path:
    """Create ``root/name`` with a manifest and optional .env file."""
    project = root / name
    project.mkdir(parents=True, exist_ok=True)
    (project / manifest).write_text(content or f"services:\n  {name}:\n    image: {name}\n")
    if env is not None:
        (project / ".env").write_text(env)
    return project


@pytest.fixture
def make_project():
    """Provide write_project for building project trees."""
    return write_project


@pytest.fixture
def compose_root(tmp_path):
    """Provide an empty compose checkout root."""
    root = tmp_path / "compose"
    root.mkdir()
    return root


@pytest.fixture
def sync_config(compose_root, tmp_path):
    """Provide a SyncConfig pointing at ``compose_root``."""
    return SyncConfig(
        repo_path=compose_root,
        arcane_base_url="http://arcane.test",
        arcane_api_key="test-key",
        log_file=tmp_path / "logs" / "sync.log",
    )


# ==============================================================================
# Git Repository Fixtures
# ==============================================================================


def git(cwd: Path, *args: str) -> str:
    """Run git in ``cwd`` and return stripped stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


@pytest.fixture
def run_git():
    """Provide the git helper for inspecting repositories."""
    return git


def configure_identity(repo: Path) -> None:
    git(repo, "config", "user.email", "test@example.com")
    git(repo, "config", "user.name", "Test User")
    git(repo, "config", "commit.gpgsign", "false")


def commit_all(repo: Path, message: str) -> str:
    git(repo, "add", "-A")
    git(repo, "commit", "-m", message)
    return git(repo, "rev-parse", "HEAD")


class GitRemoteSetup:
    """A bare remote, an upstream working copy that pushes to it, and a checkout."""

    def __init__(self, remote: Path, upstream: Path, checkout: Path) -> None:
        self.remote = remote
        self.upstream = upstream
        self.checkout = checkout

    def push_upstream(self, message: str, files: dict[str, str]) -> str:
        """Commit ``files`` in the upstream copy and push them to the remote."""
        for rel, content in files.items():
            path = self.upstream / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        commit = commit_all(self.upstream, message)
        git(self.upstream, "push", "origin", "main")
        return commit

    def commit_locally(self, message: str, files: dict[str, str]) -> str:
        """Commit ``files`` in the checkout without pushing."""
        for rel, content in files.items():
            path = self.checkout / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        return commit_all(self.checkout, message)

    def remote_tip(self) -> str:
        return git(self.remote, "rev-parse", "main")


@pytest.fixture
def git_remote_setup(tmp_path):
    """
    Create a bare remote with one commit on ``main`` and two clones of it.

    The initial commit holds project ``a`` with a compose.yaml.
    """
    upstream = tmp_path / "upstream"
    upstream.mkdir()
    git(upstream, "init")
    configure_identity(upstream)
    write_project(upstream, "a")
    commit_all(upstream, "Initial commit")
    git(upstream, "branch", "-M", "main")

    remote = tmp_path / "remote.git"
    git(tmp_path, "init", "--bare", str(remote))
    git(upstream, "remote", "add", "origin", str(remote))
    git(upstream, "push", "origin", "main")
    git(remote, "symbolic-ref", "HEAD", "refs/heads/main")

    checkout = tmp_path / "checkout"
    git(tmp_path, "clone", str(remote), str(checkout))
    configure_identity(checkout)

    return GitRemoteSetup(remote=remote, upstream=upstream, checkout=checkout)
