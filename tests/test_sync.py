import subprocess

import pytest

from profiler_src import sync
from profiler_src.errors import NoRemoteError, SyncError
from profiler_src.sync import ProfileRepository, status_all


class FakeGit:
    """Records git invocations and answers from a table"""

    def __init__(self, responses=None):
        self.calls = []
        self.responses = responses or {}

    def __call__(self, cmd, *args, **kwargs):
        git_args = tuple(cmd[1:])
        self.calls.append(git_args)
        returncode, stdout = self.responses.get(git_args, (0, ""))
        return subprocess.CompletedProcess(cmd, returncode, stdout=stdout, stderr="")


ORIGIN = ("remote", "get-url", "origin")


@pytest.fixture
def repo_dir(tmp_path):
    profile_dir = tmp_path / "work"
    (profile_dir / ".git").mkdir(parents=True)
    return profile_dir


def _install(monkeypatch, responses=None) -> FakeGit:
    fake = FakeGit(responses)
    monkeypatch.setattr(sync.shutil, "which", lambda name: f"/usr/bin/{name}")
    monkeypatch.setattr(subprocess, "run", fake)
    return fake


def test_init_creates_repository_with_remote(tmp_path, monkeypatch):
    fake = _install(monkeypatch)
    repository = ProfileRepository(tmp_path, "work")

    assert repository.init("git@example.com:me/work.git")

    assert fake.calls == [
        ("init",),
        ("add", "."),
        ("commit", "-m", "Initial commit: profile setup"),
        ("remote", "add", "origin", "git@example.com:me/work.git"),
    ]


def test_init_tolerates_failed_commit(tmp_path, monkeypatch):
    _install(
        monkeypatch,
        {("commit", "-m", "Initial commit: profile setup"): (1, "")},
    )
    assert ProfileRepository(tmp_path, "work").init()


def test_init_existing_repository_is_noop(repo_dir, monkeypatch):
    fake = _install(monkeypatch)
    assert not ProfileRepository(repo_dir, "work").init()
    assert fake.calls == []


def test_pull_falls_back_to_master(repo_dir, monkeypatch):
    fake = _install(
        monkeypatch,
        {ORIGIN: (0, "git@example.com:me/work.git\n"), ("pull", "origin", "main"): (1, "")},
    )

    ProfileRepository(repo_dir, "work").pull()

    assert fake.calls[-2:] == [("pull", "origin", "main"), ("pull", "origin", "master")]


def test_pull_without_remote(repo_dir, monkeypatch):
    _install(monkeypatch, {ORIGIN: (2, "")})
    with pytest.raises(NoRemoteError) as exc_info:
        ProfileRepository(repo_dir, "work").pull()
    assert "shell-profiler sync remote work" in exc_info.value.suggestion


def test_push_commits_pending_changes(repo_dir, monkeypatch):
    fake = _install(
        monkeypatch,
        {
            ORIGIN: (0, "git@example.com:me/work.git\n"),
            ("status", "--porcelain"): (0, " M .envrc\n"),
            ("branch", "--show-current"): (0, "feature\n"),
        },
    )

    ProfileRepository(repo_dir, "work").push(force=True)

    assert ("commit", "-m", "Update profile configuration") in fake.calls
    assert fake.calls[-1] == ("push", "origin", "feature", "--force")


def test_push_clean_tree_defaults_to_main(repo_dir, monkeypatch):
    fake = _install(
        monkeypatch,
        {ORIGIN: (0, "url\n"), ("branch", "--show-current"): (0, "")},
    )

    ProfileRepository(repo_dir, "work").push()

    assert ("add", ".") not in fake.calls
    assert fake.calls[-1] == ("push", "origin", "main")


def test_sync_skips_steps_without_remote(repo_dir, monkeypatch):
    fake = _install(monkeypatch, {ORIGIN: (2, "")})

    ProfileRepository(repo_dir, "work").sync()

    assert not any(call[0] in ("pull", "push") for call in fake.calls)


def test_operations_require_repository(tmp_path, monkeypatch):
    _install(monkeypatch)
    with pytest.raises(SyncError, match="not a git repository"):
        ProfileRepository(tmp_path, "work").push()


@pytest.mark.parametrize(
    ("origin", "expected"),
    [
        ((2, ""), ("remote", "add", "origin", "new-url")),
        ((0, "old-url\n"), ("remote", "set-url", "origin", "new-url")),
    ],
)
def test_set_remote(repo_dir, monkeypatch, origin, expected):
    fake = _install(monkeypatch, {ORIGIN: origin})
    ProfileRepository(repo_dir, "work").set_remote("new-url")
    assert fake.calls[-1] == expected


def test_status_all_lists_repositories(tmp_path, monkeypatch, capsys):
    (tmp_path / "alpha" / ".git").mkdir(parents=True)
    (tmp_path / "beta").mkdir()
    _install(monkeypatch, {ORIGIN: (2, "")})

    assert status_all(tmp_path, ["alpha", "beta"]) == 1

    out = capsys.readouterr().out
    assert "alpha" in out
    assert "beta" not in out
    assert "(no changes)" in out
    assert "Remote: (none)" in out
