import subprocess
from pathlib import Path

import pytest

from profiler_src import direnv
from profiler_src.manager import ProfileManager


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch) -> Path:
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for name in (
        "SHELL_PROFILER_PROFILES_DIR",
        "SHELL_PROFILER_DEBUG",
        "WORKSPACE_PROFILE",
        "WORKSPACE_HOME",
        "EDITOR",
        "VISUAL",
    ):
        monkeypatch.delenv(name, raising=False)
    return home


@pytest.fixture
def profiles_dir(isolated_home) -> Path:
    return isolated_home / "workspaces" / "profiles"


@pytest.fixture
def no_direnv(monkeypatch):
    monkeypatch.setattr(direnv, "find_direnv", lambda: None)


@pytest.fixture
def fake_direnv(monkeypatch):
    """direnv on PATH; every external command succeeds with no output"""
    calls = []

    def fake_run(cmd, *args, **kwargs):
        calls.append(list(cmd))
        stdout = "Found RC allowed true\n" if list(cmd[-1:]) == ["status"] else ""
        return subprocess.CompletedProcess(cmd, 0, stdout=stdout, stderr="")

    monkeypatch.setattr(direnv, "find_direnv", lambda: "/usr/bin/direnv")
    monkeypatch.setattr(subprocess, "run", fake_run)
    return calls


@pytest.fixture
def manager(profiles_dir, no_direnv) -> ProfileManager:
    return ProfileManager(profiles_dir)
