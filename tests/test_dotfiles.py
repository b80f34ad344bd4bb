import subprocess

import pytest

from profiler_src import dotfiles
from profiler_src.dotfiles import (
    edit_dotfile,
    find_dotfiles,
    format_file_size,
    resolve_editor,
)
from profiler_src.errors import EditorError, ProfilerError


@pytest.mark.parametrize(
    ("size", "expected"),
    [
        (0, "0 B"),
        (512, "512 B"),
        (1023, "1023 B"),
        (1024, "1.0 KB"),
        (1536, "1.5 KB"),
        (1024 * 1024, "1.0 MB"),
        (5 * 1024**3, "5.0 GB"),
    ],
)
def test_format_file_size(size: int, expected: str):
    assert format_file_size(size) == expected


def test_find_dotfiles_known_first_then_extras(tmp_path):
    (tmp_path / ".ssh").mkdir()
    (tmp_path / ".git").mkdir()
    for name in (".zshrc", ".gitconfig", ".envrc", ".ssh/config", "README.md"):
        (tmp_path / name).write_text("x", encoding="utf-8")

    found = find_dotfiles(tmp_path)

    assert [f.relative_path for f in found] == [
        ".envrc",
        ".gitconfig",
        ".ssh/config",
        ".zshrc",
    ]
    assert found[0].description.startswith("direnv configuration")
    assert found[0].size == 1
    assert found[-1].display == ".zshrc"


def test_resolve_editor_precedence(monkeypatch):
    env = {"EDITOR": "nano", "VISUAL": "code -w"}
    assert resolve_editor("emacs", environ=env) == "emacs"
    assert resolve_editor(None, environ=env) == "nano"
    assert resolve_editor(None, environ={"VISUAL": "code -w"}) == "code -w"


def test_resolve_editor_falls_back_to_installed(monkeypatch):
    monkeypatch.setattr(
        dotfiles.shutil, "which", lambda name: "/bin/nano" if name == "nano" else None
    )
    assert resolve_editor(None, environ={}) == "nano"


def test_resolve_editor_none_available(monkeypatch):
    monkeypatch.setattr(dotfiles.shutil, "which", lambda name: None)
    with pytest.raises(EditorError, match="no editor found"):
        resolve_editor(None, environ={})


def test_edit_dotfile_runs_editor(tmp_path, monkeypatch):
    calls = []

    def fake_run(cmd, *args, **kwargs):
        calls.append(cmd)
        return subprocess.CompletedProcess(cmd, 0)

    monkeypatch.setattr(subprocess, "run", fake_run)
    (tmp_path / ".envrc").write_text("", encoding="utf-8")

    target = edit_dotfile(tmp_path, ".envrc", editor="code -w")

    assert target == tmp_path / ".envrc"
    assert calls == [["code", "-w", str(tmp_path / ".envrc")]]


def test_edit_dotfile_editor_failure(tmp_path, monkeypatch):
    monkeypatch.setattr(
        subprocess, "run", lambda cmd, *a, **k: subprocess.CompletedProcess(cmd, 2)
    )
    with pytest.raises(EditorError):
        edit_dotfile(tmp_path, ".envrc", editor="vim")


@pytest.mark.parametrize(
    "file_name", ["../outside", "../../etc/passwd", ".", "/etc/hosts"]
)
def test_edit_dotfile_rejects_paths_outside_profile(tmp_path, monkeypatch, file_name):
    profile_dir = tmp_path / "work"
    profile_dir.mkdir()
    monkeypatch.setattr(
        subprocess, "run", lambda cmd, *a, **k: pytest.fail("editor started")
    )

    with pytest.raises(ProfilerError, match="not inside profile directory"):
        edit_dotfile(profile_dir, file_name, editor="vim")


def test_edit_dotfile_accepts_nested_path(tmp_path, monkeypatch):
    monkeypatch.setattr(
        subprocess, "run", lambda cmd, *a, **k: subprocess.CompletedProcess(cmd, 0)
    )
    target = edit_dotfile(tmp_path, ".ssh/../.ssh/config", editor="vim")
    assert target == tmp_path / ".ssh/../.ssh/config"
