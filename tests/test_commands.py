import subprocess

import pytest
from typer.testing import CliRunner

from profiler_src import sync
from profiler_src.commands import app
from profiler_src.config import load_config

runner = CliRunner()


@pytest.mark.parametrize("args", [["help"], ["--help"], ["-h"], []])
def test_help_works_without_direnv(no_direnv, args):
    result = runner.invoke(app, args)
    assert result.exit_code == 0
    assert result.output.startswith("Workspace Profile Manager")
    assert "Usage: shell-profiler <command> [arguments]" in result.output


@pytest.mark.parametrize("args", [["list"], ["create", "work"], ["sync", "status"]])
def test_commands_require_direnv(no_direnv, args):
    result = runner.invoke(app, args)
    assert result.exit_code == 1
    assert "direnv is required but not found in PATH" in result.output
    assert "https://direnv.net/" in result.output


def test_status_without_direnv_prints_instructions(no_direnv):
    result = runner.invoke(app, ["status"])
    assert result.exit_code == 0
    assert "direnv is not installed" in result.output


def test_init_writes_config(no_direnv, isolated_home, tmp_path):
    target = tmp_path / "my-profiles"

    result = runner.invoke(app, ["init", "--profiles-dir", str(target)])

    assert result.exit_code == 0, result.output
    assert target.is_dir()
    assert load_config().profiles_dir == target
    assert (isolated_home / ".profile-manager").is_file()


def test_init_existing_config_cancelled(no_direnv, isolated_home):
    (isolated_home / ".profile-manager").write_text("profiles_dir=/x\n")

    result = runner.invoke(app, ["init"], input="n\n")

    assert result.exit_code == 0
    assert "Initialization cancelled" in result.output
    assert (isolated_home / ".profile-manager").read_text() == "profiles_dir=/x\n"


def test_create_and_list(fake_direnv, profiles_dir):
    result = runner.invoke(app, ["create", "work", "--template", "work"])
    assert result.exit_code == 0, result.output
    assert (profiles_dir / "work" / ".envrc").is_file()

    result = runner.invoke(app, ["list", "--verbose"])
    assert result.exit_code == 0, result.output
    assert "Total profiles: 1" in result.output


def test_create_alias(fake_direnv, profiles_dir):
    result = runner.invoke(app, ["new", "side", "--no-interactive"])
    assert result.exit_code == 0, result.output
    assert (profiles_dir / "side").is_dir()


def test_create_twice_fails(fake_direnv):
    runner.invoke(app, ["create", "work", "--no-interactive"])
    result = runner.invoke(app, ["create", "work", "--no-interactive"])
    assert result.exit_code == 1
    assert "already exists" in result.output


@pytest.mark.parametrize(
    ("args", "message"),
    [
        (["create", "bad name", "--no-interactive"], "profile name can only contain"),
        (["create", "ok", "--template", "enterprise"], "invalid template: enterprise"),
        (["restore", "ok", "--backup-date", "soon"], "invalid backup date: soon"),
    ],
)
def test_invalid_input_is_reported(fake_direnv, args, message):
    result = runner.invoke(app, args)
    assert result.exit_code == 1
    assert "Error:" in result.output
    assert message in result.output


def test_list_without_profiles(fake_direnv):
    result = runner.invoke(app, ["ls", "--no-interactive"])
    assert result.exit_code == 0
    assert "No profiles directory found" in result.output


def test_delete_force(fake_direnv, profiles_dir):
    runner.invoke(app, ["create", "work", "--no-interactive"])

    result = runner.invoke(app, ["rm", "work", "--force"])

    assert result.exit_code == 0, result.output
    assert not (profiles_dir / "work").exists()
    assert "No profiles remaining" in result.output


def test_delete_missing_profile(fake_direnv, profiles_dir):
    profiles_dir.mkdir(parents=True)
    result = runner.invoke(app, ["delete", "ghost", "--force"])
    assert result.exit_code == 1
    assert "profile 'ghost' does not exist" in result.output


def test_update_dry_run(fake_direnv, profiles_dir):
    runner.invoke(app, ["create", "work", "--no-interactive"])
    result = runner.invoke(app, ["update", "work", "--dry-run"])
    assert result.exit_code == 0, result.output
    assert "Profile is already up to date" in result.output


def test_info_without_active_profile(fake_direnv):
    result = runner.invoke(app, ["current"])
    assert result.exit_code == 0
    assert "No workspace profile active" in result.output


def test_dotfiles_list(fake_direnv):
    runner.invoke(app, ["create", "work", "--no-interactive"])
    result = runner.invoke(app, ["dotfiles", "ls", "work"])
    assert result.exit_code == 0, result.output
    assert ".envrc" in result.output


def test_unknown_command(fake_direnv):
    result = runner.invoke(app, ["frobnicate"])
    assert result.exit_code != 0


def test_init_with_bracketed_profiles_dir(no_direnv, tmp_path):
    target = tmp_path / "x[/y]"

    result = runner.invoke(app, ["init", "--profiles-dir", str(target)])

    assert result.exit_code == 0, result.output
    assert target.is_dir()
    assert load_config().profiles_dir == target


@pytest.mark.parametrize(
    "args",
    [
        ["list", "--verbose", "--config"],
        ["select", "work", "--allow-direnv"],
        ["update", "work", "--dry-run"],
        ["delete", "work", "--dry-run"],
        ["dotfiles", "edit", "work", "--file", ".envrc", "--editor", "vim"],
    ],
)
def test_bracketed_profiles_dir(fake_direnv, tmp_path, monkeypatch, args):
    profiles_dir = tmp_path / "p[/b]"
    monkeypatch.setenv("SHELL_PROFILER_PROFILES_DIR", str(profiles_dir))

    result = runner.invoke(app, ["create", "work", "--no-interactive"])
    assert result.exit_code == 0, result.output
    assert (profiles_dir / "work" / ".envrc").is_file()

    result = runner.invoke(app, args)
    assert result.exit_code == 0, result.output


def test_dotfiles_edit_passes_editor(fake_direnv, profiles_dir):
    runner.invoke(app, ["create", "work", "--no-interactive"])

    result = runner.invoke(
        app, ["dotfiles", "edit", "work", "--file", ".envrc", "--editor", "nano -w"]
    )

    assert result.exit_code == 0, result.output
    assert ["nano", "-w", str(profiles_dir / "work" / ".envrc")] in fake_direnv


def test_dotfiles_edit_rejects_path_outside_profile(fake_direnv):
    runner.invoke(app, ["create", "work", "--no-interactive"])

    result = runner.invoke(
        app, ["dotfiles", "edit", "work", "../../outside", "--editor", "vim"]
    )

    assert result.exit_code == 1
    assert "is not inside" in result.output
    assert not any(call[0] == "vim" for call in fake_direnv)


def test_sync_remote_and_force_push(fake_direnv, profiles_dir, monkeypatch):
    runner.invoke(app, ["create", "work", "--no-interactive"])
    (profiles_dir / "work" / ".git").mkdir()
    remote = "git@example.com:me/work.git"
    git_calls = []
    origin = []

    def fake_git(cmd, *args, **kwargs):
        git_args = list(cmd[1:])
        git_calls.append(git_args)
        if git_args[:3] == ["remote", "add", "origin"]:
            origin.append(git_args[3])
        stdout = ""
        if git_args == ["remote", "get-url", "origin"] and origin:
            stdout = f"{origin[-1]}\n"
        return subprocess.CompletedProcess(cmd, 0, stdout=stdout, stderr="")

    monkeypatch.setattr(sync.shutil, "which", lambda name: f"/usr/bin/{name}")
    monkeypatch.setattr(subprocess, "run", fake_git)

    result = runner.invoke(app, ["sync", "remote", "work", "--remote", remote])
    assert result.exit_code == 0, result.output
    assert ["remote", "add", "origin", remote] in git_calls

    result = runner.invoke(app, ["sync", "push", "work", "--force"])
    assert result.exit_code == 0, result.output
    assert ["push", "origin", "main", "--force"] in git_calls
