from pathlib import Path

import pytest

from profiler_src.config import (
    AppConfig,
    expand_path,
    get_config_path,
    load_config,
    parse_config_text,
    save_config,
)
from profiler_src.errors import ConfigError


def test_defaults_without_config_file(isolated_home):
    config = load_config()
    assert config.profiles_dir == isolated_home / "workspaces" / "profiles"


def test_config_path_is_in_home(isolated_home):
    assert get_config_path() == isolated_home / ".profile-manager"


def test_parse_config_text_skips_comments_and_strips_quotes():
    text = """
# comment
profiles_dir = "/srv/profiles"

not a pair
other='x'
"""
    assert parse_config_text(text) == {"profiles_dir": "/srv/profiles", "other": "x"}


def test_save_and_load_round_trip(tmp_path):
    config_path = tmp_path / "config"
    save_config(AppConfig(profiles_dir=tmp_path / "profiles"), config_path)

    assert "profiles_dir=" in config_path.read_text(encoding="utf-8")
    assert load_config(config_path).profiles_dir == tmp_path / "profiles"


def test_config_file_expands_home(isolated_home, tmp_path):
    config_path = tmp_path / "config"
    config_path.write_text("profiles_dir=~/profiles\n", encoding="utf-8")
    assert load_config(config_path).profiles_dir == isolated_home / "profiles"


def test_environment_overrides_file(tmp_path, monkeypatch):
    config_path = tmp_path / "config"
    config_path.write_text(f"profiles_dir={tmp_path / 'from-file'}\n", encoding="utf-8")
    monkeypatch.setenv("SHELL_PROFILER_PROFILES_DIR", str(tmp_path / "from-env"))

    assert load_config(config_path).profiles_dir == tmp_path / "from-env"


def test_unknown_keys_are_ignored(tmp_path):
    config_path = tmp_path / "config"
    config_path.write_text("color=always\nprofiles_dir=/opt/p\n", encoding="utf-8")
    assert load_config(config_path).profiles_dir == Path("/opt/p")


def test_empty_profiles_dir_is_config_error(tmp_path):
    config_path = tmp_path / "config"
    config_path.write_text("profiles_dir=\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(config_path)


def test_expand_path_uses_environment(monkeypatch):
    monkeypatch.setenv("PROFILE_ROOT", "/data")
    assert expand_path("$PROFILE_ROOT/profiles/../p") == Path("/data/p")
