import pytest
from pydantic import ValidationError

from profiler_src.models import (
    CreateOptions,
    ListOptions,
    RestoreOptions,
    SelectOptions,
    validate_profile_name,
)


@pytest.mark.parametrize(
    "name",
    ["work", "client_acme", "my-project", "Personal2", "a"],
)
def test_valid_profile_names(name: str):
    assert validate_profile_name(name) == name


@pytest.mark.parametrize(
    "name",
    ["", "with space", "../escape", "dot.name", "slash/name", "ünïcode"],
)
def test_invalid_profile_names(name: str):
    with pytest.raises(ValueError):
        validate_profile_name(name)


def test_create_options_defaults():
    opts = CreateOptions(profile_name="work")
    assert opts.template == "basic"
    assert opts.init_git is False
    assert opts.git_name == ""


@pytest.mark.parametrize("template", ["basic", "personal", "work", "client"])
def test_create_options_accepts_templates(template: str):
    assert CreateOptions(profile_name="p", template=template).template == template


def test_create_options_rejects_unknown_template():
    with pytest.raises(ValidationError) as exc_info:
        CreateOptions(profile_name="p", template="enterprise")
    assert "invalid template: enterprise" in str(exc_info.value)


def test_create_options_rejects_bad_name():
    with pytest.raises(ValidationError):
        CreateOptions(profile_name="bad name")


def test_git_remote_implies_init_git():
    opts = CreateOptions(profile_name="p", git_remote="git@example.com:me/p.git")
    assert opts.init_git is True


@pytest.mark.parametrize(
    ("verbose", "show_config", "expected"),
    [
        (False, False, True),
        (True, False, False),
        (False, True, False),
    ],
)
def test_list_detail_flags_disable_menu(verbose, show_config, expected):
    opts = ListOptions(verbose=verbose, show_config=show_config)
    assert opts.interactive is expected


def test_optional_profile_name_is_validated():
    assert SelectOptions().profile_name is None
    with pytest.raises(ValidationError):
        SelectOptions(profile_name="../etc")


@pytest.mark.parametrize("date", ["2024-11-29", "2024-11-29 14:30:45", "yesterday"])
def test_restore_rejects_malformed_backup_date(date: str):
    with pytest.raises(ValidationError):
        RestoreOptions(profile_name="p", backup_date=date)


def test_restore_accepts_backup_date():
    opts = RestoreOptions(profile_name="p", backup_date="2024-11-29_14-30-45")
    assert opts.backup_date == "2024-11-29_14-30-45"
