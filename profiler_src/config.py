#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
# Copyright (c) 2026 plumiume
# SPDX-License-Identifier: MIT
# License: MIT License (https://opensource.org/licenses/MIT)
# See LICENSE.txt for details.

"""
Profile manager configuration (~/.profile-manager).

The file holds ``key=value`` lines; environment variables prefixed with
``SHELL_PROFILER_`` take precedence over it.
"""

import os
from pathlib import Path
from typing import Tuple, Type

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from .errors import ConfigError
from .log import get_logger

logger = get_logger(__name__)

CONFIG_FILE_NAME = ".profile-manager"


def get_config_path() -> Path:
    """Location of the configuration file"""
    return Path.home() / CONFIG_FILE_NAME


def default_profiles_dir() -> Path:
    return Path.home() / "workspaces" / "profiles"


def expand_path(path: str | Path) -> Path:
    """Expand ~ and environment variables, then normalise the path"""
    expanded = os.path.expandvars(os.path.expanduser(str(path)))
    return Path(os.path.normpath(expanded))


class AppConfig(BaseSettings):
    """Main configuration model"""

    model_config = SettingsConfigDict(
        env_prefix="SHELL_PROFILER_",
        case_sensitive=False,
        extra="ignore",
    )

    profiles_dir: Path = Field(
        default_factory=default_profiles_dir,
        description="Directory that holds all workspace profiles",
    )

    @field_validator("profiles_dir", mode="before")
    @classmethod
    def expand_profiles_dir(cls, v: object) -> object:
        if isinstance(v, (str, Path)):
            if not str(v).strip():
                raise ValueError("profiles_dir must not be empty")
            return expand_path(v)
        return v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        """
        Customize settings sources priority.
        Priority: env vars > config file (init) > defaults
        """
        return env_settings, init_settings


# ============================================================================
# Config File
# ============================================================================


def parse_config_text(text: str) -> dict[str, str]:
    """Parse key=value lines, skipping blanks and # comments"""
    values: dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        values[key.strip()] = value
    return values


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load configuration, falling back to defaults when no file exists"""
    if config_path is None:
        config_path = get_config_path()

    data: dict[str, str] = {}
    if config_path.exists():
        try:
            data = parse_config_text(config_path.read_text(encoding="utf-8"))
        except OSError as e:
            raise ConfigError(f"failed to read config file {config_path}: {e}")
        logger.debug("Loaded configuration from %s", config_path)
    else:
        logger.debug("No config file at %s, using defaults", config_path)

    known = {k: v for k, v in data.items() if k in AppConfig.model_fields}
    try:
        return AppConfig(**known)
    except ValueError as e:
        raise ConfigError(f"invalid configuration in {config_path}: {e}")


def save_config(config: AppConfig, config_path: Path | None = None) -> Path:
    """Write configuration in key=value form"""
    if config_path is None:
        config_path = get_config_path()

    content = (
        "# Workspace Profile Manager configuration\n"
        "# Paths may use ~ and environment variables\n"
        f"profiles_dir={config.profiles_dir}\n"
    )
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"failed to save config: {e}")

    logger.debug("Saved configuration to %s", config_path)
    return config_path
