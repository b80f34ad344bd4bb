#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
# Copyright (c) 2026 plumiume
# SPDX-License-Identifier: MIT
# License: MIT License (https://opensource.org/licenses/MIT)
# See LICENSE.txt for details.

"""
Option models and profile layout definitions.
"""

import re
from datetime import datetime
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

# ============================================================================
# Profile Layout
# ============================================================================

TemplateName = Literal["basic", "personal", "work", "client"]

TEMPLATE_NAMES: tuple[str, ...] = ("basic", "personal", "work", "client")

TEMPLATE_DESCRIPTIONS: dict[str, str] = {
    "basic": "Minimal configuration",
    "personal": "Personal projects",
    "work": "Work projects",
    "client": "Client projects",
}

PROFILE_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")

BACKUP_DATE_FORMAT = "%Y-%m-%d_%H-%M-%S"

PROFILE_DIRECTORIES: tuple[str, ...] = (
    ".config/1Password",
    ".config/claude",
    ".config/gemini",
    ".ssh",
    ".aws",
    ".azure",
    ".gcloud",
    ".kube",
    "bin",
    "code",
)

BACKUP_FILES: tuple[str, ...] = (".envrc", ".env", ".gitconfig", ".gitignore")


class ToolEnvVar(BaseModel):
    """Tool-specific variable loaded from a profile's .env"""

    name: str
    value: str
    comment: str = Field(default="", description="Comment lines written above")


TOOL_ENV_VARS: tuple[ToolEnvVar, ...] = (
    ToolEnvVar(
        name="GIT_CONFIG_GLOBAL",
        value='"$WORKSPACE_HOME/.gitconfig"',
        comment="# Git configuration",
    ),
    ToolEnvVar(
        name="GIT_SSH_COMMAND",
        value='"ssh -F $WORKSPACE_HOME/.ssh/config"',
        comment=(
            "# SSH configuration\n"
            "# Use workspace-specific SSH config instead of $HOME/.ssh/config"
        ),
    ),
    ToolEnvVar(
        name="XDG_CONFIG_HOME",
        value='"$WORKSPACE_HOME/.config"',
        comment=(
            "# XDG Base Directory specification\n"
            "# Point all XDG-compliant tools to workspace-specific config"
        ),
    ),
    ToolEnvVar(
        name="SSH_AUTH_SOCK",
        value='"$HOME/Library/Group Containers/2BUA8C4S2C.com.1password/t/agent.sock"',
        comment=(
            "# 1Password SSH Agent\n"
            "# Point to 1Password SSH agent socket for SSH key management"
        ),
    ),
    ToolEnvVar(
        name="AWS_CONFIG_FILE",
        value='"$WORKSPACE_HOME/.aws/config"',
        comment=(
            "# AWS configuration\n"
            "# Point AWS CLI and SDKs to workspace-specific config and credentials"
        ),
    ),
    ToolEnvVar(
        name="AWS_SHARED_CREDENTIALS_FILE",
        value='"$WORKSPACE_HOME/.aws/credentials"',
    ),
    ToolEnvVar(
        name="KUBECONFIG",
        value='"$WORKSPACE_HOME/.kube/config"',
        comment=(
            "# Kubernetes configuration\n"
            "# Point kubectl to workspace-specific kubeconfig"
        ),
    ),
    ToolEnvVar(
        name="TF_CLI_CONFIG_FILE",
        value='"$WORKSPACE_HOME/.terraformrc"',
        comment=(
            "# Terraform configuration\n"
            "# Use workspace-specific Terraform CLI config"
        ),
    ),
    ToolEnvVar(
        name="AZURE_CONFIG_DIR",
        value='"$WORKSPACE_HOME/.azure"',
        comment=(
            "# Azure CLI configuration\n"
            "# Point Azure CLI to workspace-specific config directory"
        ),
    ),
    ToolEnvVar(
        name="CLOUDSDK_CONFIG",
        value='"$WORKSPACE_HOME/.gcloud"',
        comment=(
            "# Google Cloud SDK configuration\n"
            "# Point gcloud CLI to workspace-specific config directory"
        ),
    ),
    ToolEnvVar(
        name="CLAUDE_CONFIG_DIR",
        value='"$WORKSPACE_HOME/.config/claude"',
        comment=(
            "# Claude Code configuration\n"
            "# Point Claude Code to workspace-specific config directory"
        ),
    ),
    ToolEnvVar(
        name="GEMINI_CONFIG_DIR",
        value='"$WORKSPACE_HOME/.config/gemini"',
        comment=(
            "# Gemini CLI configuration\n"
            "# Point Gemini CLI to workspace-specific config directory"
        ),
    ),
)

# Exports that older profiles kept in .envrc; they now live in .env
ENVRC_LEGACY_EXPORTS: tuple[str, ...] = tuple(v.name for v in TOOL_ENV_VARS) + (
    "TF_PLUGIN_CACHE_DIR",
)


class GitignoreGroup(BaseModel):
    """A commented block of .gitignore patterns"""

    comment: str
    patterns: list[str]


GITIGNORE_REQUIRED_GROUPS: tuple[GitignoreGroup, ...] = (
    GitignoreGroup(
        comment="# Azure CLI credentials and sensitive config",
        patterns=[
            ".azure/config",
            ".azure/clouds.config",
            ".azure/accessTokens.json",
            ".azure/msal_token_cache.json",
            ".azure/azureProfile.json",
        ],
    ),
    GitignoreGroup(
        comment="# Google Cloud SDK credentials and sensitive config",
        patterns=[
            ".gcloud/configurations/",
            ".gcloud/credentials",
            ".gcloud/access_tokens.db",
            ".gcloud/legacy_credentials/",
            ".gcloud/logs/",
        ],
    ),
    GitignoreGroup(
        comment="# Claude Code configuration (may contain API keys and sensitive data)",
        patterns=[".config/claude/"],
    ),
    GitignoreGroup(
        comment="# Gemini CLI configuration (may contain API keys and sensitive data)",
        patterns=[".config/gemini/"],
    ),
)

KNOWN_DOTFILES: dict[str, str] = {
    ".envrc": "direnv configuration - environment variables",
    ".gitconfig": "Git configuration - user name, email, aliases",
    ".gitignore": "Git ignore patterns",
    ".ssh/config": "SSH client configuration",
    ".aws/config": "AWS CLI configuration",
    ".aws/credentials": "AWS credentials (secrets)",
    ".azure/config": "Azure CLI configuration",
    ".azure/clouds.config": "Azure CLI cloud configuration",
    ".gcloud/configurations": "Google Cloud SDK configurations",
    ".gcloud/credentials": "Google Cloud SDK credentials",
    ".config/claude": "Claude Code configuration",
    ".config/gemini": "Gemini CLI configuration",
    ".kube/config": "Kubernetes configuration",
    ".terraformrc": "Terraform CLI configuration",
    ".config/1Password/agent.toml": "1Password SSH agent configuration",
    ".env": "Environment variables (secrets)",
    ".env.example": "Environment variables template",
    ".envrc.local": "Local direnv overrides",
}


def validate_profile_name(name: str) -> str:
    """Reject names that are not a single safe path component"""
    if not name:
        raise ValueError("profile name is required")
    if not PROFILE_NAME_PATTERN.match(name):
        raise ValueError(
            "profile name can only contain letters, numbers, hyphens, and underscores"
        )
    return name


# ============================================================================
# Command Options
# ============================================================================


class ProfileTarget(BaseModel):
    """Options shared by commands that act on one (optional) profile"""

    profile_name: Optional[str] = Field(
        default=None, description="Profile name (interactive selection if omitted)"
    )

    @field_validator("profile_name")
    @classmethod
    def check_profile_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return validate_profile_name(v)


class CreateOptions(BaseModel):
    """Options for creating a profile"""

    profile_name: str = Field(description="Name of the profile to create")
    template: TemplateName = Field(default="basic")
    git_name: str = Field(default="", description="git user.name")
    git_email: str = Field(default="", description="git user.email")
    force: bool = Field(default=False, description="Overwrite existing profile")
    interactive: bool = Field(default=False)
    dry_run: bool = Field(default=False)
    init_git: bool = Field(default=False)
    git_remote: str = Field(default="", description="Remote URL for git init")

    @field_validator("profile_name")
    @classmethod
    def check_profile_name(cls, v: str) -> str:
        return validate_profile_name(v)

    @field_validator("template", mode="before")
    @classmethod
    def check_template(cls, v: object) -> object:
        """Give the same message the CLI documents for unknown templates"""
        if isinstance(v, str) and v not in TEMPLATE_NAMES:
            raise ValueError(
                f"invalid template: {v} (must be: basic, personal, work, or client)"
            )
        return v

    @model_validator(mode="after")
    def remote_implies_git(self) -> "CreateOptions":
        if self.git_remote:
            self.init_git = True
        return self


class UpdateOptions(ProfileTarget):
    """Options for updating a profile"""

    force: bool = False
    dry_run: bool = False
    no_backup: bool = False


class DeleteOptions(ProfileTarget):
    """Options for deleting a profile"""

    force: bool = False
    dry_run: bool = False
    interactive: bool = True


class SelectOptions(ProfileTarget):
    """Options for selecting a profile"""

    allow_direnv: bool = False


class ListOptions(BaseModel):
    """Options for listing profiles"""

    verbose: bool = False
    show_config: bool = False
    interactive: bool = True

    @model_validator(mode="after")
    def detail_flags_disable_menu(self) -> "ListOptions":
        if self.verbose or self.show_config:
            self.interactive = False
        return self


class RestoreOptions(ProfileTarget):
    """Options for restoring a profile from an update backup"""

    backup_date: Optional[str] = Field(
        default=None, description="Backup timestamp (YYYY-MM-DD_HH-MM-SS)"
    )
    file_name: Optional[str] = Field(default=None, description="Restore only this file")
    force: bool = False
    dry_run: bool = False

    @field_validator("backup_date")
    @classmethod
    def check_backup_date(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        try:
            datetime.strptime(v, BACKUP_DATE_FORMAT)
        except ValueError:
            raise ValueError(
                f"invalid backup date: {v} (expected YYYY-MM-DD_HH-MM-SS)"
            )
        return v


class DotfilesOptions(ProfileTarget):
    """Options for listing and editing dotfiles"""

    file_name: Optional[str] = None
    editor: Optional[str] = None


class SyncOptions(ProfileTarget):
    """Options for profile repository operations"""

    remote: Optional[str] = None
    force: bool = False
    interactive: bool = True


# ============================================================================
# Results
# ============================================================================


class ProfileInfo(BaseModel):
    """Summary of a profile directory"""

    name: str
    path: Path
    has_envrc: bool = False
    has_gitconfig: bool = False
    direnv_allowed: Optional[bool] = Field(
        default=None, description="None when direnv status is unavailable"
    )
    git_name: Optional[str] = None
    git_email: Optional[str] = None
    template: Optional[str] = None
    created: Optional[str] = None
    env_var_count: Optional[int] = Field(
        default=None, description="Non-comment lines in .env (None if absent)"
    )
    script_count: int = 0

    @property
    def gitconfig_path(self) -> Path:
        return self.path / ".gitconfig"


class DotfileInfo(BaseModel):
    """A dotfile found inside a profile"""

    path: Path
    relative_path: str
    description: str = ""
    size: Optional[int] = None
    modified: Optional[datetime] = None

    @property
    def display(self) -> str:
        if self.description:
            return f"{self.relative_path} - {self.description}"
        return self.relative_path


class BackupInfo(BaseModel):
    """An update backup stored under .backups/"""

    timestamp: str
    path: Path
    files: list[str] = Field(default_factory=list)
