#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2026 plumiume
# SPDX-License-Identifier: MIT
# License: MIT License (https://opensource.org/licenses/MIT)
# See LICENSE.txt for details.

"""
Workspace profile management package.
"""

from .commands import app, main
from .config import AppConfig, load_config, save_config
from .errors import (
    BackupError,
    CancelledError,
    ConfigError,
    DirenvNotFoundError,
    EditorError,
    InvalidProfileError,
    NoRemoteError,
    ProfileExistsError,
    ProfileNotFoundError,
    ProfilerError,
    SyncError,
)
from .manager import ProfileManager
from .models import (
    BackupInfo,
    CreateOptions,
    DeleteOptions,
    DotfileInfo,
    DotfilesOptions,
    ListOptions,
    ProfileInfo,
    RestoreOptions,
    SelectOptions,
    SyncOptions,
    UpdateOptions,
)
from .sync import ProfileRepository

__version__ = "0.2.0"

__all__ = [
    # Commands
    "app",
    "main",
    # Manager
    "ProfileManager",
    "ProfileRepository",
    # Configuration
    "AppConfig",
    "load_config",
    "save_config",
    # Models
    "CreateOptions",
    "UpdateOptions",
    "RestoreOptions",
    "DeleteOptions",
    "SelectOptions",
    "ListOptions",
    "DotfilesOptions",
    "SyncOptions",
    "ProfileInfo",
    "DotfileInfo",
    "BackupInfo",
    # Errors
    "ProfilerError",
    "ConfigError",
    "InvalidProfileError",
    "ProfileNotFoundError",
    "ProfileExistsError",
    "DirenvNotFoundError",
    "SyncError",
    "NoRemoteError",
    "EditorError",
    "BackupError",
    "CancelledError",
]
