#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Exceptions raised by the profile manager.

Every error carries a user-facing message and, optionally, a suggestion
that the CLI prints underneath it.
"""

from typing import Optional


class ProfilerError(Exception):
    """Base exception for all shell-profiler errors"""

    def __init__(self, message: str, suggestion: Optional[str] = None):
        self.message = message
        self.suggestion = suggestion
        super().__init__(message)


class ConfigError(ProfilerError):
    """Configuration file could not be read or written"""

    def __init__(self, message: str, suggestion: Optional[str] = None):
        if suggestion is None:
            suggestion = "Run 'shell-profiler init' to set custom paths"
        super().__init__(message, suggestion)


class InvalidProfileError(ProfilerError):
    """Profile name, template or layout is invalid"""


class ProfileNotFoundError(ProfilerError):
    """Requested profile does not exist"""

    def __init__(self, name: str, path: Optional[object] = None):
        self.name = name
        message = f"profile '{name}' does not exist"
        if path is not None:
            message += f" at: {path}"
        super().__init__(message)


class ProfileExistsError(ProfilerError):
    """Profile already exists and --force was not given"""


class DirenvNotFoundError(ProfilerError):
    """direnv is not installed or not on PATH"""

    def __init__(self):
        super().__init__(
            "direnv is required but not found in PATH",
            "  Install direnv:\n"
            "    brew install direnv    # macOS/Linux (Homebrew)\n"
            "    apt install direnv     # Debian/Ubuntu\n\n"
            "  Then add the shell hook to your shell config:\n"
            '    eval "$(direnv hook bash)"   # ~/.bashrc\n'
            '    eval "$(direnv hook zsh)"    # ~/.zshrc\n\n'
            "  See https://direnv.net/ for more details",
        )


class SyncError(ProfilerError):
    """Git repository operation failed"""


class NoRemoteError(SyncError):
    """Profile repository has no 'origin' remote"""

    def __init__(self, name: str):
        super().__init__(
            "no remote 'origin' configured",
            f"Add one with 'shell-profiler sync remote {name} <url>'",
        )


class EditorError(ProfilerError):
    """No editor available, or the editor exited with an error"""


class BackupError(ProfilerError):
    """Backup could not be created or restored"""


class CancelledError(ProfilerError):
    """User declined a confirmation prompt"""
