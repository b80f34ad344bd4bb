#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Integration with direnv, the directory-scoped environment loader.
"""

import shutil
import subprocess
from pathlib import Path
from typing import Optional

from rich.console import Console

from .errors import DirenvNotFoundError
from .log import get_logger

console = Console()
logger = get_logger(__name__)

ALLOWED_MARKER = "Found RC allowed true"


def find_direnv() -> Optional[str]:
    """Path to the direnv executable, or None"""
    return shutil.which("direnv")


def require_direnv() -> str:
    """Return the direnv path or raise with installation instructions"""
    direnv = find_direnv()
    if direnv is None:
        raise DirenvNotFoundError()
    return direnv


def is_allowed(profile_dir: Path) -> Optional[bool]:
    """Whether the profile's .envrc is allowed.

    Returns None when direnv is unavailable or its status cannot be read.
    """
    direnv = find_direnv()
    if direnv is None:
        return None

    cmd = [direnv, "status"]
    logger.debug("Running: %s (cwd=%s)", " ".join(cmd), profile_dir)
    try:
        result = subprocess.run(
            cmd,
            cwd=profile_dir,
            capture_output=True,
            text=True,
            timeout=10,
        )
    except (subprocess.TimeoutExpired, FileNotFoundError, OSError) as e:
        logger.debug("direnv status failed: %s", e)
        return None

    if result.returncode != 0:
        return None
    return ALLOWED_MARKER in result.stdout


def allow(profile_dir: Path) -> bool:
    """Run 'direnv allow' inside the profile directory"""
    direnv = require_direnv()
    cmd = [direnv, "allow"]
    logger.debug("Running: %s (cwd=%s)", " ".join(cmd), profile_dir)
    try:
        result = subprocess.run(cmd, cwd=profile_dir)
    except OSError as e:
        logger.debug("direnv allow failed: %s", e)
        return False
    return result.returncode == 0


def show_status() -> int:
    """Print direnv status, or installation instructions when missing"""
    direnv = find_direnv()
    if direnv is None:
        console.print("[yellow]direnv is not installed[/yellow]")
        console.print()
        console.print("Install direnv:")
        console.print("  macOS:  brew install direnv")
        console.print("  Linux:  sudo apt install direnv")
        console.print()
        console.print("Then hook it to your shell:")
        console.print('  bash:   eval "$(direnv hook bash)"', markup=False)
        console.print('  zsh:    eval "$(direnv hook zsh)"', markup=False)
        return 0

    console.print("[bold blue]=== direnv Status ===[/bold blue]")
    console.print()

    cmd = [direnv, "status"]
    logger.debug("Running: %s", " ".join(cmd))
    result = subprocess.run(cmd)
    return result.returncode
