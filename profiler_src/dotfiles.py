#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Listing and editing configuration files inside a profile.
"""

import os
import shutil
import subprocess
from collections.abc import Mapping
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import prompts
from .errors import EditorError, ProfilerError
from .log import get_logger
from .models import KNOWN_DOTFILES, DotfileInfo

console = Console()
logger = get_logger(__name__)

FALLBACK_EDITORS: tuple[str, ...] = ("vim", "nano", "vi")


def format_file_size(size: int) -> str:
    """Human readable size with a 1024 base, e.g. '1.5 KB'"""
    unit = 1024
    if size < unit:
        return f"{size} B"
    div, exp = unit, 0
    n = size // unit
    while n >= unit:
        div *= unit
        exp += 1
        n //= unit
    return f"{size / div:.1f} {'KMGTPE'[exp]}B"


def _describe(path: Path, relative_path: str, description: str) -> DotfileInfo:
    info = DotfileInfo(path=path, relative_path=relative_path, description=description)
    try:
        st = path.stat()
    except OSError:
        return info
    info.size = st.st_size
    info.modified = datetime.fromtimestamp(st.st_mtime)
    return info


def find_dotfiles(profile_dir: Path) -> list[DotfileInfo]:
    """Known dotfiles that exist, then any other hidden root files"""
    found: list[DotfileInfo] = []
    seen: set[str] = set()

    for relative_path, description in KNOWN_DOTFILES.items():
        full_path = profile_dir / relative_path
        if full_path.exists():
            found.append(_describe(full_path, relative_path, description))
            seen.add(relative_path)

    try:
        entries = sorted(profile_dir.iterdir())
    except OSError as e:
        raise ProfilerError(f"failed to read profile directory: {e}")

    for entry in entries:
        if not entry.name.startswith(".") or entry.name == ".git":
            continue
        if entry.is_dir() or entry.name in seen:
            continue
        found.append(_describe(entry, entry.name, ""))

    return found


def list_dotfiles(profile_name: str, profile_dir: Path) -> list[DotfileInfo]:
    """Print the dotfiles table for a profile"""
    dotfiles = find_dotfiles(profile_dir)
    if not dotfiles:
        console.print(f"[yellow]No dotfiles found in profile '{profile_name}'[/yellow]")
        return dotfiles

    table = Table(
        title=f"Dotfiles in profile '{profile_name}'",
        show_header=True,
        header_style="bold magenta",
    )
    table.add_column("File", style="cyan", no_wrap=True)
    table.add_column("Size", justify="right")
    table.add_column("Modified")
    table.add_column("Description", style="dim")

    for info in dotfiles:
        table.add_row(
            escape(info.relative_path),
            format_file_size(info.size) if info.size is not None else "-",
            info.modified.strftime("%Y-%m-%d %H:%M:%S") if info.modified else "-",
            escape(info.description),
        )

    console.print(table)
    console.print()
    console.print(f"Total: {len(dotfiles)} files")
    return dotfiles


def resolve_editor(
    editor: Optional[str] = None, environ: Optional[Mapping[str, str]] = None
) -> str:
    """--editor, then $EDITOR, then $VISUAL, then the first common editor"""
    if environ is None:
        environ = os.environ

    for candidate in (editor, environ.get("EDITOR"), environ.get("VISUAL")):
        if candidate:
            return candidate

    for name in FALLBACK_EDITORS:
        if shutil.which(name):
            return name

    raise EditorError(
        "no editor found. Set EDITOR or VISUAL environment variable"
    )


def choose_dotfile(profile_dir: Path, file_name: Optional[str]) -> Path:
    """Path of the dotfile to edit, asking the user when none is given"""
    if file_name:
        target = profile_dir / file_name
        resolved = target.resolve()
        root = profile_dir.resolve()
        if resolved == root or not resolved.is_relative_to(root):
            raise ProfilerError(
                f"file '{file_name}' is not inside profile directory {profile_dir}",
                "Pass a path relative to the profile, e.g. --file .gitconfig",
            )
        return target

    dotfiles = find_dotfiles(profile_dir)
    if not dotfiles:
        raise ProfilerError(f"no dotfiles found in {profile_dir}")
    if not prompts.is_interactive():
        raise ProfilerError(
            "file name is required",
            "Pass the file with --file; interactive selection needs a terminal",
        )

    selected = prompts.select_option(
        [info.display for info in dotfiles], "Select a file to edit:"
    )
    return profile_dir / selected.split(" - ", 1)[0]


def edit_dotfile(
    profile_dir: Path, file_name: Optional[str] = None, editor: Optional[str] = None
) -> Path:
    """Open a profile file in the user's editor"""
    target = choose_dotfile(profile_dir, file_name)
    editor_cmd = resolve_editor(editor)

    console.print(
        f"[blue]Opening {escape(str(target))} with {escape(editor_cmd)}...[/blue]"
    )

    cmd = [*editor_cmd.split(), str(target)]
    logger.debug("Running: %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd)
    except OSError as e:
        raise EditorError(f"failed to start editor '{editor_cmd}': {e}")
    if result.returncode != 0:
        raise EditorError(f"editor exited with status {result.returncode}")

    console.print(f"[green]✓[/green] Finished editing {escape(target.name)}")
    return target
