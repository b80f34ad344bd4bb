#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Git synchronisation of profile directories.
"""

import shutil
import subprocess
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape

from .errors import NoRemoteError, SyncError
from .log import get_logger

console = Console()
logger = get_logger(__name__)

INITIAL_COMMIT_MESSAGE = "Initial commit: profile setup"
UPDATE_COMMIT_MESSAGE = "Update profile configuration"


class ProfileRepository:
    """A profile directory managed as a git repository"""

    def __init__(self, profile_dir: Path, name: Optional[str] = None):
        self.profile_dir = profile_dir
        self.name = name or profile_dir.name

    @property
    def is_repository(self) -> bool:
        return (self.profile_dir / ".git").is_dir()

    def _git(
        self, *args: str, capture: bool = True, check: bool = True
    ) -> subprocess.CompletedProcess:
        git = shutil.which("git")
        if git is None:
            raise SyncError("git is required but not found in PATH")

        cmd = [git, *args]
        logger.debug("Running: %s (cwd=%s)", " ".join(cmd), self.profile_dir)
        try:
            result = subprocess.run(
                cmd,
                cwd=self.profile_dir,
                capture_output=capture,
                text=True,
            )
        except OSError as e:
            raise SyncError(f"failed to run git {args[0]}: {e}")

        if check and result.returncode != 0:
            detail = (result.stderr or "").strip() if capture else ""
            message = f"git {args[0]} failed"
            if detail:
                message += f": {detail}"
            raise SyncError(message)
        return result

    def _require_repository(self) -> None:
        if not self.is_repository:
            raise SyncError(
                f"profile '{self.name}' is not a git repository",
                f"Initialize it with 'shell-profiler sync init {self.name}'",
            )

    def remote_url(self) -> Optional[str]:
        """URL of origin, or None when there is no such remote"""
        result = self._git("remote", "get-url", "origin", check=False)
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def _require_remote(self) -> str:
        url = self.remote_url()
        if url is None:
            raise NoRemoteError(self.name)
        return url

    def init(self, remote: Optional[str] = None) -> bool:
        """git init + initial commit; returns False if already a repository"""
        if self.is_repository:
            console.print(
                f"[yellow]Profile '{self.name}' is already a git repository[/yellow]"
            )
            return False

        console.print(f"[blue]Initializing git repository for profile: {self.name}[/blue]")
        self._git("init")
        self._git("add", ".")

        commit = self._git("commit", "-m", INITIAL_COMMIT_MESSAGE, check=False)
        if commit.returncode != 0:
            console.print(
                "[yellow]Initial commit failed (check git user.name/user.email)[/yellow]"
            )

        if remote:
            self._git("remote", "add", "origin", remote)
            console.print(f"[green]✓[/green] Added remote: {escape(remote)}")

        console.print(f"[green]✓[/green] Git repository initialized for {self.name}")
        return True

    def pull(self) -> None:
        self._require_repository()
        self._require_remote()

        console.print(f"[blue]Pulling changes for profile: {self.name}[/blue]")
        result = self._git("pull", "origin", "main", capture=False, check=False)
        if result.returncode != 0:
            logger.debug("Pull from main failed, trying master")
            self._git("pull", "origin", "master", capture=False)
        console.print(f"[green]✓[/green] Pulled latest changes for {self.name}")

    def push(self, force: bool = False) -> None:
        self._require_repository()
        self._require_remote()

        status = self._git("status", "--porcelain")
        if status.stdout.strip():
            console.print("[blue]Committing local changes...[/blue]")
            self._git("add", ".")
            self._git("commit", "-m", UPDATE_COMMIT_MESSAGE)

        branch_result = self._git("branch", "--show-current", check=False)
        branch = branch_result.stdout.strip() if branch_result.returncode == 0 else ""
        branch = branch or "main"

        args = ["push", "origin", branch]
        if force:
            args.append("--force")

        console.print(f"[blue]Pushing changes for profile: {self.name}[/blue]")
        self._git(*args, capture=False)
        console.print(f"[green]✓[/green] Pushed changes for {self.name}")

    def sync(self) -> None:
        """Pull then push; a missing remote only skips the step"""
        self._require_repository()
        console.print(f"[blue]Syncing profile: {self.name}[/blue]")

        for step in (self.pull, self.push):
            try:
                step()
            except NoRemoteError as e:
                console.print(
                    f"[yellow]Skipping {step.__name__}: {escape(str(e))}[/yellow]"
                )

        console.print(f"[green]✓[/green] Synced profile {self.name}")

    def set_remote(self, url: str) -> None:
        self._require_repository()
        if not url:
            raise SyncError("remote URL is required")

        if self.remote_url() is None:
            self._git("remote", "add", "origin", url)
        else:
            self._git("remote", "set-url", "origin", url)
        console.print(
            f"[green]✓[/green] Set remote origin for {self.name}: {escape(url)}"
        )

    def status(self) -> None:
        """Full git status plus remotes"""
        self._require_repository()
        console.print(f"[bold blue]=== Git Status: {self.name} ===[/bold blue]")
        self._git("status", capture=False, check=False)
        console.print()
        console.print("[blue]Remote Information:[/blue]")
        self._git("remote", "-v", capture=False, check=False)

    def short_status(self) -> None:
        """One block per profile, used when no profile is named"""
        console.print(f"[bold]{self.name}[/bold]")
        changes = self._git("status", "--short", check=False).stdout.rstrip()
        if changes:
            for line in changes.splitlines():
                console.print(f"  {line}", markup=False)
        else:
            console.print("  (no changes)")
        console.print(f"  Remote: {escape(self.remote_url() or '(none)')}")
        console.print()


def status_all(profiles_dir: Path, names: list[str]) -> int:
    """Print short status of every profile that is a repository"""
    repositories = [
        ProfileRepository(profiles_dir / name, name)
        for name in names
        if (profiles_dir / name / ".git").is_dir()
    ]
    if not repositories:
        console.print("[yellow]No profiles are git repositories[/yellow]")
        console.print("Initialize one with: shell-profiler sync init <profile>")
        return 0

    console.print("[bold blue]=== Profile Repositories ===[/bold blue]")
    console.print()
    for repository in repositories:
        repository.short_status()
    return len(repositories)
