#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Workspace profile manager: create, update, restore, delete and inspect
profile directories.
"""

import os
import shutil
import subprocess
from collections.abc import Mapping
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from . import direnv, prompts
from .errors import (
    BackupError,
    CancelledError,
    InvalidProfileError,
    ProfileExistsError,
    ProfileNotFoundError,
    ProfilerError,
)
from .log import get_logger
from .models import (
    BACKUP_DATE_FORMAT,
    BACKUP_FILES,
    ENVRC_LEGACY_EXPORTS,
    GITIGNORE_REQUIRED_GROUPS,
    PROFILE_DIRECTORIES,
    TOOL_ENV_VARS,
    BackupInfo,
    CreateOptions,
    DeleteOptions,
    ListOptions,
    ProfileInfo,
    RestoreOptions,
    SelectOptions,
    UpdateOptions,
    validate_profile_name,
)
from .sync import ProfileRepository

# Rich Console for beautiful output
console = Console()
logger = get_logger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"

DRY_RUN_FILE_LIMIT = 20


# ============================================================================
# Helpers
# ============================================================================


def get_git_config(config_file: Path, key: str) -> str:
    """Read a value from a specific git config file ('' when unset)"""
    cmd = ["git", "config", "--file", str(config_file), key]
    logger.debug("Running: %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=10)
    except (subprocess.TimeoutExpired, FileNotFoundError):
        return ""
    if result.returncode != 0:
        return ""
    return result.stdout.strip()


def count_executables(directory: Path) -> int:
    """Number of executable regular files directly inside directory"""
    if not directory.is_dir():
        return 0
    count = 0
    for entry in directory.iterdir():
        try:
            if entry.is_file() and entry.stat().st_mode & 0o111:
                count += 1
        except OSError:
            continue
    return count


def count_env_lines(env_file: Path) -> Optional[int]:
    """Non-empty, non-comment lines in an env file (None if unreadable)"""
    try:
        content = env_file.read_text(encoding="utf-8")
    except OSError:
        return None
    return sum(
        1
        for line in content.splitlines()
        if line.strip() and not line.strip().startswith("#")
    )


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def display_path(path: Path) -> str:
    """Abbreviate the home directory to ~"""
    home = str(Path.home())
    text = str(path)
    if len(text) > len(home) and text.startswith(home + os.sep):
        return "~" + text[len(home):]
    return text


def clean_envrc(content: str) -> tuple[str, bool]:
    """Move tool-specific exports out of an .envrc.

    Removes ``export VAR=`` lines for variables that now live in .env,
    together with the comment lines directly above them, and makes sure
    .env is loaded with ``dotenv_if_exists .env``.
    """
    lines = content.split("\n")
    cleaned: list[str] = []
    updated = False
    skip_next_blank = False

    for line in lines:
        trimmed = line.strip()
        is_tool_var = any(
            f"export {name}=" in trimmed or f"export {name} =" in trimmed
            for name in ENVRC_LEGACY_EXPORTS
        )

        if is_tool_var:
            while cleaned:
                prev = cleaned[-1].strip()
                if prev.startswith("#") and prev != "#!/usr/bin/env bash":
                    cleaned.pop()
                else:
                    break
            updated = True
            skip_next_blank = True
            continue

        # Drop the blank line a removed block leaves behind
        if skip_next_blank and trimmed == "":
            skip_next_blank = False
            continue
        skip_next_blank = False

        cleaned.append(line)

    has_dotenv_load = any(
        "dotenv_if_exists .env" in line and ".envrc" not in line for line in cleaned
    )
    if not has_dotenv_load:
        dotenv_lines = [
            "# Load environment variables from .env file",
            "# Tool-specific paths and secrets belong in .env, not here",
            "dotenv_if_exists .env",
            "",
        ]
        insert_at = next(
            (
                i
                for i, line in enumerate(cleaned)
                if "# Load local overrides" in line
                or "dotenv_if_exists .envrc.local" in line
                or "# Welcome message" in line
            ),
            None,
        )
        if insert_at is None:
            cleaned.extend(dotenv_lines)
        else:
            cleaned[insert_at:insert_at] = dotenv_lines
        updated = True

    return "\n".join(cleaned), updated


def merge_env_vars(content: str) -> tuple[str, bool]:
    """Append tool variables missing from an existing .env"""
    updated = False
    for var in TOOL_ENV_VARS:
        if f"{var.name}=" in content:
            continue
        if content and not content.endswith("\n"):
            content += "\n"
        if var.comment:
            content += f"\n{var.comment}\n"
        content += f"{var.name}={var.value}\n"
        updated = True
    return content, updated


def merge_gitignore(content: str) -> tuple[str, bool]:
    """Insert required pattern groups that are entirely missing.

    Groups go in front of the Terraform section when there is one,
    otherwise at the end of the file.
    """
    updated = False
    for group in GITIGNORE_REQUIRED_GROUPS:
        if any(pattern.rstrip("/") in content for pattern in group.patterns):
            continue

        section = group.comment + "\n" + "".join(p + "\n" for p in group.patterns)
        section += "\n"

        anchor = content.find("# Terraform")
        if anchor == -1:
            if content and not content.endswith("\n"):
                content += "\n"
            if content and not content.endswith("\n\n"):
                content += "\n"
            content += section
        else:
            content = content[:anchor] + section + content[anchor:]
        updated = True
    return content, updated


# ============================================================================
# Core Profile Manager
# ============================================================================


class ProfileManager:
    """Manages workspace profile operations"""

    def __init__(self, profiles_dir: Path):
        self.profiles_dir = profiles_dir
        self.templates_dir = TEMPLATES_DIR

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def profile_path(self, name: str) -> Path:
        try:
            validate_profile_name(name)
        except ValueError as e:
            raise InvalidProfileError(str(e))
        return self.profiles_dir / name

    def list_profiles(self) -> list[str]:
        """Names of all directories that contain an .envrc"""
        if not self.profiles_dir.is_dir():
            return []
        try:
            entries = sorted(self.profiles_dir.iterdir())
        except OSError as e:
            raise ProfilerError(f"failed to read profiles directory: {e}")
        return [
            entry.name
            for entry in entries
            if entry.is_dir()
            and entry.name != ".git"
            and (entry / ".envrc").is_file()
        ]

    def require_profile(self, name: str) -> Path:
        profile_dir = self.profile_path(name)
        if not profile_dir.is_dir():
            raise ProfileNotFoundError(name, profile_dir)
        return profile_dir

    def choose_profile(self, name: Optional[str], message: str) -> str:
        """Return name, or ask the user to pick one of the profiles"""
        if name:
            return name

        profiles = self.list_profiles()
        if not profiles:
            raise ProfilerError(
                "no profiles found",
                "Create your first profile with: shell-profiler create my-profile",
            )
        if not prompts.is_interactive():
            raise ProfilerError(
                "profile name is required",
                "Pass a profile name; interactive selection needs a terminal",
            )
        return prompts.select_profile(profiles, message)

    @staticmethod
    def current_profile(environ: Optional[Mapping[str, str]] = None) -> str:
        if environ is None:
            environ = os.environ
        return environ.get("WORKSPACE_PROFILE", "")

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render_template(self, template_name: str, **context: object) -> str:
        """Render a Jinja2 template from the templates directory"""
        if not (self.templates_dir.exists() and self.templates_dir.is_dir()):
            raise ProfilerError(
                f"templates directory not found: {self.templates_dir}"
            )
        env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        template = env.get_template(template_name)
        return template.render(**context)

    def _write(self, path: Path, content: str, mode: int = 0o644) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        os.chmod(path, mode)
        logger.debug("Wrote %s (%o)", path, mode)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create_profile(self, opts: CreateOptions) -> Path:
        """Create a new profile directory from templates"""
        profile_dir = self.profile_path(opts.profile_name)

        if profile_dir.exists() and not opts.force:
            raise ProfileExistsError(
                f"profile '{opts.profile_name}' already exists at: {profile_dir}",
                "Use --force to overwrite",
            )

        if opts.interactive:
            opts = self._interactive_create(opts)

        if opts.dry_run:
            console.print("[blue]DRY RUN - Nothing will be created[/blue]")
            console.print()
            console.print("Would create:")
            console.print(f"  Profile directory: {escape(str(profile_dir))}")
            console.print(
                f"  .envrc file with WORKSPACE_PROFILE={opts.profile_name}"
            )
            console.print(f"  .gitconfig with template: {opts.template}")
            if opts.git_name:
                console.print(f"  Git user.name: {escape(opts.git_name)}")
            if opts.git_email:
                console.print(f"  Git user.email: {escape(opts.git_email)}")
            return profile_dir

        console.print(
            f"[blue]Creating profile: {opts.profile_name} "
            f"(template: {opts.template})[/blue]"
        )

        try:
            for directory in PROFILE_DIRECTORIES:
                (profile_dir / directory).mkdir(parents=True, exist_ok=True)
            os.chmod(profile_dir / ".ssh", 0o700)
            self._write_profile_files(profile_dir, opts)
        except OSError as e:
            raise ProfilerError(f"failed to create profile: {e}")

        if opts.init_git:
            try:
                ProfileRepository(profile_dir, opts.profile_name).init(
                    opts.git_remote or None
                )
            except ProfilerError as e:
                console.print(
                    f"[yellow]Failed to initialize git: {escape(str(e))}[/yellow]"
                )

        console.print(
            Panel(
                f"[green]✓[/green] Profile created: {opts.profile_name}\n\n"
                f"Next steps:\n"
                f"  1. cd {escape(str(profile_dir))}\n"
                f"  2. direnv allow\n"
                f"  3. Edit .gitconfig as needed\n"
                f"  4. echo $WORKSPACE_PROFILE to verify",
                title="[bold green]Success[/bold green]",
                border_style="green",
            )
        )
        return profile_dir

    def _interactive_create(self, opts: CreateOptions) -> CreateOptions:
        template = prompts.select_template()
        git_name = prompts.ask_input("Git user name (press Enter to skip)")
        git_email = prompts.ask_input("Git user email (press Enter to skip)")
        init_git = prompts.confirm("Initialize git repository after creation?")
        git_remote = ""
        if init_git:
            git_remote = prompts.ask_input("Git remote URL (press Enter to skip)")

        return CreateOptions.model_validate(
            {
                **opts.model_dump(),
                "template": template,
                "git_name": git_name or opts.git_name,
                "git_email": git_email or opts.git_email,
                "init_git": init_git,
                "git_remote": git_remote,
            }
        )

    def _write_profile_files(self, profile_dir: Path, opts: CreateOptions) -> None:
        context = {
            "profile_name": opts.profile_name,
            "template": opts.template,
            "created": utc_timestamp(),
            "git_name": opts.git_name,
            "git_email": opts.git_email,
            "profile_path": profile_dir.resolve(),
            "display_path": display_path(profile_dir),
            "tool_env_vars": TOOL_ENV_VARS,
            "gitignore_groups": GITIGNORE_REQUIRED_GROUPS,
        }

        console.print("  Creating .envrc...")
        self._write(profile_dir / ".envrc", self.render_template("envrc.jinja2", **context))

        console.print("  Creating .env...")
        self._write(profile_dir / ".env", self.render_template("env.jinja2", **context))

        console.print("  Creating .gitconfig...")
        self._write(
            profile_dir / ".gitconfig",
            self.render_template("gitconfig.jinja2", **context),
        )

        ssh_config = profile_dir / ".ssh" / "config"
        if ssh_config.exists():
            console.print("[yellow]SSH config already exists, skipping creation[/yellow]")
        else:
            console.print("  Creating SSH config...")
            self._write(
                ssh_config, self.render_template("ssh_config.jinja2", **context), 0o600
            )

        known_hosts = profile_dir / ".ssh" / "known_hosts"
        if not known_hosts.exists():
            self._write(known_hosts, "", 0o600)

        console.print("  Creating 1Password agent configuration...")
        self._write(
            profile_dir / ".config" / "1Password" / "agent.toml",
            self.render_template("onepassword_agent.toml.jinja2", **context),
            0o600,
        )

        console.print("  Creating SSH wrapper script...")
        self._write(
            profile_dir / "bin" / "ssh",
            self.render_template("ssh_wrapper.jinja2", **context),
            0o755,
        )

        console.print("  Creating .gitignore...")
        self._write(
            profile_dir / ".gitignore",
            self.render_template("gitignore.jinja2", **context),
        )

        console.print("  Creating README.md...")
        self._write(
            profile_dir / "README.md", self.render_template("README.md.jinja2", **context)
        )

        console.print("  Creating .env.example...")
        self._write(
            profile_dir / ".env.example",
            self.render_template("env.example.jinja2", **context),
        )

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update_profile(self, opts: UpdateOptions) -> list[str]:
        """Bring an existing profile up to the current layout"""
        name = self.choose_profile(opts.profile_name, "Select profile to update:")
        profile_dir = self.require_profile(name)

        if not (profile_dir / ".envrc").is_file():
            raise InvalidProfileError(
                f"profile '{name}' does not appear to be a valid profile "
                "(missing .envrc)"
            )

        console.print(f"[blue]Updating profile: {name}[/blue]")
        console.print(f"  Location: {escape(str(profile_dir))}")
        console.print()

        if not opts.no_backup and not opts.dry_run:
            try:
                self.create_backup(profile_dir)
            except BackupError as e:
                console.print(f"[yellow]Failed to create backup: {escape(str(e))}[/yellow]")
                if not opts.force and not prompts.confirm("Continue without backup?"):
                    raise CancelledError("update cancelled")

        updates: list[str] = []
        try:
            created = self._update_directories(profile_dir, opts.dry_run)
            if created:
                updates.append(f"Created directories: {', '.join(created)}")

            if self._update_envrc(profile_dir, opts.dry_run):
                updates.append("Updated .envrc (moved tool-specific vars to .env)")

            if self._update_env_file(profile_dir, name, opts.dry_run):
                updates.append("Updated .env with tool-specific environment variables")

            if self._update_gitignore(profile_dir, opts.dry_run):
                updates.append("Updated .gitignore with new patterns")
        except OSError as e:
            raise ProfilerError(f"failed to update profile: {e}")

        if opts.dry_run:
            console.print("[blue]DRY RUN - No changes were made[/blue]")
            if updates:
                console.print()
                console.print("Would update:")
                for update in updates:
                    console.print(f"  - {update}")
            else:
                console.print("  Profile is already up to date")
        elif updates:
            console.print("[green]✓[/green] Profile updated successfully")
            console.print()
            console.print("Updates applied:")
            for update in updates:
                console.print(f"  [green]✓[/green] {update}")
        else:
            console.print("[blue]Profile is already up to date[/blue]")

        return updates

    def create_backup(self, profile_dir: Path) -> Path:
        """Copy the editable profile files to .backups/update_<timestamp>/"""
        timestamp = datetime.now().strftime(BACKUP_DATE_FORMAT)
        backup_path = profile_dir / ".backups" / f"update_{timestamp}"
        try:
            backup_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise BackupError(f"failed to create backup directory: {e}")

        for file_name in BACKUP_FILES:
            src = profile_dir / file_name
            if not src.is_file():
                continue
            try:
                shutil.copy2(src, backup_path / file_name)
            except OSError as e:
                logger.debug("Skipping %s in backup: %s", src, e)

        console.print(f"[blue]Backup created: {escape(str(backup_path))}[/blue]")
        return backup_path

    def _update_directories(self, profile_dir: Path, dry_run: bool) -> list[str]:
        created = []
        for directory in PROFILE_DIRECTORIES:
            full_path = profile_dir / directory
            if full_path.exists():
                continue
            if not dry_run:
                full_path.mkdir(parents=True, exist_ok=True)
            created.append(directory)

        ssh_dir = profile_dir / ".ssh"
        if ssh_dir.is_dir() and not dry_run:
            try:
                os.chmod(ssh_dir, 0o700)
            except OSError as e:
                console.print(
                    f"[yellow]Failed to set SSH directory permissions: {escape(str(e))}[/yellow]"
                )
        return created

    def _update_envrc(self, profile_dir: Path, dry_run: bool) -> bool:
        envrc_path = profile_dir / ".envrc"
        content, updated = clean_envrc(envrc_path.read_text(encoding="utf-8"))
        if updated and not dry_run:
            envrc_path.write_text(content, encoding="utf-8")
        return updated

    def _update_env_file(self, profile_dir: Path, name: str, dry_run: bool) -> bool:
        env_path = profile_dir / ".env"
        content = env_path.read_text(encoding="utf-8") if env_path.is_file() else ""

        if content:
            content, updated = merge_env_vars(content)
        else:
            content = self.render_template(
                "env.jinja2",
                profile_name=name,
                template=None,
                tool_env_vars=TOOL_ENV_VARS,
            )
            updated = True

        if updated and not dry_run:
            env_path.write_text(content, encoding="utf-8")
        return updated

    def _update_gitignore(self, profile_dir: Path, dry_run: bool) -> bool:
        gitignore_path = profile_dir / ".gitignore"
        if not gitignore_path.is_file():
            if not dry_run:
                gitignore_path.write_text(
                    self.render_template(
                        "gitignore.jinja2", gitignore_groups=GITIGNORE_REQUIRED_GROUPS
                    ),
                    encoding="utf-8",
                )
            return True

        content, updated = merge_gitignore(gitignore_path.read_text(encoding="utf-8"))
        if updated and not dry_run:
            gitignore_path.write_text(content, encoding="utf-8")
        return updated

    # ------------------------------------------------------------------
    # Restore
    # ------------------------------------------------------------------

    def list_backups(self, profile_dir: Path) -> list[BackupInfo]:
        """Update backups of a profile, oldest first"""
        backups_dir = profile_dir / ".backups"
        if not backups_dir.is_dir():
            return []

        backups = []
        for entry in sorted(backups_dir.iterdir()):
            if not (entry.is_dir() and entry.name.startswith("update_")):
                continue
            timestamp = entry.name[len("update_"):]
            try:
                datetime.strptime(timestamp, BACKUP_DATE_FORMAT)
            except ValueError:
                continue
            files = sorted(
                p.relative_to(entry).as_posix() for p in entry.rglob("*") if p.is_file()
            )
            backups.append(BackupInfo(timestamp=timestamp, path=entry, files=files))
        return backups

    def restore_profile(self, opts: RestoreOptions) -> list[Path]:
        """Copy files from an update backup back into the profile"""
        name = self.choose_profile(opts.profile_name, "Select profile to restore:")
        profile_dir = self.require_profile(name)

        backups = self.list_backups(profile_dir)
        if not backups:
            raise BackupError(
                f"no backups found for profile '{name}'",
                "Backups are created by 'shell-profiler update'",
            )

        console.print(f"[blue]Available backups for {name}:[/blue]")
        for backup in backups:
            console.print(f"  - {backup.timestamp} ({len(backup.files)} files)")
        console.print()

        if opts.backup_date:
            backup = next(
                (b for b in backups if b.timestamp == opts.backup_date), None
            )
            if backup is None:
                raise BackupError(
                    f"no backup from {opts.backup_date} for profile '{name}'"
                )
        else:
            backup = backups[-1]

        files = backup.files
        if opts.file_name:
            wanted = Path(opts.file_name).as_posix()
            if wanted not in backup.files:
                raise BackupError(
                    f"file '{opts.file_name}' is not in backup {backup.timestamp}"
                )
            files = [wanted]

        if opts.dry_run:
            console.print("[blue]DRY RUN - Nothing will be restored[/blue]")
            console.print()
            console.print(f"Would restore from {backup.timestamp}:")
            for file_name in files:
                console.print(f"  - {escape(str(profile_dir / file_name))}")
            return []

        if not opts.force and not prompts.confirm(
            f"Restore {len(files)} file(s) from backup {backup.timestamp}?"
        ):
            raise CancelledError("Restore cancelled")

        restored = []
        for file_name in files:
            dst = profile_dir / file_name
            try:
                dst.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(backup.path / file_name, dst)
            except OSError as e:
                raise BackupError(f"failed to restore {file_name}: {e}")
            restored.append(dst)
            console.print(f"  [green]✓[/green] {escape(file_name)}")

        console.print(
            f"[green]✓[/green] Restored profile {name} from backup {backup.timestamp}"
        )
        return restored

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete_profile(self, opts: DeleteOptions) -> bool:
        """Delete a profile directory; returns False when cancelled"""
        name = opts.profile_name
        if not name:
            if opts.force or opts.dry_run or not opts.interactive:
                raise ProfilerError("profile name is required")
            name = self.choose_profile(None, "Select profile to delete:")

        profile_dir = self.require_profile(name)

        if self.current_profile() == name:
            console.print("[yellow]You are currently in this profile![/yellow]")
            console.print(
                "[blue]The profile will remain active until you leave the directory[/blue]"
            )

        files = sorted(p for p in profile_dir.rglob("*") if not p.is_dir())
        dir_count = sum(1 for p in profile_dir.rglob("*") if p.is_dir())

        console.print(f"[blue]Profile to delete: {name}[/blue]")
        console.print(f"  Location: {escape(str(profile_dir))}")
        console.print(f"  Files: {len(files)}")
        console.print(f"  Directories: {dir_count}")

        if (profile_dir / ".env").exists():
            console.print("  [yellow]⚠ Contains .env file (may have secrets)[/yellow]")
        scripts = count_executables(profile_dir / "bin")
        if scripts:
            console.print(
                f"  [yellow]⚠ Contains {scripts} executable script(s)[/yellow]"
            )

        if opts.dry_run:
            console.print("[blue]DRY RUN - Nothing will be deleted[/blue]")
            console.print()
            console.print("Would delete:")
            for path in files[:DRY_RUN_FILE_LIMIT]:
                console.print(f"  - {escape(str(path))}")
            if len(files) > DRY_RUN_FILE_LIMIT:
                console.print(
                    f"  ... and {len(files) - DRY_RUN_FILE_LIMIT} more files"
                )
            return False

        if not opts.force and not prompts.confirm(
            f"This will permanently delete the profile '{name}' and all its files! "
            "Are you sure?"
        ):
            raise CancelledError("Deletion cancelled")

        console.print(f"[blue]Deleting profile: {name}[/blue]")
        try:
            shutil.rmtree(profile_dir)
        except OSError as e:
            raise ProfilerError(f"failed to delete profile: {e}")

        console.print(f"[green]✓[/green] Profile deleted: {name}")

        remaining = [
            p for p in self.profiles_dir.iterdir() if p.is_dir() and p.name != ".git"
        ]
        if not remaining:
            console.print("[blue]No profiles remaining[/blue]")
        return True

    # ------------------------------------------------------------------
    # Select
    # ------------------------------------------------------------------

    def select_profile(self, opts: SelectOptions) -> Path:
        """Print activation instructions for a profile"""
        profiles = self.list_profiles()
        if not profiles:
            raise ProfilerError("no profiles found")

        if opts.profile_name and opts.profile_name not in profiles:
            raise ProfileNotFoundError(opts.profile_name)

        selected = self.choose_profile(
            opts.profile_name, "Select a profile to activate:"
        )
        profile_dir = self.profile_path(selected)

        if self.current_profile() == selected:
            console.print(f"[blue]You are already in profile '{selected}'[/blue]")
            console.print(f"  Location: {escape(str(profile_dir))}")
            return profile_dir

        console.print()
        console.print(f"[green]✓[/green] Selected profile: {selected}")
        console.print(f"  Location: {escape(str(profile_dir))}")

        if direnv.is_allowed(profile_dir) is False:
            console.print()
            console.print("[yellow]direnv needs to be allowed for this profile[/yellow]")
            if opts.allow_direnv:
                if direnv.allow(profile_dir):
                    console.print("[green]✓[/green] direnv allowed")
                else:
                    console.print("[yellow]Failed to allow direnv[/yellow]")
                    console.print("  You may need to run 'direnv allow' manually")
            else:
                console.print("  Run 'direnv allow' after changing to the directory")

        console.print()
        console.print("[blue]To activate this profile:[/blue]")
        console.print(f"  cd {escape(str(profile_dir))}")
        if opts.allow_direnv:
            console.print("  (direnv will be allowed automatically)")
        else:
            console.print("  direnv allow  # (first time only)")
        console.print()
        console.print("[blue]Or use this command:[/blue]")
        console.print(f"  cd {escape(str(profile_dir))} && direnv allow")
        return profile_dir

    # ------------------------------------------------------------------
    # Inspect
    # ------------------------------------------------------------------

    def describe_profile(self, name: str) -> ProfileInfo:
        """Collect the summary shown by list and info"""
        profile_dir = self.profile_path(name)
        envrc = profile_dir / ".envrc"
        gitconfig = profile_dir / ".gitconfig"
        readme = profile_dir / "README.md"
        env_file = profile_dir / ".env"

        info = ProfileInfo(
            name=name,
            path=profile_dir,
            has_envrc=envrc.is_file(),
            has_gitconfig=gitconfig.is_file(),
            script_count=count_executables(profile_dir / "bin"),
        )

        if info.has_envrc:
            info.direnv_allowed = direnv.is_allowed(profile_dir)

        if info.has_gitconfig:
            info.git_name = get_git_config(gitconfig, "user.name") or None
            info.git_email = get_git_config(gitconfig, "user.email") or None

        if readme.is_file():
            try:
                for line in readme.read_text(encoding="utf-8").splitlines():
                    if line.startswith("Template:"):
                        info.template = line[len("Template:"):].strip()
                    elif line.startswith("Created:"):
                        info.created = line[len("Created:"):].strip()
            except OSError as e:
                logger.debug("Could not read %s: %s", readme, e)

        if env_file.is_file():
            info.env_var_count = count_env_lines(env_file)

        return info

    def list_profiles_report(self, opts: ListOptions) -> list[ProfileInfo]:
        """Print all profiles, or let the user pick one for details"""
        if not self.profiles_dir.is_dir():
            console.print("[yellow]No profiles directory found[/yellow]")
            console.print("Create your first profile with:")
            console.print("  shell-profiler create my-profile")
            return []

        names = self.list_profiles()
        if not names:
            console.print("[yellow]No profiles found[/yellow]")
            console.print("Create your first profile with:")
            console.print("  shell-profiler create my-profile")
            return []

        if opts.interactive and prompts.is_interactive():
            selected = prompts.select_profile(names, "Select a profile:")
            info = self.describe_profile(selected)
            self.show_profile_details(info, show_config=opts.show_config)
            return [info]

        profiles = [self.describe_profile(name) for name in names]
        current = self.current_profile()

        if current:
            console.print(f"[green]Currently active profile: {escape(current)}[/green]")
            console.print(f"  Location: {escape(os.environ.get('WORKSPACE_HOME', ''))}")
            console.print()

        table = Table(
            title="=== Workspace Profiles ===",
            show_header=True,
            header_style="bold magenta",
        )
        table.add_column("Profile", style="cyan", no_wrap=True)
        table.add_column("Path", style="blue")
        table.add_column("direnv")
        table.add_column("Git", style="green")
        if opts.show_config:
            table.add_column("Git Config", style="dim")
        if opts.verbose:
            table.add_column("Template")
            table.add_column("Created")
            table.add_column("Environment")
            table.add_column("Scripts", justify="right")

        for info in profiles:
            if info.name == current:
                label = f"[green]● {info.name}[/green] [yellow](active)[/yellow]"
            else:
                label = f"○ {info.name}"

            row = [
                label,
                escape(str(info.path)),
                _direnv_label(info),
                _git_label(info),
            ]
            if opts.show_config:
                row.append(escape(str(info.gitconfig_path)) if info.has_gitconfig else "-")
            if opts.verbose:
                row.extend(
                    [
                        escape(info.template or "-"),
                        escape(info.created or "-"),
                        (
                            f".env ({info.env_var_count} lines)"
                            if info.env_var_count is not None
                            else "-"
                        ),
                        str(info.script_count),
                    ]
                )
            table.add_row(*row)

        console.print(table)
        console.print()
        console.print(f"[blue]Total profiles: {len(profiles)}[/blue]")

        if not opts.verbose:
            console.print()
            console.print("Run with --verbose for more details")
            console.print("Run with --config to show git configuration paths")

        return profiles

    def show_profile_details(self, info: ProfileInfo, show_config: bool = False):
        """Print every detail of one profile"""
        console.print(f"[bold blue]=== Profile: {info.name} ===[/bold blue]")
        console.print()
        console.print(f"  [blue]Path:[/blue] {escape(str(info.path))}")
        console.print(f"  {_direnv_label(info, with_hint=True)}")
        console.print(f"  [blue]Git:[/blue] {_git_label(info)}")
        if show_config and info.has_gitconfig:
            console.print(f"    [blue]Config:[/blue] {escape(str(info.gitconfig_path))}")
        if info.template:
            console.print(f"  [blue]Template:[/blue] {escape(info.template)}")
        if info.created:
            console.print(f"  [blue]Created:[/blue] {escape(info.created)}")
        if info.env_var_count is not None:
            console.print(
                f"  [blue]Environment:[/blue] .env file present "
                f"({info.env_var_count} lines)"
            )
        if info.script_count:
            console.print(
                f"  [blue]Scripts:[/blue] {info.script_count} executable "
                "script(s) in bin/"
            )
        console.print()

    def show_info(self, environ: Optional[Mapping[str, str]] = None) -> None:
        """Describe the profile active in the current shell"""
        if environ is None:
            environ = os.environ

        profile_name = environ.get("WORKSPACE_PROFILE", "")
        profile_home = environ.get("WORKSPACE_HOME", "")

        if not profile_name:
            console.print("No workspace profile active")
            console.print()
            console.print("To activate a profile:")
            console.print(f"  1. cd {self.profiles_dir}/<profile-name>", markup=False)
            console.print("  2. direnv allow (first time only)")
            console.print()
            console.print("Available profiles:")
            for name in self.list_profiles():
                console.print(f"  - {escape(name)}")
            return

        console.print("[bold blue]=== Current Workspace Profile ===[/bold blue]")
        console.print()
        console.print(f"Profile Name:    {escape(profile_name)}")
        console.print(f"Profile Home:    {escape(profile_home)}")
        console.print()

        git_config = environ.get("GIT_CONFIG_GLOBAL", "")
        console.print("Git Configuration:")
        console.print(f"  Config File:   {escape(git_config)}")
        if git_config:
            git_config_path = Path(git_config)
            if git_config_path.is_file():
                for label, key in (
                    ("User Name:     ", "user.name"),
                    ("User Email:    ", "user.email"),
                    ("Default Branch:", "init.defaultBranch"),
                ):
                    value = get_git_config(git_config_path, key) or "Not set"
                    console.print(f"  {label} {escape(value)}")
            else:
                console.print("  [yellow]Warning: Config file not found[/yellow]")
        console.print()

        console.print("Environment Variables:")
        for key in sorted(environ):
            if key.startswith("WORKSPACE_"):
                console.print(f"  {key}={environ[key]}", markup=False)
        console.print()

        console.print("PATH additions:")
        if profile_home:
            for entry in environ.get("PATH", "").split(os.pathsep):
                if profile_home in entry:
                    console.print(f"  {entry}", markup=False)


def _direnv_label(info: ProfileInfo, with_hint: bool = False) -> str:
    if not info.has_envrc:
        return "[yellow]⚠ Missing .envrc[/yellow]"
    if info.direnv_allowed is None:
        return "[dim]unknown[/dim]"
    if info.direnv_allowed:
        return "[green]✓ allowed[/green]"
    label = "[yellow]⚠ not allowed[/yellow]"
    if with_hint:
        label += f" (run: cd {escape(str(info.path))} && direnv allow)"
    return label


def _git_label(info: ProfileInfo) -> str:
    if not info.has_gitconfig:
        return "[yellow]⚠ Missing .gitconfig[/yellow]"
    name = escape(info.git_name or "Not set")
    email = escape(info.git_email or "Not set")
    return f"{name} <{email}>"
