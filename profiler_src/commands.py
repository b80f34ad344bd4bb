#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CLI commands for workspace profile management.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Annotated, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from . import direnv, prompts
from .config import (
    AppConfig,
    default_profiles_dir,
    expand_path,
    get_config_path,
    load_config,
    save_config,
)
from .dotfiles import edit_dotfile, list_dotfiles
from .errors import CancelledError, ProfilerError
from .log import get_logger, setup_logging
from .manager import ProfileManager
from .models import (
    CreateOptions,
    DeleteOptions,
    DotfilesOptions,
    ListOptions,
    ProfileTarget,
    RestoreOptions,
    SelectOptions,
    SyncOptions,
    UpdateOptions,
)
from .sync import ProfileRepository, status_all

console = Console()
logger = get_logger(__name__)

HELP_TEXT = """\
Workspace Profile Manager

Manage workspace profiles with direnv for environment-specific configurations.

Usage: shell-profiler <command> [arguments]

Commands:
    init [options]              Initialize the profile manager configuration
        Options:
            --profiles-dir <path>   Set profiles directory path
            --interactive, -i       Interactive setup
            --force, -f             Overwrite existing configuration

    create <name> [options]     Create a new workspace profile (aliases: new, add)
        Options:
            --template, -t <type>   Use template: basic, personal, work, client
            --git-name <name>       Set git user name
            --git-email <email>     Set git user email
            --init-git              Initialize a git repository in the profile
            --git-remote <url>      Add a remote (implies --init-git)
            --dry-run               Preview without creating anything
            --interactive, -i       Interactive setup (default if no flags provided)
            --no-interactive        Disable interactive mode
            --force, -f             Overwrite existing profile

    update [name] [options]     Update a profile with new features (alias: upgrade)
        Options:
            --dry-run               Preview changes without applying
            --force, -f             Continue even if the backup fails
            --no-backup             Skip creating backup

    restore [name] [options]    Restore a profile from an update backup
        Options:
            --backup-date <date>    Restore from a specific backup (YYYY-MM-DD_HH-MM-SS)
            --file <file>           Restore only a specific file
            --dry-run               Preview restore without restoring
            --force, -f             Skip confirmation prompt

    list [options]              List all workspace profiles (alias: ls)
        Options:
            --verbose, -v           Show detailed information (disables interactive)
            --config, -c            Show git configuration paths (disables interactive)
            --no-interactive        Disable interactive mode

    select [name] [options]     Select and switch to a profile (alias: use)
        Options:
            --allow-direnv          Automatically allow direnv for selected profile

    delete [name] [options]     Delete a workspace profile (aliases: remove, rm)
        Options:
            --force, -f             Skip confirmation prompt
            --dry-run               Preview deletion without deleting
            --no-interactive        Disable interactive mode

    info                        Show the active profile (aliases: current, show)
    status                      Show direnv status

    dotfiles <command> [name]   Manage profile dotfiles
        Commands:
            list, ls                List all dotfiles in a profile
            edit, e                 Edit a dotfile
        Options:
            --profile, -p <name>    Profile name (interactive if omitted)
            --file, -f <name>       File name (interactive if omitted)
            --editor, -e <name>     Editor to use (default: $EDITOR, $VISUAL or vim)

    sync <command> [name]       Keep profiles in git repositories
        Commands:
            init [--remote <url>]   Initialize repository
            pull                    Pull changes from remote
            push [--force]          Push changes to remote
            sync                    Pull then push
            remote <url>            Set or update remote URL
            status                  Show sync status (all profiles if name omitted)
        Options:
            --no-interactive        Disable interactive profile selection

    help                        Show this help message

Global options:
    --debug                     Show diagnostic logging (or SHELL_PROFILER_DEBUG=1)

Examples:
    shell-profiler create my-project
    shell-profiler create my-project --template work --git-email me@example.com
    shell-profiler list --verbose
    shell-profiler select my-project --allow-direnv
    shell-profiler update my-project --dry-run
    shell-profiler restore my-project --backup-date 2024-11-29_14-30-45
    shell-profiler dotfiles edit my-project .gitconfig
    shell-profiler sync init my-project --remote git@github.com:me/my-project.git

Getting Started:
    1. Initialize:          shell-profiler init (or shell-profiler init --interactive)
    2. Create a profile:    shell-profiler create my-project --interactive
    3. Navigate to it:      cd <profiles-dir>/my-project
    4. Allow direnv:        direnv allow
    5. Verify:              shell-profiler info
"""

# Commands that work without direnv installed
DIRENV_EXEMPT_COMMANDS = frozenset({"help", "init", "status"})


def print_help() -> None:
    console.print(HELP_TEXT, markup=False, highlight=False, soft_wrap=True, end="")


def _help_callback(value: Optional[bool]) -> None:
    if value:
        print_help()
        raise typer.Exit()


app = typer.Typer(
    name="shell-profiler",
    help="Workspace Profile Manager: workspace profiles with direnv",
    add_completion=False,
)
dotfiles_app = typer.Typer(help="Manage profile dotfiles", no_args_is_help=True)
sync_app = typer.Typer(help="Sync profiles with git", no_args_is_help=True)
app.add_typer(dotfiles_app, name="dotfiles")
app.add_typer(sync_app, name="sync")


# ============================================================================
# Helpers
# ============================================================================


def _validation_message(error: ValidationError) -> str:
    return "; ".join(
        err["msg"].removeprefix("Value error, ") for err in error.errors()
    )


@contextmanager
def handle_errors() -> Iterator[None]:
    """Report domain errors the way every command does and exit"""
    try:
        yield
    except CancelledError as e:
        console.print(f"[blue]{escape(e.message)}[/blue]")
        raise typer.Exit(0)
    except ProfilerError as e:
        logger.debug("Command failed", exc_info=True)
        console.print(f"[red]Error: {escape(e.message)}[/red]")
        if e.suggestion:
            console.print()
            console.print(escape(e.suggestion))
        raise typer.Exit(1)
    except ValidationError as e:
        console.print(f"[red]Error: {escape(_validation_message(e))}[/red]")
        raise typer.Exit(1)


def _get_manager() -> ProfileManager:
    config = load_config()
    logger.debug("Profiles directory: %s", config.profiles_dir)
    return ProfileManager(config.profiles_dir)


def _require_name(manager: ProfileManager, opts: ProfileTarget, action: str) -> str:
    return manager.choose_profile(opts.profile_name, f"Select profile to {action}:")


@app.callback(invoke_without_command=True)
def callback(
    ctx: typer.Context,
    debug: Annotated[
        bool,
        typer.Option(
            "--debug", envvar="SHELL_PROFILER_DEBUG", help="Enable debug logging"
        ),
    ] = False,
    show_help: Annotated[
        Optional[bool],
        typer.Option(
            "--help",
            "-h",
            is_eager=True,
            callback=_help_callback,
            help="Show this message and exit",
        ),
    ] = None,
):
    """Workspace Profile Manager"""
    setup_logging(debug)

    if ctx.invoked_subcommand is None:
        print_help()
        raise typer.Exit()

    if ctx.invoked_subcommand not in DIRENV_EXEMPT_COMMANDS:
        with handle_errors():
            path = direnv.require_direnv()
            logger.debug("Using direnv at %s", path)


# ============================================================================
# CLI Commands
# ============================================================================


@app.command("help")
def help_command():
    """Show the full usage text"""
    print_help()


@app.command()
def init(
    profiles_dir: Annotated[
        Optional[str],
        typer.Option("--profiles-dir", help="Profiles directory path"),
    ] = None,
    interactive: Annotated[
        bool, typer.Option("-i", "--interactive", help="Interactive setup")
    ] = False,
    force: Annotated[
        bool, typer.Option("-f", "--force", help="Overwrite existing configuration")
    ] = False,
):
    """Initialize the profile manager configuration"""
    config_path = get_config_path()

    with handle_errors():
        if config_path.exists() and not force:
            console.print("[yellow]Configuration file already exists[/yellow]")
            console.print(f"  Location: {escape(str(config_path))}")
            console.print()
            if not prompts.confirm("Overwrite existing configuration?"):
                raise CancelledError("Initialization cancelled")

        if interactive:
            console.print("Profile Manager Initialization")
            console.print()
            profiles_dir = prompts.ask_input(
                "Profiles directory", default=str(default_profiles_dir())
            )

        target = expand_path(profiles_dir) if profiles_dir else default_profiles_dir()
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ProfilerError(f"failed to create profiles directory: {e}")

        save_config(AppConfig.model_construct(profiles_dir=target), config_path)

    console.print("[green]✓[/green] Profile manager initialized successfully")
    console.print()
    console.print(f"  Profiles directory: {escape(str(target))}")
    console.print(f"  Config file: {escape(str(config_path))}")
    console.print()
    console.print("[blue]Next steps:[/blue]")
    console.print("  1. Create your first profile: shell-profiler create my-profile")
    console.print("  2. Navigate to it: cd <profiles-dir>/my-profile")
    console.print("  3. Allow direnv: direnv allow")


@app.command()
def create(
    profile_name: Annotated[str, typer.Argument(help="Name of the profile")],
    template: Annotated[
        Optional[str],
        typer.Option(
            "-t", "--template", help="Template: basic, personal, work, client"
        ),
    ] = None,
    git_name: Annotated[
        Optional[str], typer.Option("--git-name", help="Git user name")
    ] = None,
    git_email: Annotated[
        Optional[str], typer.Option("--git-email", help="Git user email")
    ] = None,
    force: Annotated[
        bool, typer.Option("-f", "--force", help="Overwrite existing profile")
    ] = False,
    interactive: Annotated[
        Optional[bool],
        typer.Option(
            "--interactive/--no-interactive",
            "-i",
            help="Prompt for settings (default when no other flags are given)",
        ),
    ] = None,
    dry_run: Annotated[
        bool, typer.Option("--dry-run", help="Show what would be created")
    ] = False,
    init_git: Annotated[
        bool, typer.Option("--init-git", help="Initialize a git repository")
    ] = False,
    git_remote: Annotated[
        Optional[str],
        typer.Option("--git-remote", help="Git remote URL (implies --init-git)"),
    ] = None,
):
    """Create a new workspace profile"""
    if interactive is None:
        has_flags = any(
            [template, git_name, git_email, force, dry_run, init_git, git_remote]
        )
        interactive = not has_flags and prompts.is_interactive()

    with handle_errors():
        opts = CreateOptions(
            profile_name=profile_name,
            template=template or "basic",
            git_name=git_name or "",
            git_email=git_email or "",
            force=force,
            interactive=interactive,
            dry_run=dry_run,
            init_git=init_git,
            git_remote=git_remote or "",
        )
        _get_manager().create_profile(opts)


@app.command()
def update(
    profile_name: Annotated[
        Optional[str], typer.Argument(help="Profile to update")
    ] = None,
    force: Annotated[
        bool, typer.Option("-f", "--force", help="Continue even if backup fails")
    ] = False,
    dry_run: Annotated[
        bool, typer.Option("--dry-run", help="Preview changes without applying")
    ] = False,
    no_backup: Annotated[
        bool, typer.Option("--no-backup", help="Skip creating backup")
    ] = False,
):
    """Update an existing profile with new features"""
    with handle_errors():
        opts = UpdateOptions(
            profile_name=profile_name,
            force=force,
            dry_run=dry_run,
            no_backup=no_backup,
        )
        _get_manager().update_profile(opts)


@app.command()
def restore(
    profile_name: Annotated[
        Optional[str], typer.Argument(help="Profile to restore")
    ] = None,
    backup_date: Annotated[
        Optional[str],
        typer.Option("--backup-date", help="Backup timestamp (YYYY-MM-DD_HH-MM-SS)"),
    ] = None,
    file_name: Annotated[
        Optional[str], typer.Option("--file", help="Restore only this file")
    ] = None,
    force: Annotated[
        bool, typer.Option("-f", "--force", help="Skip confirmation prompt")
    ] = False,
    dry_run: Annotated[
        bool, typer.Option("--dry-run", help="Preview restore without restoring")
    ] = False,
):
    """Restore a profile from an update backup"""
    with handle_errors():
        opts = RestoreOptions(
            profile_name=profile_name,
            backup_date=backup_date,
            file_name=file_name,
            force=force,
            dry_run=dry_run,
        )
        _get_manager().restore_profile(opts)


@app.command("list")
def list_command(
    verbose: Annotated[
        bool, typer.Option("-v", "--verbose", help="Show detailed information")
    ] = False,
    show_config: Annotated[
        bool, typer.Option("-c", "--config", help="Show git configuration paths")
    ] = False,
    interactive: Annotated[
        bool,
        typer.Option(
            "--interactive/--no-interactive", "-i", help="Select a profile to inspect"
        ),
    ] = True,
):
    """List all workspace profiles"""
    with handle_errors():
        opts = ListOptions(
            verbose=verbose, show_config=show_config, interactive=interactive
        )
        _get_manager().list_profiles_report(opts)


@app.command()
def select(
    profile_name: Annotated[
        Optional[str], typer.Argument(help="Profile to select")
    ] = None,
    allow_direnv: Annotated[
        bool,
        typer.Option("--allow-direnv", help="Run 'direnv allow' for the profile"),
    ] = False,
):
    """Select and switch to a profile"""
    with handle_errors():
        opts = SelectOptions(profile_name=profile_name, allow_direnv=allow_direnv)
        _get_manager().select_profile(opts)


@app.command()
def delete(
    profile_name: Annotated[
        Optional[str], typer.Argument(help="Profile to delete")
    ] = None,
    force: Annotated[
        bool, typer.Option("-f", "--force", help="Skip confirmation prompt")
    ] = False,
    dry_run: Annotated[
        bool, typer.Option("--dry-run", help="Preview deletion without deleting")
    ] = False,
    interactive: Annotated[
        bool,
        typer.Option("--interactive/--no-interactive", help="Select interactively"),
    ] = True,
):
    """Delete a workspace profile"""
    with handle_errors():
        opts = DeleteOptions(
            profile_name=profile_name,
            force=force,
            dry_run=dry_run,
            interactive=interactive,
        )
        _get_manager().delete_profile(opts)


@app.command()
def info():
    """Show information about the active profile"""
    with handle_errors():
        _get_manager().show_info()


@app.command()
def status():
    """Show direnv status"""
    raise typer.Exit(direnv.show_status())


# Aliases
app.command("new", hidden=True)(create)
app.command("add", hidden=True)(create)
app.command("upgrade", hidden=True)(update)
app.command("ls", hidden=True)(list_command)
app.command("use", hidden=True)(select)
app.command("remove", hidden=True)(delete)
app.command("rm", hidden=True)(delete)
app.command("current", hidden=True)(info)
app.command("show", hidden=True)(info)


# ============================================================================
# Dotfiles Commands
# ============================================================================


def _dotfiles_target(manager: ProfileManager, opts: DotfilesOptions):
    name = _require_name(manager, opts, "manage dotfiles")
    return name, manager.require_profile(name)


@dotfiles_app.command("list")
def dotfiles_list(
    profile_name: Annotated[Optional[str], typer.Argument(help="Profile name")] = None,
    profile: Annotated[
        Optional[str], typer.Option("-p", "--profile", help="Profile name")
    ] = None,
):
    """List all dotfiles in a profile"""
    with handle_errors():
        manager = _get_manager()
        opts = DotfilesOptions(profile_name=profile or profile_name)
        name, profile_dir = _dotfiles_target(manager, opts)
        list_dotfiles(name, profile_dir)


@dotfiles_app.command("edit")
def dotfiles_edit(
    profile_name: Annotated[Optional[str], typer.Argument(help="Profile name")] = None,
    file_arg: Annotated[
        Optional[str], typer.Argument(metavar="[FILE]", help="File to edit")
    ] = None,
    profile: Annotated[
        Optional[str], typer.Option("-p", "--profile", help="Profile name")
    ] = None,
    file_name: Annotated[
        Optional[str], typer.Option("-f", "--file", help="File to edit")
    ] = None,
    editor: Annotated[
        Optional[str], typer.Option("-e", "--editor", help="Editor to use")
    ] = None,
):
    """Edit a dotfile in a profile"""
    with handle_errors():
        manager = _get_manager()
        opts = DotfilesOptions(
            profile_name=profile or profile_name,
            file_name=file_name or file_arg,
            editor=editor,
        )
        _, profile_dir = _dotfiles_target(manager, opts)
        edit_dotfile(profile_dir, opts.file_name, opts.editor)


dotfiles_app.command("ls", hidden=True)(dotfiles_list)
dotfiles_app.command("e", hidden=True)(dotfiles_edit)


# ============================================================================
# Sync Commands
# ============================================================================

NoInteractiveOption = Annotated[
    bool,
    typer.Option("--interactive/--no-interactive", help="Select interactively"),
]


def _repository(opts: SyncOptions, action: str) -> ProfileRepository:
    manager = _get_manager()

    name = opts.profile_name
    if not name:
        if not opts.interactive:
            raise ProfilerError("profile name is required")
        name = manager.choose_profile(None, f"Select profile for sync {action}:")
    return ProfileRepository(manager.require_profile(name), name)


@sync_app.command("init")
def sync_init(
    profile_name: Annotated[Optional[str], typer.Argument(help="Profile name")] = None,
    remote: Annotated[
        Optional[str], typer.Option("--remote", help="Remote URL for origin")
    ] = None,
    interactive: NoInteractiveOption = True,
):
    """Initialize a git repository in a profile"""
    with handle_errors():
        opts = SyncOptions(
            profile_name=profile_name, interactive=interactive, remote=remote
        )
        _repository(opts, "init").init(opts.remote)


@sync_app.command("pull")
def sync_pull(
    profile_name: Annotated[Optional[str], typer.Argument(help="Profile name")] = None,
    interactive: NoInteractiveOption = True,
):
    """Pull changes from remote"""
    with handle_errors():
        opts = SyncOptions(profile_name=profile_name, interactive=interactive)
        _repository(opts, "pull").pull()


@sync_app.command("push")
def sync_push(
    profile_name: Annotated[Optional[str], typer.Argument(help="Profile name")] = None,
    force: Annotated[bool, typer.Option("-f", "--force", help="Force push")] = False,
    interactive: NoInteractiveOption = True,
):
    """Commit and push changes to remote"""
    with handle_errors():
        opts = SyncOptions(
            profile_name=profile_name, interactive=interactive, force=force
        )
        _repository(opts, "push").push(opts.force)


@sync_app.command("sync")
def sync_sync(
    profile_name: Annotated[Optional[str], typer.Argument(help="Profile name")] = None,
    interactive: NoInteractiveOption = True,
):
    """Pull then push"""
    with handle_errors():
        opts = SyncOptions(profile_name=profile_name, interactive=interactive)
        _repository(opts, "sync").sync()


@sync_app.command("remote")
def sync_remote(
    profile_name: Annotated[Optional[str], typer.Argument(help="Profile name")] = None,
    url: Annotated[Optional[str], typer.Argument(help="Remote URL")] = None,
    remote: Annotated[
        Optional[str], typer.Option("--remote", help="Remote URL")
    ] = None,
    interactive: NoInteractiveOption = True,
):
    """Set or update the origin remote"""
    with handle_errors():
        opts = SyncOptions(
            profile_name=profile_name, interactive=interactive, remote=url or remote
        )
        _repository(opts, "remote").set_remote(opts.remote or "")


@sync_app.command("status")
def sync_status(
    profile_name: Annotated[Optional[str], typer.Argument(help="Profile name")] = None,
):
    """Show repository status (all profiles when no name is given)"""
    with handle_errors():
        if profile_name is None:
            manager = _get_manager()
            status_all(manager.profiles_dir, manager.list_profiles())
            return
        opts = SyncOptions(profile_name=profile_name, interactive=False)
        _repository(opts, "status").status()


def main():
    """Main entry point"""
    app()


if __name__ == "__main__":
    main()
