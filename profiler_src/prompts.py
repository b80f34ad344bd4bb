#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Interactive prompts for selection, input and confirmation.
"""

import sys

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, IntPrompt, Prompt

from .errors import CancelledError, ProfilerError
from .models import TEMPLATE_DESCRIPTIONS, TEMPLATE_NAMES

console = Console()


def is_interactive() -> bool:
    """True when stdin is a terminal that can answer prompts"""
    try:
        return sys.stdin.isatty()
    except (AttributeError, ValueError):
        return False


def select_option(options: list[str], message: str, default: int = 1) -> str:
    """Show a numbered menu and return the chosen option"""
    if not options:
        raise ProfilerError("no options available")

    console.print(f"\n[bold]{message}[/bold]")
    for i, option in enumerate(options, 1):
        console.print(f"  [cyan]{i:>2}[/cyan]) {escape(option)}")

    try:
        choice = IntPrompt.ask(
            "Enter number",
            console=console,
            choices=[str(i) for i in range(1, len(options) + 1)],
            show_choices=False,
            default=default,
        )
    except (EOFError, KeyboardInterrupt):
        raise CancelledError("selection cancelled")
    return options[choice - 1]


def select_profile(profiles: list[str], message: str) -> str:
    if not profiles:
        raise ProfilerError("no profiles available")
    return select_option(profiles, message)


def select_template() -> str:
    labels = [f"{name} - {TEMPLATE_DESCRIPTIONS[name]}" for name in TEMPLATE_NAMES]
    selected = select_option(labels, "Select template:")
    return selected.split(" - ", 1)[0]


def ask_input(message: str, default: str = "") -> str:
    try:
        return Prompt.ask(
            message, console=console, default=default, show_default=bool(default)
        )
    except (EOFError, KeyboardInterrupt):
        raise CancelledError("input cancelled")


def confirm(message: str, default: bool = False) -> bool:
    try:
        return Confirm.ask(message, console=console, default=default)
    except (EOFError, KeyboardInterrupt):
        return False
