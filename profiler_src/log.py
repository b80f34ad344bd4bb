#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Diagnostic logging wired to rich."""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "shell_profiler"


def setup_logging(debug: bool = False) -> logging.Logger:
    """Configure the package logger.

    User-facing output goes through the rich Console in each module; this
    logger only carries diagnostics (external commands, config sources) and
    stays at WARNING unless --debug is given.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """Child logger for a module, e.g. get_logger(__name__)"""
    return logging.getLogger(f"{LOGGER_NAME}.{name.rsplit('.', 1)[-1]}")
