"""Logging setup for fzd.

Stdout belongs to the invoking shell (it carries the chosen directory), so
log records never go there. With debugging enabled records are written to
the controlling terminal, otherwise only warnings reach stderr.
"""

from __future__ import annotations

import logging
import os
import sys

LOGGER_NAME = "fzd"
DEBUG_ENV = "FZD_DEBUG"

_CONFIGURED = False


def debug_enabled_from_env() -> bool:
    value = os.environ.get(DEBUG_ENV, "0").strip().lower()
    return value in {"1", "true", "yes", "on", "debug"}


def _open_tty_stream():
    try:
        return open("/dev/tty", "w", encoding="utf-8", buffering=1)
    except OSError:
        return None


def configure_logging(debug: bool | None = None, quiet: bool = False) -> logging.Logger:
    """Attach one handler to the package logger.

    ``quiet`` is used by the preview/list subcommands whose output is drawn
    by fzf: everything below ERROR is dropped there.
    """
    global _CONFIGURED

    logger = logging.getLogger(LOGGER_NAME)
    if debug is None:
        debug = debug_enabled_from_env()

    if quiet:
        level = logging.ERROR
    elif debug:
        level = logging.DEBUG
    else:
        level = logging.WARNING
    logger.setLevel(level)
    logger.propagate = False

    if _CONFIGURED:
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    stream = _open_tty_stream() if debug and not quiet else None
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("fzd: %(message)s"))
    logger.addHandler(handler)
    _CONFIGURED = True
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a child of the package logger for module ``name``."""
    return logging.getLogger(LOGGER_NAME).getChild(name)
