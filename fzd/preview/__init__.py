"""Preview entrypoint invoked by fzf for the highlighted line.

fzf runs ``fzd --_preview=<token>`` once per caret move; each call decodes
the token and prints a bounded rendering. Nothing here touches navigation
state.
"""

from __future__ import annotations

import os
from pathlib import Path

from ..codec import decode_token
from ..config import FzdConfig
from .directory import preview_directory, render_tree
from .file import hexdump, preview_file

MISSING_TEXT = "(missing)\n"


def render_preview(token: str | None, config: FzdConfig) -> str:
    """Return preview text for ``token``; empty for no selection."""
    selected = decode_token(token)
    if selected is None:
        return ""
    target = Path(selected)
    if os.path.isdir(target):
        return preview_directory(target, config.preview_depth, config.excludes, config.preview_timeout)
    if os.path.isfile(target):
        return preview_file(target, config.preview_max_lines, config.preview_timeout, config.style)
    return MISSING_TEXT


__all__ = [
    "MISSING_TEXT",
    "hexdump",
    "preview_directory",
    "preview_file",
    "render_preview",
    "render_tree",
]
