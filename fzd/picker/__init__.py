"""Picker session driver: fzf invocation and action resolution."""

from __future__ import annotations

from .actions import CANCEL, Action, ActionKind, format_action_line, parse_action_line
from .channel import SideChannel
from .fzf import find_fzf, supports_start_pos
from .session import PickerSession

__all__ = [
    "CANCEL",
    "Action",
    "ActionKind",
    "PickerSession",
    "SideChannel",
    "find_fzf",
    "format_action_line",
    "parse_action_line",
    "supports_start_pos",
]
