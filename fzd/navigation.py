"""Navigation state for the directory browser.

``NavigationState`` is the single owner of the current directory and of the
memory mapping each directory to the child last entered from it. That
memory only ever drives caret preselection; it is never consulted to decide
where navigation goes.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum

from .codec import basename_of, normalize_path, parent_of
from .debug import get_logger

log = get_logger("navigation")


class EnterKind(Enum):
    CONFIRM = "confirm"
    EDIT = "edit"
    IGNORE = "ignore"


@dataclass(frozen=True)
class EnterResult:
    """What pressing Enter on a selection resolves to."""

    kind: EnterKind
    path: str | None = None


def logical_cwd() -> str:
    """Return the working directory as the shell spells it.

    ``$PWD`` keeps symlinked components intact; it is only trusted when it
    still names the same directory as ``os.getcwd()``.
    """
    physical = os.getcwd()
    pwd = os.environ.get("PWD", "")
    if pwd and os.path.isabs(pwd):
        try:
            if os.path.samefile(pwd, physical):
                return normalize_path(pwd)
        except OSError:
            pass
    return normalize_path(physical)


class NavigationState:
    def __init__(self, start_dir: str) -> None:
        self.current_dir = normalize_path(start_dir)
        self.memory: dict[str, str] = {}

    @property
    def parent_dir(self) -> str:
        return parent_of(self.current_dir)

    def remember_child(self, parent: str, child: str) -> None:
        if not parent or not child:
            return
        self.memory[parent] = child
        log.debug("remember_child: [%s]=%r", parent, child)

    def up(self) -> None:
        """Move to the parent, remembering the directory just left."""
        parent = self.parent_dir
        self.remember_child(parent, basename_of(self.current_dir))
        self.current_dir = parent
        log.debug("LEFT -> %s", self.current_dir)

    def down(self, selected: str | None) -> bool:
        """Enter ``selected`` when it is a real child directory.

        The ``..`` line carries the parent path, so a Right press on it is
        ignored rather than treated as ascending.
        """
        if not selected:
            log.debug("RIGHT ignored (empty selection)")
            return False
        target = normalize_path(selected)
        if target == self.parent_dir or not os.path.isdir(target):
            log.debug("RIGHT ignored (%r)", selected)
            return False
        self.remember_child(self.current_dir, basename_of(target))
        self.current_dir = target
        log.debug("RIGHT -> %s", self.current_dir)
        return True

    def resolve_enter(self, selected: str | None) -> EnterResult:
        """Classify Enter on ``selected`` without changing state.

        Enter on the ``..`` line confirms the current directory instead of
        its parent.
        """
        if not selected:
            return EnterResult(EnterKind.IGNORE)
        target = normalize_path(selected)
        if os.path.isdir(target):
            if target == self.parent_dir:
                return EnterResult(EnterKind.CONFIRM, self.current_dir)
            return EnterResult(EnterKind.CONFIRM, target)
        if os.path.isfile(target):
            return EnterResult(EnterKind.EDIT, target)
        return EnterResult(EnterKind.IGNORE)

    def reveal_file(self, file_path: str) -> None:
        """Make the directory containing ``file_path`` current.

        Its own parent remembers it, so stepping up lands the caret on it.
        """
        containing = parent_of(file_path)
        self.current_dir = containing
        self.remember_child(parent_of(containing), basename_of(containing))

    def reveal_entry(self, entry_path: str) -> None:
        """Make the parent of ``entry_path`` current, caret on the entry."""
        target = normalize_path(entry_path)
        containing = parent_of(target)
        self.current_dir = containing
        if os.path.isdir(target) and target != containing:
            self.remember_child(containing, basename_of(target))
