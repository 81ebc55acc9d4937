"""Interactive browse loop.

One iteration is one frame: list the current directory, build the fzf
records, block on the picker for a single action, and apply it. The loop
ends when a directory is confirmed or the user cancels.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass

from .config import FzdConfig, ensure_dir, runtime_dir, state_dir
from .debug import get_logger
from .editor import launch_editor
from .lines import Frame, LabelColors, build_lines
from .listing import Listing, list_entries
from .navigation import EnterKind, NavigationState
from .picker import ActionKind, PickerSession, find_fzf, supports_start_pos
from .search import GlobalSearchOverlay

log = get_logger("app")

EXIT_OK = 0
EXIT_CANCELLED = 130
HISTORY_FILENAME = "query-history"


@dataclass(frozen=True)
class BrowseResult:
    """Terminal outcome of a session: exit status and the directory to report."""

    status: int
    path: str | None = None

    @property
    def cancelled(self) -> bool:
        return self.status == EXIT_CANCELLED


CANCELLED = BrowseResult(EXIT_CANCELLED)


def display_prompt(directory: str, home: str | None = None) -> str:
    """Prompt text with the home directory abbreviated to ``~``."""
    home = os.path.expanduser("~") if home is None else home
    shown = directory
    if home and home != "/" and (directory == home or directory.startswith(home + "/")):
        shown = "~" + directory[len(home) :]
    if shown == "/":
        return "/ > "
    return f"{shown}/ > "


class Browser:
    def __init__(
        self,
        config: FzdConfig,
        picker: PickerSession,
        state: NavigationState,
        open_file: Callable[[str], None] | None = None,
        overlay: GlobalSearchOverlay | None = None,
        lister: Callable[[str], Listing] = list_entries,
    ) -> None:
        self.config = config
        self.picker = picker
        self.state = state
        self.colors = LabelColors.from_hex(config.color_dir, config.color_file)
        self.open_file = open_file or self._open_in_editor
        self.overlay = overlay or GlobalSearchOverlay(config, picker, self.open_file, self.colors)
        self.lister = lister

    def _open_in_editor(self, path: str) -> None:
        error = launch_editor(path, self.config.editor)
        if error:
            log.warning("%s", error)

    def frame(self) -> Frame:
        current = self.state.current_dir
        return build_lines(current, self.lister(current), self.state.memory, self.colors)

    def step(self) -> BrowseResult | None:
        """Run one frame; return a result when the session is over."""
        frame = self.frame()
        if frame.preselect is not None:
            log.debug("apply caret: line %d", frame.preselect)
        action = self.picker.run_frame(frame.render(), display_prompt(frame.directory), frame.preselect)

        if action.kind is ActionKind.CANCEL:
            log.debug("fzf aborted (Esc/close)")
            return CANCELLED
        if action.kind is ActionKind.SEARCH:
            confirmed = self.overlay.run(self.state)
            if confirmed is not None:
                return BrowseResult(EXIT_OK, confirmed)
            return None
        if action.kind is ActionKind.UP:
            self.state.up()
            return None
        if action.kind is ActionKind.DOWN:
            self.state.down(action.path)
            return None

        enter = self.state.resolve_enter(action.path)
        if enter.kind is EnterKind.CONFIRM:
            log.debug("ENTER dir -> %s", enter.path)
            return BrowseResult(EXIT_OK, enter.path)
        if enter.kind is EnterKind.EDIT and enter.path is not None:
            log.debug("ENTER file -> editor")
            self.open_file(enter.path)
        return None

    def run(self) -> BrowseResult:
        log.debug("cwd=%s", self.state.current_dir)
        while True:
            result = self.step()
            if result is not None:
                return result


def build_browser(config: FzdConfig, start_dir: str) -> Browser:
    """Wire a ``Browser`` to the real fzf; raises when fzf is missing."""
    fzf_bin = find_fzf()
    history_dir = ensure_dir(state_dir())
    picker = PickerSession(
        fzf_bin,
        runtime_dir=ensure_dir(runtime_dir()),
        history_file=history_dir / HISTORY_FILENAME if history_dir is not None else None,
        caret_supported=supports_start_pos(fzf_bin),
    )
    log.debug("start:pos supported: %s", picker.caret_supported)
    return Browser(config, picker, NavigationState(start_dir))
