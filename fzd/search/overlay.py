"""Global-search overlay: a second picker session over filesystem-wide hits.

The overlay is entered from a browse frame, runs exactly one picker
invocation, and either hands back a directory to confirm or folds its result
into the navigation state before the browse loop resumes.
"""

from __future__ import annotations

import os
from collections.abc import Callable

from ..config import FzdConfig
from ..debug import get_logger
from ..lines import LabelColors, render_results
from ..navigation import NavigationState
from ..picker import Action, ActionKind, PickerSession
from .backends import LocateBackend, SearchBackend, select_backend

log = get_logger("search.overlay")


def overlay_prompt(config: FzdConfig) -> str:
    return f"global:{config.global_root.rstrip('/')}/ > "


class GlobalSearchOverlay:
    def __init__(
        self,
        config: FzdConfig,
        picker: PickerSession,
        open_file: Callable[[str], None],
        colors: LabelColors | None = None,
        backend_selector: Callable[[FzdConfig], SearchBackend | None] = select_backend,
    ) -> None:
        self.config = config
        self.picker = picker
        self.open_file = open_file
        self.colors = colors or LabelColors()
        self.backend_selector = backend_selector

    def pick(self) -> Action:
        """Run the overlay picker once with the backend chosen for this session."""
        prompt = overlay_prompt(self.config)
        backend = self.backend_selector(self.config)
        if backend is None:
            log.debug("GLOBAL overlay disabled")
            return self.picker.run_idle_overlay(prompt)

        log.debug("GLOBAL overlay start (backend=%s)", backend.name)
        if isinstance(backend, LocateBackend):
            return self.picker.run_overlay("", prompt, live_reload=True)

        index_text = render_results(((hit.path, hit.is_dir) for hit in backend.index()), self.colors)
        return self.picker.run_overlay(index_text, prompt, live_reload=False)

    def run(self, state: NavigationState) -> str | None:
        """Run the overlay; return a directory to confirm, else ``None``.

        Right enters a directory hit; Left shows the hit inside its parent;
        Enter confirms a directory or edits a file and then browses the
        file's directory.
        """
        action = self.pick()
        if action.kind is ActionKind.CANCEL:
            log.debug("GLOBAL overlay cancelled")
            return None

        selected = action.path
        if selected is None:
            log.debug("GLOBAL overlay: no selection")
            return None

        if action.kind is ActionKind.DOWN:
            state.down(selected)
            return None
        if action.kind is ActionKind.UP:
            if os.path.exists(selected):
                state.reveal_entry(selected)
            return None
        if action.kind is ActionKind.ENTER:
            if os.path.isdir(selected):
                return selected
            if os.path.isfile(selected):
                self.open_file(selected)
                state.reveal_file(selected)
        return None
