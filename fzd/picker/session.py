"""Run fzf for one frame and resolve exactly one action from it."""

from __future__ import annotations

import subprocess
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path

from ..debug import get_logger
from ..errors import PickerFailedError
from . import fzf
from .actions import CANCEL, Action, ActionKind, parse_action_line
from .channel import DEFAULT_POLL_SECONDS, DEFAULT_WAIT_SECONDS, SideChannel

log = get_logger("picker")

FZF_ERROR_EXIT = 2


class PickerSession:
    """Driver for the main browse frames and the global-search overlay.

    Every invocation gets a fresh side channel that is removed before the
    call returns, whatever fzf did.
    """

    def __init__(
        self,
        fzf_bin: str,
        runtime_dir: Path | None = None,
        history_file: Path | None = None,
        caret_supported: bool = False,
        wait_timeout: float = DEFAULT_WAIT_SECONDS,
        poll_interval: float = DEFAULT_POLL_SECONDS,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ) -> None:
        self.fzf_bin = fzf_bin
        self.runtime_dir = runtime_dir
        self.history_file = history_file
        self.caret_supported = caret_supported
        self.wait_timeout = wait_timeout
        self.poll_interval = poll_interval
        self._runner = runner

    def run_frame(self, lines_text: str, prompt: str, preselect: int | None = None) -> Action:
        """Show one directory frame; keys: Enter, Left, Right, Ctrl-F, Esc."""
        extra = fzf.history_options(self.history_file)
        if self.caret_supported:
            extra += fzf.preselect_options(preselect)
        elif preselect is not None:
            log.debug("no caret this frame (start:pos unsupported)")
        return self.run(lines_text, prompt, fzf.MAIN_KEYS, extra)

    def run_overlay(self, source_text: str, prompt: str, live_reload: bool) -> Action:
        """Show the global-search overlay over a static or live-reloaded list."""
        extra = fzf.live_reload_options() if live_reload else []
        return self.run(source_text, prompt, fzf.OVERLAY_KEYS, extra)

    def run_idle_overlay(self, prompt: str) -> Action:
        """Overlay with no data source; only Escape does anything."""
        return self.run("", prompt, fzf.ESCAPE_ONLY_KEYS, ["--disabled"])

    def run(
        self,
        input_text: str,
        prompt: str,
        keys: Mapping[str, ActionKind],
        extra_options: Sequence[str] = (),
    ) -> Action:
        """Run fzf once; raises ``PickerFailedError`` when fzf reports its error status."""
        with SideChannel(self.runtime_dir) as channel:
            argv = [
                self.fzf_bin,
                *fzf.base_options(prompt),
                *extra_options,
                *fzf.key_options(keys, channel.path),
            ]
            try:
                proc = self._runner(
                    argv,
                    input=input_text,
                    stdout=subprocess.DEVNULL,
                    encoding="utf-8",
                    errors="surrogateescape",
                    env=fzf.fzf_environment(),
                    check=False,
                )
            except OSError as exc:
                log.error("failed to run fzf: %s", exc)
                return CANCEL
            if proc.returncode == FZF_ERROR_EXIT:
                raise PickerFailedError(proc.returncode)

            message = channel.receive(self.wait_timeout, self.poll_interval)

        action = parse_action_line(message)
        if action is None:
            if message:
                log.debug("garbled side-channel message %r", message)
            else:
                log.debug("fzf aborted without an action")
            return CANCEL
        if action.kind not in keys.values():
            log.debug("action %s not bound in this picker", action.kind.name)
            return CANCEL
        log.debug("action %s token=%r", action.kind.name, action.token)
        return action
