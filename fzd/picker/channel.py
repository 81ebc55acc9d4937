"""One-shot side channel between fzf key bindings and the browse loop.

fzf reports typed queries and special keys through the same result slot, so
each frame gets a fresh file that exactly one binding writes before fzf
exits. The loop reads it once, with a short bounded poll because the write
is not guaranteed to be visible the moment fzf's process ends.
"""

from __future__ import annotations

import os
import tempfile
import time
from collections.abc import Callable
from pathlib import Path

from ..debug import get_logger

log = get_logger("picker.channel")

DEFAULT_WAIT_SECONDS = 0.2
DEFAULT_POLL_SECONDS = 0.01


class SideChannel:
    """Single-writer/single-reader slot backed by a temporary file."""

    def __init__(self, directory: Path | None = None) -> None:
        target_dir = str(directory) if directory is not None else None
        fd, name = tempfile.mkstemp(prefix="fzd-ctrl-", dir=target_dir)
        os.close(fd)
        self.path = Path(name)
        self._consumed = False

    def _read(self) -> str:
        try:
            return self.path.read_text(encoding="utf-8", errors="replace")
        except OSError:
            return ""

    def receive(
        self,
        timeout: float = DEFAULT_WAIT_SECONDS,
        poll_interval: float = DEFAULT_POLL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> str | None:
        """Return the message, or ``None`` if nothing arrived in time.

        A message counts as complete once it ends with a newline; on timeout
        whatever partial content exists is returned. The slot yields its
        message only once.
        """
        if self._consumed:
            return None
        deadline = clock() + max(0.0, timeout)
        content = self._read()
        while not content.endswith("\n"):
            if clock() >= deadline:
                break
            sleep(poll_interval)
            content = self._read()
        self._consumed = True
        if not content:
            log.debug("side channel empty after %.3fs", timeout)
            return None
        return content

    def close(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
        except OSError as exc:
            log.debug("could not remove %s: %s", self.path, exc)

    def __enter__(self) -> SideChannel:
        return self

    def __exit__(self, *_exc_info) -> None:
        self.close()
