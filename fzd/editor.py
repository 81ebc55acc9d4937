"""Editor launch helper for files picked in the browser.

The shell captures fzd's stdout, so the editor is attached to the
controlling terminal explicitly. Failures are reported as a message string
instead of raising, and the browse loop carries on.
"""

from __future__ import annotations

import contextlib
import os
import shlex
import shutil
import subprocess
import sys
from collections.abc import Callable, Mapping

FALLBACK_EDITOR = "micro"
TTY_PATH = "/dev/tty"


def resolve_editor_command(
    configured: str | None = None,
    environ: Mapping[str, str] | None = None,
    which: Callable[[str], str | None] = shutil.which,
) -> list[str]:
    """Pick the editor argv: config, ``$EDITOR``, ``$VISUAL``, then ``micro``.

    A candidate whose program is not on ``PATH`` is skipped.
    """
    env = os.environ if environ is None else environ
    for candidate in (configured, env.get("EDITOR"), env.get("VISUAL")):
        if not candidate or not candidate.strip():
            continue
        try:
            cmd = shlex.split(candidate)
        except ValueError:
            continue
        if cmd and which(cmd[0]):
            return cmd
    return [FALLBACK_EDITOR]


@contextlib.contextmanager
def _terminal_streams():
    try:
        tty_in = open(TTY_PATH, "rb")
    except OSError:
        yield None, None
        return
    try:
        tty_out = open(TTY_PATH, "wb")
    except OSError:
        tty_in.close()
        yield None, None
        return
    with tty_in, tty_out:
        yield tty_in, tty_out


def launch_editor(target: str, configured: str | None = None) -> str | None:
    """Open ``target`` in the editor and wait for it to exit."""
    if not os.path.isfile(target):
        return f"Cannot edit: {target} is not a file."
    cmd = resolve_editor_command(configured)
    with _terminal_streams() as (tty_in, tty_out):
        try:
            subprocess.run(
                [*cmd, "--", target],
                stdin=tty_in,
                stdout=tty_out if tty_out is not None else sys.stderr,
                stderr=tty_out if tty_out is not None else sys.stderr,
                check=False,
            )
        except OSError as exc:
            return f"Failed to launch editor: {exc}"
    return None
