"""fzf executable discovery, capability probing, and argv construction."""

from __future__ import annotations

import os
import shlex
import shutil
import subprocess
import sys
from collections.abc import Mapping
from pathlib import Path

from ..errors import PickerNotFoundError
from ..lines import DELIMITER
from .actions import ActionKind, format_action_line

FZF_NAME = "fzf"
PROBE_TIMEOUT_SECONDS = 5.0
HISTORY_SIZE = 4000
PREVIEW_WINDOW = "right,60%:wrap"

# Default picker commands that would replace the stdin we feed fzf.
FZF_ENV_DROP = ("FZF_DEFAULT_COMMAND", "FZF_CTRL_T_COMMAND", "FZF_ALT_C_COMMAND")

MAIN_KEYS: Mapping[str, ActionKind] = {
    "enter": ActionKind.ENTER,
    "left": ActionKind.UP,
    "right": ActionKind.DOWN,
    "ctrl-f": ActionKind.SEARCH,
    "esc": ActionKind.CANCEL,
}
OVERLAY_KEYS: Mapping[str, ActionKind] = {
    "enter": ActionKind.ENTER,
    "left": ActionKind.UP,
    "right": ActionKind.DOWN,
    "esc": ActionKind.CANCEL,
}
ESCAPE_ONLY_KEYS: Mapping[str, ActionKind] = {"esc": ActionKind.CANCEL}


def find_fzf() -> str:
    """Return the fzf path or raise ``PickerNotFoundError``."""
    found = shutil.which(FZF_NAME)
    if not found:
        raise PickerNotFoundError(FZF_NAME)
    return found


def fzf_environment(base: Mapping[str, str] | None = None) -> dict[str, str]:
    """Environment for fzf; ``FZF_DEFAULT_OPTS`` is kept so user themes apply."""
    env = dict(os.environ if base is None else base)
    for name in FZF_ENV_DROP:
        env.pop(name, None)
    return env


def supports_start_pos(fzf_bin: str) -> bool:
    """Return whether this fzf understands ``--bind start:pos(N)``."""
    try:
        proc = subprocess.run(
            [fzf_bin, "--bind=start:pos(1)", "--select-1", "--exit-0"],
            input="x\n",
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            text=True,
            timeout=PROBE_TIMEOUT_SECONDS,
            env=fzf_environment(),
            check=False,
        )
    except (OSError, subprocess.SubprocessError):
        return False
    return proc.returncode == 0


def self_command(*args: str) -> str:
    """Shell command re-entering this program, for fzf callbacks."""
    return shlex.join([sys.executable, "-m", "fzd", *args])


def preview_command() -> str:
    return f"{self_command()} --_preview={{1}}"


def global_list_command() -> str:
    return f"{self_command()} --_global-list={{q}}"


def bind_action(key: str, kind: ActionKind, channel_path: Path) -> str:
    """Binding that records ``kind`` plus the highlighted token, then aborts."""
    message = format_action_line(kind, "{1}")
    return f"{key}:execute-silent(echo {message} > {shlex.quote(str(channel_path))})+abort"


def base_options(prompt: str) -> list[str]:
    return [
        "--ansi",
        "--height=100%",
        "--layout=reverse",
        "--border",
        "--no-mouse",
        f"--delimiter={DELIMITER}",
        "--with-nth=2..",
        f"--prompt={prompt}",
        f"--preview={preview_command()}",
        f"--preview-window={PREVIEW_WINDOW}",
    ]


def key_options(keys: Mapping[str, ActionKind], channel_path: Path) -> list[str]:
    return [f"--bind={bind_action(key, kind, channel_path)}" for key, kind in keys.items()]


def preselect_options(preselect: int | None) -> list[str]:
    """Caret binding for a 0-based line index (fzf positions are 1-based)."""
    if preselect is None or preselect < 0:
        return []
    position = preselect + 1
    return [f"--bind=start:pos({position}),load:pos({position})"]


def history_options(history_file: Path | None) -> list[str]:
    if history_file is None:
        return []
    return [f"--history={history_file}", f"--history-size={HISTORY_SIZE}"]


def live_reload_options() -> list[str]:
    """Query-driven reload: fzf stops matching and re-runs the list command."""
    return ["--disabled", f"--bind=change:reload:{global_list_command()}"]
