"""Time-bounded invocation of external preview renderers."""

from __future__ import annotations

import shutil
import subprocess
from collections.abc import Iterable
from dataclasses import dataclass

TIMEOUT_NOTE = "… (preview timed out)"


@dataclass(frozen=True)
class ExternalOutput:
    text: str
    timed_out: bool = False
    failed: bool = False


def first_available(names: Iterable[str]) -> str | None:
    for name in names:
        found = shutil.which(name)
        if found:
            return found
    return None


def _as_text(data: bytes | str | None) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


def run_bounded(cmd: list[str], timeout: float) -> ExternalOutput:
    """Run ``cmd`` and capture stdout, killing it after ``timeout`` seconds.

    On timeout the output produced so far is kept. A non-positive timeout
    disables the bound.
    """
    try:
        proc = subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            stdin=subprocess.DEVNULL,
            timeout=timeout if timeout > 0 else None,
            check=False,
        )
    except subprocess.TimeoutExpired as exc:
        return ExternalOutput(_as_text(exc.output), timed_out=True)
    except OSError:
        return ExternalOutput("", failed=True)
    return ExternalOutput(_as_text(proc.stdout), failed=proc.returncode != 0 and not proc.stdout)


def with_timeout_note(output: ExternalOutput) -> str:
    text = output.text
    if not output.timed_out:
        return text
    if text and not text.endswith("\n"):
        text += "\n"
    return f"{text}{TIMEOUT_NOTE}\n"
