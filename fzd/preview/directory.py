"""Directory previews: a depth-limited colored tree.

``eza --tree`` is preferred, then ``tree``. When neither is installed the
tree is rendered here, bounded by depth, entry count and a deadline.
"""

from __future__ import annotations

import os
import time
from fnmatch import fnmatchcase
from pathlib import Path

from .external import TIMEOUT_NOTE, first_available, run_bounded, with_timeout_note
from .highlight import sanitize_terminal_text

DIR_PREVIEW_MAX_ENTRIES = 1_000

_DIR_COLOR = "\033[1;34m"
_FILE_COLOR = "\033[38;5;252m"
_BRANCH_COLOR = "\033[2;38;5;245m"
_NOTE_COLOR = "\033[2;38;5;250m"
_RESET = "\033[0m"


def eza_command(eza: str, directory: Path, depth: int, excludes: tuple[str, ...]) -> list[str]:
    cmd = [eza, "--tree", "-L", str(depth), "--group-directories-first", "--color=always", "--icons"]
    for pattern in excludes:
        cmd += ["--ignore-glob", pattern]
    return [*cmd, "--", str(directory)]


def tree_command(tree: str, directory: Path, depth: int, excludes: tuple[str, ...]) -> list[str]:
    cmd = [tree, "-a", "-C", "-L", str(depth)]
    if excludes:
        cmd += ["-I", "|".join(excludes)]
    return [*cmd, "--", str(directory)]


def _is_excluded(name: str, excludes: tuple[str, ...]) -> bool:
    return any(fnmatchcase(name, pattern) for pattern in excludes)


def render_tree(
    root_dir: Path,
    max_depth: int,
    excludes: tuple[str, ...] = (),
    timeout: float = 0.0,
    max_entries: int = DIR_PREVIEW_MAX_ENTRIES,
) -> str:
    """Render a tree of ``root_dir`` without external tools."""
    deadline = time.monotonic() + timeout if timeout > 0 else None
    lines_out: list[str] = [f"{_DIR_COLOR}{sanitize_terminal_text(str(root_dir))}/{_RESET}"]
    emitted = 0
    timed_out = False

    def scan(directory: Path) -> tuple[list[tuple[str, bool]], OSError | None]:
        children: list[tuple[str, bool]] = []
        try:
            with os.scandir(directory) as entries:
                for child in entries:
                    if _is_excluded(child.name, excludes):
                        continue
                    try:
                        is_dir = child.is_dir(follow_symlinks=False)
                    except OSError:
                        is_dir = False
                    children.append((child.name, is_dir))
        except OSError as exc:
            return [], exc
        children.sort(key=lambda item: (not item[1], item[0].lower()))
        return children, None

    def walk(directory: Path, prefix: str, depth: int) -> None:
        nonlocal emitted, timed_out
        if depth > max_depth or emitted >= max_entries or timed_out:
            return

        children, scan_error = scan(directory)
        if scan_error is not None:
            lines_out.append(f"{_BRANCH_COLOR}{prefix}└─{_RESET} {_NOTE_COLOR}<error: {scan_error}>{_RESET}")
            return

        for idx, (name, is_dir) in enumerate(children):
            if emitted >= max_entries:
                break
            if deadline is not None and time.monotonic() > deadline:
                timed_out = True
                return
            last = idx == len(children) - 1
            branch = "└─ " if last else "├─ "
            suffix = "/" if is_dir else ""
            color = _DIR_COLOR if is_dir else _FILE_COLOR
            lines_out.append(
                f"{_BRANCH_COLOR}{prefix}{branch}{_RESET}{color}{sanitize_terminal_text(name)}{suffix}{_RESET}"
            )
            emitted += 1
            if is_dir:
                walk(directory / name, prefix + ("   " if last else "│  "), depth + 1)

    walk(root_dir, "", 1)
    if timed_out:
        lines_out.append(TIMEOUT_NOTE)
    elif emitted >= max_entries:
        lines_out.append(f"{_NOTE_COLOR}... truncated after {max_entries} entries ...{_RESET}")
    return "\n".join(lines_out) + "\n"


def preview_directory(directory: Path, depth: int, excludes: tuple[str, ...], timeout: float) -> str:
    eza = first_available(("eza",))
    if eza is not None:
        output = run_bounded(eza_command(eza, directory, depth, excludes), timeout)
        if not output.failed:
            return with_timeout_note(output)

    tree = first_available(("tree",))
    if tree is not None:
        output = run_bounded(tree_command(tree, directory, depth, excludes), timeout)
        if not output.failed:
            return with_timeout_note(output)

    return render_tree(directory, depth, excludes, timeout=timeout)


__all__ = [
    "eza_command",
    "preview_directory",
    "render_tree",
    "tree_command",
]
