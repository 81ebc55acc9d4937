"""File previews: highlighted excerpt for text, type label and hex dump for binaries."""

from __future__ import annotations

from pathlib import Path

from .external import first_available, run_bounded, with_timeout_note
from .highlight import colorize_source, decode_text, sanitize_terminal_text

BINARY_PROBE_BYTES = 4_096
EXCERPT_MAX_BYTES = 256_000
HEXDUMP_BYTES = 1_024
HEXDUMP_WIDTH = 16
BAT_NAMES = ("bat", "batcat")


def is_text_sample(sample: bytes) -> bool:
    return b"\x00" not in sample


def read_sample(path: Path, size: int) -> bytes:
    try:
        with path.open("rb") as handle:
            return handle.read(size)
    except OSError:
        return b""


def human_size(size: int) -> str:
    value = float(size)
    for unit in ("B", "K", "M", "G", "T"):
        if value < 1024 or unit == "T":
            if unit == "B":
                return f"{int(value)}{unit}"
            return f"{value:.1f}{unit}"
        value /= 1024
    return f"{size}B"


def hexdump(data: bytes, width: int = HEXDUMP_WIDTH) -> str:
    """Canonical hex+ASCII dump (``hexdump -C`` layout)."""
    rows: list[str] = []
    for offset in range(0, len(data), width):
        chunk = data[offset : offset + width]
        hex_cells = [f"{byte:02x}" for byte in chunk]
        left = " ".join(hex_cells[:8])
        right = " ".join(hex_cells[8:])
        ascii_part = "".join(chr(byte) if 32 <= byte < 127 else "." for byte in chunk)
        rows.append(f"{offset:08x}  {left:<23}  {right:<23}  |{ascii_part}|")
    if data:
        rows.append(f"{len(data):08x}")
    return "\n".join(rows)


def file_type_label(path: Path, timeout: float) -> str:
    file_cmd = first_available(("file",))
    if file_cmd is None:
        return "binary"
    output = run_bounded([file_cmd, "-b", "--", str(path)], timeout)
    label = output.text.strip()
    return label or "binary"


def preview_binary(path: Path, timeout: float) -> str:
    try:
        size_line = f"{human_size(path.stat().st_size)}  {path}"
    except OSError:
        size_line = str(path)
    dump = hexdump(read_sample(path, HEXDUMP_BYTES))
    parts = [f"⚙ {sanitize_terminal_text(file_type_label(path, timeout))}", sanitize_terminal_text(size_line)]
    if dump:
        parts += ["", dump]
    return "\n".join(parts) + "\n"


def bat_command(bat: str, path: Path, max_lines: int) -> list[str]:
    return [bat, "--color=always", "--pager=never", f"--line-range=:{max_lines}", "--", str(path)]


def excerpt(path: Path, max_lines: int) -> str:
    """First ``max_lines`` lines of ``path``, decoded and sanitized."""
    text = decode_text(read_sample(path, EXCERPT_MAX_BYTES))
    lines = text.splitlines(keepends=True)[:max_lines]
    return sanitize_terminal_text("".join(lines))


def preview_text(path: Path, max_lines: int, timeout: float, style: str) -> str:
    bat = first_available(BAT_NAMES)
    if bat is not None:
        output = run_bounded(bat_command(bat, path, max_lines), timeout)
        if not output.failed:
            return with_timeout_note(output)
    return colorize_source(excerpt(path, max_lines), path, style)


def preview_file(path: Path, max_lines: int, timeout: float, style: str) -> str:
    if is_text_sample(read_sample(path, BINARY_PROBE_BYTES)):
        return preview_text(path, max_lines, timeout, style)
    return preview_binary(path, timeout)
