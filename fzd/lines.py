"""Build the tab-delimited records fed to fzf for one frame.

Each record is ``<token>\\t<label>``. fzf only displays the label
(``--with-nth=2..``) and hands the token back through previews and key
bindings. Line order is significant: preselection is a position index into
exactly this list.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Iterable, Mapping

from .codec import encode_path, join_path, parent_of
from .listing import Listing

DELIMITER = "\t"
PARENT_LABEL = "../"
RESET = "\033[0m"

# C0 controls (tab and newline included), DEL, C1 controls.
_LABEL_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f-\x9f]")


def label_text(name: str) -> str:
    """Escape control characters so a name always stays on one record line."""
    return _LABEL_CONTROL_RE.sub(lambda match: f"\\x{ord(match.group()):02x}", name)


def hex_to_ansi(value: str | None) -> str:
    """Convert ``#RRGGBB`` to a 24-bit foreground escape; invalid → ``""``."""
    if not value:
        return ""
    digits = value[1:] if value.startswith("#") else value
    if len(digits) != 6:
        return ""
    try:
        red, green, blue = (int(digits[idx : idx + 2], 16) for idx in (0, 2, 4))
    except ValueError:
        return ""
    return f"\033[38;2;{red};{green};{blue}m"


@dataclass(frozen=True)
class LabelColors:
    """Optional directory/file label colors; empty strings mean terminal default."""

    directory: str = ""
    file: str = ""

    @classmethod
    def from_hex(cls, color_dir: str | None, color_file: str | None) -> LabelColors:
        return cls(directory=hex_to_ansi(color_dir), file=hex_to_ansi(color_file))

    def paint(self, text: str, is_dir: bool) -> str:
        color = self.directory if is_dir else self.file
        if not color:
            return text
        return f"{color}{text}{RESET}"


@dataclass(frozen=True)
class DisplayLine:
    token: str
    label: str

    def render(self) -> str:
        return f"{self.token}{DELIMITER}{self.label}"


@dataclass(frozen=True)
class Frame:
    """Lines for one picker invocation plus the optional caret line index."""

    directory: str
    lines: tuple[DisplayLine, ...]
    preselect: int | None = None

    def render(self) -> str:
        return "".join(f"{line.render()}\n" for line in self.lines)


def build_lines(
    current_dir: str,
    listing: Listing,
    memory: Mapping[str, str],
    colors: LabelColors | None = None,
) -> Frame:
    """Combine a listing with navigation memory into an ordered frame.

    Index 0 is the parent entry, directories follow from index 1, then files.
    ``preselect`` is the index of the directory remembered for
    ``current_dir``, or ``None`` when it is no longer listed.
    """
    colors = colors or LabelColors()
    lines = [DisplayLine(encode_path(parent_of(current_dir)), colors.paint(PARENT_LABEL, True))]

    wanted_child = memory.get(current_dir)
    preselect: int | None = None
    for name in listing.dir_names:
        if preselect is None and wanted_child and name == wanted_child:
            preselect = len(lines)
        label = colors.paint(f"{label_text(name)}/", True)
        lines.append(DisplayLine(encode_path(join_path(current_dir, name)), label))
    for file_name in listing.files:
        label = colors.paint(label_text(file_name), False)
        lines.append(DisplayLine(encode_path(join_path(current_dir, file_name)), label))

    return Frame(directory=current_dir, lines=tuple(lines), preselect=preselect)


def format_result_line(path: str, is_dir: bool, colors: LabelColors | None = None) -> str:
    """Render one global-search hit as a record without the trailing newline."""
    colors = colors or LabelColors()
    base = os.path.basename(path) or path
    label = f"{label_text(base)}/" if is_dir else label_text(base)
    return DisplayLine(encode_path(path), colors.paint(label, is_dir)).render()


def render_results(results: Iterable[tuple[str, bool]], colors: LabelColors | None = None) -> str:
    return "".join(f"{format_result_line(path, is_dir, colors)}\n" for path, is_dir in results)
