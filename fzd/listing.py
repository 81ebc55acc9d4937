"""Directory scanning for one browse frame."""

from __future__ import annotations

import os
import string
from dataclasses import dataclass

from .debug import get_logger

log = get_logger("listing")


@dataclass(frozen=True)
class Listing:
    """Sorted child names of one directory.

    ``dirs`` carry a trailing ``/`` marker; ``files`` are bare basenames.
    """

    dirs: tuple[str, ...] = ()
    files: tuple[str, ...] = ()

    @property
    def dir_names(self) -> tuple[str, ...]:
        return tuple(name[:-1] for name in self.dirs)


# ASCII-only case folding to upper case, as ``sort -f`` does in the C locale.
_ASCII_UPPER = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)


def _sort_key(label: str) -> tuple[str, str]:
    return (label.translate(_ASCII_UPPER), label)


def list_entries(directory: str) -> Listing:
    """List subdirectories and regular files of ``directory``.

    Hidden entries are included. Symlinks count as whatever they point to;
    dangling links and special files are skipped. An unreadable directory
    yields an empty listing.
    """
    dirs: list[str] = []
    files: list[str] = []
    try:
        with os.scandir(directory) as entries:
            for child in entries:
                name = child.name
                try:
                    if child.is_dir():
                        dirs.append(name)
                        continue
                    if child.is_file():
                        files.append(name)
                except OSError:
                    continue
    except OSError as exc:
        log.debug("listing failed for %s: %s", directory, exc)
        return Listing()

    marked = sorted((f"{name}/" for name in dirs), key=_sort_key)
    files.sort(key=_sort_key)
    return Listing(dirs=tuple(marked), files=tuple(files))
