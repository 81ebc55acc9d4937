"""Exception types raised by fzd.

Only conditions that make the session unusable are exceptions: fzf missing
before the browse loop starts, or fzf rejecting its invocation inside it.
Per-frame failures degrade in place.
"""

from __future__ import annotations


class FzdError(Exception):
    """Base class for fatal fzd errors reported to the user."""


class PickerNotFoundError(FzdError):
    """The fzf executable could not be located."""

    def __init__(self, name: str = "fzf") -> None:
        super().__init__(f"fzd: ERROR: {name} not found")
        self.name = name


class PickerFailedError(FzdError):
    """fzf exited with its error status (bad option, broken terminal)."""

    def __init__(self, status: int) -> None:
        super().__init__(f"fzd: ERROR: fzf failed (exit status {status})")
        self.status = status
