"""Actions resolved from one picker invocation and their wire format.

Key bindings write ``A:<KIND>:<token>`` into the frame's side channel just
before fzf aborts. Anything that does not parse is treated as a cancel.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..codec import decode_token, normalize_path

ACTION_PREFIX = "A:"


class ActionKind(Enum):
    ENTER = "ENTER"
    UP = "LEFT"
    DOWN = "RIGHT"
    SEARCH = "SEARCH"
    CANCEL = "CANCEL"


@dataclass(frozen=True)
class Action:
    kind: ActionKind
    token: str = ""

    @property
    def path(self) -> str | None:
        """Decoded, normalized selection or ``None`` for empty/garbled tokens."""
        decoded = decode_token(self.token)
        if decoded is None:
            return None
        return normalize_path(decoded)


CANCEL = Action(ActionKind.CANCEL)

_KINDS_BY_WIRE = {kind.value: kind for kind in ActionKind}


def format_action_line(kind: ActionKind, token: str = "") -> str:
    return f"{ACTION_PREFIX}{kind.value}:{token}"


def parse_action_line(text: str | None) -> Action | None:
    """Parse the first ``A:`` line of side-channel content."""
    if not text:
        return None
    for raw in text.splitlines():
        line = raw.strip()
        if not line.startswith(ACTION_PREFIX):
            continue
        _prefix, _sep, rest = line.partition(":")
        wire_kind, sep, token = rest.partition(":")
        if not sep:
            return None
        kind = _KINDS_BY_WIRE.get(wire_kind)
        if kind is None:
            return None
        return Action(kind, token.strip().strip("'\""))
    return None
