"""Path normalization and the opaque tokens carried through fzf.

fzf records are single lines split on tabs, so every path is shipped as a
base64 token in the first field and decoded again when an action or preview
callback hands it back. Paths here are plain normalized strings rather than
``Path`` objects because string identity is what navigation memory keys on.
"""

from __future__ import annotations

import base64
import binascii
import os
import re

_SEPARATOR_RUN_RE = re.compile(r"/{2,}")


def normalize_path(path: str) -> str:
    """Collapse repeated separators and drop a trailing slash (except root)."""
    if not path:
        return path
    normalized = _SEPARATOR_RUN_RE.sub("/", path)
    if normalized != "/":
        normalized = normalized.rstrip("/") or "/"
    return normalized


def parent_of(path: str) -> str:
    """Return the normalized parent of ``path``; root is its own parent."""
    return normalize_path(os.path.dirname(normalize_path(path)))


def basename_of(path: str) -> str:
    return os.path.basename(normalize_path(path))


def join_path(base: str, child: str) -> str:
    child = child.lstrip("/")
    if base == "/":
        return normalize_path(f"/{child}")
    return normalize_path(f"{base}/{child}")


def encode_path(path: str) -> str:
    """Encode ``path`` as a base64 token (no tabs, newlines, or spaces).

    Paths go through ``os.fsencode`` so undecodable filenames survive the
    round trip via surrogate escapes.
    """
    return base64.b64encode(os.fsencode(path)).decode("ascii")


def decode_token(token: str | None) -> str | None:
    """Decode a token produced by ``encode_path``.

    Returns ``None`` for empty or malformed input instead of raising; callers
    treat that as "no selection".
    """
    if not token:
        return None
    cleaned = token.strip().strip("'\"")
    if not cleaned:
        return None
    try:
        raw = base64.b64decode(cleaned.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError, ValueError):
        return None
    if not raw or b"\x00" in raw:
        return None
    return os.fsdecode(raw)


__all__ = [
    "normalize_path",
    "parent_of",
    "basename_of",
    "join_path",
    "encode_path",
    "decode_token",
]
