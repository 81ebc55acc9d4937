"""Pure path predicates shared by every global-search backend.

Backends differ in how they find candidates; these predicates decide which
candidates are shown, so all backends agree on the same filesystem state.
"""

from __future__ import annotations

from dataclasses import dataclass
from fnmatch import fnmatchcase

from ..codec import normalize_path


def _split_parts(path: str) -> list[str]:
    return [part for part in path.split("/") if part]


def _matches_run(parts: list[str], pattern_parts: list[str]) -> bool:
    """Return whether ``pattern_parts`` glob-match any contiguous run of ``parts``."""
    width = len(pattern_parts)
    if width == 0 or width > len(parts):
        return False
    for start in range(len(parts) - width + 1):
        if all(fnmatchcase(parts[start + idx], pattern_parts[idx]) for idx in range(width)):
            return True
    return False


def matches_query(path: str, query: str, full_path: bool = False) -> bool:
    """Case-insensitive substring match on the basename (or the whole path)."""
    if not query:
        return True
    normalized = normalize_path(path)
    haystack = normalized if full_path else normalized.rsplit("/", 1)[-1]
    return query.lower() in haystack.lower()


@dataclass(frozen=True)
class SearchFilter:
    """Allowed roots, exclude globs, and an optional depth bound.

    Exclude patterns may span components (``var/lib/docker``) and are matched
    against the part of the path below its root.
    """

    roots: tuple[str, ...]
    excludes: tuple[str, ...] = ()
    max_depth: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "roots", tuple(normalize_path(root) for root in self.roots if root))
        patterns = tuple(pattern.strip("/") for pattern in self.excludes)
        object.__setattr__(self, "excludes", tuple(pattern for pattern in patterns if pattern))

    def root_for(self, path: str) -> str | None:
        """Return the most specific allowed root containing ``path``."""
        best: str | None = None
        for root in self.roots:
            if root == "/":
                inside = path.startswith("/")
            else:
                inside = path == root or path.startswith(root + "/")
            if inside and (best is None or len(root) > len(best)):
                best = root
        return best

    def relative_parts(self, path: str, root: str) -> list[str]:
        if root == "/":
            return _split_parts(path)
        return _split_parts(path[len(root) :])

    def is_excluded(self, path: str, root: str | None = None) -> bool:
        path = normalize_path(path)
        if root is None:
            root = self.root_for(path) or "/"
        parts = self.relative_parts(path, root)
        return any(_matches_run(parts, _split_parts(pattern)) for pattern in self.excludes)

    def allows(self, path: str) -> bool:
        """Return whether ``path`` lies strictly below a root, within depth, not excluded."""
        path = normalize_path(path)
        root = self.root_for(path)
        if root is None:
            return False
        parts = self.relative_parts(path, root)
        if not parts:
            return False
        if self.max_depth is not None and len(parts) > self.max_depth:
            return False
        return not any(_matches_run(parts, _split_parts(pattern)) for pattern in self.excludes)
