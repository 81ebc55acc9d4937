"""Global-search backends.

``LocateBackend`` queries the system locate database on every keystroke.
``WalkBackend`` walks the configured roots (with fd when installed, plain
``os.walk`` otherwise) and can also build a one-shot index that fzf filters
itself. Both expose ``search(query)`` with identical filtering.
"""

from __future__ import annotations

import os
import shutil
import subprocess
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass

from ..codec import normalize_path
from ..config import BACKEND_CACHE, BACKEND_DISABLED, BACKEND_LOCATE, FzdConfig
from ..debug import get_logger
from .filters import SearchFilter, matches_query

log = get_logger("search")

LOCATE_NAMES = ("plocate", "locate")
FD_NAMES = ("fd", "fdfind")


@dataclass(frozen=True)
class SearchResult:
    path: str
    is_dir: bool


def _first_executable(names: Iterable[str], which: Callable[[str], str | None]) -> str | None:
    for name in names:
        found = which(name)
        if found:
            return found
    return None


def _stream_lines(cmd: list[str], env: dict[str, str] | None = None) -> Iterator[str]:
    """Yield stdout lines of ``cmd``; the process is killed if iteration stops early."""
    try:
        proc = subprocess.Popen(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            encoding="utf-8",
            errors="surrogateescape",
            env=env,
        )
    except OSError as exc:
        log.warning("failed to run %s: %s", cmd[0], exc)
        return
    try:
        assert proc.stdout is not None
        for raw in proc.stdout:
            line = raw.rstrip("\n")
            if line:
                yield line
    finally:
        if proc.poll() is None:
            proc.kill()
        proc.communicate()


def _classify(path: str) -> bool | None:
    """``True`` for directories, ``False`` for regular files, ``None`` otherwise."""
    if os.path.isdir(path):
        return True
    if os.path.isfile(path):
        return False
    return None


class SearchBackend:
    name = "base"

    def __init__(self, config: FzdConfig, search_filter: SearchFilter | None = None) -> None:
        self.config = config
        self.filter = search_filter or search_filter_for(config)

    def candidates(self, query: str) -> Iterable[str]:
        raise NotImplementedError

    def search(self, query: str) -> list[SearchResult]:
        """Filtered, capped hits for ``query``; short queries return nothing."""
        if len(query) < self.config.global_minlen:
            return []
        return self.collect(self.candidates(query), query)

    def collect(self, candidates: Iterable[str], query: str = "") -> list[SearchResult]:
        limit = self.config.global_maxresults
        results: list[SearchResult] = []
        seen: set[str] = set()
        stream = iter(candidates)
        try:
            for raw in stream:
                path = normalize_path(raw)
                if path in seen or not self.filter.allows(path):
                    continue
                if not matches_query(path, query, self.config.global_fullpath):
                    continue
                is_dir = _classify(path)
                if is_dir is None:
                    continue
                seen.add(path)
                results.append(SearchResult(path, is_dir))
                if len(results) >= limit:
                    break
        finally:
            close = getattr(stream, "close", None)
            if close is not None:
                close()
        return results


class LocateBackend(SearchBackend):
    name = BACKEND_LOCATE

    def __init__(
        self,
        config: FzdConfig,
        executable: str,
        search_filter: SearchFilter | None = None,
    ) -> None:
        super().__init__(config, search_filter)
        self.executable = executable

    @staticmethod
    def find(which: Callable[[str], str | None] = shutil.which) -> str | None:
        return _first_executable(LOCATE_NAMES, which)

    def command(self, query: str) -> list[str]:
        cmd = [self.executable]
        if self.config.locate_dbs:
            cmd += ["-d", self.config.locate_dbs]
        cmd += ["-i", "-e", "-l", str(self.config.global_maxresults), "--", query]
        return cmd

    def candidates(self, query: str) -> Iterable[str]:
        env = dict(os.environ)
        env.pop("LOCATE_PATH", None)
        return _stream_lines(self.command(query), env)


class WalkBackend(SearchBackend):
    name = BACKEND_CACHE

    def __init__(
        self,
        config: FzdConfig,
        fd_executable: str | None = None,
        search_filter: SearchFilter | None = None,
    ) -> None:
        super().__init__(config, search_filter)
        self.fd_executable = fd_executable

    @staticmethod
    def find_fd(which: Callable[[str], str | None] = shutil.which) -> str | None:
        return _first_executable(FD_NAMES, which)

    def fd_command(self, query: str | None) -> list[str]:
        assert self.fd_executable is not None
        cmd = [self.fd_executable, "-H", "-i", "--color=never", "-a", "-d", str(self.config.global_maxdepth)]
        if query:
            if self.config.global_fullpath:
                cmd.append("--full-path")
            cmd += ["--fixed-strings", query]
        else:
            cmd.append(".")
        for pattern in self.config.global_excludes:
            cmd += ["--exclude", pattern]
        cmd += [root for root in self.filter.roots if os.path.isdir(root)]
        return cmd

    def walk_paths(self) -> Iterator[str]:
        """Depth-bounded ``os.walk`` over the roots, pruning excluded subtrees."""
        max_depth = self.config.global_maxdepth
        for root in self.filter.roots:
            if not os.path.isdir(root):
                continue
            base_depth = len([part for part in root.split("/") if part])
            for dirpath, dirnames, filenames in os.walk(root):
                depth = len([part for part in dirpath.split("/") if part]) - base_depth
                kept: list[str] = []
                for name in sorted(dirnames, key=str.lower):
                    child = os.path.join(dirpath, name)
                    if self.filter.is_excluded(child, root):
                        continue
                    yield child
                    if depth + 1 < max_depth:
                        kept.append(name)
                dirnames[:] = kept
                for name in sorted(filenames, key=str.lower):
                    yield os.path.join(dirpath, name)

    def candidates(self, query: str | None) -> Iterable[str]:
        if self.fd_executable is not None and any(os.path.isdir(root) for root in self.filter.roots):
            return _stream_lines(self.fd_command(query))
        return self.walk_paths()

    def index(self) -> list[SearchResult]:
        """One-shot listing of everything below the roots, for static picking."""
        return self.collect(self.candidates(None))


def search_filter_for(config: FzdConfig) -> SearchFilter:
    return SearchFilter(
        roots=config.global_paths,
        excludes=config.global_excludes,
        max_depth=config.global_maxdepth,
    )


def select_backend(
    config: FzdConfig,
    which: Callable[[str], str | None] = shutil.which,
) -> SearchBackend | None:
    """Pick the backend for one overlay session; ``None`` when search is disabled.

    ``auto`` and ``locate`` prefer the locate database and fall back to the
    walk backend when no locate binary exists.
    """
    if config.global_backend == BACKEND_DISABLED:
        return None
    if config.global_backend != BACKEND_CACHE:
        locate = LocateBackend.find(which)
        if locate is not None:
            return LocateBackend(config, locate)
        if config.global_backend == BACKEND_LOCATE:
            log.debug("locate requested but not installed; walking instead")
    return WalkBackend(config, WalkBackend.find_fd(which))
