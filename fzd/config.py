"""Configuration loading for fzd.

Options come from a JSON object stored in the platform config directory and
are then overridden by ``FZD_*`` environment variables. All access is
defensive: malformed or missing values fall back to defaults.
"""

from __future__ import annotations

import getpass
import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path

from platformdirs import user_cache_dir, user_config_dir, user_runtime_dir, user_state_dir

APP_NAME = "fzd"
CONFIG_FILENAME = "config.json"
CONFIG_FILE_ENV = "FZD_CONF_FILE"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH

BACKEND_AUTO = "auto"
BACKEND_LOCATE = "locate"
BACKEND_CACHE = "cache"
BACKEND_DISABLED = "disabled"
_BACKEND_ALIASES = {
    "auto": BACKEND_AUTO,
    "locate": BACKEND_LOCATE,
    "plocate": BACKEND_LOCATE,
    "indexed": BACKEND_LOCATE,
    "cache": BACKEND_CACHE,
    "rebuilt-index": BACKEND_CACHE,
    "walk": BACKEND_CACHE,
    "disabled": BACKEND_DISABLED,
    "off": BACKEND_DISABLED,
    "none": BACKEND_DISABLED,
}

DEFAULT_EXCLUDES = ".git,node_modules,.cache,.venv,__pycache__"
DEFAULT_GLOBAL_XEXCLUDES = "proc,sys,dev,run,proc/*,sys/*,dev/*,run/*,snap,lost+found,var/lib/docker"
DEFAULT_GLOBAL_PATHS = "/etc /opt /srv /mnt /home/$USER"


def _default_user() -> str:
    try:
        return getpass.getuser()
    except Exception:
        return ""


@dataclass(frozen=True)
class FzdConfig:
    """Effective options consumed by the browser, preview, and search code."""

    global_backend: str = BACKEND_AUTO
    global_minlen: int = 2
    global_maxdepth: int = 6
    global_maxresults: int = 1200
    global_paths: tuple[str, ...] = ()
    global_fullpath: bool = False
    locate_dbs: str = ""
    global_xexcludes: tuple[str, ...] = ()
    excludes: tuple[str, ...] = ()
    global_root: str = "/"
    preview_depth: int = 2
    preview_max_lines: int = 200
    preview_timeout: float = 2.0
    color_dir: str | None = None
    color_file: str | None = None
    style: str = "monokai"
    editor: str | None = None
    debug: bool = False

    @property
    def global_excludes(self) -> tuple[str, ...]:
        """Exclude globs applied to global search (local + system-wide)."""
        return self.excludes + self.global_xexcludes

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


def config_path(environ: dict[str, str] | None = None) -> Path:
    env = os.environ if environ is None else environ
    override = env.get(CONFIG_FILE_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    return CONFIG_PATH


def load_config_file(path: Path | None = None) -> dict[str, object]:
    """Load the JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    target = path if path is not None else config_path()
    try:
        data = json.loads(target.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def _coerce_int(value: object, default: int, minimum: int = 0) -> int:
    """Accept ints and integer strings; booleans and junk fall back."""
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = int(value.strip())
        except ValueError:
            return default
    else:
        return default
    return parsed if parsed >= minimum else default


def _coerce_float(value: object, default: float) -> float:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        parsed = float(value)
    elif isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return default
    else:
        return default
    return parsed if parsed >= 0 else default


def _coerce_bool(value: object, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off", ""}:
            return False
    return default


def _coerce_optional_str(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None


def split_patterns(value: object) -> tuple[str, ...]:
    """Split a comma-separated glob list (or JSON list) into patterns."""
    if isinstance(value, (list, tuple)):
        items = [str(item) for item in value]
    elif isinstance(value, str):
        items = value.split(",")
    else:
        return ()
    return tuple(item.strip() for item in items if item.strip())


def expand_roots(value: object) -> tuple[str, ...]:
    """Split space-separated roots and expand ``$VAR`` and ``~`` in each."""
    if isinstance(value, (list, tuple)):
        raw_items = [str(item) for item in value]
    elif isinstance(value, str):
        raw_items = value.split()
    else:
        return ()
    roots: list[str] = []
    env = dict(os.environ)
    env.setdefault("USER", _default_user())
    for item in raw_items:
        expanded = item
        for name, replacement in (("${USER}", env["USER"]), ("$USER", env["USER"])):
            expanded = expanded.replace(name, replacement)
        expanded = os.path.expanduser(os.path.expandvars(expanded))
        if expanded:
            roots.append(expanded)
    return tuple(roots)


def normalize_backend(value: object) -> str:
    if not isinstance(value, str):
        return BACKEND_AUTO
    return _BACKEND_ALIASES.get(value.strip().lower(), BACKEND_AUTO)


def _normalize_hex_color(value: object) -> str | None:
    text = _coerce_optional_str(value)
    if text is None:
        return None
    digits = text[1:] if text.startswith("#") else text
    if len(digits) != 6:
        return None
    try:
        int(digits, 16)
    except ValueError:
        return None
    return f"#{digits.lower()}"


def _merged_options(file_data: dict[str, object], environ: dict[str, str]) -> dict[str, object]:
    """Overlay ``FZD_<KEY>`` environment values on top of file values."""
    merged: dict[str, object] = {str(key).lower(): value for key, value in file_data.items()}
    for key, value in environ.items():
        if not key.startswith("FZD_") or key == CONFIG_FILE_ENV:
            continue
        merged[key[4:].lower()] = value
    return merged


def load_config(environ: dict[str, str] | None = None, path: Path | None = None) -> FzdConfig:
    """Build the effective ``FzdConfig`` from file and environment."""
    env = dict(os.environ if environ is None else environ)
    options = _merged_options(load_config_file(path if path is not None else config_path(env)), env)
    defaults = FzdConfig()

    editor = _coerce_optional_str(options.get("editor"))
    return FzdConfig(
        global_backend=normalize_backend(options.get("global_backend", BACKEND_AUTO)),
        global_minlen=_coerce_int(options.get("global_minlen"), defaults.global_minlen),
        global_maxdepth=_coerce_int(options.get("global_maxdepth"), defaults.global_maxdepth, minimum=1),
        global_maxresults=_coerce_int(options.get("global_maxresults"), defaults.global_maxresults, minimum=1),
        global_paths=expand_roots(options.get("global_paths", DEFAULT_GLOBAL_PATHS)),
        global_fullpath=_coerce_bool(options.get("global_fullpath"), False),
        locate_dbs=_coerce_optional_str(options.get("locate_dbs")) or "",
        global_xexcludes=split_patterns(options.get("global_xexcludes", DEFAULT_GLOBAL_XEXCLUDES)),
        excludes=split_patterns(options.get("excludes", DEFAULT_EXCLUDES)),
        global_root=_coerce_optional_str(options.get("global_root")) or "/",
        preview_depth=_coerce_int(options.get("preview_depth"), defaults.preview_depth, minimum=1),
        preview_max_lines=_coerce_int(options.get("preview_max_lines"), defaults.preview_max_lines, minimum=1),
        preview_timeout=_coerce_float(options.get("preview_timeout"), defaults.preview_timeout),
        color_dir=_normalize_hex_color(options.get("color_dir")),
        color_file=_normalize_hex_color(options.get("color_file")),
        style=_coerce_optional_str(options.get("style")) or defaults.style,
        editor=editor,
        debug=_coerce_bool(options.get("debug"), False),
    )


def state_dir() -> Path:
    """Directory for the query history file."""
    return Path(user_state_dir(APP_NAME, appauthor=False))


def runtime_dir() -> Path:
    """Directory for per-frame side-channel files.

    Uses the per-session runtime directory when the session provides one,
    otherwise a ``tmp`` folder under the cache directory.
    """
    if os.environ.get("XDG_RUNTIME_DIR"):
        return Path(user_runtime_dir(APP_NAME, appauthor=False))
    return Path(user_cache_dir(APP_NAME, appauthor=False)) / "tmp"


def ensure_dir(path: Path) -> Path | None:
    """Create ``path`` if needed; return ``None`` when that is impossible."""
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError:
        return None
    return path
