"""Command-line front door for fzd.

Without internal flags this runs the interactive browser and prints the
confirmed directory for the calling shell. fzf re-invokes the program with
``--_preview`` and ``--_global-list`` for its preview pane and live reloads.
"""

from __future__ import annotations

import argparse
import json
import os
import sys

from .app import EXIT_OK, build_browser
from .codec import normalize_path
from .config import FzdConfig, load_config
from .debug import configure_logging
from .errors import FzdError
from .lines import LabelColors, render_results
from .navigation import logical_cwd
from .preview import render_preview
from .search import select_backend


def _emit(text: str) -> None:
    """Write to stdout, passing undecodable filename bytes through untouched."""
    buffer = getattr(sys.stdout, "buffer", None)
    if buffer is None:
        sys.stdout.write(text)
    else:
        buffer.write(text.encode("utf-8", errors="surrogateescape"))
    sys.stdout.flush()


def _colors(config: FzdConfig) -> LabelColors:
    return LabelColors.from_hex(config.color_dir, config.color_file)


def global_list(query: str, config: FzdConfig) -> str:
    """Records for the live-reload binding; empty when search is disabled."""
    backend = select_backend(config)
    if backend is None:
        return ""
    hits = backend.search(query)
    return render_results(((hit.path, hit.is_dir) for hit in hits), _colors(config))


def _resolve_start_dir(raw: str | None) -> str:
    if raw is None:
        return logical_cwd()
    start = os.path.abspath(os.path.expanduser(raw))
    if not os.path.isdir(start):
        raise SystemExit(f"fzd: not a directory: {raw}")
    return normalize_path(start)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fzd",
        description="Browse directories with fzf and print the chosen directory.",
        epilog="Keys: Left up, Right into, Enter choose/edit, Ctrl-F global search, Esc quit.",
    )
    parser.add_argument("path", nargs="?", default=None, help="Start directory. Defaults to the current directory.")
    parser.add_argument("--print-config", action="store_true", help="Print the effective configuration as JSON.")
    parser.add_argument("--_preview", dest="preview", metavar="TOKEN", default=None, help=argparse.SUPPRESS)
    parser.add_argument("--_global-list", dest="global_list", metavar="QUERY", default=None, help=argparse.SUPPRESS)
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse arguments and dispatch.

    Exits 0 after printing a confirmed directory, 130 when the user cancels,
    and 1 with a message when the environment is unusable.
    """
    args = build_parser().parse_args(argv)
    config = load_config()

    if args.preview is not None:
        configure_logging(quiet=True)
        _emit(render_preview(args.preview, config))
        return
    if args.global_list is not None:
        configure_logging(quiet=True)
        _emit(global_list(args.global_list, config))
        return

    configure_logging(debug=config.debug)
    if args.print_config:
        _emit(json.dumps(config.to_dict(), indent=2) + "\n")
        return

    start_dir = _resolve_start_dir(args.path)
    try:
        browser = build_browser(config, start_dir)
        result = browser.run()
    except FzdError as exc:
        raise SystemExit(str(exc)) from exc

    if result.status == EXIT_OK and result.path:
        _emit(f"{result.path}\n")
    raise SystemExit(result.status)


if __name__ == "__main__":
    main()
