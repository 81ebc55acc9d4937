"""Module entrypoint for ``python -m fzd``.

fzf preview and reload callbacks re-enter the program through this module.
All argument parsing happens in ``fzd.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
