"""VAR CLI entry point.

Allows running via `python -m vared` and provides the console script
defined in `pyproject.toml`.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from .version import get_version_string

HELP_TEXT = """\
Usage: vared [OPTION]... [FILE]
Edit text files.

Options:
  -h, --help           display this help and exit
  -V, --version        show program version and exit
  --log-file PATH      write debug logging to PATH

Keys:
  Arrows, Home, End    move the cursor
  Ctrl-S               save
  Ctrl-Q, Ctrl-X       quit
  Ctrl-T               toggle line numbers
"""


def main(argv: Optional[list[str]] = None) -> int:
    # Very small arg parsing: options first, then an optional filename
    args = list(sys.argv[1:] if argv is None else argv)
    log_file = None
    filename = None

    while args:
        arg = args.pop(0)
        if arg in ("-h", "--help"):
            print(HELP_TEXT, end='')
            return 0
        if arg in ("-V", "--version"):
            print(f"vared {get_version_string()}")
            return 0
        if arg == "--log-file":
            if not args:
                print("--log-file requires a path. Use -h for help.", file=sys.stderr)
                return 2
            log_file = args.pop(0)
        elif arg.startswith("-") and arg != "-":
            print(f"Unknown argument: {arg}. Use -h for help.", file=sys.stderr)
            return 2
        elif filename is None:
            filename = arg
        else:
            print("Only one file can be edited at a time.", file=sys.stderr)
            return 2

    if log_file:
        logging.basicConfig(
            filename=log_file,
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )

    # Lazy import to avoid importing UI deps for --version
    from .editor import Editor
    editor = Editor()
    if filename:
        editor.load_file(filename)
    editor.run()
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
