"""``python -m termwall_app`` entrypoint used by scheduled tasks and desktop shortcuts."""

from __future__ import annotations

import sys
from pathlib import Path

try:
    from .cli import main as _cli_main
except ImportError:
    # Executed as a plain script, outside the package.
    from termwall_app.cli import main as _cli_main

_COMMANDS = {"run", "render", "doctor"}


def _normalize(args: list[str]) -> list[str]:
    if not args:
        return ["run"]
    # Task schedulers often pass the image directory as the only argument.
    if len(args) == 1 and args[0] not in _COMMANDS and not args[0].startswith("-") and Path(args[0]).is_dir():
        return ["run", "--dir", args[0]]
    return args


def main(argv: list[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    return int(_cli_main(_normalize(args)))


if __name__ == "__main__":
    raise SystemExit(main())
