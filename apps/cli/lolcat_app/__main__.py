from __future__ import annotations

import sys

try:
    from .cli import main as _cli_main
except ImportError:
    # Run as a plain script (``python path/to/__main__.py``).
    from lolcat_app.cli import main as _cli_main


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    return int(_cli_main(list(args)))


if __name__ == "__main__":
    raise SystemExit(main())
