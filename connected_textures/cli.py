"""
Command line front-end.

    connected-textures -t top.png -b bottom.png -o atlas.png [-s settings.txt]

User errors print a diagnostic to stderr and still exit with status 0.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .atlas import check_output_path, generate
from .errors import ConnectedTextureError
from .settings import resolve_settings

log = logging.getLogger("connected_textures")

USAGE = (
    "Usage: connected-textures -t <top image> -b <bottom image> -o <output image> "
    "[-s <settings file>] [-v] [--debug-gradients <dir>]"
)


class UsageError(Exception):
    pass


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        raise UsageError(message)


def setup_logging(verbosity: int = 0) -> None:
    level = [logging.WARNING, logging.INFO, logging.DEBUG][min(verbosity, 2)]
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(message)s",
        datefmt="%H:%M:%S",
    )


def print_usage() -> None:
    print(USAGE)


def build_parser() -> argparse.ArgumentParser:
    p = _ArgumentParser(
        prog="connected-textures",
        usage=USAGE[len("Usage: "):],
        description="Generate a connected texture atlas from a top and a bottom texture.",
    )
    p.add_argument("-t", dest="top", type=Path, help="Top image path.")
    p.add_argument("-b", dest="bottom", type=Path, help="Bottom image path.")
    p.add_argument("-o", dest="output", type=Path, help="Output image path; its directory must exist.")
    p.add_argument("-s", dest="settings", type=Path, default=None,
                   help="Settings file (default: settings.txt in the working directory, created if missing).")
    p.add_argument("-v", "--verbose", action="count", default=0, help="Increase verbosity (-v, -vv).")
    p.add_argument("--debug-gradients", type=Path, default=None,
                   help="Directory to dump each tile's walking gradient as a grayscale PNG.")
    p.add_argument("--seed", type=int, default=None, help=argparse.SUPPRESS)
    return p


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except UsageError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        print_usage()
        return 0

    setup_logging(args.verbose)

    if args.top is None or args.bottom is None or args.output is None:
        print("Program requires top, bottom, and output image location", file=sys.stderr)
        print_usage()
        return 0

    try:
        check_output_path(args.output)
        settings = resolve_settings(args.settings)
        if args.seed is not None:
            settings = settings.with_seed(args.seed)

        saved = generate(args.top, args.bottom, args.output, settings, debug_dir=args.debug_gradients)
    except ConnectedTextureError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 0

    log.info("Connected texture written to %s", saved)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
