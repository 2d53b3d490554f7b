"""Main CLI entry point for bplistcodec."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .. import __version__
from ..exceptions import BplistError
from .commands import dump_file, info_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the bplist CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        prog="bplist",
        description="bplistcodec: Binary Property List Codec",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  bplist --dump Info.plist          Print the decoded value
  bplist --info Info.plist          Show trailer and section sizes
  bplist --version                  Show version
        """,
    )

    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--dump",
        metavar="FILE",
        type=str,
        help="Decode a binary plist and print its value",
    )
    group.add_argument(
        "--info",
        metavar="FILE",
        type=str,
        help="Show the trailer fields of a binary plist",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log codec details to stderr",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"bplistcodec {__version__}",
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    command = dump_file if args.dump else info_file if args.info else None
    if command is None:
        # If no command specified, show help
        parser.print_help()
        return 0

    file_path = Path(args.dump or args.info)
    if not file_path.exists():
        print(f"Error: File not found: {file_path}", file=sys.stderr)
        return 1

    try:
        command(file_path)
        return 0
    except BplistError as e:
        print(f"Error reading {file_path}: {type(e).__name__}: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
