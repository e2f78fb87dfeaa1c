"""Command-line entry point."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from typing import TextIO

APP_NAME = "foyle"

CONFIG_FLAG_NAME = "config"
LEVEL_FLAG_NAME = "level"

COMMIT_NOT_SET = "none"

# Build information; release tooling replaces these values.
VERSION = "dev"
COMMIT = COMMIT_NOT_SET
DATE = "unknown"
BUILT_BY = "unknown"


def version_text(name: str) -> str:
    """The one-line version description printed by the version command."""
    return f"{name} {VERSION}, commit {COMMIT}, built at {DATE} by {BUILT_BY}"


def _run_version(args: argparse.Namespace, out: TextIO) -> int:
    print(version_text(APP_NAME), file=out)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the root parser with its global options and subcommands."""
    parser = argparse.ArgumentParser(prog=APP_NAME, description=APP_NAME)
    parser.add_argument(
        f"--{CONFIG_FLAG_NAME}",
        dest="config",
        default="",
        help=f"config file (default is $HOME/.{APP_NAME}/config.yaml)",
    )
    parser.add_argument(
        f"--{LEVEL_FLAG_NAME}",
        dest="level",
        default="info",
        help="The logging level.",
    )
    parser.add_argument(
        "--json-logs",
        dest="json_logs",
        action="store_true",
        default=False,
        help="Enable json logging.",
    )

    commands = parser.add_subparsers(dest="command", metavar="<command>")
    version = commands.add_parser(
        "version",
        help="Return version",
        description="Return version",
        epilog=f"Example:\n  {APP_NAME}  version",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    version.set_defaults(handler=_run_version)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line and return the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help(sys.stdout)
        return 0
    try:
        return handler(args, sys.stdout)
    except Exception as err:  # report any failure the way the command line does
        print(f"Command failed with error: {err}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())