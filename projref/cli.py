"""
Command-line interface for projref.

This module is responsible for argument parsing and delegating to the
orchestration in the command module.
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional, Tuple

from .command import run_add_reference
from .config import Config
from .errors import ProjRefError, UsageError
from .logging_utils import configure_logging

PROG = "dotnet add p2p"
ARGUMENT_SEPARATOR = "--"


class _ArgumentParser(argparse.ArgumentParser):
    """Report usage errors through main like every other failure."""

    def error(self, message: str):
        raise UsageError(message)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog=PROG,
        description="Command to add project to project (p2p) reference",
        usage=f"{PROG} [-h] [-f FRAMEWORK] [--force] [-v] [PROJECT] -- REFERENCE [REFERENCE ...]",
        epilog="Arguments after '--' are the project to project references to add.",
    )

    parser.add_argument(
        "project",
        nargs="?",
        metavar="PROJECT",
        help=(
            "The project file to modify. If a project file is not specified, "
            "it searches the current working directory for an MSBuild file "
            "that has a file extension that ends in `proj` and uses that file."
        ),
    )
    parser.add_argument(
        "-f",
        "--framework",
        metavar="FRAMEWORK",
        help="Add reference only when targeting a specific framework.",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Add reference even if it does not exist, do not convert paths to relative.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (can be specified multiple times).",
    )

    return parser


def split_references(argv: List[str]) -> Tuple[List[str], List[str]]:
    """
    Split argv at the first argument separator.

    Returns the arguments before the separator and the reference paths
    after it.
    """

    if ARGUMENT_SEPARATOR not in argv:
        return list(argv), []
    index = argv.index(ARGUMENT_SEPARATOR)
    return argv[:index], argv[index + 1 :]


def parse_config(argv: List[str], parser: Optional[argparse.ArgumentParser] = None) -> Config:
    parser = parser or build_arg_parser()
    head, trailing = split_references(argv)
    # Unrecognized arguments before the separator are references too.
    args, extra = parser.parse_known_args(head)

    return Config(
        project=args.project,
        references=[*extra, *trailing],
        framework=args.framework,
        force=args.force,
        verbosity=args.verbose,
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    if argv is None:
        argv = sys.argv[1:]

    try:
        config = parse_config(argv, parser)
        configure_logging(verbosity=config.verbosity)
        run_add_reference(config)
    except KeyboardInterrupt:
        return 130
    except ProjRefError as exc:
        print(f"{PROG}: error: {exc}", file=sys.stderr)
        parser.print_help()
        return 1

    return 0


if __name__ == "__main__":  # pragma: no cover - manual invocation
    raise SystemExit(main())
