"""Main CLI entry point for depstage.

Provides commands: resolve, key
"""

import argparse
import logging
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from depstage.cli.resolve import key_command, resolve_command

logger = logging.getLogger("depstage.cli")


def setup_logging(verbose: bool = False, console: Optional[Console] = None) -> None:
    """Setup logging configuration with Rich integration.

    Args:
        verbose: Enable verbose logging.
        console: Rich Console instance for coordinated output (optional).
    """
    level = logging.DEBUG if verbose else logging.WARNING

    handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        log_time_format="[%H:%M:%S]",
    )

    logging.basicConfig(
        level=level,
        format="[%(name)s] [%(levelname)s] %(message)s",
        handlers=[handler],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="depstage",
        description="Depstage - stage build sources from local, archive and VCS URIs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Fetch sources into the staging area (reusing cached copies)",
    )
    resolve_parser.add_argument(
        "sources",
        nargs="+",
        help="Source URIs (file:, http(s):, git:, hg:, svn:) or local paths",
    )
    resolve_parser.add_argument(
        "-j",
        "--jobs",
        type=int,
        default=None,
        help="Number of sources resolved in parallel",
    )

    key_parser = subparsers.add_parser(
        "key",
        help="Show the staging directory a source maps to without fetching",
    )
    key_parser.add_argument("source", help="Source URI or local path")

    for sub in (resolve_parser, key_parser):
        sub.add_argument(
            "-s",
            "--staging",
            default=None,
            help="Staging root (default: .depstage_cache/staging)",
        )
        sub.add_argument(
            "-c",
            "--config",
            default=None,
            help="Configuration file (.toml/.json) or inline TOML/JSON",
        )

    return parser


def main() -> int:
    """Main CLI entry point.

    Returns:
        int: Exit code.
    """
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(args.verbose)

    if args.command == "resolve":
        return resolve_command(args)
    if args.command == "key":
        return key_command(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
