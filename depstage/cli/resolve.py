"""Resolve and key command implementations."""

import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError
from rich.console import Console
from rich.table import Table
from rich.text import Text

from depstage.config import StagingConfig, load_staging_config
from depstage.errors import DepstageError
from depstage.resolvers import DistributedVCS, ResolveInfo, SchemeDispatcher, SourceURI

logger = logging.getLogger("depstage.cli.resolve")


def _load_config(args) -> Optional[StagingConfig]:
    try:
        return load_staging_config(getattr(args, "config", None))
    except (ValidationError, ValueError, OSError) as e:
        logger.error("Invalid configuration: %s", e)
        return None


def _staging_root(args, config: StagingConfig) -> Path:
    staging = getattr(args, "staging", None)
    return Path(staging).expanduser() if staging else config.staging_root


def resolve_command(args, console: Optional[Console] = None) -> int:
    """Execute resolve command.

    Args:
        args: Parsed command-line arguments containing:
            - sources: Source URIs or local paths
            - staging: Staging root override (optional)
            - config: Configuration file or inline string (optional)
            - jobs: Worker thread override (optional)
        console: Rich console for the result table.

    Returns:
        int: 0 when every source resolved, 1 otherwise.
    """
    console = console or Console()
    config = _load_config(args)
    if config is None:
        return 1

    staging = _staging_root(args, config)
    workers = getattr(args, "jobs", None) or config.max_workers
    dispatcher = SchemeDispatcher.from_config(config)

    logger.info("Resolving %d source(s) into %s", len(args.sources), staging)
    outcomes = dispatcher.resolve_all(args.sources, staging, max_workers=workers)

    table = Table(title="Staged sources")
    table.add_column("Source")
    table.add_column("Directory")

    failed = 0
    for uri, result in outcomes:
        if isinstance(result, BaseException):
            failed += 1
            table.add_row(str(uri), Text(f"failed: {result}", style="red"))
        else:
            table.add_row(str(uri), str(result))

    console.print(table)
    return 1 if failed else 0


def key_command(args, console: Optional[Console] = None) -> int:
    """Print the cache directories a source maps to, without fetching.

    Returns:
        int: 0 on success, 1 if the source is unsupported.
    """
    console = console or Console()
    config = _load_config(args)
    if config is None:
        return 1

    staging = _staging_root(args, config)
    dispatcher = SchemeDispatcher.from_config(config)
    try:
        uri = SourceURI.parse(args.source)
        action = dispatcher.select(ResolveInfo(uri, staging))
    except DepstageError as e:
        logger.error("%s", e)
        return 1

    resolver = dispatcher.resolver_for(uri)
    if isinstance(resolver, DistributedVCS) and uri.has_fragment:
        console.print(f"mirror: {resolver.mirror_dir(uri, staging)}")
        console.print(f"branch: {action.target}")
    else:
        console.print(str(action.target))
    return 0
