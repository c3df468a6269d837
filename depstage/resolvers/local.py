"""Resolver for sources that are directories on the local filesystem."""

import logging
import shutil
from pathlib import Path
from typing import Callable, List, Optional
from urllib.request import url2pathname

from depstage.resolvers.base import FetchAction, ResolveInfo
from depstage.resolvers.staging import creates, unique_subdirectory_for
from depstage.resolvers.uri import SourceURI

logger = logging.getLogger("depstage.resolvers.local")


def uri_to_path(uri: SourceURI) -> Path:
    """Convert a ``file:`` URI to a local path."""
    return Path(url2pathname(uri.path))


def _skip_staging(source: Path, target: Path) -> Optional[Callable[[str, List[str]], List[str]]]:
    """Build a copytree ignore callback that skips the staging area.

    Returns None unless ``target`` lies inside ``source``; otherwise the copy
    would walk into its own output.
    """
    root = source.resolve()
    try:
        entry = target.resolve().relative_to(root).parts[0]
    except (ValueError, IndexError):
        return None

    logger.debug("Staging area is inside %s; skipping %s", root, entry)

    def ignore(directory: str, names: List[str]) -> List[str]:
        if entry in names and Path(directory).resolve() == root:
            return [entry]
        return []

    return ignore


def local(info: ResolveInfo) -> Optional[FetchAction]:
    """Copy an existing local directory into the staging area.

    Args:
        info: Resolution request with a ``file:`` URI.

    Returns:
        Optional[FetchAction]: None when the path is not an existing directory.
    """
    source = uri_to_path(info.uri)
    target = unique_subdirectory_for(info.uri, info.staging)

    if not source.is_dir():
        logger.debug("Local resolver declined %s: not a directory", source)
        return None

    def fetch() -> Path:
        ignore = _skip_staging(source, target)
        return creates(
            target,
            lambda: shutil.copytree(source, target, symlinks=True, ignore=ignore),
        )

    return FetchAction(target, fetch, f"copy {source} -> {target}")


__all__ = ["local", "uri_to_path"]
