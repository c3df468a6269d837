"""Scheme dispatcher.

Maps a URI's dispatch key (marker scheme, or plain scheme) to exactly one
resolver through an immutable table built once at startup.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from types import MappingProxyType
from typing import List, Mapping, Optional, Sequence, Tuple, Union

from depstage.resolvers.base import (
    FetchAction,
    ResolveInfo,
    Resolver,
    UnsupportedSourceError,
)
from depstage.resolvers.git import git
from depstage.resolvers.local import local
from depstage.resolvers.mercurial import mercurial
from depstage.resolvers.remote import RemoteResolver, remote
from depstage.resolvers.subversion import SubversionResolver, subversion
from depstage.resolvers.uri import SourceURI

logger = logging.getLogger("depstage.resolvers.dispatcher")

# Sources that fail to parse are reported with their original text.
ResolveOutcome = Tuple[Union[SourceURI, str], Union[Path, BaseException]]


def build_table(
    remote_resolver: Resolver = remote,
    subversion_resolver: Resolver = subversion,
) -> Mapping[str, Resolver]:
    """Build the scheme -> resolver table.

    Args:
        remote_resolver: Resolver for http(s) archives.
        subversion_resolver: Resolver for svn URLs.

    Returns:
        Mapping[str, Resolver]: Read-only dispatch table.
    """
    return MappingProxyType(
        {
            "file": local,
            "http": remote_resolver,
            "https": remote_resolver,
            "svn": subversion_resolver,
            "svn+ssh": subversion_resolver,
            "svn+http": subversion_resolver,
            "svn+https": subversion_resolver,
            "hg": mercurial,
            "git": git,
        }
    )


DEFAULT_RESOLVERS = build_table()


class SchemeDispatcher:
    """Select and run resolvers by URI scheme.

    Attributes:
        table: Immutable dispatch table.
    """

    def __init__(self, table: Optional[Mapping[str, Resolver]] = None) -> None:
        self.table = MappingProxyType(dict(table if table is not None else DEFAULT_RESOLVERS))

    @classmethod
    def from_config(cls, config) -> "SchemeDispatcher":
        """Build a dispatcher whose resolvers honor a ``StagingConfig``."""
        return cls(
            build_table(
                remote_resolver=RemoteResolver(
                    timeout=config.download_timeout, chunk_size=config.chunk_size
                ),
                subversion_resolver=SubversionResolver(quiet=config.quiet_checkout),
            )
        )

    @property
    def schemes(self) -> List[str]:
        return sorted(self.table)

    def resolver_for(self, uri: SourceURI) -> Optional[Resolver]:
        return self.table.get(uri.dispatch_key)

    def select(self, info: ResolveInfo) -> FetchAction:
        """Pick the resolver for a request and return its fetch action.

        No I/O beyond the resolver's applicability check happens here.

        Raises:
            UnsupportedSourceError: If no resolver is registered for the
                scheme or the registered resolver declines the URI.
        """
        resolver = self.resolver_for(info.uri)
        if resolver is None:
            raise UnsupportedSourceError(
                f"No resolver for scheme '{info.uri.dispatch_key}': {info.uri}. "
                f"Supported schemes: {', '.join(self.schemes)}"
            )

        action = resolver(info)
        if action is None:
            raise UnsupportedSourceError(f"Unsupported source: {info.uri}")

        logger.debug("Selected %s for %s", action, info.uri)
        return action

    def resolve(self, uri: Union[str, SourceURI], staging: Path) -> Path:
        """Resolve a URI to a staged directory, fetching on cache miss."""
        if isinstance(uri, str):
            uri = SourceURI.parse(uri)
        return self.select(ResolveInfo(uri, Path(staging)))()

    def resolve_all(
        self,
        uris: Sequence[Union[str, SourceURI]],
        staging: Path,
        max_workers: int = 4,
    ) -> List[ResolveOutcome]:
        """Resolve several URIs concurrently.

        Identical cache keys are fetched once; other requesters wait for it.

        Returns:
            List of ``(uri, directory or exception)`` pairs in input order. A
            source that cannot be parsed is reported with its original text.
        """
        outcomes: List[ResolveOutcome] = []

        def resolve_one(source: Union[str, SourceURI]) -> Tuple[SourceURI, Path]:
            uri = SourceURI.parse(source) if isinstance(source, str) else source
            return uri, self.resolve(uri, staging)

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [executor.submit(resolve_one, source) for source in uris]
            for source, future in zip(uris, futures):
                try:
                    outcomes.append(future.result())
                except Exception as e:  # noqa: BLE001 - reported per source
                    logger.error("Failed to resolve %s: %s", source, e)
                    outcomes.append((source, e))

        return outcomes


__all__ = ["DEFAULT_RESOLVERS", "SchemeDispatcher", "build_table"]
