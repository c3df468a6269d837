"""Core resolver contracts: the resolution request and the deferred fetch action.

A resolver is a pure function ``ResolveInfo -> Optional[FetchAction]``:

1. ``None`` means the resolver does not apply to the URI.
2. A ``FetchAction`` means it can service the request. Nothing has touched
   the filesystem or spawned a process yet; calling the action does the I/O
   and returns the populated directory.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Protocol

from depstage.errors import DepstageError, InvalidSourceError, UnsupportedSourceError
from depstage.resolvers.uri import SourceURI

logger = logging.getLogger("depstage.resolvers.base")


# =============================================================================
# Data Model
# =============================================================================

@dataclass(frozen=True)
class ResolveInfo:
    """A resolution request.

    Attributes:
        uri: Source URI to resolve.
        staging: Staging root under which cache directories are created.
    """

    uri: SourceURI
    staging: Path


class FetchAction:
    """Deferred, zero-argument fetch operation.

    Constructing one performs no I/O. Calling it runs the fetch (under the
    atomic fetch guard) and returns the populated directory.

    Attributes:
        target: Directory the action populates and returns.
        description: Human readable summary used in logs.
    """

    def __init__(
        self, target: Path, fetch: Callable[[], Path], description: str = ""
    ) -> None:
        self.target = target
        self.description = description or str(target)
        self._fetch = fetch

    def __call__(self) -> Path:
        logger.debug("Running fetch action: %s", self.description)
        return self._fetch()

    def __repr__(self) -> str:
        return f"FetchAction(target={self.target}, description={self.description!r})"


class Resolver(Protocol):
    """Resolver callable protocol."""

    def __call__(self, info: ResolveInfo) -> Optional[FetchAction]:
        ...


__all__ = [
    "DepstageError",
    "FetchAction",
    "InvalidSourceError",
    "ResolveInfo",
    "Resolver",
    "UnsupportedSourceError",
]
