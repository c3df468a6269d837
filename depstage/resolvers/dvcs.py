"""Distributed VCS resolution template.

Backends implement ``clone`` and ``checkout``; ``DistributedVCS`` turns
them into a resolver with two cache tiers:

1. a branch-independent mirror keyed by the URI without fragment, cloned
   from the network once per repository;
2. for ``repo#branch``, a branch-specific copy keyed by the full URI,
   cloned from the local mirror and checked out at ``branch``.

The mirror is never refreshed once present; a new branch is always derived
from whatever the mirror already holds.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from depstage.resolvers.base import FetchAction, ResolveInfo
from depstage.resolvers.staging import creates, unique_subdirectory_for
from depstage.resolvers.uri import SourceURI

logger = logging.getLogger("depstage.resolvers.dvcs")


class DistributedVCS(ABC):
    """Base class for distributed VCS backends.

    Subclasses set ``SCHEME`` (the canonical VCS name used in cache keys)
    and implement ``clone`` and ``checkout``.
    """

    SCHEME: str = ""

    @abstractmethod
    def clone(self, source: str, target: Path) -> None:
        """Clone ``source`` (remote URL or local mirror path) into ``target``."""
        raise NotImplementedError

    @abstractmethod
    def checkout(self, branch: str, cwd: Path) -> None:
        """Switch the working copy in ``cwd`` to ``branch``."""
        raise NotImplementedError

    def normalized(self, uri: SourceURI) -> SourceURI:
        """Rewrite the scheme to the canonical VCS name (cache keys only)."""
        return uri.with_scheme(self.SCHEME)

    def mirror_dir(self, uri: SourceURI, staging: Path) -> Path:
        """Cache directory of the branch-independent mirror."""
        return unique_subdirectory_for(
            self.normalized(uri.without_marker_scheme().without_fragment()), staging
        )

    def branch_dir(self, uri: SourceURI, staging: Path) -> Path:
        """Cache directory of the branch-specific copy."""
        return unique_subdirectory_for(
            self.normalized(uri.without_marker_scheme()), staging
        )

    def __call__(self, info: ResolveInfo) -> Optional[FetchAction]:
        uri = info.uri.without_marker_scheme()
        local_copy = self.mirror_dir(uri, info.staging)
        source = uri.without_fragment().to_ascii_string()

        if not uri.has_fragment:
            def fetch_mirror() -> Path:
                return creates(local_copy, lambda: self.clone(source, local_copy))

            return FetchAction(
                local_copy, fetch_mirror, f"{self.SCHEME} clone {source}"
            )

        branch = uri.fragment
        branch_copy = self.branch_dir(uri, info.staging)

        def populate_branch() -> None:
            self.clone(str(local_copy.absolute()), branch_copy)
            self.checkout(branch, branch_copy)

        def fetch_branch() -> Path:
            creates(local_copy, lambda: self.clone(source, local_copy))
            return creates(branch_copy, populate_branch)

        return FetchAction(
            branch_copy, fetch_branch, f"{self.SCHEME} clone {source}#{branch}"
        )


__all__ = ["DistributedVCS"]
