"""Subversion resolver.

Centralized VCS has no mirror tier: one checkout per (repository, revision)
pair, keyed by the normalized URI including its fragment.
"""

import logging
from pathlib import Path
from typing import List, Optional

from depstage.resolvers.base import FetchAction, ResolveInfo
from depstage.resolvers.process import run, tee
from depstage.resolvers.staging import creates, unique_subdirectory_for
from depstage.utils.validation import ensure_safe_argument

logger = logging.getLogger("depstage.resolvers.subversion")


class SubversionResolver:
    """Check out a subversion URL, pinned to ``-r <fragment>`` when given.

    Attributes:
        quiet: Pass ``-q`` to ``svn checkout``.
    """

    SCHEME = "svn"

    def __init__(self, quiet: bool = True) -> None:
        self.quiet = quiet

    def checkout_command(
        self, source: str, target: Path, revision: Optional[str] = None
    ) -> List[str]:
        cmd = ["svn", "checkout"]
        if self.quiet:
            cmd.append("-q")
        if revision is not None:
            cmd.extend(["-r", ensure_safe_argument(revision, "svn revision")])
        cmd.extend([ensure_safe_argument(source, "svn source"), str(target.absolute())])
        return cmd

    def __call__(self, info: ResolveInfo) -> Optional[FetchAction]:
        uri = info.uri.without_marker_scheme()
        local_copy = unique_subdirectory_for(uri.with_scheme(self.SCHEME), info.staging)
        source = uri.without_fragment().to_ascii_string()
        revision = uri.fragment

        def fetch() -> Path:
            def checkout() -> None:
                logger.info("Checking out %s at %s", source, revision or "HEAD")
                tee(run(*self.checkout_command(source, local_copy, revision)))

            return creates(local_copy, checkout)

        return FetchAction(local_copy, fetch, f"svn checkout {source}@{revision or 'HEAD'}")


subversion = SubversionResolver()

__all__ = ["SubversionResolver", "subversion"]
