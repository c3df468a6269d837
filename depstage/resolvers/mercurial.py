"""Mercurial backend for the distributed VCS template."""

from pathlib import Path

from depstage.resolvers.dvcs import DistributedVCS
from depstage.resolvers.process import run, tee
from depstage.utils.validation import ensure_safe_argument


class Mercurial(DistributedVCS):
    SCHEME = "hg"

    def clone(self, source: str, target: Path) -> None:
        ensure_safe_argument(source, "hg source")
        tee(run("hg", "clone", source, str(target.absolute())))

    def checkout(self, branch: str, cwd: Path) -> None:
        ensure_safe_argument(branch, "hg revision")
        tee(run("hg", "checkout", "-q", branch, cwd=cwd))


mercurial = Mercurial()

__all__ = ["Mercurial", "mercurial"]
