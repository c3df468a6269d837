"""Git backend for the distributed VCS template."""

import logging
from pathlib import Path
from typing import Iterable, List

from depstage.resolvers.dvcs import DistributedVCS
from depstage.resolvers.process import run, tee
from depstage.utils.validation import ensure_safe_argument

logger = logging.getLogger("depstage.resolvers.git")

_HEADS_PREFIX = "refs/heads/"


def parse_remote_heads(lines: Iterable[str]) -> List[str]:
    """Extract branch names from ``git ls-remote --heads`` output.

    Each line has the form ``<sha>\\trefs/heads/<branch>``.

    Args:
        lines: Output lines.

    Returns:
        List[str]: Branch names in output order.
    """
    branches = []
    for line in lines:
        fields = line.split()
        if len(fields) != 2:
            continue
        ref = fields[1]
        if ref.startswith(_HEADS_PREFIX):
            branches.append(ref[len(_HEADS_PREFIX):])
    return branches


class Git(DistributedVCS):
    """Clone with every remote branch tracked locally.

    After cloning, HEAD is detached at ``origin/HEAD`` so that a local branch
    can be force-created for each remote head, including the current one.
    The clone then returns to its default branch. Any branch named in a
    fragment later resolves from the mirror without network access.
    """

    SCHEME = "git"

    def clone(self, source: str, target: Path) -> None:
        ensure_safe_argument(source, "git source")
        logger.info("Cloning git repository: %s", source)
        tee(run("git", "clone", source, str(target.absolute())))

        head = list(run("git", "rev-parse", "--abbrev-ref", "HEAD", cwd=target))
        default_branch = head[0].strip() if head else "HEAD"

        self.checkout("origin/HEAD", target)

        branches = parse_remote_heads(
            run("git", "ls-remote", "--heads", "origin", cwd=target)
        )
        logger.debug("Tracking %d remote branch(es) in %s", len(branches), target)
        for branch in branches:
            tee(
                run(
                    "git", "branch", "--track", "--force",
                    branch, "origin/" + branch,
                    cwd=target,
                )
            )

        # "HEAD" means the remote itself had a detached HEAD
        if default_branch != "HEAD":
            self.checkout(default_branch, target)

    def checkout(self, branch: str, cwd: Path) -> None:
        ensure_safe_argument(branch, "git ref")
        tee(run("git", "checkout", "-q", branch, cwd=cwd))


git = Git()

__all__ = ["Git", "git", "parse_remote_heads"]
