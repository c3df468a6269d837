"""Staging layout and the atomic fetch-or-reuse guard.

Each source maps to ``<staging root>/<half SHA-1 of its canonical URI>``.
A directory that exists under the staging root is a complete cache entry;
it is never refreshed.
"""

import hashlib
import logging
import os
import shutil
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Dict, Iterator

from depstage.resolvers.uri import SourceURI

logger = logging.getLogger("depstage.resolvers.staging")

# Half of a SHA-1 hex digest.
HASH_LENGTH = 20


class _KeyLock:
    """Lock for one cache directory plus the number of threads holding or awaiting it."""

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.users = 0


# Entries live only while some thread holds or waits for them.
_locks: Dict[str, _KeyLock] = {}
_locks_guard = threading.Lock()


def half_hash_string(text: str) -> str:
    """Hash text to a fixed-length hex string.

    Args:
        text: ASCII text to hash.

    Returns:
        str: First half of the SHA-1 hex digest.
    """
    return hashlib.sha1(text.encode("ascii")).hexdigest()[:HASH_LENGTH]


def unique_subdirectory_for(uri: SourceURI, staging: Path) -> Path:
    """Name the cache directory for a URI. Does not create it.

    Args:
        uri: Normalized source URI.
        staging: Staging root.

    Returns:
        Path: ``staging / <hash>``.
    """
    return Path(staging) / half_hash_string(uri.to_ascii_string())


@contextmanager
def _key_lock(directory: Path) -> Iterator[None]:
    key = os.path.normcase(os.path.abspath(directory))
    with _locks_guard:
        entry = _locks.get(key)
        if entry is None:
            entry = _locks[key] = _KeyLock()
        entry.users += 1
    try:
        with entry.lock:
            yield
    finally:
        with _locks_guard:
            entry.users -= 1
            if entry.users == 0:
                del _locks[key]


def creates(directory: Path, action: Callable[[], object]) -> Path:
    """Run ``action`` only if ``directory`` does not exist yet.

    Concurrent callers targeting the same directory are serialized: one runs
    the action, the others wait and then reuse its result. On failure the
    partially created directory is removed and the original exception is
    re-raised unchanged.

    Args:
        directory: Cache directory populated by ``action``.
        action: Zero-argument callable that creates and fills ``directory``.

    Returns:
        Path: ``directory``.
    """
    with _key_lock(directory):
        if directory.exists():
            logger.debug("Cache hit: %s", directory)
            return directory

        directory.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Populating cache directory: %s", directory)
        try:
            action()
        except BaseException:
            logger.warning("Fetch failed, removing partial directory: %s", directory)
            if directory.is_file() or directory.is_symlink():
                directory.unlink(missing_ok=True)
            else:
                shutil.rmtree(directory, ignore_errors=True)
            raise

    return directory


__all__ = ["HASH_LENGTH", "creates", "half_hash_string", "unique_subdirectory_for"]
