"""Resolver for archives downloaded over HTTP(S)."""

import logging
import posixpath
import tempfile
from pathlib import Path
from typing import Optional
from urllib.parse import urlsplit

import requests

from depstage.resolvers.base import FetchAction, ResolveInfo
from depstage.resolvers.staging import creates, unique_subdirectory_for
from depstage.utils.archive_utils import safe_extract_any

logger = logging.getLogger("depstage.resolvers.remote")


class RemoteResolver:
    """Download an archive and unpack it into the staging area.

    Always applicable: network and unpack failures surface only when the
    fetch action runs.

    Attributes:
        timeout: Request timeout in seconds.
        chunk_size: Streaming chunk size in bytes.
    """

    def __init__(self, timeout: int = 300, chunk_size: int = 8192) -> None:
        self.timeout = timeout
        self.chunk_size = chunk_size

    def __call__(self, info: ResolveInfo) -> Optional[FetchAction]:
        url = info.uri.without_fragment().to_ascii_string()
        target = unique_subdirectory_for(info.uri, info.staging)

        def fetch() -> Path:
            return creates(target, lambda: self.unzip_url(url, target))

        return FetchAction(target, fetch, f"download {url} -> {target}")

    def download(self, url: str, target_path: Path) -> None:
        """Stream ``url`` into ``target_path``.

        Raises:
            requests.RequestException: On connection or HTTP errors.
        """
        logger.info("Downloading file: %s", url)
        with requests.get(url, timeout=self.timeout, stream=True) as response:
            response.raise_for_status()
            with target_path.open("wb") as out:
                for chunk in response.iter_content(chunk_size=self.chunk_size):
                    out.write(chunk)
        logger.debug("Downloaded %s to %s", url, target_path)

    def unzip_url(self, url: str, target_dir: Path) -> None:
        """Download an archive and unpack it into ``target_dir``."""
        name = posixpath.basename(urlsplit(url).path) or "download"
        with tempfile.TemporaryDirectory(
            prefix=".download-", dir=target_dir.parent
        ) as tmp:
            archive_path = Path(tmp) / name
            self.download(url, archive_path)
            safe_extract_any(archive_path, target_dir, name_hint=name)


remote = RemoteResolver()

__all__ = ["RemoteResolver", "remote"]
