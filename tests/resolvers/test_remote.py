"""Tests for the remote archive resolver."""

from __future__ import annotations

import io
import tarfile
import zipfile
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import requests

from depstage.resolvers.base import ResolveInfo
from depstage.resolvers.remote import RemoteResolver
from depstage.resolvers.uri import SourceURI
from depstage.utils.archive_utils import ArchiveSecurityError


def _zip_bytes(members: dict[str, str]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        for name, content in members.items():
            zf.writestr(name, content)
    return buf.getvalue()


def _tar_gz_bytes(members: dict[str, str]) -> bytes:
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tf:
        for name, content in members.items():
            data = content.encode("utf-8")
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tf.addfile(info, io.BytesIO(data))
    return buf.getvalue()


def _response(payload: bytes) -> MagicMock:
    response = MagicMock()
    response.__enter__.return_value = response
    response.iter_content.return_value = [payload[:10], payload[10:]]
    return response


def _info(url: str, staging: Path) -> ResolveInfo:
    return ResolveInfo(SourceURI.parse(url), staging)


def test_action_is_lazy(tmp_path: Path) -> None:
    with patch("depstage.resolvers.remote.requests.get") as mock_get:
        action = RemoteResolver()(_info("https://example.com/src.zip", tmp_path))

    assert action is not None
    mock_get.assert_not_called()
    assert not action.target.exists()


def test_downloads_and_unpacks_zip(tmp_path: Path) -> None:
    payload = _zip_bytes({"lib/a.txt": "alpha", "README": "hi"})
    resolver = RemoteResolver(timeout=30, chunk_size=4096)

    with patch(
        "depstage.resolvers.remote.requests.get", return_value=_response(payload)
    ) as mock_get:
        staged = resolver(_info("https://example.com/src.zip", tmp_path))()

    mock_get.assert_called_once_with(
        "https://example.com/src.zip", timeout=30, stream=True
    )
    assert (staged / "lib" / "a.txt").read_text(encoding="utf-8") == "alpha"
    assert (staged / "README").read_text(encoding="utf-8") == "hi"
    # temporary download directory is cleaned up
    assert sorted(p.name for p in tmp_path.iterdir()) == [staged.name]


def test_tar_detected_from_content(tmp_path: Path) -> None:
    payload = _tar_gz_bytes({"pkg/setup.cfg": "[metadata]"})

    with patch(
        "depstage.resolvers.remote.requests.get", return_value=_response(payload)
    ):
        staged = RemoteResolver()(_info("https://example.com/download", tmp_path))()

    assert (staged / "pkg" / "setup.cfg").exists()


def test_cache_hit_skips_download(tmp_path: Path) -> None:
    payload = _zip_bytes({"a.txt": "a"})
    info = _info("https://example.com/src.zip", tmp_path)

    with patch(
        "depstage.resolvers.remote.requests.get", return_value=_response(payload)
    ) as mock_get:
        first = RemoteResolver()(info)()
        second = RemoteResolver()(info)()

    assert first == second
    assert mock_get.call_count == 1


def test_http_error_leaves_no_residue(tmp_path: Path) -> None:
    response = _response(b"")
    response.raise_for_status.side_effect = requests.HTTPError("404 Not Found")

    with patch("depstage.resolvers.remote.requests.get", return_value=response):
        action = RemoteResolver()(_info("https://example.com/missing.zip", tmp_path))
        with pytest.raises(requests.HTTPError):
            action()

    assert not action.target.exists()


def test_zip_slip_is_rejected(tmp_path: Path) -> None:
    payload = _zip_bytes({"../evil.txt": "pwned"})

    with patch(
        "depstage.resolvers.remote.requests.get", return_value=_response(payload)
    ):
        action = RemoteResolver()(_info("https://example.com/evil.zip", tmp_path))
        with pytest.raises(ArchiveSecurityError):
            action()

    assert not action.target.exists()
    assert not (tmp_path / "evil.txt").exists()


def test_unknown_format_fails(tmp_path: Path) -> None:
    with patch(
        "depstage.resolvers.remote.requests.get",
        return_value=_response(b"not an archive at all"),
    ):
        action = RemoteResolver()(_info("https://example.com/file.bin", tmp_path))
        with pytest.raises(ValueError, match="Unsupported archive format"):
            action()

    assert not action.target.exists()
