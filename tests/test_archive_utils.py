"""Tests for safe archive unpacking."""

from __future__ import annotations

import io
import tarfile
import zipfile
from pathlib import Path

import pytest

from depstage.utils.archive_utils import ArchiveSecurityError, safe_extract_any


def _write_tar(path: Path, mode: str, members: dict[str, str], symlink: tuple[str, str] | None = None) -> None:
    with tarfile.open(path, mode) as tf:
        for name, content in members.items():
            data = content.encode("utf-8")
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tf.addfile(info, io.BytesIO(data))
        if symlink:
            link = tarfile.TarInfo(symlink[0])
            link.type = tarfile.SYMTYPE
            link.linkname = symlink[1]
            tf.addfile(link)


@pytest.mark.parametrize(
    "name, mode",
    [("src.tar.gz", "w:gz"), ("src.tgz", "w:gz"), ("src.tar.bz2", "w:bz2"), ("src.tar.xz", "w:xz"), ("src.tar", "w")],
)
def test_tar_variants_by_suffix(tmp_path: Path, name: str, mode: str) -> None:
    archive = tmp_path / name
    _write_tar(archive, mode, {"pkg/a.txt": "a"})

    safe_extract_any(archive, tmp_path / "out")

    assert (tmp_path / "out" / "pkg" / "a.txt").read_text(encoding="utf-8") == "a"


def test_zip_by_name_hint(tmp_path: Path) -> None:
    archive = tmp_path / "blob"
    with zipfile.ZipFile(archive, "w") as zf:
        zf.writestr("x/y.txt", "y")

    safe_extract_any(archive, tmp_path / "out", name_hint="release.zip")

    assert (tmp_path / "out" / "x" / "y.txt").exists()


def test_tar_absolute_member_rejected(tmp_path: Path) -> None:
    archive = tmp_path / "evil.tar"
    _write_tar(archive, "w", {"/etc/evil": "x"})

    with pytest.raises(ArchiveSecurityError):
        safe_extract_any(archive, tmp_path / "out")


def test_tar_symlink_escape_rejected(tmp_path: Path) -> None:
    archive = tmp_path / "evil.tar"
    _write_tar(archive, "w", {}, symlink=("link", "../../outside"))

    with pytest.raises(ArchiveSecurityError, match="Symlink attack"):
        safe_extract_any(archive, tmp_path / "out")
