"""Safe archive unpacking for downloaded sources.

Protects against path traversal (Zip Slip, Tar Slip) and symbolic link
attacks. The archive format comes from the download name when it has a
known suffix, otherwise from the file contents.
"""

import logging
import sys
import tarfile
import zipfile
from pathlib import Path
from typing import Optional

logger = logging.getLogger("depstage.utils.archive_utils")

_TAR_SUFFIXES = {
    ".tar.gz": "r:gz",
    ".tgz": "r:gz",
    ".tar.bz2": "r:bz2",
    ".tbz2": "r:bz2",
    ".tar.xz": "r:xz",
    ".txz": "r:xz",
    ".tar": "r:",
}


class ArchiveSecurityError(Exception):
    """Raised when archive contains potentially malicious paths."""

    pass


def _is_path_safe(member_path: Path, target_dir: Path) -> bool:
    try:
        resolved = (target_dir / member_path).resolve()
        return resolved.is_relative_to(target_dir)
    except (ValueError, RuntimeError):
        return False


def _check_member(name: str, target_dir: Path, kind: str) -> None:
    member_path = Path(name)
    if member_path.is_absolute() or ".." in member_path.parts:
        raise ArchiveSecurityError(f"{kind} Slip detected: {name} contains path traversal")
    if not _is_path_safe(member_path, target_dir):
        raise ArchiveSecurityError(f"{kind} Slip detected: {name} escapes target directory")


def safe_extract_zip(archive_path: Path, target_dir: Path) -> None:
    """Safely extract ZIP archive with path traversal protection.

    Raises:
        ArchiveSecurityError: If archive contains path traversal attempts.
        zipfile.BadZipFile: If archive is corrupted.
    """
    target_dir = target_dir.resolve()

    with zipfile.ZipFile(archive_path, "r") as zip_ref:
        for member in zip_ref.namelist():
            _check_member(member, target_dir, "Zip")
        zip_ref.extractall(target_dir)


def safe_extract_tar(archive_path: Path, target_dir: Path, mode: str = "r:*") -> None:
    """Safely extract TAR archive with path traversal protection.

    Raises:
        ArchiveSecurityError: If archive contains path traversal attempts.
        tarfile.TarError: If archive is corrupted.
    """
    target_dir = target_dir.resolve()

    with tarfile.open(archive_path, mode) as tar_ref:
        for member in tar_ref.getmembers():
            _check_member(member.name, target_dir, "Tar")
            if member.issym() or member.islnk():
                link_target = Path(member.linkname)
                if link_target.is_absolute() or ".." in link_target.parts:
                    raise ArchiveSecurityError(
                        f"Symlink attack detected: {member.name} -> {member.linkname}"
                    )

        # Python 3.12+ has built-in filter parameter
        if sys.version_info >= (3, 12):
            tar_ref.extractall(target_dir, filter="data")
        else:
            tar_ref.extractall(target_dir)


def _tar_mode_for(name: str) -> Optional[str]:
    name = name.lower()
    for suffix, mode in _TAR_SUFFIXES.items():
        if name.endswith(suffix):
            return mode
    return None


def safe_extract_any(
    archive_path: Path, target_dir: Path, name_hint: Optional[str] = None
) -> None:
    """Unpack a zip or tar archive into ``target_dir``.

    Args:
        archive_path: Downloaded archive file.
        target_dir: Extraction directory (created if missing).
        name_hint: Original file name or URL path, used for suffix detection.

    Raises:
        ArchiveSecurityError: If archive contains malicious paths.
        ValueError: If the archive format is not recognized.
    """
    name = (name_hint or archive_path.name).lower()
    target_dir.mkdir(parents=True, exist_ok=True)

    tar_mode = _tar_mode_for(name)
    if name.endswith((".zip", ".jar")):
        safe_extract_zip(archive_path, target_dir)
    elif tar_mode is not None:
        safe_extract_tar(archive_path, target_dir, tar_mode)
    elif zipfile.is_zipfile(archive_path):
        safe_extract_zip(archive_path, target_dir)
    elif tarfile.is_tarfile(archive_path):
        safe_extract_tar(archive_path, target_dir)
    else:
        raise ValueError(f"Unsupported archive format: {name}")

    logger.info("Safely extracted %s to %s", name, target_dir)


__all__ = [
    "ArchiveSecurityError",
    "safe_extract_any",
    "safe_extract_tar",
    "safe_extract_zip",
]
