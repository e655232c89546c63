"""
Cross-platform file system utilities for zigkit.

This module provides the platform-aware file operations the installer needs:
- Archive extraction (gzip tar, zip) with directory traversal checks
- Marking binaries executable
- Safe directory deletion
- Executable lookup on a search path
"""

import os
import shutil
import stat
import sys
import tarfile
import zipfile
from pathlib import Path
from typing import Optional, Union

from zigkit.core.platform import ArchiveKind

IS_WINDOWS = os.name == "nt"


# ============================================================================
# Errors
# ============================================================================


class FilesystemError(Exception):
    """Base exception for filesystem operations."""

    pass


class ArchiveExtractionError(FilesystemError):
    """Failed to extract an archive."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


# ============================================================================
# Path Utilities
# ============================================================================


def find_executable(
    name: str, search_path: Optional[str] = None, windows: bool = IS_WINDOWS
) -> Optional[Path]:
    """
    Find an executable on a PATH-style search string.

    Args:
        name: Executable name (e.g., 'zig', 'zls')
        search_path: os.pathsep separated directories (default: process PATH)
        windows: Also try Windows executable extensions

    Returns:
        Path to executable if found, None otherwise

    Example:
        >>> find_executable('zig')
        PosixPath('/usr/local/bin/zig')
    """
    extensions = ["", ".exe", ".bat", ".cmd"] if windows else [""]

    if search_path is None:
        search_path = os.environ.get("PATH", "")

    for entry in search_path.split(os.pathsep):
        if not entry:
            continue
        directory = Path(entry)
        for ext in extensions:
            exe_path = directory / f"{name}{ext}"
            if exe_path.is_file() and os.access(exe_path, os.X_OK):
                return exe_path

    return None


def make_executable(path: Union[str, Path]) -> None:
    """
    Add executable permission bits to a file.

    On Windows the file mode has no executable bit, so only existence is
    checked.

    Args:
        path: File to mark executable

    Raises:
        FileNotFoundError: If the file does not exist
        PermissionError: If the mode cannot be changed
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"File not found: {path}")

    if IS_WINDOWS:
        return

    mode = path.stat().st_mode
    path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


# ============================================================================
# Archive Extraction
# ============================================================================


def _validate_archive_path(path: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = (destination / path).resolve()

    if not member_path.is_relative_to(destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{path}' attempts directory traversal. "
            "This is a security risk and extraction has been blocked."
        )


def extract_archive(
    archive_path: Union[str, Path],
    destination: Union[str, Path],
    kind: ArchiveKind,
) -> None:
    """
    Extract an archive to a destination directory.

    The format is given by the caller rather than sniffed from the file name:
    the published format is a property of the platform.

    Args:
        archive_path: Path to the archive file
        destination: Directory to extract to
        kind: Archive format

    Raises:
        ArchiveExtractionError: If extraction fails
        InsecureArchiveError: If archive contains malicious paths

    Example:
        >>> extract_archive('zls.tar.gz', 'zls-0.14.0', ArchiveKind.GZIP_TAR)
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.exists():
        raise ArchiveExtractionError(f"Archive not found: {archive_path}")

    destination.mkdir(parents=True, exist_ok=True)

    try:
        if kind is ArchiveKind.ZIP:
            _extract_zip(archive_path, destination)
        else:
            _extract_tar_gz(archive_path, destination)
    except InsecureArchiveError:
        raise
    except Exception as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}") from e


def _extract_zip(archive_path: Path, destination: Path) -> None:
    """Extract a ZIP archive."""
    with zipfile.ZipFile(archive_path, "r") as zf:
        members = zf.namelist()

        for member in members:
            _validate_archive_path(member, destination)

        for member in members:
            zf.extract(member, destination)


def _extract_tar_gz(archive_path: Path, destination: Path) -> None:
    """Extract a .tar.gz archive."""
    with tarfile.open(archive_path, "r:gz") as tar:
        for member in tar.getmembers():
            _validate_archive_path(member.name, destination)

        # Python 3.12+ applies the data filter itself; earlier versions rely
        # on the validation above
        if sys.version_info >= (3, 12):
            tar.extractall(destination, filter="data")
        else:
            tar.extractall(destination)


# ============================================================================
# Safe Deletion
# ============================================================================


def safe_rmtree(
    path: Union[str, Path], require_prefix: Optional[Union[str, Path]] = None
) -> None:
    """
    Safely remove a directory tree (or a single file) with safeguards.

    Args:
        path: Directory or file to remove
        require_prefix: If specified, path must be under this directory

    Raises:
        ValueError: If path is not under require_prefix
        FilesystemError: If deletion fails

    Example:
        >>> safe_rmtree('/home/u/.zigkit/zls/zls-0.12.0', require_prefix='/home/u/.zigkit')
    """
    path = Path(path).resolve()

    if require_prefix is not None:
        require_prefix = Path(require_prefix).resolve()
        if not path.is_relative_to(require_prefix):
            raise ValueError(
                f"Refusing to delete '{path}': not under required prefix '{require_prefix}'"
            )

    if not path.exists():
        return

    try:
        if path.is_dir():
            if IS_WINDOWS:

                def handle_remove_readonly(func, target, exc):
                    """Error handler for Windows read-only files."""
                    if not os.access(target, os.W_OK):
                        os.chmod(target, 0o777)
                        func(target)
                    else:
                        raise

                shutil.rmtree(path, onerror=handle_remove_readonly)
            else:
                shutil.rmtree(path)
        else:
            path.unlink()
    except Exception as e:
        raise FilesystemError(f"Failed to remove '{path}': {e}") from e


__all__ = [
    "FilesystemError",
    "ArchiveExtractionError",
    "InsecureArchiveError",
    "find_executable",
    "make_executable",
    "extract_archive",
    "safe_rmtree",
]
