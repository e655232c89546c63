"""
Language server download and installation.

Installs one ZLS release into its ``zls-<version>`` directory:

1. Skip everything if the binary is already on disk
2. Report the "downloading" phase
3. Download and extract the archive (gzip tar on macOS/Linux, zip on Windows)
4. Mark the binary executable
5. Optionally remove every other entry of the install root (stale versions)

Steps 1-4 run under a per-version file lock, so concurrent callers install a
version once.
"""

import logging
import tempfile
from pathlib import Path
from typing import Optional

from zigkit.core.download import DownloadError, download_file
from zigkit.core.exceptions import DownloadFailedError, ExecutablePermissionError
from zigkit.core.filesystem import (
    ArchiveExtractionError,
    extract_archive,
    make_executable,
    safe_rmtree,
)
from zigkit.core.locking import LockManager
from zigkit.core.platform import ArchiveKind, PlatformTarget, archive_kind
from zigkit.zls.models import InstallationStatus, StatusReporter, log_status

logger = logging.getLogger(__name__)


class ArtifactFetcher:
    """
    Downloads and installs language server archives.

    Example:
        >>> fetcher = ArtifactFetcher(LockManager(cache / "lock"))
        >>> fetcher.fetch(url, install_dir / "zls-0.14.0",
        ...               install_dir / "zls-0.14.0" / "zls", detect_platform())
        True
    """

    def __init__(
        self,
        lock_manager: Optional[LockManager] = None,
        status_reporter: StatusReporter = log_status,
        prune_stale: bool = True,
    ):
        """
        Initialize fetcher.

        Args:
            lock_manager: Lock manager for install locks (default: global lock dir)
            status_reporter: Callback receiving installation phases
            prune_stale: Remove sibling version directories after a fresh install
        """
        self.lock_manager = lock_manager or LockManager()
        self.status_reporter = status_reporter
        self.prune_stale = prune_stale

    def fetch(
        self,
        download_url: str,
        version_dir: Path,
        binary_path: Path,
        platform: PlatformTarget,
    ) -> bool:
        """
        Make sure the binary of a version is installed.

        Args:
            download_url: Archive URL
            version_dir: Directory the archive is extracted into
            binary_path: Expected binary inside version_dir
            platform: Platform deciding the archive format

        Returns:
            True if a download happened, False if the binary was already present

        Raises:
            DownloadFailedError: If download or extraction fails
            ExecutablePermissionError: If the binary cannot be made executable
            InstallLockTimeout: If another process holds the install lock too long
        """
        version_dir = Path(version_dir)
        binary_path = Path(binary_path)

        with self.lock_manager.install_lock(version_dir.name):
            if binary_path.is_file():
                logger.debug(f"{binary_path} already installed")
                return False

            self.status_reporter(InstallationStatus.DOWNLOADING)
            logger.info(f"Installing {version_dir.name} from {download_url}")

            try:
                self._download_and_extract(
                    download_url, version_dir, archive_kind(platform)
                )
            except (DownloadError, ArchiveExtractionError, OSError) as e:
                self._discard(version_dir)
                raise DownloadFailedError(f"failed to download file: {e}") from e

            try:
                make_executable(binary_path)
            except OSError as e:
                self._discard(version_dir)
                raise ExecutablePermissionError(
                    f"failed to make {binary_path} executable: {e}"
                ) from e

        logger.info(f"Installed {binary_path}")

        if self.prune_stale:
            prune_stale_versions(version_dir)

        return True

    def _download_and_extract(
        self, download_url: str, version_dir: Path, kind: ArchiveKind
    ) -> None:
        archive_name = download_url.rsplit("/", 1)[-1] or "archive"
        with tempfile.TemporaryDirectory(prefix="zigkit_") as tmp:
            archive_path = download_file(download_url, Path(tmp) / archive_name)
            extract_archive(archive_path, version_dir, kind)

    @staticmethod
    def _discard(version_dir: Path) -> None:
        try:
            safe_rmtree(version_dir, require_prefix=version_dir.parent)
        except Exception as e:
            logger.warning(f"Failed to clean up {version_dir}: {e}")


def prune_stale_versions(version_dir: Path) -> int:
    """
    Remove every entry next to version_dir, best-effort.

    A failed removal is logged and does not stop the others.

    Args:
        version_dir: The directory to keep

    Returns:
        Number of entries removed
    """
    install_dir = version_dir.parent
    try:
        entries = list(install_dir.iterdir())
    except OSError as e:
        logger.warning(f"Failed to list {install_dir}: {e}")
        return 0

    removed = 0
    for entry in entries:
        if entry.name == version_dir.name:
            continue
        try:
            safe_rmtree(entry, require_prefix=install_dir)
            removed += 1
            logger.info(f"Removed stale {entry.name}")
        except Exception as e:
            logger.warning(f"Failed to remove stale {entry}: {e}")

    return removed


__all__ = ["ArtifactFetcher", "prune_stale_versions"]
