"""
Concurrent access control for zigkit installs.

A host that resolves the language server from several threads or processes
must not download the same version twice. The installer holds a per-version
file lock around "check binary, download if missing", so a second caller
waits for the first and then finds the binary already on disk.

Usage:
    from zigkit.core.locking import LockManager

    lock_manager = LockManager(lock_dir)
    with lock_manager.install_lock("zls-0.14.0", timeout=300):
        ...
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from filelock import FileLock, Timeout

from zigkit.core.directory import get_lock_dir
from zigkit.core.exceptions import InstallLockTimeout

logger = logging.getLogger(__name__)


class LockManager:
    """
    Manages install locks for zigkit.

    Uses file-based locking with the `filelock` library for cross-platform
    compatibility and automatic cleanup on process death.

    Attributes:
        lock_dir: Directory where lock files are stored
    """

    def __init__(self, lock_dir: Optional[Path] = None):
        """
        Initialize lock manager.

        Args:
            lock_dir: Directory for lock files (default: global cache/lock/)
        """
        self.lock_dir = Path(lock_dir) if lock_dir is not None else get_lock_dir()

    @contextmanager
    def install_lock(self, install_id: str, timeout: int = 300):
        """
        Acquire the lock for one installed version.

        Args:
            install_id: Version directory name (e.g. 'zls-0.14.0')
            timeout: Maximum wait time in seconds (default: 300 for long downloads)

        Yields:
            None

        Raises:
            InstallLockTimeout: If lock can't be acquired within timeout
        """
        self.lock_dir.mkdir(parents=True, exist_ok=True)
        safe_id = install_id.replace("/", "-").replace("\\", "-").replace(":", "-")
        lock_path = self.lock_dir / f"{safe_id}.lock"
        lock = FileLock(lock_path, timeout=timeout)

        try:
            with lock:
                logger.debug(f"Acquired install lock: {lock_path}")
                yield
                logger.debug(f"Released install lock: {lock_path}")
        except Timeout as e:
            raise InstallLockTimeout(
                f"Could not acquire install lock for {install_id} after {timeout}s. "
                "Another process may be downloading this version."
            ) from e


__all__ = ["LockManager"]
