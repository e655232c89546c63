"""
Directory structure management for zigkit.

Directory Structure:
    Global Cache (~/.zigkit/ or %USERPROFILE%\\.zigkit\\):
        - zls/            : Install root; one ``zls-<version>/`` directory per
                            installed language server
        - lock/           : Install lock files (kept out of zls/ so pruning of
                            stale version directories never touches them)

The ``ZIGKIT_CACHE_DIR`` environment variable overrides the cache root.
"""

import os
from pathlib import Path
from typing import Optional

from zigkit.core.exceptions import ZigKitError

CACHE_DIR_ENV = "ZIGKIT_CACHE_DIR"


class DirectoryError(ZigKitError):
    """Base exception for directory-related errors."""

    pass


def get_global_cache_dir() -> Path:
    """
    Get the platform-specific global cache directory path.

    Returns:
        Path: The global cache directory path.
            - $ZIGKIT_CACHE_DIR if set
            - Windows: %USERPROFILE%\\.zigkit
            - Linux/macOS: ~/.zigkit/

    Raises:
        DirectoryError: If USERPROFILE is unset on Windows
    """
    override = os.environ.get(CACHE_DIR_ENV)
    if override:
        return Path(override)

    if os.name == "nt":
        user_profile = os.environ.get("USERPROFILE")
        if not user_profile:
            raise DirectoryError(
                "USERPROFILE environment variable is not set. "
                "Cannot determine global cache directory."
            )
        return Path(user_profile) / ".zigkit"
    else:
        return Path.home() / ".zigkit"


def get_install_dir(cache_dir: Optional[Path] = None) -> Path:
    """Get the directory holding the ``zls-<version>`` directories."""
    return (cache_dir or get_global_cache_dir()) / "zls"


def get_lock_dir(cache_dir: Optional[Path] = None) -> Path:
    """Get the directory holding install lock files."""
    return (cache_dir or get_global_cache_dir()) / "lock"


def ensure_cache_structure(cache_dir: Optional[Path] = None) -> Path:
    """
    Create the cache directory structure if it doesn't exist.

    Args:
        cache_dir: Cache root (default: global cache directory)

    Returns:
        Path: The cache root.

    Raises:
        DirectoryError: If directory creation fails.
    """
    root = cache_dir or get_global_cache_dir()

    for directory in (root, get_install_dir(root), get_lock_dir(root)):
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DirectoryError(f"Failed to create directory {directory}: {e}") from e

    return root


__all__ = [
    "CACHE_DIR_ENV",
    "DirectoryError",
    "get_global_cache_dir",
    "get_install_dir",
    "get_lock_dir",
    "ensure_cache_structure",
]
