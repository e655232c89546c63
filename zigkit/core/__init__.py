"""
Core functionality for zigkit.

This package contains the foundational modules that other components depend on.
"""

from .exceptions import (
    ZigKitError,
    ConfigError,
    FetchError,
    ReleaseNotFoundError,
    NegotiationError,
    UnsupportedPlatformError,
    ToolchainVersionError,
    DownloadFailedError,
    ExecutablePermissionError,
    InstallLockTimeout,
    UnsupportedBuildTaskError,
)

from .platform import (
    Os,
    Arch,
    ArchiveKind,
    AssetNaming,
    PlatformTarget,
    detect_platform,
    clear_platform_cache,
)

from .directory import (
    get_global_cache_dir,
    get_install_dir,
    get_lock_dir,
    ensure_cache_structure,
)

from .locking import LockManager

__all__ = [
    # Exceptions
    "ZigKitError",
    "ConfigError",
    "FetchError",
    "ReleaseNotFoundError",
    "NegotiationError",
    "UnsupportedPlatformError",
    "ToolchainVersionError",
    "DownloadFailedError",
    "ExecutablePermissionError",
    "InstallLockTimeout",
    "UnsupportedBuildTaskError",
    # Platform
    "Os",
    "Arch",
    "ArchiveKind",
    "AssetNaming",
    "PlatformTarget",
    "detect_platform",
    "clear_platform_cache",
    # Directories
    "get_global_cache_dir",
    "get_install_dir",
    "get_lock_dir",
    "ensure_cache_structure",
    # Locking
    "LockManager",
]
