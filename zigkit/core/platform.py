"""
Platform detection for zigkit.

This module detects the current platform (OS, architecture) and owns the single
mapping table from the platform enums to the string tokens used by the remote
ZLS services. The two services disagree on token order, so every asset name,
target key and directory name is built here and nowhere else.

Usage:
    from zigkit.core.platform import detect_platform, target_token

    target = detect_platform()
    print(target_token(target))  # e.g. 'x86_64-linux'
"""

import functools
import platform
from dataclasses import dataclass
from enum import Enum

from zigkit.core.exceptions import UnsupportedPlatformError


class Os(Enum):
    """Operating systems a ZLS build is published for."""

    MAC = "mac"
    LINUX = "linux"
    WINDOWS = "windows"


class Arch(Enum):
    """CPU architectures a ZLS build is published for."""

    AARCH64 = "aarch64"
    X86 = "x86"
    X86_64 = "x86_64"


class ArchiveKind(Enum):
    """Archive formats understood by the extractor."""

    GZIP_TAR = "gzip-tar"
    ZIP = "zip"


class AssetNaming(Enum):
    """
    Asset file naming conventions used by the ZLS builds host.

    ARCH_OS is what builds.zigtools.org serves for current releases
    (``zls-x86_64-linux-0.14.0.tar.gz``); OS_ARCH is the older layout
    (``zls-linux-x86_64-0.13.0.tar.gz``).
    """

    ARCH_OS = "arch-os"
    OS_ARCH = "os-arch"


@dataclass(frozen=True)
class PlatformTarget:
    """
    Immutable (OS, architecture) pair.

    Attributes:
        os: Operating system
        arch: CPU architecture
    """

    os: Os
    arch: Arch

    @property
    def is_windows(self) -> bool:
        return self.os is Os.WINDOWS

    def __str__(self) -> str:
        return target_token(self)


# ============================================================================
# Token Table
# ============================================================================

_OS_TOKENS = {
    Os.MAC: "macos",
    Os.LINUX: "linux",
    Os.WINDOWS: "windows",
}

_ARCH_TOKENS = {
    Arch.AARCH64: "aarch64",
    Arch.X86: "x86",
    Arch.X86_64: "x86_64",
}


def os_token(target: PlatformTarget) -> str:
    """Get the OS token (``macos``, ``linux``, ``windows``)."""
    return _OS_TOKENS[target.os]


def arch_token(target: PlatformTarget) -> str:
    """Get the architecture token (``aarch64``, ``x86``, ``x86_64``)."""
    return _ARCH_TOKENS[target.arch]


def target_token(target: PlatformTarget) -> str:
    """
    Get the ``arch-os`` target token.

    This is the key used by the version-compatibility endpoint to index
    per-platform asset descriptors.

    Example:
        >>> target_token(PlatformTarget(Os.MAC, Arch.AARCH64))
        'aarch64-macos'
    """
    return f"{arch_token(target)}-{os_token(target)}"


def archive_extension(target: PlatformTarget) -> str:
    """Get the archive extension (without leading dot) published for a platform."""
    return "zip" if target.is_windows else "tar.gz"


def archive_kind(target: PlatformTarget) -> ArchiveKind:
    """Get the archive format to extract on a platform."""
    return ArchiveKind.ZIP if target.is_windows else ArchiveKind.GZIP_TAR


def asset_name(
    target: PlatformTarget,
    version: str,
    naming: AssetNaming = AssetNaming.ARCH_OS,
    tool: str = "zls",
) -> str:
    """
    Build the published asset file name for a release.

    Args:
        target: Platform to build the name for
        version: Release version (e.g. '0.13.0')
        naming: Asset naming convention served by the host
        tool: Tool name prefix

    Returns:
        Asset file name

    Example:
        >>> asset_name(PlatformTarget(Os.LINUX, Arch.X86_64), "0.14.0")
        'zls-x86_64-linux-0.14.0.tar.gz'
    """
    if naming is AssetNaming.OS_ARCH:
        platform_part = f"{os_token(target)}-{arch_token(target)}"
    else:
        platform_part = f"{arch_token(target)}-{os_token(target)}"
    return f"{tool}-{platform_part}-{version}.{archive_extension(target)}"


def binary_name(target: PlatformTarget, tool: str = "zls") -> str:
    """Get the executable file name of a tool on a platform."""
    return f"{tool}.exe" if target.is_windows else tool


def version_dir_name(version: str, tool: str = "zls") -> str:
    """Get the ``<tool>-<version>`` directory name holding one installed binary."""
    return f"{tool}-{version}"


# ============================================================================
# Detection
# ============================================================================


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformTarget:
    """
    Detect the current platform.

    This function is cached - it only runs detection once per process.

    Returns:
        PlatformTarget for the running interpreter

    Raises:
        UnsupportedPlatformError: If the OS or CPU has no ZLS build
    """
    return PlatformTarget(os=_detect_os(), arch=_detect_architecture())


def _detect_os() -> Os:
    system = platform.system().lower()

    if system == "windows":
        return Os.WINDOWS
    elif system == "linux":
        return Os.LINUX
    elif system == "darwin":
        return Os.MAC
    else:
        raise UnsupportedPlatformError(system, "unsupported operating system")


def _detect_architecture() -> Arch:
    machine = platform.machine().lower()

    # Normalize architecture names
    if machine in ("x86_64", "amd64", "x64"):
        return Arch.X86_64
    elif machine in ("aarch64", "arm64"):
        return Arch.AARCH64
    elif machine in ("i386", "i686", "x86"):
        return Arch.X86
    else:
        raise UnsupportedPlatformError(machine, "unsupported architecture")


def clear_platform_cache():
    """
    Clear the platform detection cache.

    Useful for testing or when platform information changes.
    """
    detect_platform.cache_clear()


__all__ = [
    "Os",
    "Arch",
    "ArchiveKind",
    "AssetNaming",
    "PlatformTarget",
    "os_token",
    "arch_token",
    "target_token",
    "archive_extension",
    "archive_kind",
    "asset_name",
    "binary_name",
    "version_dir_name",
    "detect_platform",
    "clear_platform_cache",
]
