"""
Zig language server (ZLS) resolution.

Finds a user-provided ZLS, or negotiates a version compatible with the local
Zig toolchain and installs it into the zigkit cache.
"""

from .cache import CacheStore
from .fetcher import ArtifactFetcher, prune_stale_versions
from .models import (
    AssetDescriptor,
    InstallationStatus,
    LanguageServerCommand,
    NegotiatedVersion,
    ResolvedBinary,
)
from .negotiator import VersionNegotiator
from .override import OverrideResolver
from .releases import GithubRelease, latest_github_release
from .resolver import ZlsResolver
from .toolchain import detect_zig_version

__all__ = [
    "CacheStore",
    "ArtifactFetcher",
    "prune_stale_versions",
    "AssetDescriptor",
    "InstallationStatus",
    "LanguageServerCommand",
    "NegotiatedVersion",
    "ResolvedBinary",
    "VersionNegotiator",
    "OverrideResolver",
    "GithubRelease",
    "latest_github_release",
    "ZlsResolver",
    "detect_zig_version",
]
