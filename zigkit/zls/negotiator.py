"""
ZLS version negotiation.

Determines which ZLS release to install and where to download it from:

- Without a local Zig toolchain, the latest stable GitHub release is used and
  the download URL is built from the builds host and the platform token table.
- With a local Zig toolchain, the zigtools select-version endpoint picks the
  newest ZLS that is runtime-compatible with that Zig version and supplies a
  per-platform asset descriptor.
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

from zigkit.core.download import fetch_json
from zigkit.core.exceptions import NegotiationError, UnsupportedPlatformError
from zigkit.core.platform import AssetNaming, PlatformTarget, asset_name, target_token
from zigkit.zls.models import AssetDescriptor, NegotiatedVersion
from zigkit.zls.releases import latest_github_release

logger = logging.getLogger(__name__)

ZLS_REPOSITORY = "zigtools/zls"
BUILDS_URL = "https://builds.zigtools.org"
SELECT_VERSION_URL = "https://releases.zigtools.org/v1/zls/select-version"
COMPATIBILITY_MODE = "only-runtime"


class VersionNegotiator:
    """
    Picks a ZLS version compatible with the local toolchain.

    Example:
        >>> negotiator = VersionNegotiator()
        >>> result = negotiator.negotiate("0.13.0", detect_platform())
        >>> result.version
        '0.13.0'
    """

    def __init__(
        self,
        naming: AssetNaming = AssetNaming.ARCH_OS,
        builds_url: str = BUILDS_URL,
        select_version_url: str = SELECT_VERSION_URL,
        repository: str = ZLS_REPOSITORY,
    ):
        """
        Initialize negotiator.

        Args:
            naming: Asset naming convention served by the builds host
            builds_url: Base URL of the builds host
            select_version_url: URL of the version-compatibility endpoint
            repository: GitHub repository publishing releases
        """
        self.naming = naming
        self.builds_url = builds_url.rstrip("/")
        self.select_version_url = select_version_url
        self.repository = repository

    def negotiate(
        self, toolchain_version: Optional[str], platform: PlatformTarget
    ) -> NegotiatedVersion:
        """
        Determine the ZLS version and download URL.

        Args:
            toolchain_version: Local Zig version, or None without a toolchain
            platform: Platform to download for

        Returns:
            NegotiatedVersion with resolved version and download URL

        Raises:
            FetchError: If a remote lookup fails or cannot be parsed
            NegotiationError: If the compatibility response is unusable
            UnsupportedPlatformError: If no asset exists for the platform
        """
        if toolchain_version is None:
            return self.from_latest_release(platform)
        return self.from_compatible_release(toolchain_version, platform)

    def from_latest_release(self, platform: PlatformTarget) -> NegotiatedVersion:
        """Resolve the latest stable release."""
        release = latest_github_release(
            self.repository, require_assets=True, pre_release=False
        )

        # The tar.gz assets are not listed on the GitHub release, but the
        # builds host serves them next to the .tar.xz ones.
        name = asset_name(platform, release.version, self.naming)
        download_url = f"{self.builds_url}/{name}"

        logger.info(f"Latest ZLS release is {release.version}")
        return NegotiatedVersion(version=release.version, download_url=download_url)

    def from_compatible_release(
        self, toolchain_version: str, platform: PlatformTarget
    ) -> NegotiatedVersion:
        """Resolve the release compatible with a Zig version."""
        zig_version = toolchain_version.strip()
        url = (
            f"{self.select_version_url}"
            f"?zig_version={quote(zig_version, safe='')}"
            f"&compatibility={COMPATIBILITY_MODE}"
        )

        select = fetch_json(url)
        if not isinstance(select, dict):
            raise NegotiationError("failed to parse select version: expected an object")

        version = select.get("version")
        if version is None:
            message = select.get("message")
            if message:
                raise NegotiationError(
                    f"no ZLS release is compatible with Zig {zig_version}: {message}"
                )
            raise NegotiationError("failed to parse version: missing 'version' field")
        if not isinstance(version, str):
            raise NegotiationError(f"failed to parse version: {version!r}")

        target = target_token(platform)
        asset = parse_asset(select, target)

        # Only the gzip form is guaranteed extractable; the builds host serves
        # it next to the advertised .tar.xz.
        download_url = asset.tarball_url.replace(".tar.xz", ".tar.gz")

        logger.info(f"ZLS {version} is compatible with Zig {zig_version}")
        return NegotiatedVersion(version=version, download_url=download_url)


def parse_asset(select: Dict[str, Any], target: str) -> AssetDescriptor:
    """
    Get the asset descriptor of one platform from a select-version response.

    Raises:
        UnsupportedPlatformError: If the target is absent or malformed
    """
    entry = select.get(target)
    if entry is None:
        raise UnsupportedPlatformError(target)
    if not isinstance(entry, dict):
        raise UnsupportedPlatformError(target, f"malformed asset {entry!r}")

    tarball = entry.get("tarball")
    if not isinstance(tarball, str) or not tarball:
        raise UnsupportedPlatformError(target, "asset has no tarball URL")

    return AssetDescriptor(
        tarball_url=tarball,
        checksum=str(entry.get("shasum", "")),
        size=str(entry.get("size", "")),
    )


__all__ = ["VersionNegotiator", "parse_asset"]
