"""
GitHub release lookup.

Used when there is no local Zig toolchain: the newest published ZLS release
is installed.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import List

from zigkit.core.download import fetch_json
from zigkit.core.exceptions import FetchError, ReleaseNotFoundError

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
GITHUB_TOKEN_ENV = "GITHUB_TOKEN"


@dataclass
class GithubReleaseAsset:
    """A downloadable file attached to a release."""

    name: str
    download_url: str


@dataclass
class GithubRelease:
    """A published release."""

    version: str
    assets: List[GithubReleaseAsset] = field(default_factory=list)


def latest_github_release(
    repo: str,
    require_assets: bool = True,
    pre_release: bool = False,
    api_url: str = GITHUB_API_URL,
) -> GithubRelease:
    """
    Get the newest release of a repository matching the filters.

    Releases are listed newest first by the API; drafts are never returned.

    Args:
        repo: Repository in "owner/name" form (e.g. "zigtools/zls")
        require_assets: Skip releases without attached assets
        pre_release: Select pre-releases instead of stable releases
        api_url: GitHub API base URL

    Returns:
        The first matching release

    Raises:
        FetchError: If the listing cannot be fetched or parsed
        ReleaseNotFoundError: If no release matches

    Example:
        >>> release = latest_github_release("zigtools/zls")
        >>> release.version
        '0.14.0'
    """
    headers = {"Accept": "application/vnd.github+json"}
    token = os.environ.get(GITHUB_TOKEN_ENV)
    if token:
        headers["Authorization"] = f"Bearer {token}"

    releases = fetch_json(
        f"{api_url}/repos/{repo}/releases",
        params={"per_page": "100"},
        headers=headers,
    )
    if isinstance(releases, dict) and "message" in releases:
        raise FetchError(
            f"failed to list releases of {repo}: {releases['message']}"
        )
    if not isinstance(releases, list):
        raise FetchError(f"unexpected release listing for {repo}")

    for entry in releases:
        if not isinstance(entry, dict):
            continue
        if entry.get("draft"):
            continue
        if bool(entry.get("prerelease")) != pre_release:
            continue

        assets = [
            GithubReleaseAsset(
                name=asset.get("name", ""),
                download_url=asset.get("browser_download_url", ""),
            )
            for asset in entry.get("assets") or []
            if isinstance(asset, dict)
        ]
        if require_assets and not assets:
            continue

        tag = entry.get("tag_name")
        if not isinstance(tag, str) or not tag:
            raise FetchError(f"release of {repo} has no tag name")

        logger.debug(f"Latest release of {repo}: {tag}")
        return GithubRelease(version=tag, assets=assets)

    raise ReleaseNotFoundError(repo)


__all__ = ["GithubRelease", "GithubReleaseAsset", "latest_github_release"]
