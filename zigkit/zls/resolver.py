"""
ZLS binary resolution.

This module ties the resolution stages together:

    settings / PATH override  ->  zig version  ->  cache
        ->  version negotiation  ->  download  ->  cache

The override stage short-circuits everything else and never touches the
network or the cache. A cache hit skips negotiation; an installed binary skips
the download.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from zigkit.config.settings import WorktreeSettings
from zigkit.core.directory import (
    ensure_cache_structure,
    get_global_cache_dir,
    get_install_dir,
    get_lock_dir,
)
from zigkit.core.exceptions import ConfigError
from zigkit.core.locking import LockManager
from zigkit.core.platform import (
    PlatformTarget,
    binary_name,
    detect_platform,
    version_dir_name,
)
from zigkit.core.worktree import Worktree
from zigkit.zls.cache import CacheStore, normalize_key
from zigkit.zls.fetcher import ArtifactFetcher
from zigkit.zls.models import (
    Environment,
    InstallationStatus,
    LanguageServerCommand,
    ResolvedBinary,
    StatusReporter,
    log_status,
)
from zigkit.zls.negotiator import VersionNegotiator
from zigkit.zls.override import OverrideResolver
from zigkit.zls.toolchain import detect_zig_version

logger = logging.getLogger(__name__)

SERVER_NAME = "zls"


class ZlsResolver:
    """
    Resolves, caches and installs the Zig language server.

    One instance lives for one host session and owns its CacheStore.

    Example:
        >>> resolver = ZlsResolver()
        >>> command = resolver.language_server_command(LocalWorktree(Path(".")))
        >>> command.command
        '/home/u/.zigkit/zls/zls-0.14.0/zls'
    """

    def __init__(
        self,
        cache_dir: Optional[Path] = None,
        platform: Optional[PlatformTarget] = None,
        cache: Optional[CacheStore] = None,
        negotiator: Optional[VersionNegotiator] = None,
        fetcher: Optional[ArtifactFetcher] = None,
        status_reporter: StatusReporter = log_status,
    ):
        """
        Initialize resolver.

        Args:
            cache_dir: Cache root (default: global cache directory)
            platform: Platform information (auto-detected if None)
            cache: Binary cache (default: new empty cache)
            negotiator: Version negotiator (default: built from worktree settings)
            fetcher: Installer (default: built from worktree settings)
            status_reporter: Callback receiving installation phases
        """
        self.cache_dir = Path(cache_dir) if cache_dir else get_global_cache_dir()
        self.install_dir = get_install_dir(self.cache_dir)
        self.platform = platform or detect_platform()
        self.cache = cache if cache is not None else CacheStore()
        self.status_reporter = status_reporter
        self.override = OverrideResolver(SERVER_NAME)
        self._negotiator = negotiator
        self._fetcher = fetcher
        self._lock_manager = LockManager(get_lock_dir(self.cache_dir))

    def language_server_binary(self, worktree: Worktree) -> ResolvedBinary:
        """
        Resolve the language server binary for a worktree.

        Args:
            worktree: Worktree the server runs in

        Returns:
            ResolvedBinary

        Raises:
            ToolchainVersionError: If the local Zig reports an unusable version
            FetchError: If a remote lookup fails
            NegotiationError: If no compatible version can be determined
            DownloadFailedError: If download or extraction fails
            ExecutablePermissionError: If the binary cannot be made executable
        """
        environment: Optional[Environment] = (
            None if self.platform.is_windows else worktree.shell_env()
        )

        settings = self._load_settings(worktree)
        lsp_settings = settings.for_server(SERVER_NAME)

        binary = self.override.resolve(lsp_settings, worktree, environment)
        if binary is not None:
            return binary

        args = self.override.configured_arguments(lsp_settings)

        self.status_reporter(InstallationStatus.CHECKING_FOR_UPDATE)

        zig_version = normalize_key(detect_zig_version(worktree))

        cached = self.cache.get(zig_version)
        if cached is not None:
            logger.debug(f"Using cached zls for Zig {zig_version}: {cached}")
            return ResolvedBinary(path=cached, args=args, environment=environment)

        negotiator = self._negotiator or VersionNegotiator(
            naming=settings.download.asset_naming
        )
        negotiated = negotiator.negotiate(zig_version, self.platform)

        ensure_cache_structure(self.cache_dir)
        version_dir = self.install_dir / version_dir_name(negotiated.version)
        binary_path = version_dir / binary_name(self.platform)

        fetcher = self._fetcher or ArtifactFetcher(
            lock_manager=self._lock_manager,
            status_reporter=self.status_reporter,
            prune_stale=settings.download.prune_stale,
        )
        fetcher.fetch(negotiated.download_url, version_dir, binary_path, self.platform)

        path = str(binary_path)
        self.cache.put(zig_version, path)

        return ResolvedBinary(path=path, args=args, environment=environment)

    def language_server_command(self, worktree: Worktree) -> LanguageServerCommand:
        """Resolve the binary and build the launch command."""
        return LanguageServerCommand.from_binary(self.language_server_binary(worktree))

    def language_server_workspace_configuration(
        self, worktree: Worktree
    ) -> Dict[str, Any]:
        """
        Get the ``lsp.zls.settings`` mapping sent to the server.

        Returns:
            Settings mapping; empty when absent or unreadable
        """
        lsp_settings = self._load_settings(worktree).for_server(SERVER_NAME)
        return dict(lsp_settings.settings or {})

    def _load_settings(self, worktree: Worktree) -> WorktreeSettings:
        try:
            return worktree.settings()
        except ConfigError as e:
            logger.warning(f"Ignoring worktree settings: {e}")
            return WorktreeSettings()


__all__ = ["ZlsResolver", "SERVER_NAME"]
