"""
Worktree interface for zigkit.

The resolver never reads the process environment or the file system around a
project directly. It asks a Worktree, which the host supplies. LocalWorktree is
the implementation used by the command line and by tests.
"""

import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

from zigkit.config.settings import WorktreeSettings, load_settings
from zigkit.core.filesystem import find_executable
from zigkit.core.platform import PlatformTarget, detect_platform


class Worktree(ABC):
    """
    Abstract interface for a project worktree.

    This interface allows the resolver to query search paths, environment and
    settings without knowing whether they come from an editor host, a shell or
    a test double.
    """

    @property
    @abstractmethod
    def root_path(self) -> Path:
        """Root directory of the worktree."""
        pass

    @abstractmethod
    def which(self, binary_name: str) -> Optional[str]:
        """
        Find a binary on the worktree's search path.

        Args:
            binary_name: Executable name (e.g., "zig", "zls")

        Returns:
            Path to the executable, or None if it is not on the search path
        """
        pass

    @abstractmethod
    def shell_env(self) -> List[Tuple[str, str]]:
        """
        Get the environment a launched process should inherit.

        Returns:
            Ordered (key, value) pairs
        """
        pass

    @abstractmethod
    def settings(self) -> WorktreeSettings:
        """
        Get the worktree settings.

        Raises:
            ConfigError: If the settings file is invalid
        """
        pass


class LocalWorktree(Worktree):
    """Worktree backed by a directory on disk and a captured environment."""

    def __init__(
        self,
        root_path: Path,
        env: Optional[Mapping[str, str]] = None,
        platform: Optional[PlatformTarget] = None,
    ):
        """
        Initialize local worktree.

        Args:
            root_path: Worktree root directory
            env: Environment of the worktree shell (default: process environment)
            platform: Platform information (auto-detected if None)
        """
        self._root_path = Path(root_path)
        self._env: Dict[str, str] = dict(os.environ if env is None else env)
        self._platform = platform or detect_platform()

    @property
    def root_path(self) -> Path:
        return self._root_path

    def which(self, binary_name: str) -> Optional[str]:
        found = find_executable(
            binary_name,
            search_path=self._env.get("PATH", ""),
            windows=self._platform.is_windows,
        )
        return str(found) if found else None

    def shell_env(self) -> List[Tuple[str, str]]:
        return sorted(self._env.items())

    def settings(self) -> WorktreeSettings:
        return load_settings(self._root_path)


__all__ = ["Worktree", "LocalWorktree"]
