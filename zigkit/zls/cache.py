"""
Process-lifetime cache of resolved language server binaries.

Keys are Zig toolchain versions (``None`` when no toolchain is installed), so
worktrees using different Zig versions keep separate entries. An entry is only
trusted while its file still exists.
"""

import logging
import threading
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)


def normalize_key(toolchain_version: Optional[str]) -> Optional[str]:
    """Trim a toolchain version so "0.13.0\\n" and "0.13.0" share an entry."""
    if toolchain_version is None:
        return None
    return toolchain_version.strip()


class CacheStore:
    """
    Maps toolchain versions to installed binary paths.

    Thread-safe; one instance is owned by one resolver session.

    Example:
        >>> cache = CacheStore()
        >>> cache.put("0.13.0", "/home/u/.zigkit/zls/zls-0.13.0/zls")
        >>> cache.get("0.13.0\\n")
        '/home/u/.zigkit/zls/zls-0.13.0/zls'
    """

    def __init__(self):
        self._entries: Dict[Optional[str], str] = {}
        self._lock = threading.Lock()

    def get(self, toolchain_version: Optional[str]) -> Optional[str]:
        """
        Look up a binary path.

        A path whose file was removed behind our back is reported as a miss,
        never as an error.

        Args:
            toolchain_version: Zig version, or None for "no toolchain"

        Returns:
            Binary path, or None on a miss or stale entry
        """
        key = normalize_key(toolchain_version)
        with self._lock:
            path = self._entries.get(key)

        if path is None:
            return None

        if not Path(path).is_file():
            logger.debug(f"Cached binary for {key!r} is gone: {path}")
            return None

        return path

    def put(self, toolchain_version: Optional[str], path: str) -> None:
        """Record the binary resolved for a toolchain version."""
        key = normalize_key(toolchain_version)
        with self._lock:
            self._entries[key] = str(path)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


__all__ = ["CacheStore", "normalize_key"]
