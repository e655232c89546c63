"""
Configuration for zigkit.

Worktree settings are read from ``zigkit.yaml`` at the worktree root.
"""

from .settings import (
    SETTINGS_FILE_NAME,
    BinarySettings,
    LspSettings,
    DownloadSettings,
    WorktreeSettings,
    load_settings,
    parse_settings,
)

__all__ = [
    "SETTINGS_FILE_NAME",
    "BinarySettings",
    "LspSettings",
    "DownloadSettings",
    "WorktreeSettings",
    "load_settings",
    "parse_settings",
]
