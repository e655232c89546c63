"""YAML settings parser for zigkit.

This module provides parsing and validation for the ``zigkit.yaml`` file at
the root of a worktree.

Example ``zigkit.yaml``::

    lsp:
      zls:
        binary:
          path: /opt/zls/zls
          arguments: ["--enable-stderr-logs"]
        settings:
          enable_build_on_save: true
    download:
      asset_naming: arch-os
      prune_stale: true
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from zigkit.core.exceptions import ConfigError
from zigkit.core.platform import AssetNaming

SETTINGS_FILE_NAME = "zigkit.yaml"


@dataclass
class BinarySettings:
    """User override for a language server executable."""

    path: Optional[str] = None
    arguments: Optional[List[str]] = None


@dataclass
class LspSettings:
    """Settings for one language server."""

    binary: Optional[BinarySettings] = None
    settings: Optional[Dict[str, Any]] = None  # Passed to the server verbatim


@dataclass
class DownloadSettings:
    """Download behaviour."""

    asset_naming: AssetNaming = AssetNaming.ARCH_OS
    prune_stale: bool = True  # Remove sibling version directories after install


@dataclass
class WorktreeSettings:
    """Complete worktree settings."""

    lsp: Dict[str, LspSettings] = field(default_factory=dict)
    download: DownloadSettings = field(default_factory=DownloadSettings)

    def for_server(self, name: str) -> LspSettings:
        """Get the settings of one language server (defaults when absent)."""
        return self.lsp.get(name, LspSettings())


def load_settings(worktree_root: Path) -> WorktreeSettings:
    """
    Load ``zigkit.yaml`` from a worktree root.

    Args:
        worktree_root: Worktree root directory

    Returns:
        Parsed settings; defaults when the file does not exist

    Raises:
        ConfigError: If the file is invalid
    """
    settings_path = Path(worktree_root) / SETTINGS_FILE_NAME
    if not settings_path.exists():
        return WorktreeSettings()

    return parse_settings(settings_path)


def parse_settings(settings_path: Path) -> WorktreeSettings:
    """
    Parse a settings file.

    Args:
        settings_path: Path to zigkit.yaml

    Returns:
        Parsed and validated settings

    Raises:
        ConfigError: If settings are invalid
    """
    try:
        with open(settings_path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax in {settings_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read {settings_path}: {e}") from e

    if data is None:
        return WorktreeSettings()

    return _parse_and_validate(data)


def _parse_and_validate(data: Any) -> WorktreeSettings:
    """Parse and validate settings data."""
    if not isinstance(data, dict):
        raise ConfigError("Settings must be a mapping")

    lsp_data = data.get("lsp") or {}
    if not isinstance(lsp_data, dict):
        raise ConfigError("'lsp' must be a mapping of server name to settings")

    lsp = {name: _parse_lsp(name, entry) for name, entry in lsp_data.items()}

    return WorktreeSettings(lsp=lsp, download=_parse_download(data.get("download")))


def _parse_lsp(name: str, data: Any) -> LspSettings:
    if data is None:
        return LspSettings()
    if not isinstance(data, dict):
        raise ConfigError(f"lsp.{name} must be a mapping")

    binary = None
    binary_data = data.get("binary")
    if binary_data is not None:
        if not isinstance(binary_data, dict):
            raise ConfigError(f"lsp.{name}.binary must be a mapping")

        path = binary_data.get("path")
        if path is not None and not isinstance(path, str):
            raise ConfigError(f"lsp.{name}.binary.path must be a string")

        arguments = binary_data.get("arguments")
        if arguments is not None:
            if not isinstance(arguments, list) or not all(
                isinstance(arg, str) for arg in arguments
            ):
                raise ConfigError(f"lsp.{name}.binary.arguments must be a list of strings")

        binary = BinarySettings(path=path, arguments=arguments)

    settings = data.get("settings")
    if settings is not None and not isinstance(settings, dict):
        raise ConfigError(f"lsp.{name}.settings must be a mapping")

    return LspSettings(binary=binary, settings=settings)


def _parse_download(data: Any) -> DownloadSettings:
    if data is None:
        return DownloadSettings()
    if not isinstance(data, dict):
        raise ConfigError("'download' must be a mapping")

    result = DownloadSettings()

    if "asset_naming" in data:
        try:
            result.asset_naming = AssetNaming(data["asset_naming"])
        except ValueError:
            valid = ", ".join(n.value for n in AssetNaming)
            raise ConfigError(
                f"Invalid download.asset_naming: {data['asset_naming']!r} (expected one of: {valid})"
            )

    if "prune_stale" in data:
        if not isinstance(data["prune_stale"], bool):
            raise ConfigError("download.prune_stale must be a boolean")
        result.prune_stale = data["prune_stale"]

    return result
