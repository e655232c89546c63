"""
Explicit and PATH-discovered language server binaries.

Checked before any version or network work, first match wins:

1. ``lsp.zls.binary.path`` in the worktree settings, trusted as-is even if the
   file does not exist.
2. ``zls`` on the worktree search path.

``lsp.zls.binary.arguments`` apply to whatever binary resolution ends up with,
so they are exposed separately for the later stages.
"""

import logging
from typing import List, Optional

from zigkit.config.settings import LspSettings
from zigkit.core.worktree import Worktree
from zigkit.zls.models import Environment, ResolvedBinary

logger = logging.getLogger(__name__)


class OverrideResolver:
    """Finds a user-provided language server before anything is downloaded."""

    def __init__(self, binary_name: str = "zls"):
        self.binary_name = binary_name

    @staticmethod
    def configured_arguments(lsp_settings: LspSettings) -> Optional[List[str]]:
        """Get the configured extra arguments, if any."""
        if lsp_settings.binary is None:
            return None
        return lsp_settings.binary.arguments

    def resolve(
        self,
        lsp_settings: LspSettings,
        worktree: Worktree,
        environment: Optional[Environment] = None,
    ) -> Optional[ResolvedBinary]:
        """
        Look for an explicit or discoverable binary.

        Never touches the network.

        Args:
            lsp_settings: Settings of the language server for this worktree
            worktree: Worktree to search
            environment: Environment to attach to the result

        Returns:
            ResolvedBinary, or None when resolution must continue
        """
        args = self.configured_arguments(lsp_settings)

        if lsp_settings.binary is not None and lsp_settings.binary.path:
            path = lsp_settings.binary.path
            logger.info(f"Using {self.binary_name} from settings: {path}")
            return ResolvedBinary(path=path, args=args, environment=environment)

        path = worktree.which(self.binary_name)
        if path:
            logger.info(f"Using {self.binary_name} found on PATH: {path}")
            return ResolvedBinary(path=path, args=args, environment=environment)

        return None


__all__ = ["OverrideResolver"]
