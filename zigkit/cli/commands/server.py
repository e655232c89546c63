"""
Server command implementation.

Resolves the ZLS binary for a worktree and prints its launch command.
"""

import json
import logging

from zigkit.core.worktree import LocalWorktree
from zigkit.zls.resolver import ZlsResolver

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the server command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    worktree = LocalWorktree(args.worktree.resolve())
    resolver = ZlsResolver(cache_dir=args.cache_dir)

    command = resolver.language_server_command(worktree)
    logger.debug(f"Resolved command: {command}")

    print(json.dumps(command.to_dict(), indent=2))
    return 0
