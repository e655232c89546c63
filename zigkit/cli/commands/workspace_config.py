"""
Workspace-config command implementation.

Prints the settings sent to ZLS for a worktree.
"""

import json

from zigkit.core.worktree import LocalWorktree
from zigkit.zls.resolver import ZlsResolver


def run(args) -> int:
    """Print the workspace configuration of a worktree."""
    worktree = LocalWorktree(args.worktree.resolve())
    resolver = ZlsResolver(cache_dir=args.cache_dir)

    print(json.dumps(resolver.language_server_workspace_configuration(worktree), indent=2))
    return 0
