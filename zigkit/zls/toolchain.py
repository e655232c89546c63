"""
Local Zig toolchain detection.

The installed Zig version decides which ZLS release is compatible. No Zig on
the worktree search path, or a ``zig version`` that exits non-zero, means "no
local toolchain" and the latest ZLS release is used instead.
"""

import logging
import subprocess
from typing import Optional

from zigkit.core.exceptions import ToolchainVersionError
from zigkit.core.worktree import Worktree

logger = logging.getLogger(__name__)


def detect_zig_version(worktree: Worktree, timeout: int = 5) -> Optional[str]:
    """
    Get the version reported by the worktree's Zig compiler.

    Args:
        worktree: Worktree whose search path is used
        timeout: Seconds to wait for ``zig version``

    Returns:
        Trimmed version string (e.g. "0.13.0"), or None if no usable toolchain

    Raises:
        ToolchainVersionError: If zig cannot be run or prints undecodable output
    """
    zig_path = worktree.which("zig")
    if zig_path is None:
        logger.debug("zig not found on worktree PATH")
        return None

    env = dict(worktree.shell_env())
    try:
        result = subprocess.run(
            [zig_path, "version"],
            capture_output=True,
            timeout=timeout,
            cwd=str(worktree.root_path),
            env=env or None,
        )
    except subprocess.TimeoutExpired as e:
        raise ToolchainVersionError("Timeout while getting Zig version") from e
    except OSError as e:
        raise ToolchainVersionError(f"Failed to run `zig version`: {e}") from e

    if result.returncode != 0:
        logger.warning(
            f"`zig version` exited with {result.returncode}; treating Zig as absent"
        )
        return None

    try:
        version = result.stdout.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ToolchainVersionError(
            f"Failed to parse output of `zig version` command: {e}"
        ) from e

    version = version.strip()
    if not version:
        logger.warning("`zig version` printed nothing; treating Zig as absent")
        return None

    logger.debug(f"Detected Zig {version}")
    return version


__all__ = ["detect_zig_version"]
