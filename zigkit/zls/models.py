"""Data types shared by the ZLS resolution pipeline."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)

Environment = List[Tuple[str, str]]


class InstallationStatus(Enum):
    """Installation phases reported to the host."""

    CHECKING_FOR_UPDATE = "checking"
    DOWNLOADING = "downloading"


StatusReporter = Callable[[InstallationStatus], None]


def log_status(status: InstallationStatus) -> None:
    """Default status reporter: log the phase."""
    logger.info(f"zls installation status: {status.value}")


@dataclass
class ResolvedBinary:
    """
    A language server executable ready to be launched.

    Produced by exactly one of: explicit user override, PATH discovery,
    cache hit, or download. The launcher receives it verbatim.
    """

    path: str
    args: Optional[List[str]] = None
    environment: Optional[Environment] = None


@dataclass
class LanguageServerCommand:
    """Command handed to the process launcher."""

    command: str
    args: List[str] = field(default_factory=list)
    env: Environment = field(default_factory=list)

    @classmethod
    def from_binary(cls, binary: ResolvedBinary) -> "LanguageServerCommand":
        return cls(
            command=binary.path,
            args=list(binary.args or []),
            env=list(binary.environment or []),
        )

    def to_dict(self) -> dict:
        return {
            "command": self.command,
            "args": self.args,
            "env": [list(pair) for pair in self.env],
        }


@dataclass
class AssetDescriptor:
    """Per-platform asset entry of a select-version response."""

    tarball_url: str
    checksum: str
    size: str


@dataclass
class NegotiatedVersion:
    """Result of version negotiation."""

    version: str
    download_url: str


__all__ = [
    "Environment",
    "InstallationStatus",
    "StatusReporter",
    "log_status",
    "ResolvedBinary",
    "LanguageServerCommand",
    "AssetDescriptor",
    "NegotiatedVersion",
]
