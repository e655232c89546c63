"""
Centralized exception hierarchy for zigkit.

This module defines the custom exceptions raised while resolving the Zig
language server binary and while translating build tasks into debug requests.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class ZigKitError(Exception):
    """Base exception for all zigkit errors."""

    pass


class ConfigError(ZigKitError):
    """Configuration parsing or validation error."""

    pass


# ============================================================================
# Version Negotiation Exceptions
# ============================================================================


class FetchError(ZigKitError):
    """Raised when a remote lookup fails in transport or cannot be parsed."""

    pass


class ReleaseNotFoundError(FetchError):
    """Raised when no release matches the requested filters."""

    def __init__(self, repo: str):
        self.repo = repo
        super().__init__(f"No matching release found for {repo}")


class NegotiationError(ZigKitError):
    """Raised when a compatible language server version cannot be determined."""

    pass


class UnsupportedPlatformError(NegotiationError):
    """Raised when no asset is published for the current platform."""

    def __init__(self, target: str, detail: str = ""):
        self.target = target
        msg = f"failed to find ZLS asset for {target}"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class ToolchainVersionError(ZigKitError):
    """Raised when the local Zig toolchain reports an unusable version."""

    pass


# ============================================================================
# Installation Exceptions
# ============================================================================


class DownloadFailedError(ZigKitError):
    """Raised when downloading or extracting the language server fails."""

    pass


class ExecutablePermissionError(ZigKitError):
    """Raised when the downloaded binary cannot be marked executable."""

    pass


class InstallLockTimeout(ZigKitError):
    """Raised when the per-version install lock cannot be acquired."""

    pass


# ============================================================================
# Debug Task Exceptions
# ============================================================================


class UnsupportedBuildTaskError(ZigKitError):
    """Raised when a build task cannot be turned into a launch request."""

    pass
