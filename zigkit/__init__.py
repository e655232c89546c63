"""
zigkit - Zig language server provisioning and debug task translation.

Resolves a ZLS binary compatible with the local Zig toolchain (installing it
on demand) and translates Zig build tasks into debug launch descriptions.
"""

__version__ = "0.1.0"
