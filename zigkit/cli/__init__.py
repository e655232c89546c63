"""
zigkit CLI module.

This module provides the command-line interface for zigkit.
"""

from .parser import CLI, main

__all__ = ["CLI", "main"]
