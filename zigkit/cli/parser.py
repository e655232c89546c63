"""
zigkit CLI argument parser.

This module implements the command-line interface for zigkit using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from zigkit import __version__

logger = logging.getLogger(__name__)


class CLI:
    """zigkit command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="zigkit",
            description="zigkit - Zig language server provisioning and debug task translation",
            epilog='Use "zigkit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        parser.add_argument(
            "--version", action="version", version=f"zigkit {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--cache-dir",
            type=Path,
            metavar="DIR",
            help="Cache directory (default: ~/.zigkit or $ZIGKIT_CACHE_DIR)",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_server_command(subparsers)
        self._add_workspace_config_command(subparsers)
        self._add_locate_command(subparsers)

        return parser

    def _add_server_command(self, subparsers):
        """Add 'server' subcommand."""
        parser = subparsers.add_parser(
            "server",
            help="Resolve the ZLS launch command",
            description="Resolve (and install if needed) ZLS and print its launch command as JSON",
        )
        parser.add_argument(
            "--worktree",
            type=Path,
            default=Path.cwd(),
            metavar="DIR",
            help="Worktree root (default: current directory)",
        )

    def _add_workspace_config_command(self, subparsers):
        """Add 'workspace-config' subcommand."""
        parser = subparsers.add_parser(
            "workspace-config",
            help="Print the ZLS workspace configuration",
            description="Print the lsp.zls.settings of a worktree as JSON",
        )
        parser.add_argument(
            "--worktree",
            type=Path,
            default=Path.cwd(),
            metavar="DIR",
            help="Worktree root (default: current directory)",
        )

    def _add_locate_command(self, subparsers):
        """Add 'locate' subcommand."""
        parser = subparsers.add_parser(
            "locate",
            help="Translate a build task for debugging",
            description="Translate a build task JSON into a debug scenario or launch request",
        )
        parser.add_argument(
            "mode",
            choices=["scenario", "launch"],
            help="scenario: build step to debug; launch: program the build produced",
        )
        parser.add_argument(
            "task",
            metavar="TASK_JSON",
            help="Path to the task JSON file, or '-' for stdin",
        )
        parser.add_argument(
            "--label",
            metavar="LABEL",
            help="Scenario label (default: task label)",
        )
        parser.add_argument(
            "--adapter",
            default="CodeLLDB",
            metavar="NAME",
            help="Debug adapter name (default: CodeLLDB)",
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Logs go to stderr; stdout carries the JSON output.
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            stream=sys.stderr,
            force=True,
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        command_map = {
            "server": "zigkit.cli.commands.server",
            "workspace-config": "zigkit.cli.commands.workspace_config",
            "locate": "zigkit.cli.commands.locate",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
