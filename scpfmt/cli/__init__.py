"""
scpfmt CLI entry point.

This module builds the argument parser, configures logging and resolves
the workspace configuration before dispatching to a subcommand module.
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from scpfmt import __version__
from scpfmt.config import load_workspace_config
from scpfmt.errors import SCPError

from .commands import add_format_command, add_lsp_command
from .context import CLIContext
from .errors import CLIConfigError, handle_cli_exception


def _configure_logging(args) -> None:
    """Configure the level of the ``scpfmt`` logger."""
    log_level = (
        getattr(args, 'log_level', None) or
        os.getenv('SCPFMT_LOG_LEVEL', 'warn')
    ).lower()

    level_map = {
        'debug': logging.DEBUG,
        'info': logging.INFO,
        'warn': logging.WARNING,
        'warning': logging.WARNING,
        'error': logging.ERROR,
    }

    numeric_level = level_map.get(log_level, logging.WARNING)

    package_logger = logging.getLogger('scpfmt')
    package_logger.setLevel(numeric_level)

    # Add console handler if not already present
    if not package_logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)
        # Prevent propagation to root logger to avoid duplicate messages
        package_logger.propagate = False


def build_parser(workspace_root: Path, config_path: Optional[Path]) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Formatter for SCP (Sphere Script) files",
        prog="scpfmt"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        '--config',
        default=str(config_path) if config_path else None,
        help='Path to an scpfmt.toml configuration file'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Print full tracebacks and detailed CLI errors (or set SCPFMT_VERBOSE=1)'
    )
    parser.add_argument(
        '--workspace',
        default=str(workspace_root),
        help='Workspace root directory (defaults to current working directory)'
    )
    parser.add_argument(
        '--log-level',
        choices=['debug', 'info', 'warn', 'error'],
        default=None,
        help='Set logging level (or set SCPFMT_LOG_LEVEL)'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')
    add_format_command(subparsers)
    add_lsp_command(subparsers)
    return parser


def main(argv: Optional[list] = None) -> None:
    """
    Main CLI entrypoint with subcommand support.

    Args:
        argv: Command-line arguments (None uses sys.argv[1:])

    Examples:
        Format a script folder:
        >>> main(['format', 'scripts/'])  # doctest: +SKIP

        Check formatting in CI:
        >>> main(['format', '--check', 'scripts/'])  # doctest: +SKIP
    """
    if argv is None:
        argv = sys.argv[1:]

    # Pre-parse to locate the workspace and config before building the parser
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument('--config')
    pre_parser.add_argument('--workspace')
    pre_args, _ = pre_parser.parse_known_args(argv)

    workspace_root = (
        Path(pre_args.workspace).resolve()
        if pre_args.workspace
        else Path.cwd()
    )
    config_path = (
        Path(pre_args.config).resolve()
        if pre_args.config
        else None
    )

    parser = build_parser(workspace_root, config_path)
    args = parser.parse_args(argv)
    _configure_logging(args)

    if not getattr(args, 'func', None):
        parser.print_help()
        raise SystemExit(2)

    try:
        config = load_workspace_config(workspace_root, config_path)
    except SCPError as exc:
        handle_cli_exception(
            CLIConfigError(exc.format(), hint="Check scpfmt.toml in the workspace root"),
            verbose=args.verbose,
        )

    args.cli_context = CLIContext(workspace_root=workspace_root, config=config)
    args.func(args)


__all__ = ["main", "build_parser"]
