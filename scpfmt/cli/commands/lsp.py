"""Language server command."""

import argparse
import os
import sys
from pathlib import Path

from ..context import get_cli_context
from ..errors import CLIRuntimeError, handle_cli_exception


def add_lsp_command(subparsers) -> None:
    lsp_parser = subparsers.add_parser(
        'lsp',
        help='Start the SCP language server on stdio (rooted at --workspace until the client sends its own root)'
    )
    lsp_parser.set_defaults(func=cmd_lsp)


def cmd_lsp(args: argparse.Namespace) -> None:
    """
    Handle the 'lsp' subcommand to launch the SCP language server.

    Starts the language server over stdio so editors can request
    document formatting for .scp files.

    Raises:
        SystemExit: If the language server fails to start
    """
    try:
        ctx = get_cli_context(args)

        from scpfmt.lsp.server import create_server

        config_path = Path(args.config) if getattr(args, "config", None) else None
        server = create_server(ctx.workspace_root, config_path)
        print(f"Starting SCP language server (pid={os.getpid()})", file=sys.stderr)

        try:
            server.start_io()
        except KeyboardInterrupt:
            print("Language server interrupted by user.", file=sys.stderr)
        except Exception as exc:
            raise CLIRuntimeError(
                f"Language server stopped unexpectedly: {exc}",
            ) from exc

    except Exception as exc:
        handle_cli_exception(exc, verbose=getattr(args, "verbose", False))
