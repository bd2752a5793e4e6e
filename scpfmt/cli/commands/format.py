"""
Format command.

Rewrites SCP scripts in place, or reports what would change with
``--check`` and ``--diff``.
"""

import argparse
import difflib
import logging
import sys
from pathlib import Path
from typing import List, Tuple

from ...config import collect_files
from ...errors import SCPError
from ...formatting import FormattedResult, LineFormatter
from ..context import get_cli_context
from ..errors import CLIConfigError, CLIFileNotFoundError, handle_cli_exception

logger = logging.getLogger(__name__)

STDIN_MARKER = "-"


def add_format_command(subparsers) -> None:
    format_parser = subparsers.add_parser(
        'format',
        help='Normalize keyword casing in SCP scripts'
    )
    format_parser.add_argument(
        'paths', nargs='+',
        help="Files or directories to format ('-' reads stdin and writes stdout)"
    )
    mode = format_parser.add_mutually_exclusive_group()
    mode.add_argument(
        '--check', action='store_true',
        help='Exit with status 1 if any file would be reformatted; write nothing'
    )
    mode.add_argument(
        '--diff', action='store_true',
        help='Print a unified diff of the changes instead of writing them'
    )
    format_parser.add_argument(
        '--keywords', default=None,
        help='Keyword table to use instead of the configured one'
    )
    format_parser.add_argument(
        '--encoding', default='utf-8',
        help='Encoding of the script files (default: utf-8)'
    )
    format_parser.set_defaults(func=cmd_format)


def _unified_diff(original: str, formatted: str, name: str) -> str:
    return "".join(
        difflib.unified_diff(
            original.splitlines(keepends=True),
            formatted.splitlines(keepends=True),
            fromfile=f"a/{name}",
            tofile=f"b/{name}",
        )
    )


def _report_line_errors(name: str, result: FormattedResult) -> None:
    for failure in result.errors:
        print(f"Warning in {name}: {failure}", file=sys.stderr)


def _format_stdin(formatter: LineFormatter, args: argparse.Namespace) -> Tuple[int, int]:
    # Bytes in and out, so CRLF input stays CRLF.
    try:
        content = sys.stdin.buffer.read().decode(args.encoding)
    except UnicodeDecodeError as exc:
        print(f"Error processing <stdin>: {exc}", file=sys.stderr)
        return 0, 1
    result = formatter.format_text(content)
    _report_line_errors("<stdin>", result)
    if args.check:
        if result.is_changed:
            print("Would reformat <stdin>", file=sys.stderr)
    elif args.diff:
        sys.stdout.write(_unified_diff(content, result.formatted_text, "<stdin>"))
    else:
        sys.stdout.flush()
        sys.stdout.buffer.write(result.formatted_text.encode(args.encoding))
        sys.stdout.buffer.flush()
    return int(result.is_changed), len(result.errors)


def _format_file(formatter: LineFormatter, path: Path, args: argparse.Namespace) -> Tuple[int, int]:
    try:
        with path.open(encoding=args.encoding, newline='') as handle:
            content = handle.read()
    except (OSError, UnicodeDecodeError) as exc:
        print(f"Error processing {path}: {exc}", file=sys.stderr)
        return 0, 1

    result = formatter.format_text(content)
    _report_line_errors(str(path), result)
    if not result.is_changed:
        logger.debug("%s is already formatted", path)
        return 0, len(result.errors)

    if args.check:
        print(f"Would reformat {path}")
    elif args.diff:
        sys.stdout.write(_unified_diff(content, result.formatted_text, path.as_posix()))
    else:
        with path.open('w', encoding=args.encoding, newline='') as handle:
            handle.write(result.formatted_text)
        print(f"Formatted {path}")
    return 1, len(result.errors)


def cmd_format(args: argparse.Namespace) -> None:
    """
    Handle the 'format' subcommand to format SCP scripts.

    Args:
        args: Parsed command-line arguments containing:
            - paths: Files or directories to format, or '-' for stdin
            - check: If True, only report files that need formatting
            - diff: If True, print a diff instead of writing
            - keywords: Optional keyword table path

    Raises:
        SystemExit: If check mode finds changes or a file could not be formatted

    Examples:
        >>> args = argparse.Namespace(paths=['items.scp'], check=False, diff=False)
        >>> cmd_format(args)  # doctest: +SKIP
        Formatted items.scp
        Formatted 1 file(s)
    """
    try:
        ctx = get_cli_context(args)
        try:
            keywords = Path(args.keywords) if args.keywords else None
            formatter = ctx.config.create_formatter(keywords)
        except SCPError as exc:
            raise CLIConfigError(exc.format(), hint="Fix the keyword table or workspace configuration") from exc

        use_stdin = STDIN_MARKER in args.paths
        files: List[Path] = collect_files(ctx.config, [p for p in args.paths if p != STDIN_MARKER])
        if not files and not use_stdin:
            raise CLIFileNotFoundError(
                "No SCP files to format",
                hint=f"Pass script files or directories containing {', '.join(ctx.config.format.extensions)} files",
            )

        changed_count = 0
        error_count = 0
        if use_stdin:
            changed, errors = _format_stdin(formatter, args)
            changed_count += changed
            error_count += errors
        for path in files:
            changed, errors = _format_file(formatter, path, args)
            changed_count += changed
            error_count += errors

        logger.info("Processed %d file(s), %d changed, %d error(s)", len(files) + use_stdin, changed_count, error_count)

        if args.check:
            if changed_count > 0:
                print(f"{changed_count} file(s) would be reformatted", file=sys.stderr)
                raise SystemExit(1)
            print("All files are already formatted", file=sys.stderr)
        elif not args.diff and files:
            print(f"Formatted {changed_count} file(s)", file=sys.stderr)
        if error_count > 0:
            print(f"Encountered {error_count} error(s)", file=sys.stderr)
            raise SystemExit(1)

    except Exception as exc:
        handle_cli_exception(exc, verbose=getattr(args, "verbose", False))
