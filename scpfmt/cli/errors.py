"""
Error handling for the scpfmt CLI.

This module provides the exception hierarchy for CLI operations, with
error codes, hints and user-friendly formatting.
"""

import os
import sys
import traceback
from typing import Any, Dict, Optional, NoReturn


# Maximum length for traceback output in CLI
_CLI_TRACE_LIMIT = 4000


class CLIError(Exception):
    """
    Base exception for all CLI operations.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code for programmatic handling
        hint: Optional suggestion for resolving the error
        context: Additional metadata about the error
    """

    def __init__(
        self,
        message: str,
        *,
        code: str,
        hint: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        exit_code: int = 1,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.hint = hint
        self.context = context or {}
        self.exit_code = exit_code

    def __str__(self) -> str:
        return self.message


class CLIConfigError(CLIError):
    """
    Configuration file or keyword table errors.

    Raised when:
    - scpfmt.toml is invalid
    - A keyword table fails validation
    """

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault('code', 'CLI_CONFIG_ERROR')
        super().__init__(message, **kwargs)


class CLIRuntimeError(CLIError):
    """Errors during command execution."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault('code', 'CLI_RUNTIME_ERROR')
        super().__init__(message, **kwargs)


class CLIFileNotFoundError(CLIError):
    """
    Required file or directory not found.

    Raised when:
    - No script files match the given paths
    - Configuration file is missing
    """

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault('code', 'CLI_FILE_NOT_FOUND')
        super().__init__(message, **kwargs)


def format_cli_error(
    exc: BaseException,
    *,
    verbose: bool = False,
    include_traceback: bool = False
) -> str:
    """
    Format exception for CLI display with context and hints.

    Examples:
        >>> print(format_cli_error(CLIConfigError("Bad table", hint="Check keywords.toml")))
        Error [CLI_CONFIG_ERROR]: Bad table
        Hint: Check keywords.toml
    """
    lines = []

    if isinstance(exc, CLIError):
        lines.append(f"Error [{exc.code}]: {exc.message}")
        if exc.hint:
            lines.append(f"Hint: {exc.hint}")
        if verbose and exc.context:
            lines.append("\nContext:")
            for key, value in exc.context.items():
                lines.append(f"  {key}: {value}")
    else:
        formatter = getattr(exc, "format", None)
        if callable(formatter):
            lines.append(f"Error: {formatter()}")
        else:
            lines.append(f"Error: {exc.__class__.__name__}: {exc}")

    if include_traceback:
        lines.append("\nTraceback:")
        lines.append(format_traceback_excerpt())

    return "\n".join(lines)


def format_traceback_excerpt() -> str:
    """
    Format current exception traceback with size limit.

    Note:
        Should only be called within an exception handler context.
    """
    trace = traceback.format_exc().strip()
    if len(trace) <= _CLI_TRACE_LIMIT:
        return trace
    return f"{trace[:_CLI_TRACE_LIMIT - 3]}..."


def _env_flag(name: str) -> bool:
    val = os.getenv(name)
    if val is None:
        return False
    return val.strip().lower() in {"1", "true", "yes", "on"}


def cli_verbose_enabled(verbose_flag: bool = False) -> bool:
    """
    Determine whether verbose error output is enabled.

    Respects an explicit flag and the SCPFMT_VERBOSE environment variable.
    """
    return verbose_flag or _env_flag("SCPFMT_VERBOSE")


def handle_cli_exception(exc: BaseException, *, verbose: bool = False) -> NoReturn:
    """Print ``exc`` to stderr and exit with its exit code."""
    if isinstance(exc, SystemExit):
        raise exc
    verbose = cli_verbose_enabled(verbose)
    print(format_cli_error(exc, verbose=verbose, include_traceback=verbose), file=sys.stderr)
    raise SystemExit(getattr(exc, "exit_code", 1))
