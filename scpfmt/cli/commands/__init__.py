"""Subcommand implementations for the scpfmt CLI."""

from .format import add_format_command, cmd_format
from .lsp import add_lsp_command, cmd_lsp

__all__ = ["add_format_command", "add_lsp_command", "cmd_format", "cmd_lsp"]
