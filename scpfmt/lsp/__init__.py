"""Language Server Protocol implementation for SCP scripts."""

from .server import SCPLanguageServer, create_server

__all__ = [
    "SCPLanguageServer",
    "create_server",
]
