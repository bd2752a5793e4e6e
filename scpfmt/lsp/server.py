"""pygls based Language Server entrypoint."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from lsprotocol.types import InitializedParams
from pygls.server import LanguageServer

from scpfmt import __version__

from .handlers import register_all
from .workspace import WorkspaceIndex

logger = logging.getLogger(__name__)


class SCPLanguageServer(LanguageServer):
    """Concrete LanguageServer holding the SCP formatting workspace."""

    def __init__(self, root_uri: Optional[str] = None, config_path: Optional[Path] = None) -> None:
        super().__init__(name="scpfmt-lsp", version=__version__)
        self.workspace_index = WorkspaceIndex(root_uri, config_path)
        register_all(self)
        self._register_lifecycle_handlers()

    def _register_lifecycle_handlers(self) -> None:
        workspace = self.workspace_index

        @self.feature("initialized")
        async def _on_initialized(ls: "SCPLanguageServer", params: InitializedParams) -> None:  # noqa: ARG001
            # The client's root wins; without one the startup root stays.
            if ls.workspace.root_uri:
                workspace.set_root(ls.workspace.root_uri)
            else:
                workspace.reload_config()
            logger.info("Workspace initialised at %s", workspace.root_path)


def create_server(
    workspace_root: Optional[Path] = None,
    config_path: Optional[Path] = None,
) -> SCPLanguageServer:
    root_uri = workspace_root.resolve().as_uri() if workspace_root is not None else None
    return SCPLanguageServer(root_uri, config_path)


def main() -> None:
    server = create_server()
    logger.info("Starting SCP language server (pid=%s)", os.getpid())
    server.start_io()


if __name__ == "__main__":  # pragma: no cover
    main()
