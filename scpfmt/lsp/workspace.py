"""Open-document tracking and formatting for the SCP language server."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from lsprotocol.types import (
    DocumentFormattingParams,
    Position,
    Range,
    TextDocumentContentChangeEvent,
    TextDocumentItem,
    TextEdit,
)
from pygls.uris import to_fs_path

from scpfmt.config import WorkspaceConfig, load_workspace_config
from scpfmt.errors import SCPError
from scpfmt.formatting import LineFormatter

from .state import DocumentState, utf16_length


class WorkspaceIndex:
    """Holds the open documents and the formatter configured for the workspace."""

    def __init__(self, root_uri: Optional[str] = None, config_path: Optional[Path] = None) -> None:
        self.logger = logging.getLogger("scpfmt.lsp.workspace")
        self.root_uri = root_uri
        self.config_path = config_path
        self.root_path = self._resolve_root(root_uri)
        self._open_documents: Dict[str, DocumentState] = {}
        self._config: Optional[WorkspaceConfig] = None
        self._formatter: Optional[LineFormatter] = None

    def set_root(self, root_uri: Optional[str]) -> None:
        self.root_uri = root_uri
        self.root_path = self._resolve_root(root_uri)
        self.reload_config()

    def reload_config(self) -> None:
        try:
            self._config = load_workspace_config(self.root_path, self.config_path)
            self._formatter = self._config.create_formatter()
        except SCPError as exc:
            self.logger.error("Rejected workspace configuration, using bundled keywords: %s", exc.format())
            self._config = WorkspaceConfig(root=self.root_path)
            self._formatter = LineFormatter()
        self.logger.info("Formatter configured for %s", self.root_path)

    @property
    def formatter(self) -> LineFormatter:
        if self._formatter is None:
            self.reload_config()
        return self._formatter

    # ------------------------------------------------------------------
    # Document lifecycle
    # ------------------------------------------------------------------
    def did_open(self, item: TextDocumentItem) -> DocumentState:
        document = DocumentState(uri=item.uri, text=item.text, version=item.version)
        self._open_documents[item.uri] = document
        return document

    def did_change(
        self,
        uri: str,
        version: int,
        changes: Sequence[TextDocumentContentChangeEvent],
    ) -> DocumentState:
        document = self._open_documents.get(uri)
        if document is None:
            document = DocumentState(uri=uri, text=self._read_document_from_fs(uri), version=version)
            self._open_documents[uri] = document
        document.update(document.apply_changes(changes), version)
        return document

    def did_close(self, uri: str) -> None:
        self._open_documents.pop(uri, None)

    def document(self, uri: str) -> Optional[DocumentState]:
        return self._open_documents.get(uri)

    # ------------------------------------------------------------------
    # Formatting
    # ------------------------------------------------------------------
    def format_document(self, params: DocumentFormattingParams) -> List[TextEdit]:
        document = self.document(params.text_document.uri)
        if document is None:
            return []
        result = self.formatter.format_document(document.lines)
        for failure in result.errors:
            self.logger.warning("Could not format %s %s", document.path, failure)
        return [
            TextEdit(
                range=Range(
                    start=Position(line=edit.line, character=edit.start),
                    end=Position(line=edit.line, character=utf16_length(document.lines[edit.line])),
                ),
                new_text=edit.new_text,
            )
            for edit in result.edits
        ]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _read_document_from_fs(self, uri: str) -> str:
        try:
            path = Path(to_fs_path(uri))
        except (TypeError, ValueError):
            return ""
        try:
            return path.read_text(encoding="utf-8")
        except OSError:
            return ""

    def _resolve_root(self, root_uri: Optional[str]) -> Path:
        if root_uri:
            try:
                return Path(to_fs_path(root_uri))
            except (TypeError, ValueError):
                return Path(root_uri)
        return Path.cwd()


__all__ = ["WorkspaceIndex"]
