from __future__ import annotations

from pathlib import Path

import pytest
from lsprotocol.types import (
    DocumentFormattingParams,
    FormattingOptions,
    TextDocumentIdentifier,
    TextDocumentItem,
)

from scpfmt.lsp.workspace import WorkspaceIndex


def _make_uri(path: Path) -> str:
    return path.resolve().as_uri()


@pytest.fixture()
def workspace(tmp_path) -> WorkspaceIndex:
    root_uri = _make_uri(tmp_path)
    ws = WorkspaceIndex(root_uri)
    ws.set_root(root_uri)
    return ws


@pytest.fixture()
def open_document(workspace, tmp_path):
    def _open(text: str, filename: str = "script.scp", *, version: int = 1) -> TextDocumentItem:
        item = TextDocumentItem(
            uri=_make_uri(tmp_path / filename),
            language_id="scp",
            version=version,
            text=text,
        )
        workspace.did_open(item)
        return item

    return _open


@pytest.fixture()
def formatting_params():
    def _params(uri: str) -> DocumentFormattingParams:
        return DocumentFormattingParams(
            text_document=TextDocumentIdentifier(uri=uri),
            options=FormattingOptions(tab_size=4, insert_spaces=True),
        )

    return _params
