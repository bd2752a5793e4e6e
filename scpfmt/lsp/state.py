"""Document level state tracking for the SCP language server."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence

from lsprotocol.types import Position, TextDocumentContentChangeEvent
from pygls.uris import to_fs_path

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def utf16_length(text: str) -> int:
    """Length of ``text`` in UTF-16 code units, the LSP column unit."""
    return len(text.encode("utf-16-le")) // 2


@dataclass
class DocumentState:
    """Tracks the text of an open document."""

    uri: str
    text: str
    version: int
    path: Path = field(init=False)
    lines: List[str] = field(init=False)

    def __post_init__(self) -> None:
        self.path = self._resolve_path()
        self._set_text(self.text)

    def update(self, text: str, version: int) -> None:
        self._set_text(text)
        self.version = version

    def apply_changes(self, changes: Sequence[TextDocumentContentChangeEvent]) -> str:
        text = self.text
        for change in changes:
            change_range = getattr(change, "range", None)
            if change_range is None:
                text = change.text
                continue
            snapshot = DocumentState(uri=self.uri, text=text, version=self.version)
            start = snapshot.offset_at(change_range.start)
            end = snapshot.offset_at(change_range.end)
            text = text[:start] + change.text + text[end:]
        return text

    def offset_at(self, position: Position) -> int:
        """Convert an LSP position (UTF-16 columns) to an offset into ``text``."""
        line_index = min(max(position.line, 0), len(self.lines) - 1)
        offset = 0
        for match_index, match in enumerate(_LINE_BREAK.finditer(self.text)):
            if match_index == line_index:
                break
            offset = match.end()
        line = self.lines[line_index]
        units = 0
        column = 0
        for char in line:
            if units >= position.character:
                break
            units += utf16_length(char)
            column += 1
        return offset + column

    def _set_text(self, text: str) -> None:
        self.text = text
        self.lines = _LINE_BREAK.split(text)

    def _resolve_path(self) -> Path:
        try:
            return Path(to_fs_path(self.uri))
        except (TypeError, ValueError):
            return Path(self.uri)
