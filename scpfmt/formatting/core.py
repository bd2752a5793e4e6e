"""Line formatting pipeline and document-level edit production."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from scpfmt.errors import LineFormatError

from .keywords import KeywordTable, load_keyword_table
from .rules import RewriteRule, build_rules, is_comment

logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(r"(\r\n|\r|\n)")


@dataclass(frozen=True)
class LineEdit:
    """Replacement of one whole line, columns ``start`` to ``end``."""

    line: int
    start: int
    end: int
    new_text: str


@dataclass(frozen=True)
class LineFailure:
    """A line whose rules raised; it keeps its original text."""

    line: int
    message: str
    rule_id: Optional[str] = None

    def __str__(self) -> str:
        if self.rule_id:
            return f"line {self.line + 1} ({self.rule_id}): {self.message}"
        return f"line {self.line + 1}: {self.message}"


@dataclass
class FormattedResult:
    """Result of formatting a document."""

    edits: List[LineEdit]
    formatted_text: str
    is_changed: bool
    errors: List[LineFailure] = field(default_factory=list)

    def success(self) -> bool:
        """Check if every line was formatted."""
        return len(self.errors) == 0


class LineFormatter:
    """
    Keyword-casing formatter for SCP scripts.

    Each line is trimmed of trailing whitespace and, unless it is a comment,
    passed through the rewrite rules in order. Lines are independent, so a
    formatter instance can be shared between callers.
    """

    def __init__(self, table: Optional[KeywordTable] = None, rules: Optional[Sequence[RewriteRule]] = None):
        self.table = table if table is not None else load_keyword_table()
        self.rules = list(rules) if rules is not None else build_rules(self.table)

    def format_line(self, line: Optional[str]) -> str:
        """Format a single line of text."""
        line = line.rstrip() if isinstance(line, str) else ""
        if is_comment(line):
            return line
        for rule in self.rules:
            try:
                line = rule(line)
            except Exception as exc:
                raise LineFormatError(f"{exc.__class__.__name__}: {exc}", rule_id=rule.rule_id) from exc
        return line

    def format_document(self, lines: Sequence[Optional[str]]) -> FormattedResult:
        """
        Produce one edit per line, in order, each spanning the whole original line.

        Unchanged lines still get an edit whose text equals the formatted
        line. A line whose rules raise is reported in ``errors`` and keeps
        its original text.
        """
        edits: List[LineEdit] = []
        errors: List[LineFailure] = []
        formatted_lines: List[str] = []
        is_changed = False

        for index, raw in enumerate(lines):
            raw = raw if isinstance(raw, str) else ""
            try:
                new_text = self._format_line_at(index, raw)
            except LineFormatError as exc:
                logger.warning("%s", exc.format())
                errors.append(LineFailure(line=index, message=exc.message, rule_id=exc.rule_id))
                new_text = raw
            edits.append(LineEdit(line=index, start=0, end=len(raw), new_text=new_text))
            formatted_lines.append(new_text)
            is_changed = is_changed or new_text != raw

        return FormattedResult(
            edits=edits,
            formatted_text="\n".join(formatted_lines),
            is_changed=is_changed,
            errors=errors,
        )

    def format_text(self, text: str) -> FormattedResult:
        """Format ``text`` while keeping each of its original line endings."""
        parts = _LINE_BREAK.split(text)
        lines = parts[0::2]
        breaks = parts[1::2]

        result = self.format_document(lines)
        pieces: List[str] = []
        for index, edit in enumerate(result.edits):
            pieces.append(edit.new_text)
            if index < len(breaks):
                pieces.append(breaks[index])
        result.formatted_text = "".join(pieces)
        result.is_changed = result.formatted_text != text
        return result

    def _format_line_at(self, index: int, raw: str) -> str:
        try:
            return self.format_line(raw)
        except LineFormatError as exc:
            raise exc.at_line(index + 1) from exc.__cause__


__all__ = ["FormattedResult", "LineEdit", "LineFailure", "LineFormatter"]
