"""Unified error model for the SCP formatter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class ErrorLocation:
    path: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None

    def describe(self) -> str:
        if self.path and self.line is not None and self.column is not None:
            return f"{self.path}:{self.line}:{self.column}"
        if self.path and self.line is not None:
            return f"{self.path}:{self.line}"
        if self.path:
            return self.path
        if self.line is not None:
            return f"line {self.line}"
        return "unknown location"


class SCPError(Exception):
    """Base class for all formatter errors surfaced to users."""

    code: Optional[str] = None
    hint: Optional[str] = None

    def __init__(
        self,
        message: str,
        *,
        path: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
        code: Optional[str] = None,
        hint: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.location = ErrorLocation(path=path, line=line, column=column)
        self.path = path
        self.line = line
        self.column = column
        if code is not None:
            self.code = code
        if hint is not None:
            self.hint = hint

    def format(self) -> str:
        components = [self.message]
        meta_parts = []
        location_desc = self.location.describe()
        if location_desc != "unknown location":
            meta_parts.append(location_desc)
        if self.code:
            meta_parts.append(self.code)
        if meta_parts:
            components[-1] = f"{components[-1]} ({'; '.join(meta_parts)})"
        if self.hint:
            components.append(f"Hint: {self.hint}")
        return " ".join(part for part in components if part)


class KeywordTableError(SCPError):
    """Raised when a keyword table is malformed or self-contradictory."""

    code = "KEYWORD_TABLE"


class LineFormatError(SCPError):
    """Raised when a rewrite rule fails on a single line."""

    code = "LINE_FORMAT"

    def __init__(self, message: str, *, rule_id: Optional[str] = None, **kwargs) -> None:
        super().__init__(message, **kwargs)
        self.rule_id = rule_id

    def format(self) -> str:
        if self.rule_id:
            return f"[{self.rule_id}] {super().format()}"
        return super().format()

    def at_line(self, line: int) -> "LineFormatError":
        """Copy of this error located at ``line`` (1-based)."""
        return LineFormatError(self.message, rule_id=self.rule_id, path=self.path, line=line)
