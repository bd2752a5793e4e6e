"""Keyword tables consulted by the rewrite rules."""

from __future__ import annotations

import logging
import re
import tomllib
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from scpfmt.errors import KeywordTableError

logger = logging.getLogger(__name__)

CATEGORIES = ("assignment", "scoped", "control", "command")

_TOKEN_PATTERN = re.compile(r"[A-Za-z0-9_]+")


@dataclass(frozen=True)
class KeywordTable:
    """Literal tokens partitioned by the rule that rewrites them.

    Construction validates the table: tokens must be plain words, a category
    may not repeat a token, and a token cannot be both a scoped prefix and an
    assignment keyword.
    """

    assignment: Tuple[str, ...] = ()
    scoped: Tuple[str, ...] = ()
    control: Tuple[str, ...] = ()
    command: Tuple[str, ...] = ()
    source: Optional[str] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        for category in CATEGORIES:
            tokens = tuple(getattr(self, category))
            object.__setattr__(self, category, tokens)
            _validate_category(category, tokens, self.source)
        overlap = {token.lower() for token in self.scoped} & {token.lower() for token in self.assignment}
        if overlap:
            raise KeywordTableError(
                f"Tokens listed as both scoped prefixes and assignment keywords: {', '.join(sorted(overlap))}",
                path=self.source,
                hint="Keep each token in only one of 'scoped' and 'assignment'.",
            )

    def extended(self, extra: Mapping[str, Sequence[str]]) -> "KeywordTable":
        """Return a copy with ``extra`` tokens appended to their categories."""
        unknown = set(extra) - set(CATEGORIES)
        if unknown:
            raise KeywordTableError(
                f"Unknown keyword categories: {', '.join(sorted(unknown))}",
                path=self.source,
                hint=f"Valid categories are: {', '.join(CATEGORIES)}",
            )
        merged: Dict[str, Tuple[str, ...]] = {}
        for category in CATEGORIES:
            current = list(getattr(self, category))
            seen = {token.lower() for token in current}
            for token in extra.get(category, ()):
                if str(token).lower() not in seen:
                    current.append(str(token))
                    seen.add(str(token).lower())
            merged[category] = tuple(current)
        return KeywordTable(source=self.source, **merged)

    def as_dict(self) -> Dict[str, List[str]]:
        return {category: list(getattr(self, category)) for category in CATEGORIES}


def _validate_category(category: str, tokens: Iterable[Any], source: Optional[str]) -> None:
    seen = set()
    for token in tokens:
        if not isinstance(token, str) or not _TOKEN_PATTERN.fullmatch(token):
            raise KeywordTableError(
                f"Invalid {category} keyword {token!r}",
                path=source,
                hint="Keywords may only contain letters, digits and underscores.",
            )
        lowered = token.lower()
        if lowered in seen:
            raise KeywordTableError(f"Duplicate {category} keyword {token!r}", path=source)
        seen.add(lowered)


def table_from_mapping(data: Mapping[str, Any], *, source: Optional[str] = None) -> KeywordTable:
    """Build a table from a parsed ``[keywords]`` document."""
    section = data.get("keywords", data)
    if not isinstance(section, Mapping):
        raise KeywordTableError("The [keywords] section must be a table", path=source)
    values: Dict[str, Tuple[str, ...]] = {}
    for category in CATEGORIES:
        raw = section.get(category) or []
        if not isinstance(raw, (list, tuple)):
            raise KeywordTableError(f"'{category}' must be a list of keywords", path=source)
        values[category] = tuple(raw)
    return KeywordTable(source=source, **values)


def load_keyword_table(path: Optional[Path] = None) -> KeywordTable:
    """Load a keyword table from ``path`` or the bundled default table."""
    if path is None:
        text = resources.files("scpfmt.data").joinpath("keywords.toml").read_text(encoding="utf-8")
        source = "<bundled keywords.toml>"
    else:
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as exc:
            raise KeywordTableError(f"Cannot read keyword table: {exc}", path=str(path)) from exc
        source = str(path)
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise KeywordTableError(f"Invalid TOML: {exc}", path=source) from exc
    table = table_from_mapping(data, source=source)
    logger.debug(
        "Loaded keyword table from %s (%s)",
        source,
        ", ".join(f"{category}={len(getattr(table, category))}" for category in CATEGORIES),
    )
    return table


__all__ = ["CATEGORIES", "KeywordTable", "load_keyword_table", "table_from_mapping"]
