"""Rewrite rules applied to each non-comment line of an SCP script.

Every rule is a callable taking and returning one line of text. Rules only
change the case of the region they match and never look at comments: the
comment check happens once, in :class:`scpfmt.formatting.core.LineFormatter`.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import List, Pattern, Sequence

from .keywords import KeywordTable


def is_comment(line: str) -> bool:
    """Return True when the line, ignoring leading whitespace, starts with ``//``."""
    return line.lstrip().startswith("//")


def upper(text: str) -> str:
    """Uppercase ``text`` without changing its length."""
    # Characters like "ß" would expand to two characters; those keep their case.
    return "".join(
        upper_char if len(upper_char) == 1 else char
        for char, upper_char in ((char, char.upper()) for char in text)
    )


class RewriteRule(ABC):
    """Base class for line rewrite rules."""

    def __init__(self, rule_id: str, description: str):
        self.rule_id = rule_id
        self.description = description

    @abstractmethod
    def apply(self, line: str) -> str:
        """Return ``line`` with this rule's keywords uppercased."""

    def __call__(self, line: str) -> str:
        return self.apply(line)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.rule_id!r})"


class SectionHeaderRule(RewriteRule):
    """``[itemdef 0x1]`` -> ``[ITEMDEF 0x1]``."""

    _PATTERN = re.compile(r"^\s*\[(\w+)(\s+.*)?\]\s*$")

    def __init__(self) -> None:
        super().__init__("section-header", "Uppercase the type word of section headers")

    def apply(self, line: str) -> str:
        match = self._PATTERN.match(line)
        if match is None:
            return line
        start, end = match.span(1)
        return line[:start] + upper(match.group(1)) + line[end:]


class TriggerRule(RewriteRule):
    """``on=@create`` -> ``ON=@CREATE``."""

    # A trailing "//" stops the match, so "on=@create//note" is left alone.
    _PATTERN = re.compile(r"\bon=@\w+\b[^\s/]*(?!\S)", re.IGNORECASE)

    def __init__(self) -> None:
        super().__init__("trigger", "Uppercase trigger declarations")

    def apply(self, line: str) -> str:
        return self._PATTERN.sub(lambda match: upper(match.group(0)), line)


class _LeadingTokenRule(RewriteRule):
    """Uppercase a table token found at the start of a line."""

    def __init__(self, rule_id: str, description: str, tokens: Sequence[str], suffix: str):
        super().__init__(rule_id, description)
        self.patterns: List[Pattern[str]] = [
            re.compile(rf"^(\s*)({re.escape(token)}){suffix}", re.IGNORECASE) for token in tokens
        ]

    def apply(self, line: str) -> str:
        for pattern in self.patterns:
            match = pattern.match(line)
            if match is None:
                continue
            start, end = match.span(2)
            line = line[:start] + upper(match.group(2)) + line[end:]
        return line


class ScopedAssignmentRule(_LeadingTokenRule):
    """``tag.myflag=1`` -> ``TAG.myflag=1``."""

    def __init__(self, tokens: Sequence[str]) -> None:
        super().__init__("scoped-assignment", "Uppercase scoped variable prefixes", tokens, r"(?=[.=])")


class AssignmentRule(_LeadingTokenRule):
    """``defname=i_sword`` -> ``DEFNAME=i_sword``."""

    def __init__(self, tokens: Sequence[str]) -> None:
        super().__init__("assignment", "Uppercase property assignment keywords", tokens, r"(?==)")


class ControlRule(_LeadingTokenRule):
    """``endif`` -> ``ENDIF``."""

    def __init__(self, tokens: Sequence[str]) -> None:
        super().__init__("control", "Uppercase control flow keywords", tokens, r"\b")


class CommandRule(RewriteRule):
    """``say "hello"`` -> ``SAY "hello"`` anywhere on the line."""

    def __init__(self, tokens: Sequence[str]) -> None:
        super().__init__("command", "Uppercase known command names")
        self.patterns = [
            re.compile(rf"\b{re.escape(token)}\b(?=\s|\(|$)", re.IGNORECASE) for token in tokens
        ]

    def apply(self, line: str) -> str:
        for pattern in self.patterns:
            line = pattern.sub(lambda match: upper(match.group(0)), line)
        return line


# Order matters: section headers before any line-start rule, triggers
# before assignments (ON= is an assignment), commands last.
DEFAULT_RULE_ORDER = (
    "section-header",
    "trigger",
    "scoped-assignment",
    "assignment",
    "control",
    "command",
)


def build_rules(table: KeywordTable) -> List[RewriteRule]:
    """Instantiate the rule pipeline for ``table`` in :data:`DEFAULT_RULE_ORDER`."""
    rules = {
        rule.rule_id: rule
        for rule in (
            SectionHeaderRule(),
            TriggerRule(),
            ScopedAssignmentRule(table.scoped),
            AssignmentRule(table.assignment),
            ControlRule(table.control),
            CommandRule(table.command),
        )
    }
    return [rules[rule_id] for rule_id in DEFAULT_RULE_ORDER]


__all__ = [
    "AssignmentRule",
    "CommandRule",
    "ControlRule",
    "DEFAULT_RULE_ORDER",
    "RewriteRule",
    "ScopedAssignmentRule",
    "SectionHeaderRule",
    "TriggerRule",
    "build_rules",
    "is_comment",
    "upper",
]
