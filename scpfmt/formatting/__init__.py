"""
Keyword-casing formatter for SCP (Sphere Script) files.

This module provides a line-oriented formatter that:
1. Skips whole-line ``//`` comments
2. Uppercases section headers, triggers, assignments, control keywords and commands
3. Trims trailing whitespace and leaves everything else untouched
4. Integrates with both CLI and LSP
"""

from __future__ import annotations

from .core import FormattedResult, LineEdit, LineFailure, LineFormatter
from .keywords import CATEGORIES, KeywordTable, load_keyword_table, table_from_mapping
from .rules import DEFAULT_RULE_ORDER, RewriteRule, build_rules, is_comment

__all__ = [
    "CATEGORIES",
    "DEFAULT_RULE_ORDER",
    "FormattedResult",
    "KeywordTable",
    "LineEdit",
    "LineFailure",
    "LineFormatter",
    "RewriteRule",
    "build_rules",
    "is_comment",
    "load_keyword_table",
    "table_from_mapping",
]
