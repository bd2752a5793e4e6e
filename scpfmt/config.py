"""Workspace configuration support for the SCP formatter."""

from __future__ import annotations

import json
import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from scpfmt.errors import SCPError
from scpfmt.formatting import CATEGORIES, KeywordTable, LineFormatter, load_keyword_table

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = ("scpfmt.toml", ".scpfmtrc")
DEFAULT_EXTENSIONS = (".scp",)


class ConfigError(SCPError):
    """Raised when the workspace configuration cannot be used."""

    code = "CONFIG"


@dataclass
class FormatConfig:
    """Formatting settings resolved for a workspace."""

    keyword_table: Optional[Path] = None
    extensions: List[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    extra_keywords: Dict[str, List[str]] = field(default_factory=dict)


@dataclass
class WorkspaceConfig:
    """Resolved workspace configuration."""

    root: Path
    format: FormatConfig = field(default_factory=FormatConfig)
    path: Optional[Path] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    def keyword_table(self, override: Optional[Path] = None) -> KeywordTable:
        table = load_keyword_table(override or self.format.keyword_table)
        if self.format.extra_keywords:
            table = table.extended(self.format.extra_keywords)
        return table

    def create_formatter(self, keyword_table: Optional[Path] = None) -> LineFormatter:
        return LineFormatter(self.keyword_table(keyword_table))

    def matches(self, path: Path) -> bool:
        return path.suffix.lower() in {ext.lower() for ext in self.format.extensions}

    def discover(self, root: Path) -> List[Path]:
        return sorted(path for path in root.rglob("*") if path.is_file() and self.matches(path))


def _read_json_config(path: Path) -> Dict[str, Any]:
    content = path.read_text(encoding="utf-8")
    return json.loads(content)


def _read_toml_config(path: Path) -> Dict[str, Any]:
    with path.open("rb") as handle:
        return tomllib.load(handle)


def _string_list(value: Any, *, key: str, source: Path) -> List[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    raise ConfigError(f"'{key}' must be a string or a list of strings", path=str(source))


def _section(value: Any, *, key: str, source: Path) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{key}' must be a table", path=str(source))
    return value


def _parse_format(data: Any, root: Path, source: Path) -> FormatConfig:
    if not isinstance(data, dict):
        raise ConfigError(
            "Configuration must be a table of settings",
            path=str(source),
            hint="Use [format] and [keywords.extend] tables (or JSON objects)",
        )
    format_section = _section(data.get("format"), key="format", source=source)
    table_raw = format_section.get("keyword_table")
    if table_raw is not None and not isinstance(table_raw, str):
        raise ConfigError("'format.keyword_table' must be a path string", path=str(source))
    keyword_table: Optional[Path] = None
    if table_raw:
        keyword_table = Path(table_raw)
        if not keyword_table.is_absolute():
            keyword_table = (root / keyword_table).resolve()

    extensions_raw = format_section.get("extensions")
    extensions = (
        _string_list(extensions_raw, key="format.extensions", source=source)
        if extensions_raw is not None
        else list(DEFAULT_EXTENSIONS)
    )
    extensions = [ext if ext.startswith(".") else f".{ext}" for ext in extensions]

    keywords_section = _section(data.get("keywords"), key="keywords", source=source)
    extend_section = _section(keywords_section.get("extend"), key="keywords.extend", source=source)
    extra_keywords: Dict[str, List[str]] = {}
    for category, tokens in extend_section.items():
        if category not in CATEGORIES:
            raise ConfigError(
                f"Unknown keyword category '{category}'",
                path=str(source),
                hint=f"Valid categories are: {', '.join(CATEGORIES)}",
            )
        extra_keywords[category] = _string_list(tokens, key=f"keywords.extend.{category}", source=source)

    return FormatConfig(keyword_table=keyword_table, extensions=extensions, extra_keywords=extra_keywords)


def locate_config_file(root: Path, explicit: Optional[Path] = None) -> Optional[Path]:
    if explicit is not None:
        return explicit if explicit.exists() else None
    for candidate in CONFIG_FILENAMES:
        path = root / candidate
        if path.exists():
            return path
    return None


def load_workspace_config(root: Path, explicit: Optional[Path] = None) -> WorkspaceConfig:
    root = root.resolve()
    config_path = locate_config_file(root, explicit)
    if config_path is None:
        if explicit is not None:
            raise ConfigError("Configuration file not found", path=str(explicit))
        return WorkspaceConfig(root=root)

    try:
        if config_path.suffix == ".toml":
            data = _read_toml_config(config_path)
        else:
            data = _read_json_config(config_path)
    except (tomllib.TOMLDecodeError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Invalid configuration: {exc}", path=str(config_path)) from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read configuration: {exc}", path=str(config_path)) from exc

    logger.debug("Loaded workspace configuration from %s", config_path)
    return WorkspaceConfig(
        root=root,
        format=_parse_format(data, root, config_path),
        path=config_path,
        raw=data,
    )


def collect_files(workspace: WorkspaceConfig, targets: Sequence[str]) -> List[Path]:
    """Expand file and directory arguments into the script files to format."""
    files: List[Path] = []
    for target in targets:
        path = Path(target)
        if not path.is_absolute():
            path = workspace.root / path
        if path.is_dir():
            files.extend(workspace.discover(path))
        elif path.is_file():
            files.append(path)
        else:
            logger.warning("Skipping %s (no such file or directory)", target)
    return files


__all__ = [
    "CONFIG_FILENAMES",
    "ConfigError",
    "DEFAULT_EXTENSIONS",
    "FormatConfig",
    "WorkspaceConfig",
    "collect_files",
    "load_workspace_config",
    "locate_config_file",
]
