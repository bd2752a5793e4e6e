"""
SCP (Sphere Script) formatter.

Sphere scripts are line-oriented: section headers such as ``[ITEMDEF ...]``,
trigger declarations (``ON=@CREATE``), property assignments, control blocks
and command calls. This package normalizes the casing of those keywords
without touching comments or values.

The code is organised into several modules:

* ``formatting`` – the keyword tables, the rewrite rules and the line
  formatter that applies them to a document.
* ``config`` – workspace configuration (``scpfmt.toml``).
* ``lsp`` – a pygls language server answering formatting requests.
* ``cli`` – the ``scpfmt`` command line interface.
"""

import re
from pathlib import Path
from importlib import metadata as _metadata


def _local_version() -> str | None:
    root = Path(__file__).resolve().parents[1]
    pyproject = root / "pyproject.toml"
    if not pyproject.exists():
        return None
    try:
        text = pyproject.read_text(encoding="utf-8")
    except OSError:  # pragma: no cover - IO errors should not break imports
        return None
    match = re.search(r"^version\s*=\s*\"([^\"]+)\"", text, flags=re.MULTILINE)
    if match:
        return match.group(1)
    return None


try:  # pragma: no cover - metadata fallback for editable installs
    __version__ = _metadata.version("scp-formatter")
except _metadata.PackageNotFoundError:  # pragma: no cover - source tree
    __version__ = _local_version() or "0.1.0"

__all__ = ["__version__"]
