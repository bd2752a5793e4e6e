from __future__ import annotations

from scpfmt.lsp.server import create_server


def test_server_starts_at_given_workspace(tmp_path) -> None:
    (tmp_path / "scpfmt.toml").write_text('[keywords.extend]\ncommand = ["resurrect"]\n', encoding="utf-8")

    server = create_server(tmp_path)

    assert server.workspace_index.root_path == tmp_path.resolve()
    assert server.workspace_index.formatter.format_line("resurrect me") == "RESURRECT me"


def test_server_uses_explicit_config(tmp_path) -> None:
    config = tmp_path / "elsewhere.toml"
    config.write_text('[keywords.extend]\ncontrol = ["loop"]\n', encoding="utf-8")

    server = create_server(tmp_path, config)

    assert server.workspace_index.config_path == config
    assert server.workspace_index.formatter.format_line("loop") == "LOOP"
