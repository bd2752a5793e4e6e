"""Tests for the lsp subcommand wiring."""

import pytest

from scpfmt.cli import main


class _FakeServer:
    def __init__(self):
        self.started = False

    def start_io(self):
        self.started = True


@pytest.fixture
def created(monkeypatch):
    calls = []

    def _create_server(workspace_root=None, config_path=None):
        server = _FakeServer()
        calls.append((workspace_root, config_path, server))
        return server

    monkeypatch.setattr("scpfmt.lsp.server.create_server", _create_server)
    return calls


def test_lsp_uses_cli_workspace(tmp_path, created):
    main(["--workspace", str(tmp_path), "lsp"])

    (workspace_root, config_path, server), = created
    assert workspace_root == tmp_path.resolve()
    assert config_path is None
    assert server.started


def test_lsp_passes_explicit_config(tmp_path, created):
    config = tmp_path / "custom.toml"
    config.write_text('[keywords.extend]\ncommand = ["resurrect"]\n', encoding="utf-8")

    main(["--workspace", str(tmp_path), "--config", str(config), "lsp"])

    (_, config_path, _), = created
    assert config_path == config.resolve()
