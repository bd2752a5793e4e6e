"""Tests for the 'scpfmt format' command."""

import io

import pytest

from scpfmt.cli import main


UNFORMATTED = "[itemdef i_test]\ndefname=i_test\non=@create\n  say hello  \n"
FORMATTED = "[ITEMDEF i_test]\nDEFNAME=i_test\nON=@CREATE\n  SAY hello\n"


@pytest.fixture
def script(tmp_path):
    path = tmp_path / "items.scp"
    path.write_text(UNFORMATTED, encoding="utf-8")
    return path


def run(tmp_path, *args):
    main(["--workspace", str(tmp_path), *args])


def test_formats_file_in_place(tmp_path, script, capsys):
    run(tmp_path, "format", "items.scp")
    assert script.read_text(encoding="utf-8") == FORMATTED
    assert "Formatted" in capsys.readouterr().out


def test_check_reports_and_does_not_write(tmp_path, script, capsys):
    with pytest.raises(SystemExit) as exc_info:
        run(tmp_path, "format", "--check", "items.scp")
    assert exc_info.value.code == 1
    assert script.read_text(encoding="utf-8") == UNFORMATTED
    assert "Would reformat" in capsys.readouterr().out


def test_check_passes_on_formatted_file(tmp_path, capsys):
    (tmp_path / "done.scp").write_text(FORMATTED, encoding="utf-8")
    run(tmp_path, "format", "--check", "done.scp")
    assert "already formatted" in capsys.readouterr().err


def test_diff_prints_changes_without_writing(tmp_path, script, capsys):
    run(tmp_path, "format", "--diff", "items.scp")
    out = capsys.readouterr().out
    assert "-on=@create\n" in out
    assert "+ON=@CREATE\n" in out
    assert script.read_text(encoding="utf-8") == UNFORMATTED


def test_directory_uses_configured_extensions(tmp_path):
    (tmp_path / "scripts").mkdir()
    scp = tmp_path / "scripts" / "a.scp"
    scp.write_text("begin\n", encoding="utf-8")
    other = tmp_path / "scripts" / "readme.txt"
    other.write_text("begin\n", encoding="utf-8")

    run(tmp_path, "format", "scripts")

    assert scp.read_text(encoding="utf-8") == "BEGIN\n"
    assert other.read_text(encoding="utf-8") == "begin\n"


def test_crlf_line_endings_are_kept(tmp_path):
    path = tmp_path / "win.scp"
    path.write_bytes(b"begin  \r\nsay hi\r\n")
    run(tmp_path, "format", "win.scp")
    assert path.read_bytes() == b"BEGIN\r\nSAY hi\r\n"


def _stdin(data: bytes) -> io.TextIOWrapper:
    return io.TextIOWrapper(io.BytesIO(data), encoding="utf-8")


def test_stdin_to_stdout(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", _stdin(UNFORMATTED.encode("utf-8")))
    run(tmp_path, "format", "-")
    assert capsys.readouterr().out == FORMATTED


def test_stdin_keeps_crlf_line_endings(tmp_path, monkeypatch, capsysbinary):
    monkeypatch.setattr("sys.stdin", _stdin(b"begin  \r\nsay hi\r\n"))
    run(tmp_path, "format", "-")
    assert capsysbinary.readouterr().out == b"BEGIN\r\nSAY hi\r\n"


def test_stdin_check_with_crlf_formatted_input(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", _stdin(b"BEGIN\r\nSAY hi\r\n"))
    run(tmp_path, "format", "--check", "-")
    assert "already formatted" in capsys.readouterr().err


def test_no_files_is_an_error(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc_info:
        run(tmp_path, "format", "missing.scp")
    assert exc_info.value.code == 1
    assert "CLI_FILE_NOT_FOUND" in capsys.readouterr().err


def test_invalid_keyword_table_is_rejected(tmp_path, script, capsys):
    table = tmp_path / "bad.toml"
    table.write_text('[keywords]\ncommand = ["say", "s.y"]\n', encoding="utf-8")
    with pytest.raises(SystemExit) as exc_info:
        run(tmp_path, "format", "--keywords", str(table), "items.scp")
    assert exc_info.value.code == 1
    assert "CLI_CONFIG_ERROR" in capsys.readouterr().err
    assert script.read_text(encoding="utf-8") == UNFORMATTED


def test_invalid_workspace_config_is_rejected(tmp_path, script, capsys):
    (tmp_path / "scpfmt.toml").write_text('[keywords.extend]\nmacros = ["x"]\n', encoding="utf-8")
    with pytest.raises(SystemExit) as exc_info:
        run(tmp_path, "format", "items.scp")
    assert exc_info.value.code == 1
    assert "CLI_CONFIG_ERROR" in capsys.readouterr().err


def test_missing_subcommand_prints_help(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc_info:
        run(tmp_path)
    assert exc_info.value.code == 2
    assert "usage: scpfmt" in capsys.readouterr().out


def test_wrong_shape_workspace_config_is_rejected(tmp_path, script, capsys):
    (tmp_path / ".scpfmtrc").write_text("[]", encoding="utf-8")
    with pytest.raises(SystemExit) as exc_info:
        run(tmp_path, "format", "items.scp")
    assert exc_info.value.code == 1
    err = capsys.readouterr().err
    assert "CLI_CONFIG_ERROR" in err
    assert "Traceback" not in err
