"""Tests for the command-line entry point."""

import sys
from pathlib import Path

import pytest

from holonid.__main__ import VERSION, main, parse_serve_args
from holonid.config import ServerConfig
from holonid.identity.document import render_document
from holonid.identity.model import HolonIdentity


@pytest.fixture(autouse=True)
def registry_root(tmp_path: Path, monkeypatch) -> Path:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.setenv("HOLONID_ROOT", str(tmp_path))
    monkeypatch.delenv("HOLONID_ON_AMBIGUOUS", raising=False)
    monkeypatch.delenv("HOLONID_LISTEN", raising=False)
    return tmp_path


def invoke(monkeypatch, *args: str) -> None:
    monkeypatch.setattr(sys, "argv", ["holonid", *args])
    main()


class TestMain:
    def test_version(self, monkeypatch, capsys):
        invoke(monkeypatch, "version")
        assert capsys.readouterr().out.strip() == f"holonid v{VERSION}"

    def test_no_command(self, monkeypatch, capsys):
        with pytest.raises(SystemExit) as exc_info:
            invoke(monkeypatch)
        assert exc_info.value.code == 1
        assert "Usage" in capsys.readouterr().err

    def test_unknown_command(self, monkeypatch, capsys):
        with pytest.raises(SystemExit) as exc_info:
            invoke(monkeypatch, "frobnicate")
        assert exc_info.value.code == 1
        assert "unknown command: frobnicate" in capsys.readouterr().err

    def test_show_requires_target(self, monkeypatch, capsys):
        with pytest.raises(SystemExit) as exc_info:
            invoke(monkeypatch, "show")
        assert exc_info.value.code == 1

    def test_show_not_found_exits_1(self, monkeypatch, capsys):
        with pytest.raises(SystemExit) as exc_info:
            invoke(monkeypatch, "show", "ffff")
        assert exc_info.value.code == 1
        assert "error: holon not found: ffff" in capsys.readouterr().err

    def test_list_and_show(self, monkeypatch, capsys, registry_root: Path):
        path = registry_root / "deep" / "HOLON.md"
        path.parent.mkdir()
        identity = HolonIdentity(uuid="3f1c-0001", given_name="Deep", family_name="Prober")
        path.write_text(render_document(identity, "\n# Deep\n"), encoding="utf-8")

        invoke(monkeypatch, "list")
        assert "3f1c-0001" in capsys.readouterr().out

        invoke(monkeypatch, "show", "3f1c")
        assert capsys.readouterr().out == path.read_text() + "\n"


class TestServeArgs:
    def test_defaults_untouched(self):
        base = ServerConfig(host="127.0.0.1", port=9090)
        assert parse_serve_args([], base) == base

    def test_port_keeps_configured_host(self):
        server = parse_serve_args(["--port", "7070"], ServerConfig(host="127.0.0.1"))
        assert (server.host, server.port) == ("127.0.0.1", 7070)

    def test_listen_unix(self):
        server = parse_serve_args(["--listen", "unix:///tmp/who.sock"], ServerConfig())
        assert server.unix_path == "/tmp/who.sock"

    @pytest.mark.parametrize(
        "args", [["--port"], ["--port", "abc"], ["--verbose"], ["--listen", "stdio://"]]
    )
    def test_invalid(self, args):
        with pytest.raises(ValueError):
            parse_serve_args(args, ServerConfig())

    def test_bad_option_exits_1(self, monkeypatch, capsys):
        with pytest.raises(SystemExit) as exc_info:
            invoke(monkeypatch, "serve", "--verbose")
        assert exc_info.value.code == 1
        assert "unknown serve option" in capsys.readouterr().err
