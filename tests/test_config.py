"""Tests for configuration loading."""

import pytest
from pathlib import Path

from holonid.config import ServerConfig, load_config, parse_listen

_ENV_KEYS = [
    "HOLONID_ROOT",
    "HOLONID_ON_AMBIGUOUS",
    "HOLONID_LANG",
    "HOLONID_HOST",
    "HOLONID_PORT",
    "HOLONID_LOG_LEVEL",
    "HOLONID_LISTEN",
]


@pytest.fixture(autouse=True)
def clean_env(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


class TestConfig:
    def test_defaults(self):
        config = load_config()
        assert config.root == Path(".")
        assert config.registry.on_ambiguous == "error"
        assert config.registry.default_lang == "python"
        assert config.server.host == "127.0.0.1"
        assert config.server.port == 9090
        assert config.log_level == "INFO"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("HOLONID_ROOT", "/srv/holons")
        monkeypatch.setenv("HOLONID_PORT", "7070")
        monkeypatch.setenv("HOLONID_ON_AMBIGUOUS", "first")

        config = load_config()
        assert config.root == Path("/srv/holons")
        assert config.server.port == 7070
        assert config.registry.on_ambiguous == "first"

    def test_toml_file(self, tmp_path: Path):
        toml_path = tmp_path / "holonid.toml"
        toml_path.write_text("""
root = "registry"
log_level = "DEBUG"

[registry]
default_lang = "go"

[server]
host = "0.0.0.0"
port = 8080
""")
        config = load_config(toml_path)
        assert config.root == Path("registry")
        assert config.log_level == "DEBUG"
        assert config.registry.default_lang == "go"
        assert config.server.host == "0.0.0.0"
        assert config.server.port == 8080

    def test_toml_discovered_in_cwd(self, tmp_path: Path):
        (tmp_path / "holonid.toml").write_text('[server]\nport = 6060\n')
        config = load_config()
        assert config.server.port == 6060

    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("HOLONID_LANG", "rust")

        toml_path = tmp_path / "holonid.toml"
        toml_path.write_text("""
[registry]
default_lang = "go"
""")
        config = load_config(toml_path)
        assert config.registry.default_lang == "rust"  # env wins

    def test_invalid_ambiguity_policy(self, monkeypatch):
        monkeypatch.setenv("HOLONID_ON_AMBIGUOUS", "random")
        with pytest.raises(ValueError, match="on_ambiguous"):
            load_config()

    def test_listen_from_env(self, monkeypatch):
        monkeypatch.setenv("HOLONID_LISTEN", "unix:///tmp/who.sock")
        config = load_config()
        assert config.server.unix_path == "/tmp/who.sock"

    def test_listen_from_toml(self, tmp_path: Path):
        (tmp_path / "holonid.toml").write_text('[server]\nlisten = "tcp://:7000"\n')
        config = load_config()
        assert config.server.host == "0.0.0.0"
        assert config.server.port == 7000
        assert config.server.unix_path is None


class TestParseListen:
    @pytest.mark.parametrize(
        "uri, host, port, unix_path",
        [
            ("tcp://:9090", "0.0.0.0", 9090, None),
            ("tcp://127.0.0.1:8080", "127.0.0.1", 8080, None),
            ("tcp://[::1]:8080", "::1", 8080, None),
            ("unix:///tmp/who.sock", "127.0.0.1", 9090, "/tmp/who.sock"),
        ],
    )
    def test_valid(self, uri, host, port, unix_path):
        server = parse_listen(uri, ServerConfig())
        assert (server.host, server.port, server.unix_path) == (host, port, unix_path)

    @pytest.mark.parametrize(
        "uri", ["9090", "tcp://localhost", "tcp://:http", "unix://", "stdio://", "grpc://:1"]
    )
    def test_invalid(self, uri):
        with pytest.raises(ValueError, match="invalid listen URI"):
            parse_listen(uri, ServerConfig())

    def test_tcp_clears_unix_path(self):
        server = parse_listen("tcp://:1234", ServerConfig(unix_path="/tmp/x.sock"))
        assert server.unix_path is None
